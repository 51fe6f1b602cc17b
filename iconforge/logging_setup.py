"""Единая настройка логирования приложения."""
from __future__ import annotations

import logging
import os
from typing import Optional

from iconforge.config import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Настраивает корневой логгер пакета `iconforge` (повторный вызов ничего не меняет).

    Args:
        level: Имя уровня ("DEBUG", "INFO", …). По умолчанию берётся из
            переменной окружения `ICONFORGE_LOG_LEVEL`, иначе INFO.
    """
    global _configured
    root = logging.getLogger("iconforge")
    if _configured:
        return root

    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    resolved = logging.getLevelName(level_name)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(resolved)
    root.propagate = False

    _configured = True
    return root
