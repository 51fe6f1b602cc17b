"""Тесты настройки логирования."""
from __future__ import annotations

import logging

import pytest

from iconforge import logging_setup


@pytest.fixture
def fresh_logger(monkeypatch):
    """Сбрасывает состояние логгера пакета и восстанавливает его после теста."""
    root = logging.getLogger("iconforge")
    saved = (list(root.handlers), root.level, root.propagate)
    root.handlers = []
    monkeypatch.setattr(logging_setup, "_configured", False)
    yield root
    root.handlers, level, root.propagate = saved[0], saved[1], saved[2]
    root.setLevel(level)


class TestConfigureLogging:
    def test_level_from_environment(self, fresh_logger, monkeypatch):
        monkeypatch.setenv("ICONFORGE_LOG_LEVEL", "debug")
        logger = logging_setup.configure_logging()
        assert logger is fresh_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_explicit_level_and_idempotence(self, fresh_logger):
        logging_setup.configure_logging("WARNING")
        logging_setup.configure_logging("DEBUG")
        assert fresh_logger.level == logging.WARNING
        assert len(fresh_logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self, fresh_logger, monkeypatch):
        monkeypatch.delenv("ICONFORGE_LOG_LEVEL", raising=False)
        logging_setup.configure_logging("LOUD")
        assert fresh_logger.level == logging.INFO
