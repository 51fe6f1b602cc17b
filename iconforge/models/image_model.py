"""Модель исходного изображения.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image

from iconforge.config import DEFAULT_BASE_NAME


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель декодированного исходника и его метаданные.

    Fields:
        path: Путь к исходному файлу.
        pil_image: Декодированное изображение PIL (RGBA).
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL исходного файла до приведения к RGBA.
        mime_type: MIME-тип, определённый по имени файла.
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    mime_type: str
    size_bytes: Optional[int]

    @property
    def base_name(self) -> str:
        """Имя файла без последнего расширения; `AppIcon`, если оно пустое."""
        return base_name_of(self.path)


def base_name_of(path: Path) -> str:
    name = path.name
    stem = name.rsplit(".", 1)[0] if "." in name else name
    return stem or DEFAULT_BASE_NAME
