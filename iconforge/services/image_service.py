"""Загрузка исходного изображения: проверка типа, чтение и декодирование.

Принципы:
- SRP: класс отвечает только за получение `ImageData` из файла.
- Каждая ступень поднимает своё исключение, чтобы контроллер мог показать
  точное сообщение: неподдерживаемый файл, ошибка чтения, ошибка декодирования.
"""
from __future__ import annotations

import io
import logging
import mimetypes
from pathlib import Path
from typing import Optional

import cairosvg
from PIL import Image, UnidentifiedImageError

from iconforge.config import SVG_MIME, SVG_RASTER_EDGE
from iconforge.models.image_model import ImageData
from iconforge.services.errors import ImageDecodeError, ImageReadError, UnsupportedFileError

logger = logging.getLogger(__name__)


class ImageService:
    def detect_mime(self, file_path: str | Path) -> str:
        """Возвращает MIME-тип файла по имени или бросает `UnsupportedFileError`.

        Принимаются только типы вида `image/*`.
        """
        mime_type, _encoding = mimetypes.guess_type(str(file_path), strict=False)
        if not mime_type or not mime_type.startswith("image/"):
            raise UnsupportedFileError(f"Не изображение: {file_path} ({mime_type or 'unknown'})")
        return mime_type

    def read_bytes(self, file_path: str | Path) -> bytes:
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise ImageReadError(f"Файл не найден: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise ImageReadError(f"Не удалось прочитать файл: {path}") from exc

    def decode(self, data: bytes, path: Path, mime_type: str) -> ImageData:
        """Декодирует байты в `ImageData` (RGBA): либо изображение, либо исключение.

        Raises:
            ImageDecodeError: если Pillow не смог распознать или дочитать данные.
        """
        raster = self.rasterize_svg(data, path) if mime_type == SVG_MIME else data
        try:
            with Image.open(io.BytesIO(raster)) as opened:
                opened.load()
                source_mode = opened.mode
                pil_image = opened.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise ImageDecodeError(f"Файл не является изображением: {path}") from exc

        width, height = pil_image.size
        if width == 0 or height == 0:
            raise ImageDecodeError(f"Пустое изображение: {path}")

        return ImageData(
            path=path,
            pil_image=pil_image,
            width=width,
            height=height,
            mode=source_mode,
            mime_type=mime_type,
            size_bytes=len(data),
        )

    def rasterize_svg(self, data: bytes, path: Path) -> bytes:
        """Растеризует SVG в PNG так, чтобы длинная сторона была не меньше `SVG_RASTER_EDGE`.

        Raises:
            ImageDecodeError: cairosvg не смог разобрать или отрисовать документ.
        """
        try:
            png = cairosvg.svg2png(bytestring=data)
            with Image.open(io.BytesIO(png)) as natural:
                longest = max(natural.size)
            if 0 < longest < SVG_RASTER_EDGE:
                png = cairosvg.svg2png(bytestring=data, scale=SVG_RASTER_EDGE / longest)
        except (ValueError, SyntaxError, OSError, MemoryError) as exc:
            raise ImageDecodeError(f"Не удалось растеризовать SVG: {path}") from exc
        logger.debug("Rasterized SVG %s (%d bytes PNG)", path.name, len(png))
        return png

    def load_image(self, file_path: str | Path) -> ImageData:
        """Проверяет тип, читает и декодирует изображение с диска.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` c `PIL.Image.Image` в режиме RGBA.

        Raises:
            UnsupportedFileError: MIME-тип не `image/*`.
            ImageReadError: файл не существует или не читается.
            ImageDecodeError: файл не распознан как изображение.
        """
        path = Path(file_path)
        mime_type = self.detect_mime(path)
        data = self.read_bytes(path)
        image_data = self.decode(data, path, mime_type)
        logger.info("Loaded %s: %dx%d %s", path.name, image_data.width, image_data.height, image_data.mode)
        return image_data


def size_label(size_bytes: Optional[int]) -> str:
    """Человекочитаемый размер файла."""
    if size_bytes is None:
        return "—"
    if size_bytes < 1024:
        return f"{size_bytes} Б"
    kib = size_bytes / 1024
    if kib < 1024:
        return f"{kib:.1f} КБ"
    return f"{kib / 1024:.1f} МБ"
