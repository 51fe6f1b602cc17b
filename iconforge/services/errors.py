"""Иерархия исключений генератора иконок.

Каждая ступень конвейера (выбор файла, чтение, декодирование, рендер и упаковка)
поднимает свой класс; контроллер сопоставляет класс с сообщением для пользователя.
"""
from __future__ import annotations


class IconForgeError(Exception):
    """Базовое исключение пакета."""


class UnsupportedFileError(IconForgeError, ValueError):
    """MIME-тип выбранного файла не начинается с `image/`."""


class ImageReadError(IconForgeError, OSError):
    """Файл не существует или не читается."""


class ImageDecodeError(IconForgeError, ValueError):
    """Содержимое файла не распознано как изображение."""


class GenerationError(IconForgeError):
    """Любой сбой рендера, кодирования контейнера или сборки архива."""


class RenderSurfaceError(GenerationError):
    """Не удалось получить поверхность для рисования. Повтор бессмыслен."""


class VariantRenderError(GenerationError):
    """Сбой при рендере одного из вариантов."""


class ContainerEncodeError(GenerationError):
    """Сбой при сериализации контейнера .icns."""


class ArchiveBuildError(GenerationError):
    """Сбой при сборке zip-архива iconset."""


class HandleRevokedError(IconForgeError, RuntimeError):
    """Попытка использовать отозванный дескриптор загрузки."""
