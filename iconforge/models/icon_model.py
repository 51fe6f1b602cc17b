"""Модели вариантов иконки: статическая таблица размеров и результаты рендера.

Таблица `ICON_VARIANTS` фиксирована: порядок записей задаёт порядок рендера,
порядок файлов в манифесте и порядок карточек в галерее.
"""
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Tuple

from PIL import Image


@dataclass(frozen=True)
class VariantSpec:
    """Один вариант иконки: номинальный размер и масштаб.

    Fields:
        id: Короткий идентификатор, например "16@2".
        label: Подпись для UI.
        description: Назначение размера.
        size: Номинальная сторона в логических пикселях.
        scale: Масштаб (1 или 2).
        filename: Имя PNG внутри iconset.
    """
    id: str
    label: str
    description: str
    size: int
    scale: int
    filename: str

    @property
    def actual_size(self) -> int:
        """Фактическая сторона растра, px."""
        return self.size * self.scale


def _spec(size: int, scale: int, description: str) -> VariantSpec:
    suffix = "@2x" if scale == 2 else ""
    return VariantSpec(
        id=f"{size}@{scale}" if scale != 1 else str(size),
        label=f"{size} × {size}" + (f" {suffix}" if suffix else ""),
        description=description,
        size=size,
        scale=scale,
        filename=f"icon_{size}x{size}{suffix}.png",
    )


ICON_VARIANTS: Tuple[VariantSpec, ...] = (
    _spec(16, 1, "Menu bar / toolbar"),
    _spec(16, 2, "Retina 32 × 32"),
    _spec(32, 1, "Dock small icon"),
    _spec(32, 2, "Retina 64 × 64"),
    _spec(128, 1, "Finder preview"),
    _spec(128, 2, "Retina 256 × 256"),
    _spec(256, 1, "HiDPI common size"),
    _spec(256, 2, "Retina 512 × 512"),
    _spec(512, 1, "App Store showcase"),
    _spec(512, 2, "Retina 1024 × 1024"),
)


@dataclass(frozen=True)
class VariantResult:
    """Отрендеренный вариант: поля спецификации плюс PNG-байты и превью.

    Fields:
        spec: Исходная запись таблицы.
        actual_size: Фактическая сторона, px (= size * scale).
        png_bytes: Закодированный PNG.
        data_url: Те же байты в виде `data:image/png;base64,…`.
    """
    spec: VariantSpec
    actual_size: int
    png_bytes: bytes
    data_url: str

    @property
    def id(self) -> str:
        return self.spec.id

    @property
    def label(self) -> str:
        return self.spec.label

    @property
    def description(self) -> str:
        return self.spec.description

    @property
    def size(self) -> int:
        return self.spec.size

    @property
    def scale(self) -> int:
        return self.spec.scale

    @property
    def filename(self) -> str:
        return self.spec.filename

    def to_image(self) -> Image.Image:
        """Декодирует PNG-байты обратно в изображение PIL."""
        image = Image.open(io.BytesIO(self.png_bytes))
        image.load()
        return image
