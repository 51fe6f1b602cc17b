"""Фикстуры тестов: исходные изображения в памяти и на диске, готовые варианты."""
from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import numpy as np
import pytest
from PIL import Image

from iconforge.models.icon_model import VariantResult, VariantSpec
from iconforge.services.template_service import to_data_url
from iconforge.services.variant_service import VariantPipeline


def png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def transparent_source() -> Image.Image:
    """Полностью прозрачный PNG 1024 × 1024."""
    return Image.new("RGBA", (1024, 1024), (0, 0, 0, 0))


@pytest.fixture
def wide_source() -> Image.Image:
    """Непрозрачный красный прямоугольник 2000 × 1000."""
    return Image.new("RGBA", (2000, 1000), (255, 0, 0, 255))


@pytest.fixture(scope="session")
def pattern_source() -> Image.Image:
    """Цветной градиент 256 × 256, чтобы варианты отличались друг от друга."""
    ramp = np.linspace(0, 255, 256, dtype=np.uint8)
    arr = np.zeros((256, 256, 4), dtype=np.uint8)
    arr[..., 0] = ramp[np.newaxis, :]
    arr[..., 1] = ramp[:, np.newaxis]
    arr[..., 2] = 128
    arr[..., 3] = 255
    return Image.fromarray(arr)


@pytest.fixture(scope="session")
def generated_variants(pattern_source):
    """Полный набор из 10 вариантов, отрендеренный один раз на сессию."""
    return VariantPipeline().generate(pattern_source)


@pytest.fixture
def write_image(tmp_path) -> Callable[..., Path]:
    """Фабрика: сохраняет изображение на диск под заданным именем."""
    def _write(name: str, image: Image.Image | None = None, fmt: str = "PNG") -> Path:
        path = tmp_path / name
        if image is None:
            image = Image.new("RGBA", (64, 48), (0, 128, 255, 255))
        image.save(path, format=fmt)
        return path
    return _write


@pytest.fixture
def make_variant() -> Callable[..., VariantResult]:
    """Фабрика облегчённых `VariantResult` без рендера (для кодировщика и упаковщика)."""
    def _make(size: int, scale: int = 1, data: bytes | None = None, spec_id: str | None = None) -> VariantResult:
        suffix = "@2x" if scale == 2 else ""
        spec = VariantSpec(
            id=spec_id or (f"{size}@{scale}" if scale != 1 else str(size)),
            label=f"{size} × {size}{suffix}",
            description="test",
            size=size,
            scale=scale,
            filename=f"icon_{size}x{size}{suffix}.png",
        )
        payload = data if data is not None else f"png-{size}x{scale}".encode("ascii")
        return VariantResult(spec=spec, actual_size=size * scale, png_bytes=payload, data_url=to_data_url(payload))
    return _make
