"""Рендер одного варианта иконки по фиксированному шаблону.

Шаблон: белая скруглённая база с мягкой тенью, исходник вписан по центру с
внутренним отступом, сверху вертикальный блик, по контуру тонкая обводка.

Принципы:
- SRP: класс рисует ровно один квадратный растр заданной стороны.
- Поверхность (`PIL.Image`) создаётся заново на каждый вариант и закрывается
  на любом пути выхода, включая исключения.
- Рендер детерминирован: одинаковый вход даёт побайтно одинаковый PNG.
"""
from __future__ import annotations

import base64
import io
import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFilter

from iconforge.config import (
    BASE_COLOR,
    BASE_RADIUS_RATIO,
    HIGHLIGHT_STOPS,
    INNER_PADDING_RATIO,
    OUTER_PADDING_MIN,
    OUTER_PADDING_RATIO,
    RGBA,
    SHADOW_BLUR_RATIO,
    SHADOW_COLOR,
    SHADOW_OFFSET_RATIO,
    STROKE_COLOR,
    STROKE_WIDTH_MIN,
    STROKE_WIDTH_RATIO,
    SUPERSAMPLING,
)
from iconforge.services.errors import RenderSurfaceError, VariantRenderError

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Округление «половина вверх» (2.5 -> 3), а не банковское."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class TemplateGeometry:
    """Геометрия шаблона для холста со стороной `edge`.

    Fields:
        edge: Сторона холста E, px.
        padding: Внешний отступ p = max(round(0.08·E), 2).
        base: Сторона базы b = E − 2p.
        radius: Радиус скругления round(0.22·b), не больше b/2.
        inner_padding: Внутренний отступ ip = round(0.12·b).
        stroke_width: Толщина обводки max(0.012·E, 1).
        shadow_blur: Размытие тени 0.06·E.
        shadow_offset: Вертикальное смещение тени 0.02·E.
    """
    edge: int
    padding: int
    base: int
    radius: int
    inner_padding: int
    stroke_width: float
    shadow_blur: float
    shadow_offset: float

    @classmethod
    def for_edge(cls, edge: int) -> "TemplateGeometry":
        if edge <= 0:
            raise ValueError(f"Сторона холста должна быть положительной: {edge}")
        padding = max(round_half_up(edge * OUTER_PADDING_RATIO), OUTER_PADDING_MIN)
        base = edge - 2 * padding
        if base <= 0:
            raise ValueError(f"Сторона {edge}px слишком мала для шаблона")
        radius = min(round_half_up(base * BASE_RADIUS_RATIO), base // 2)
        return cls(
            edge=edge,
            padding=padding,
            base=base,
            radius=radius,
            inner_padding=round_half_up(base * INNER_PADDING_RATIO),
            stroke_width=max(edge * STROKE_WIDTH_RATIO, STROKE_WIDTH_MIN),
            shadow_blur=edge * SHADOW_BLUR_RATIO,
            shadow_offset=edge * SHADOW_OFFSET_RATIO,
        )

    @property
    def content_box(self) -> int:
        """Сторона области, в которую вписывается исходник."""
        return max(self.base - 2 * self.inner_padding, 1)

    def fit(self, width: int, height: int) -> Tuple[int, int, int, int]:
        """Вписывает `width × height` в область контента с сохранением пропорций.

        Returns:
            (x, y, w, h): левый верхний угол и размер на холсте, по центру базы.
        """
        box = self.content_box
        scale = min(box / width, box / height)
        draw_w = min(max(1, round_half_up(width * scale)), box)
        draw_h = min(max(1, round_half_up(height * scale)), box)
        x = self.padding + round_half_up((self.base - draw_w) / 2)
        y = self.padding + round_half_up((self.base - draw_h) / 2)
        return x, y, draw_w, draw_h


@dataclass(frozen=True)
class RenderedVariant:
    """PNG-кодировка варианта и её data URL для превью."""
    png_bytes: bytes
    data_url: str


@contextmanager
def acquire_surface(edge: int) -> Iterator[Image.Image]:
    """Создаёт прозрачную RGBA-поверхность `edge × edge` и гарантированно закрывает её."""
    try:
        surface = Image.new("RGBA", (edge, edge), (0, 0, 0, 0))
    except (ValueError, MemoryError) as exc:
        raise RenderSurfaceError(f"Не удалось создать поверхность {edge}×{edge}") from exc
    try:
        yield surface
    finally:
        surface.close()


def to_data_url(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


class TemplateCompositor:
    def render(self, source: Image.Image, edge: int) -> RenderedVariant:
        """Рендерит исходник в квадратную иконку `edge × edge` и кодирует в PNG.

        Args:
            source: Декодированное исходное изображение (желательно RGBA).
            edge: Фактическая сторона результата, px.

        Raises:
            RenderSurfaceError: поверхность не создаётся (фатально для всего запуска).
            VariantRenderError: некорректная геометрия или сбой рисования/кодирования.
        """
        try:
            geometry = TemplateGeometry.for_edge(edge)
        except ValueError as exc:
            raise VariantRenderError(str(exc)) from exc

        rgba = source if source.mode == "RGBA" else source.convert("RGBA")
        with acquire_surface(edge) as surface:
            try:
                self._compose(surface, rgba, geometry)
                buffer = io.BytesIO()
                surface.save(buffer, format="PNG")
            except (OSError, ValueError) as exc:
                raise VariantRenderError(f"Сбой рендера {edge}×{edge}") from exc
        png_bytes = buffer.getvalue()
        logger.debug("Rendered %dx%d variant (%d bytes)", edge, edge, len(png_bytes))
        return RenderedVariant(png_bytes=png_bytes, data_url=to_data_url(png_bytes))

    # ---------- Слои шаблона ----------
    def _compose(self, surface: Image.Image, source: Image.Image, g: TemplateGeometry) -> None:
        base_mask = self._rounded_mask(g)
        clip = np.asarray(base_mask, dtype=np.float32) / 255.0

        # 1) тень под базой
        surface.alpha_composite(self._shadow_layer(base_mask, g))
        # 2) белая база
        surface.alpha_composite(self._solid_layer(g.edge, BASE_COLOR, clip))
        # 3) исходник, обрезанный по базе
        surface.alpha_composite(self._content_layer(source, g, clip))
        # 4) блик, тоже в пределах базы
        surface.alpha_composite(self._highlight_layer(g, clip))
        # 5) обводка поверх, без обрезки
        stroke = np.asarray(self._rounded_mask(g, outline=True), dtype=np.float32) / 255.0
        surface.alpha_composite(self._solid_layer(g.edge, STROKE_COLOR, stroke))

    def _rounded_mask(self, g: TemplateGeometry, outline: bool = False) -> Image.Image:
        """Маска скруглённого квадрата базы (или его контура), сглаженная суперсэмплингом."""
        ss = SUPERSAMPLING
        big = Image.new("L", (g.edge * ss, g.edge * ss), 0)
        draw = ImageDraw.Draw(big)
        start = g.padding * ss
        end = (g.padding + g.base) * ss - 1
        if outline:
            width = max(1, round_half_up(g.stroke_width * ss))
            half = width // 2
            # контур центрирован на границе базы
            draw.rounded_rectangle(
                (start - half, start - half, end + half, end + half),
                radius=g.radius * ss + half,
                outline=255,
                width=width,
            )
        else:
            draw.rounded_rectangle((start, start, end, end), radius=g.radius * ss, fill=255)
        return big.resize((g.edge, g.edge), Image.Resampling.BOX)

    def _solid_layer(self, edge: int, color: RGBA, coverage: np.ndarray) -> Image.Image:
        """Слой одного цвета; непрозрачность = альфа цвета × покрытие [0..1]."""
        arr = np.empty((edge, edge, 4), dtype=np.uint8)
        arr[..., :3] = color[:3]
        arr[..., 3] = np.clip(np.rint(coverage * color[3]), 0, 255).astype(np.uint8)
        return Image.fromarray(arr)

    def _shadow_layer(self, base_mask: Image.Image, g: TemplateGeometry) -> Image.Image:
        shifted = Image.new("L", (g.edge, g.edge), 0)
        shifted.paste(base_mask, (0, round_half_up(g.shadow_offset)))
        # размытие canvas ~ 2σ гауссианы
        blurred = shifted.filter(ImageFilter.GaussianBlur(g.shadow_blur / 2))
        coverage = np.asarray(blurred, dtype=np.float32) / 255.0
        return self._solid_layer(g.edge, SHADOW_COLOR, coverage)

    def _content_layer(self, source: Image.Image, g: TemplateGeometry, clip: np.ndarray) -> Image.Image:
        x, y, w, h = g.fit(source.width, source.height)
        fitted = source.resize((w, h), Image.Resampling.LANCZOS)
        layer = Image.new("RGBA", (g.edge, g.edge), (0, 0, 0, 0))
        layer.paste(fitted, (x, y))
        arr = np.array(layer, dtype=np.float32)
        arr[..., 3] *= clip
        return Image.fromarray(np.clip(np.rint(arr), 0, 255).astype(np.uint8))

    def _highlight_layer(self, g: TemplateGeometry, clip: np.ndarray) -> Image.Image:
        rows = self._gradient_rows(g, HIGHLIGHT_STOPS)
        arr = np.repeat(rows[:, np.newaxis, :], g.edge, axis=1)
        arr[..., 3] *= clip
        return Image.fromarray(np.clip(np.rint(arr), 0, 255).astype(np.uint8))

    def _gradient_rows(self, g: TemplateGeometry, stops: Sequence[Tuple[float, RGBA]]) -> np.ndarray:
        """Цвет каждой строки холста: линейная интерполяция по стопам от верха базы к низу."""
        y = np.arange(g.edge, dtype=np.float32) + 0.5
        t = np.clip((y - g.padding) / g.base, 0.0, 1.0)
        positions = [pos for pos, _ in stops]
        rows = np.empty((g.edge, 4), dtype=np.float32)
        for channel in range(4):
            rows[:, channel] = np.interp(t, positions, [color[channel] for _, color in stops])
        return rows
