"""Параметры шаблона иконки, упаковки и окружения.

Все значения заданы константами модуля: внешних файлов конфигурации нет,
единственная переменная окружения управляет уровнем логирования.
"""
from __future__ import annotations

from typing import Tuple

RGBA = Tuple[int, int, int, int]

# ---- Геометрия шаблона (доли от стороны холста E или базы b) ----
OUTER_PADDING_RATIO = 0.08   # от E
OUTER_PADDING_MIN = 2        # px
BASE_RADIUS_RATIO = 0.22     # от b
INNER_PADDING_RATIO = 0.12   # от b
SHADOW_BLUR_RATIO = 0.06     # от E
SHADOW_OFFSET_RATIO = 0.02   # от E
STROKE_WIDTH_RATIO = 0.012   # от E
STROKE_WIDTH_MIN = 1.0

# Маски рисуются в увеличенном масштабе и уменьшаются для сглаживания краёв
SUPERSAMPLING = 4

# ---- Цвета шаблона ----
BASE_COLOR: RGBA = (255, 255, 255, 255)
SHADOW_COLOR: RGBA = (15, 23, 42, round(0.18 * 255))
STROKE_COLOR: RGBA = (148, 163, 184, round(0.25 * 255))
# (позиция 0..1, RGBA) сверху вниз
HIGHLIGHT_STOPS: Tuple[Tuple[float, RGBA], ...] = (
    (0.0, (255, 255, 255, round(0.55 * 255))),
    (0.5, (255, 255, 255, 0)),
    (1.0, (148, 163, 184, round(0.25 * 255))),
)

# ---- Упаковка ----
ICONSET_DIR_NAME = "AppIcon.iconset"
MANIFEST_NAME = "Contents.json"
MANIFEST_IDIOM = "mac"
MANIFEST_INFO = {"author": "icon-generator", "version": 1}
ICNS_MAGIC = b"icns"

# SVG растеризуется так, чтобы длинная сторона была не меньше самого крупного варианта
SVG_MIME = "image/svg+xml"
SVG_RASTER_EDGE = 1024

DEFAULT_BASE_NAME = "AppIcon"
ARCHIVE_SUFFIX = "-macos-iconset.zip"
CONTAINER_SUFFIX = ".icns"

ARCHIVE_MIME = "application/zip"
CONTAINER_MIME = "image/icns"
VARIANT_MIME = "image/png"

# ---- Окружение / UI ----
LOG_LEVEL_ENV = "ICONFORGE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
APPEARANCE_MODE = "system"
COLOR_THEME = "blue"
WINDOW_TITLE = "macOS Icon Generator"
WINDOW_MIN_SIZE = (1000, 680)
