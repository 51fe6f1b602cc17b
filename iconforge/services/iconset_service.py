"""Упаковка вариантов в iconset: манифест Contents.json и zip-архив.

Структура архива:
    AppIcon.iconset/
        icon_16x16.png … icon_512x512@2x.png  (в порядке таблицы)
        Contents.json
"""
from __future__ import annotations

import io
import json
import logging
import zipfile
import zlib
from typing import Any, Dict, List, Sequence

from iconforge.config import ICONSET_DIR_NAME, MANIFEST_IDIOM, MANIFEST_INFO, MANIFEST_NAME
from iconforge.models.icon_model import VariantResult
from iconforge.services.errors import ArchiveBuildError

logger = logging.getLogger(__name__)

# Фиксированная дата записей: архив из одинаковых данных совпадает побайтно
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


class IconsetPackager:
    def __init__(self, directory: str = ICONSET_DIR_NAME) -> None:
        self._directory = directory.rstrip("/")

    def build_manifest(self, variants: Sequence[VariantResult]) -> Dict[str, Any]:
        """Манифест iconset. В `size` номинальный размер, не фактический."""
        images: List[Dict[str, str]] = [
            {
                "idiom": MANIFEST_IDIOM,
                "filename": variant.filename,
                "scale": f"{variant.scale}x",
                "size": f"{variant.size}x{variant.size}",
            }
            for variant in variants
        ]
        return {"images": images, "info": dict(MANIFEST_INFO)}

    def manifest_json(self, variants: Sequence[VariantResult]) -> str:
        return json.dumps(self.build_manifest(variants), indent=2, ensure_ascii=False)

    def build_archive(self, variants: Sequence[VariantResult]) -> bytes:
        """Собирает zip-архив iconset целиком в памяти.

        Raises:
            ArchiveBuildError: сбой сжатия или записи; частичный архив не возвращается.
        """
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
                archive.writestr(self._entry(f"{self._directory}/", is_dir=True), b"")
                for variant in variants:
                    archive.writestr(self._entry(f"{self._directory}/{variant.filename}"), variant.png_bytes)
                manifest = self.manifest_json(variants).encode("utf-8")
                archive.writestr(self._entry(f"{self._directory}/{MANIFEST_NAME}"), manifest)
        except (OSError, ValueError, zlib.error, zipfile.LargeZipFile) as exc:
            raise ArchiveBuildError("Не удалось собрать архив iconset") from exc

        data = buffer.getvalue()
        logger.info("Built iconset archive: %d files, %d bytes", len(variants) + 1, len(data))
        return data

    def _entry(self, name: str, is_dir: bool = False) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo(name, date_time=ZIP_TIMESTAMP)
        if is_dir:
            info.compress_type = zipfile.ZIP_STORED
            info.external_attr = (0o40755 << 16) | 0x10
        else:
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
        return info
