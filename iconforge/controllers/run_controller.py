"""Контроллер запуска: один исходник -> полный набор вариантов, архив и .icns.

Владеет всем состоянием между запусками: текущим результатом и выданными
дескрипторами загрузки. Новый запуск, любой сбой и закрытие окна отзывают
все ранее выданные дескрипторы.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from iconforge.config import (
    ARCHIVE_MIME,
    ARCHIVE_SUFFIX,
    CONTAINER_MIME,
    CONTAINER_SUFFIX,
    VARIANT_MIME,
)
from iconforge.models.icon_model import VariantResult
from iconforge.models.image_model import ImageData
from iconforge.services.errors import (
    GenerationError,
    HandleRevokedError,
    IconForgeError,
    ImageDecodeError,
    ImageReadError,
    UnsupportedFileError,
)
from iconforge.services.icns_service import IcnsEncoder
from iconforge.services.iconset_service import IconsetPackager
from iconforge.services.image_service import ImageService
from iconforge.services.variant_service import VariantPipeline

logger = logging.getLogger(__name__)

MSG_UNSUPPORTED = "Выберите файл изображения (PNG, JPEG, SVG…)."
MSG_READ_FAILED = "Не удалось прочитать файл. Попробуйте ещё раз."
MSG_DECODE_FAILED = "Не удалось распознать изображение. Убедитесь, что файл не повреждён."
MSG_GENERATION_FAILED = "Не удалось сгенерировать иконки. Попробуйте другое изображение."


def user_message(exc: BaseException) -> str:
    """Однострочное сообщение для пользователя по классу исключения."""
    if isinstance(exc, UnsupportedFileError):
        return MSG_UNSUPPORTED
    if isinstance(exc, ImageReadError):
        return MSG_READ_FAILED
    if isinstance(exc, ImageDecodeError):
        return MSG_DECODE_FAILED
    return MSG_GENERATION_FAILED


@dataclass
class DownloadHandle:
    """Готовые к сохранению байты с именем файла и MIME-типом.

    После `revoke()` байты освобождаются, а любое обращение к ним
    поднимает `HandleRevokedError`.
    """
    filename: str
    mime_type: str
    _payload: Optional[bytes] = field(default=None, repr=False)

    @property
    def revoked(self) -> bool:
        return self._payload is None

    @property
    def payload(self) -> bytes:
        if self._payload is None:
            raise HandleRevokedError(f"Дескриптор {self.filename} отозван")
        return self._payload

    def revoke(self) -> None:
        self._payload = None

    def write_to(self, target: str | Path) -> Path:
        path = Path(target)
        path.write_bytes(self.payload)
        logger.info("Saved %s (%d bytes)", path, len(self.payload))
        return path


@dataclass(frozen=True)
class RunResult:
    """Результат успешного запуска. Неизменяем; заменяется следующим запуском."""
    source: ImageData
    variants: Tuple[VariantResult, ...]
    archive: DownloadHandle
    container: DownloadHandle
    variant_handles: Dict[str, DownloadHandle]

    @property
    def base_name(self) -> str:
        return self.source.base_name

    def handles(self) -> List[DownloadHandle]:
        return [self.archive, self.container, *self.variant_handles.values()]


class RunController:
    def __init__(
        self,
        image_service: Optional[ImageService] = None,
        pipeline: Optional[VariantPipeline] = None,
        encoder: Optional[IcnsEncoder] = None,
        packager: Optional[IconsetPackager] = None,
    ) -> None:
        self._image_service = image_service or ImageService()
        self._pipeline = pipeline or VariantPipeline()
        self._encoder = encoder or IcnsEncoder()
        self._packager = packager or IconsetPackager()
        self._current: Optional[RunResult] = None
        self._live_handles: List[DownloadHandle] = []
        self._closed = False

    @property
    def current(self) -> Optional[RunResult]:
        return self._current

    @property
    def live_handles(self) -> List[DownloadHandle]:
        return list(self._live_handles)

    @property
    def closed(self) -> bool:
        return self._closed

    def process_file(self, file_path: str | Path) -> RunResult:
        """Выполняет один запуск целиком.

        Предыдущий результат отбрасывается до начала работы. При любом сбое
        состояние остаётся пустым и исключение пробрасывается дальше.

        Raises:
            UnsupportedFileError, ImageReadError, ImageDecodeError: проблемы с входным файлом.
            GenerationError: сбой рендера или упаковки.
            RuntimeError: контроллер уже закрыт.
        """
        if self._closed:
            raise RuntimeError("RunController закрыт")
        self.supersede()

        path = Path(file_path)
        try:
            source = self._image_service.load_image(path)
            variants = self._pipeline.generate(source.pil_image)
            archive_bytes = self._packager.build_archive(variants)
            container_bytes = self._encoder.encode(variants)
        except GenerationError:
            logger.exception("Icon generation failed for %s", path)
            self.supersede()
            raise
        except IconForgeError as exc:
            logger.warning("Rejected %s: %s", path, exc)
            self.supersede()
            raise
        except Exception as exc:
            logger.exception("Unexpected failure while generating icons for %s", path)
            self.supersede()
            raise GenerationError(f"Непредвиденный сбой генерации: {path.name}") from exc

        base = source.base_name
        result = RunResult(
            source=source,
            variants=tuple(variants),
            archive=self._issue(f"{base}{ARCHIVE_SUFFIX}", ARCHIVE_MIME, archive_bytes),
            container=self._issue(f"{base}{CONTAINER_SUFFIX}", CONTAINER_MIME, container_bytes),
            variant_handles={
                variant.id: self._issue(variant.filename, VARIANT_MIME, variant.png_bytes)
                for variant in variants
            },
        )
        self._current = result
        logger.info("Run complete for %s: %d variants", path.name, len(result.variants))
        return result

    def supersede(self) -> None:
        """Отзывает все выданные дескрипторы и забывает текущий результат."""
        for handle in self._live_handles:
            handle.revoke()
        if self._live_handles:
            logger.debug("Revoked %d download handles", len(self._live_handles))
        self._live_handles = []
        self._current = None

    def teardown(self) -> None:
        self.supersede()
        self._closed = True

    def _issue(self, filename: str, mime_type: str, payload: bytes) -> DownloadHandle:
        handle = DownloadHandle(filename=filename, mime_type=mime_type, _payload=payload)
        self._live_handles.append(handle)
        return handle
