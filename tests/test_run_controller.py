"""Тесты контроллера запуска: выдача, замена и отзыв дескрипторов."""
from __future__ import annotations

import io
import logging
import zipfile
from unittest.mock import Mock

import pytest

from iconforge.controllers.run_controller import (
    MSG_DECODE_FAILED,
    MSG_GENERATION_FAILED,
    MSG_READ_FAILED,
    MSG_UNSUPPORTED,
    DownloadHandle,
    RunController,
    user_message,
)
from iconforge.models.icon_model import ICON_VARIANTS
from iconforge.services.errors import (
    ArchiveBuildError,
    GenerationError,
    HandleRevokedError,
    ImageDecodeError,
    ImageReadError,
    UnsupportedFileError,
    VariantRenderError,
)
from iconforge.services.icns_service import read_entries
from iconforge.services.variant_service import VariantPipeline


@pytest.fixture
def controller():
    """Контроллер с укороченной таблицей, чтобы тесты не рендерили 1024 px."""
    return RunController(pipeline=VariantPipeline(specs=ICON_VARIANTS[:4]))


class TestDownloadHandle:
    """Дескриптор загрузки."""

    def test_write_and_revoke(self, tmp_path):
        handle = DownloadHandle(filename="a.icns", mime_type="image/icns", _payload=b"data")
        target = handle.write_to(tmp_path / "a.icns")
        assert target.read_bytes() == b"data"
        handle.revoke()
        assert handle.revoked
        with pytest.raises(HandleRevokedError):
            _ = handle.payload
        with pytest.raises(HandleRevokedError):
            handle.write_to(tmp_path / "b.icns")


class TestProcessFile:
    """Успешный запуск."""

    def test_full_run_with_default_table(self, write_image):
        result = RunController().process_file(write_image("brand.png"))
        assert len(result.variants) == 10
        assert result.archive.filename == "brand-macos-iconset.zip"
        assert result.archive.mime_type == "application/zip"
        assert result.container.filename == "brand.icns"
        assert result.container.mime_type == "image/icns"
        assert len(read_entries(result.container.payload)) == 7
        with zipfile.ZipFile(io.BytesIO(result.archive.payload)) as archive:
            assert len(archive.namelist()) == 12

    def test_issues_handles(self, controller, write_image):
        result = controller.process_file(write_image("logo.png"))
        assert controller.current is result
        assert result.base_name == "logo"
        assert set(result.variant_handles) == {"16", "16@2", "32", "32@2"}
        assert result.variant_handles["16@2"].filename == "icon_16x16@2x.png"
        assert result.variant_handles["16@2"].payload == result.variants[1].png_bytes
        assert result.variant_handles["16"].mime_type == "image/png"
        assert controller.live_handles == result.handles()
        assert len(controller.live_handles) == 6

    def test_new_run_revokes_previous_handles(self, controller, write_image):
        first = controller.process_file(write_image("first.png"))
        second = controller.process_file(write_image("second.png"))
        assert all(handle.revoked for handle in first.handles())
        assert not any(handle.revoked for handle in second.handles())
        assert controller.current is second
        assert len(controller.live_handles) == 6


class TestProcessFileFailures:
    """Любой сбой оставляет пустое состояние."""

    def test_non_image_rejected(self, controller, write_image, tmp_path):
        previous = controller.process_file(write_image("ok.png"))
        text = tmp_path / "notes.txt"
        text.write_text("not an image")
        with pytest.raises(UnsupportedFileError):
            controller.process_file(text)
        assert controller.current is None
        assert controller.live_handles == []
        assert all(handle.revoked for handle in previous.handles())

    def test_missing_file(self, controller, tmp_path):
        with pytest.raises(ImageReadError):
            controller.process_file(tmp_path / "gone.png")
        assert controller.current is None

    def test_corrupted_image(self, controller, tmp_path):
        path = tmp_path / "bad.png"
        path.write_bytes(b"garbage")
        with pytest.raises(ImageDecodeError):
            controller.process_file(path)
        assert controller.current is None

    def test_generation_failure_is_logged_and_discarded(self, write_image, caplog):
        pipeline = Mock(spec=VariantPipeline)
        pipeline.generate.side_effect = VariantRenderError("boom")
        controller = RunController(pipeline=pipeline)
        with caplog.at_level(logging.ERROR, logger="iconforge"):
            with pytest.raises(VariantRenderError):
                controller.process_file(write_image("logo.png"))
        assert controller.current is None
        assert controller.live_handles == []
        assert any(record.exc_info for record in caplog.records)

    def test_archive_failure_discards_variants(self, write_image):
        packager = Mock()
        packager.build_archive.side_effect = ArchiveBuildError("zip")
        controller = RunController(pipeline=VariantPipeline(specs=ICON_VARIANTS[:1]), packager=packager)
        with pytest.raises(ArchiveBuildError):
            controller.process_file(write_image("logo.png"))
        assert controller.current is None
        assert controller.live_handles == []


class TestUnexpectedFailures:
    """Любое непредвиденное исключение сводится к сбою генерации."""

    def test_backend_error_becomes_generation_error(self, write_image, caplog):
        pipeline = Mock(spec=VariantPipeline)
        pipeline.generate.side_effect = RuntimeError("numpy exploded")
        controller = RunController(pipeline=pipeline)
        with caplog.at_level(logging.ERROR, logger="iconforge"):
            with pytest.raises(GenerationError) as info:
                controller.process_file(write_image("logo.png"))
        assert isinstance(info.value.__cause__, RuntimeError)
        assert user_message(info.value) == MSG_GENERATION_FAILED
        assert controller.current is None
        assert controller.live_handles == []
        assert any(record.exc_info for record in caplog.records)

    def test_svg_source_runs_end_to_end(self, controller, tmp_path):
        path = tmp_path / "vector.svg"
        path.write_text(
            '<svg xmlns="http://www.w3.org/2000/svg" width="32" height="32">'
            '<circle cx="16" cy="16" r="12" fill="green"/></svg>'
        )
        result = controller.process_file(path)
        assert result.source.width == 1024
        assert result.container.filename == "vector.icns"
        assert len(result.variants) == 4


class TestTeardown:
    def test_teardown_revokes_and_closes(self, controller, write_image):
        result = controller.process_file(write_image("logo.png"))
        controller.teardown()
        assert controller.closed
        assert all(handle.revoked for handle in result.handles())
        with pytest.raises(RuntimeError):
            controller.process_file(write_image("again.png"))


class TestUserMessage:
    @pytest.mark.parametrize(
        "exc, message",
        [
            (UnsupportedFileError("x"), MSG_UNSUPPORTED),
            (ImageReadError("x"), MSG_READ_FAILED),
            (ImageDecodeError("x"), MSG_DECODE_FAILED),
            (VariantRenderError("x"), MSG_GENERATION_FAILED),
            (ArchiveBuildError("x"), MSG_GENERATION_FAILED),
        ],
    )
    def test_mapping(self, exc, message):
        assert user_message(exc) == message
