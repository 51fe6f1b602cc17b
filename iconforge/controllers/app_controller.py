"""Контроллер приложения: связывает UI с контроллером запуска.

SOLID:
- SRP: только оркестрация UI и диалогов; рендер и упаковка в сервисах.
- DIP: вся работа с файлами и результатами идёт через `RunController`.
Clean Code:
- Обработчики компактны; любой сбой сбрасывает экран к состоянию «нет результата».
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from tkinter import TclError, filedialog
from typing import Optional

import customtkinter as ctk

from iconforge.controllers.run_controller import DownloadHandle, RunController, user_message
from iconforge.services.errors import IconForgeError
from iconforge.ui.sidebar import Sidebar
from iconforge.ui.status_bar import StatusBar
from iconforge.ui.variant_gallery import VariantGallery

logger = logging.getLogger(__name__)

IMAGE_FILETYPES = (
    ("Images", "*.png *.jpg *.jpeg *.svg *.bmp *.gif *.tiff *.webp *.ico"),
    ("All files", "*.*"),
)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Бинд событий (UI -> контроллер).
    - Запуск генерации через `RunController` и отображение результата или ошибки.
    - Сохранение выданных дескрипторов через системный диалог.
    """
    gallery: VariantGallery
    sidebar: Sidebar
    status: StatusBar
    window: ctk.CTk

    runs: RunController = field(default_factory=RunController)

    def bind_events(self) -> None:
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_save_archive = self._handle_save_archive
        self.sidebar.on_save_container = self._handle_save_container
        self.gallery.on_save_variant = self._handle_save_variant
        self.window.protocol("WM_DELETE_WINDOW", self._handle_close)

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(title="Выберите изображение", filetypes=IMAGE_FILETYPES)
        except TclError:
            logger.warning("Open dialog is unavailable")
            return

        if not file_path:
            return
        self.open_path(file_path)

    def open_path(self, file_path: str) -> None:
        """Обрабатывает выбранный файл и обновляет весь экран."""
        self._reset_view()
        self.sidebar.set_busy(True)
        self.status.set_processing()
        self.window.update_idletasks()
        try:
            result = self.runs.process_file(file_path)
        except IconForgeError as exc:
            self._reset_view()
            self.status.set_error(user_message(exc))
            return
        finally:
            self.sidebar.set_busy(False)

        self.sidebar.set_source_info(result.source)
        self.gallery.set_variants(result.variants)
        self.sidebar.set_downloads_enabled(True)
        self.status.set_ready(f"Готово: {result.base_name}, {len(result.variants)} размеров.")

    def _handle_save_archive(self) -> None:
        result = self.runs.current
        if result is not None:
            self._save_handle(result.archive, (("Zip", "*.zip"),))

    def _handle_save_container(self) -> None:
        result = self.runs.current
        if result is not None:
            self._save_handle(result.container, (("ICNS", "*.icns"),))

    def _handle_save_variant(self, variant_id: str) -> None:
        result = self.runs.current
        if result is None:
            return
        handle = result.variant_handles.get(variant_id)
        if handle is not None:
            self._save_handle(handle, (("PNG", "*.png"),))

    def _handle_close(self) -> None:
        self.runs.teardown()
        self.window.destroy()

    # ---- Helpers ----
    def _save_handle(self, handle: DownloadHandle, filetypes: tuple) -> None:
        try:
            target: Optional[str] = filedialog.asksaveasfilename(
                title="Сохранить",
                initialfile=handle.filename,
                filetypes=filetypes,
            )
        except TclError:
            logger.warning("Save dialog is unavailable")
            return
        if not target:
            return
        try:
            handle.write_to(target)
        except (OSError, IconForgeError):
            logger.exception("Failed to save %s", handle.filename)
            self.status.set_error("Не удалось сохранить файл.")

    def _reset_view(self) -> None:
        self.gallery.clear()
        self.sidebar.set_source_info(None)
        self.sidebar.set_downloads_enabled(False)
