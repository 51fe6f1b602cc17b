"""Боковая панель: выбор файла, сведения об исходнике, кнопки загрузки.

Принципы:
- SRP: управляет только виджетами, не знает о рендере и упаковке.
- ISP: события наружу через `on_*`, состояние внутрь через `set_*`.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk
from PIL import Image

from iconforge.models.image_model import ImageData
from iconforge.services.image_service import size_label

PREVIEW_SIZE = 160


def blank_image() -> ctk.CTkImage:
    # CTkLabel не сбрасывает картинку при image=None
    blank = Image.new("RGBA", (1, 1), (0, 0, 0, 0))
    return ctk.CTkImage(light_image=blank, dark_image=blank, size=(1, 1))


class Sidebar(ctk.CTkFrame):
    """Панель с блоками: файл, исходник, загрузки."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_save_archive: Optional[Callable[[], None]] = None
        self.on_save_container: Optional[Callable[[], None]] = None

        # Файл
        self._title = ctk.CTkLabel(self, text="Иконка macOS", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._hint = ctk.CTkLabel(
            self,
            text="PNG с прозрачностью, лучше 1024 × 1024 или больше",
            wraplength=250,
            anchor="w",
            justify="left",
        )
        self._hint.grid(row=1, column=0, padx=8, pady=(0, 6), sticky="ew")

        self._open_btn = ctk.CTkButton(self, text="Выбрать изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=2, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Исходник
        self._info_title = ctk.CTkLabel(self, text="Исходник", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=3, column=0, padx=8, pady=(8, 4), sticky="w")

        self._preview = ctk.CTkLabel(self, text="", width=PREVIEW_SIZE, height=PREVIEW_SIZE)
        self._preview.grid(row=4, column=0, padx=8, pady=(0, 6))
        self._preview_image: Optional[ctk.CTkImage] = None

        self._name_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")

        self._info_name = ctk.CTkLabel(self, textvariable=self._name_val, wraplength=250, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_name.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=6, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=7, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Загрузки
        self._dl_title = ctk.CTkLabel(self, text="Загрузки", font=ctk.CTkFont(size=16, weight="bold"))
        self._dl_title.grid(row=8, column=0, padx=8, pady=(8, 4), sticky="w")

        self._archive_btn = ctk.CTkButton(self, text="Сохранить iconset (.zip)", command=self._emit_save_archive)
        self._archive_btn.grid(row=9, column=0, padx=8, pady=(0, 6), sticky="ew")
        self._container_btn = ctk.CTkButton(self, text="Сохранить .icns", command=self._emit_save_container)
        self._container_btn.grid(row=10, column=0, padx=8, pady=(0, 6), sticky="ew")

        self._contents = ctk.CTkLabel(
            self,
            text="• AppIcon.iconset с Contents.json\n• .icns для macOS\n• 10 размеров, включая Retina",
            anchor="w",
            justify="left",
        )
        self._contents.grid(row=11, column=0, padx=8, pady=(6, 8), sticky="ew")

        # filler
        self.grid_rowconfigure(99, weight=1)

        self.set_downloads_enabled(False)

    # ---- public API (sync from controller) ----
    def set_source_info(self, image_data: Optional[ImageData]) -> None:
        if image_data is None:
            self._name_val.set("—")
            self._dims_val.set("—")
            self._size_val.set("—")
            self._preview_image = None
            self._preview.configure(image=blank_image())
            return
        self._name_val.set(f"Файл: {image_data.base_name}")
        self._dims_val.set(f"Размер: {image_data.width} × {image_data.height} px, {image_data.mode}")
        self._size_val.set(f"Объём: {size_label(image_data.size_bytes)}")
        self._set_preview(image_data.pil_image)

    def set_downloads_enabled(self, enabled: bool) -> None:
        state = "normal" if enabled else "disabled"
        self._archive_btn.configure(state=state)
        self._container_btn.configure(state=state)

    def set_busy(self, busy: bool) -> None:
        self._open_btn.configure(
            state="disabled" if busy else "normal",
            text="Обработка изображения…" if busy else "Выбрать изображение…",
        )

    # ---- helpers ----
    def _set_preview(self, image: Image.Image) -> None:
        thumb = image.copy()
        thumb.thumbnail((PREVIEW_SIZE, PREVIEW_SIZE), Image.Resampling.LANCZOS)
        self._preview_image = ctk.CTkImage(light_image=thumb, dark_image=thumb, size=thumb.size)
        self._preview.configure(image=self._preview_image)

    # ---- events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_save_archive(self) -> None:
        if self.on_save_archive:
            self.on_save_archive()

    def _emit_save_container(self) -> None:
        if self.on_save_container:
            self.on_save_container()
