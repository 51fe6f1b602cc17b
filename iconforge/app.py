"""Главное окно: галерея вариантов, боковая панель и строка состояния."""
import customtkinter as ctk

from iconforge.config import APPEARANCE_MODE, COLOR_THEME, WINDOW_MIN_SIZE, WINDOW_TITLE
from iconforge.controllers.app_controller import AppController
from iconforge.ui.sidebar import Sidebar
from iconforge.ui.status_bar import StatusBar
from iconforge.ui.variant_gallery import VariantGallery


class IconForgeApp(ctk.CTk):
    def __init__(self) -> None:
        ctk.set_appearance_mode(APPEARANCE_MODE)
        ctk.set_default_color_theme(COLOR_THEME)
        super().__init__()

        self.title(WINDOW_TITLE)
        self.minsize(*WINDOW_MIN_SIZE)

        gallery, sidebar, status = self._build_layout()
        self.controller = AppController(gallery=gallery, sidebar=sidebar, status=status, window=self)
        self.controller.bind_events()

    def _build_layout(self) -> tuple[VariantGallery, Sidebar, StatusBar]:
        # gallery stretches, sidebar keeps its width, status bar spans both
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        gallery = VariantGallery(self)
        gallery.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        sidebar = Sidebar(self)
        sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        status = StatusBar(self)
        status.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))
        return gallery, sidebar, status
