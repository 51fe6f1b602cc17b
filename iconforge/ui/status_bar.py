from __future__ import annotations

import customtkinter as ctk

STATUS_READY = "Готово. Выберите изображение, чтобы получить все размеры иконки."
STATUS_PROCESSING = "Обработка…"

ERROR_COLOR = ("#B91C1C", "#F87171")


class StatusBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=40, **kwargs)

        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._status = ctk.StringVar(value=STATUS_READY)
        self._label = ctk.CTkLabel(self, textvariable=self._status, anchor="w")
        self._label.grid(row=0, column=0, padx=(10, 6), pady=8, sticky="ew")
        self._default_color = self._label.cget("text_color")

    # public API (sync from controller)
    def set_ready(self, text: str = STATUS_READY) -> None:
        self._label.configure(text_color=self._default_color)
        self._status.set(text)

    def set_processing(self) -> None:
        self._label.configure(text_color=self._default_color)
        self._status.set(STATUS_PROCESSING)

    def set_error(self, message: str) -> None:
        self._label.configure(text_color=ERROR_COLOR)
        self._status.set(message)
