"""Галерея вариантов: карточка на каждую запись таблицы размеров.

Принципы:
- SRP: только отображение превью и кнопок «сохранить этот размер».
- Карточек всегда столько же, сколько записей в таблице, и в том же порядке;
  без результата карточка показывает заглушку.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

import customtkinter as ctk

from iconforge.models.icon_model import ICON_VARIANTS, VariantResult, VariantSpec
from iconforge.ui.sidebar import blank_image

COLUMNS = 3


def display_size(actual_size: int) -> int:
    """Размер области превью на экране для фактической стороны варианта."""
    if actual_size >= 512:
        return 240
    if actual_size >= 256:
        return 180
    if actual_size >= 128:
        return 140
    if actual_size >= 64:
        return 110
    return 90


class _VariantCard(ctk.CTkFrame):
    def __init__(self, master: ctk.CTkBaseClass, spec: VariantSpec, on_save: Callable[[str], None]) -> None:
        super().__init__(master, corner_radius=12)
        self._spec = spec
        self._on_save = on_save
        self._image: Optional[ctk.CTkImage] = None

        self.grid_columnconfigure(0, weight=1)
        stage = display_size(spec.actual_size)

        self._title = ctk.CTkLabel(self, text=spec.label, font=ctk.CTkFont(size=14, weight="bold"))
        self._title.grid(row=0, column=0, padx=10, pady=(8, 0), sticky="w")
        self._desc = ctk.CTkLabel(self, text=f"{spec.description} · {spec.actual_size} px", anchor="w")
        self._desc.grid(row=1, column=0, padx=10, pady=(0, 4), sticky="w")

        self._preview = ctk.CTkLabel(self, text="—", width=stage, height=stage)
        self._preview.grid(row=2, column=0, padx=10, pady=4)

        self._save_btn = ctk.CTkButton(self, text="Сохранить этот размер", command=self._emit_save)
        self._save_btn.grid(row=3, column=0, padx=10, pady=(4, 10), sticky="ew")
        self._save_btn.grid_remove()

    def show(self, variant: Optional[VariantResult]) -> None:
        if variant is None:
            self._image = None
            self._preview.configure(image=blank_image(), text="—")
            self._save_btn.grid_remove()
            return
        # мелкие размеры в натуральную величину, крупные вписываются в область превью
        picture = variant.to_image()
        shown = min(variant.actual_size, display_size(variant.actual_size))
        self._image = ctk.CTkImage(light_image=picture, dark_image=picture, size=(shown, shown))
        self._preview.configure(image=self._image, text="")
        self._save_btn.grid()

    def _emit_save(self) -> None:
        self._on_save(self._spec.id)


class VariantGallery(ctk.CTkScrollableFrame):
    """Прокручиваемая сетка карточек всех вариантов."""
    def __init__(self, master: ctk.CTk, specs: Sequence[VariantSpec] = ICON_VARIANTS, **kwargs) -> None:
        super().__init__(master, label_text=f"{len(specs)} размеров с превью", **kwargs)

        self.on_save_variant: Optional[Callable[[str], None]] = None

        for column in range(COLUMNS):
            self.grid_columnconfigure(column, weight=1)

        self._cards: Dict[str, _VariantCard] = {}
        for index, spec in enumerate(specs):
            card = _VariantCard(self, spec, on_save=self._emit_save)
            card.grid(row=index // COLUMNS, column=index % COLUMNS, padx=6, pady=6, sticky="nsew")
            self._cards[spec.id] = card

    # ---- Public API ----
    def set_variants(self, variants: Sequence[VariantResult]) -> None:
        by_id = {variant.id: variant for variant in variants}
        for spec_id, card in self._cards.items():
            card.show(by_id.get(spec_id))

    def clear(self) -> None:
        self.set_variants(())

    def _emit_save(self, spec_id: str) -> None:
        if self.on_save_variant:
            self.on_save_variant(spec_id)
