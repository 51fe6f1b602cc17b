"""Конвейер вариантов: прогоняет шаблон по всей статической таблице размеров."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from PIL import Image

from iconforge.models.icon_model import ICON_VARIANTS, VariantResult, VariantSpec
from iconforge.services.errors import GenerationError, VariantRenderError
from iconforge.services.template_service import TemplateCompositor

logger = logging.getLogger(__name__)


class VariantPipeline:
    """Строит ровно по одному `VariantResult` на каждую запись таблицы, в её порядке.

    Варианты рендерятся строго последовательно, каждый на своей поверхности.
    Сбой любого варианта прерывает весь запуск: частичный набор не возвращается.
    """
    def __init__(
        self,
        compositor: Optional[TemplateCompositor] = None,
        specs: Sequence[VariantSpec] = ICON_VARIANTS,
    ) -> None:
        self._compositor = compositor or TemplateCompositor()
        self._specs = tuple(specs)

    @property
    def specs(self) -> Sequence[VariantSpec]:
        return self._specs

    def generate(self, source: Image.Image) -> List[VariantResult]:
        results: List[VariantResult] = []
        for spec in self._specs:
            edge = spec.actual_size
            try:
                rendered = self._compositor.render(source, edge)
            except GenerationError:
                raise
            except (OSError, ValueError, MemoryError) as exc:
                raise VariantRenderError(f"Сбой рендера варианта {spec.filename}") from exc
            results.append(
                VariantResult(
                    spec=spec,
                    actual_size=edge,
                    png_bytes=rendered.png_bytes,
                    data_url=rendered.data_url,
                )
            )
        logger.info("Generated %d variants", len(results))
        return results
