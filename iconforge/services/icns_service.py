"""Кодирование вариантов в контейнер .icns.

Формат (big-endian):
    magic 'icns' | u32 общая длина файла
    затем для каждой записи: 4-символьный тип | u32 длина (8 + данные) | PNG-данные

Записи: уникальные фактические стороны (первый встреченный вариант побеждает),
только стороны с известным типом, по возрастанию стороны.
"""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Dict, List, Sequence

from iconforge.config import ICNS_MAGIC
from iconforge.models.icon_model import VariantResult
from iconforge.services.errors import ContainerEncodeError

logger = logging.getLogger(__name__)

# Полный набор типов, включая стороны, которых может не быть в таблице вариантов:
# расширение таблицы не требует правок кодировщика.
ICNS_TYPE_MAP: Dict[int, str] = {
    16: "icp4",
    32: "icp5",
    64: "icp6",
    128: "ic07",
    256: "ic08",
    512: "ic09",
    1024: "ic10",
}

HEADER = struct.Struct(">4sI")


@dataclass(frozen=True)
class ContainerEntry:
    size: int
    type_tag: str
    data: bytes

    @property
    def length(self) -> int:
        return HEADER.size + len(self.data)


class IcnsEncoder:
    def select_entries(self, variants: Sequence[VariantResult]) -> List[ContainerEntry]:
        """Отбирает записи контейнера: дедупликация по стороне, фильтр по типу, сортировка."""
        unique: Dict[int, bytes] = {}
        for variant in variants:
            unique.setdefault(variant.actual_size, variant.png_bytes)

        entries = [
            ContainerEntry(size=size, type_tag=ICNS_TYPE_MAP[size], data=data)
            for size, data in unique.items()
            if size in ICNS_TYPE_MAP
        ]
        entries.sort(key=lambda entry: entry.size)
        return entries

    def encode(self, variants: Sequence[VariantResult]) -> bytes:
        """Сериализует варианты в один .icns-блоб.

        Raises:
            ContainerEncodeError: если запись не упаковывается (например, тип не из 4 ASCII-байт).
        """
        entries = self.select_entries(variants)
        total_length = HEADER.size + sum(entry.length for entry in entries)
        blob = bytearray()
        try:
            blob += HEADER.pack(ICNS_MAGIC, total_length)
            for entry in entries:
                tag = entry.type_tag.encode("ascii")
                if len(tag) != 4:
                    raise ContainerEncodeError(f"Тип записи должен быть из 4 символов: {entry.type_tag!r}")
                blob += HEADER.pack(tag, entry.length)
                blob += entry.data
        except (struct.error, UnicodeEncodeError) as exc:
            raise ContainerEncodeError("Не удалось упаковать контейнер .icns") from exc

        if len(blob) != total_length:
            raise ContainerEncodeError(f"Длина контейнера {len(blob)} != {total_length}")
        logger.info("Encoded icns with %d entries (%d bytes)", len(entries), total_length)
        return bytes(blob)


def read_entries(blob: bytes) -> List[ContainerEntry]:
    """Разбирает .icns обратно в записи; используется для проверки собранных файлов.

    Raises:
        ValueError: неверная сигнатура или длины.
    """
    if len(blob) < HEADER.size:
        raise ValueError("Контейнер короче заголовка")
    magic, total_length = HEADER.unpack_from(blob, 0)
    if magic != ICNS_MAGIC:
        raise ValueError(f"Неверная сигнатура: {magic!r}")
    if total_length != len(blob):
        raise ValueError(f"Длина в заголовке {total_length} != {len(blob)}")

    sizes_by_tag = {tag: size for size, tag in ICNS_TYPE_MAP.items()}
    entries: List[ContainerEntry] = []
    offset = HEADER.size
    while offset < total_length:
        if offset + HEADER.size > total_length:
            raise ValueError(f"Обрезанный заголовок записи по смещению {offset}")
        raw_tag, length = HEADER.unpack_from(blob, offset)
        if length < HEADER.size or offset + length > total_length:
            raise ValueError(f"Неверная длина записи {length} по смещению {offset}")
        tag = raw_tag.decode("ascii")
        entries.append(
            ContainerEntry(
                size=sizes_by_tag.get(tag, 0),
                type_tag=tag,
                data=bytes(blob[offset + HEADER.size:offset + length]),
            )
        )
        offset += length
    return entries
