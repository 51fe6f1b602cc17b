"""Тесты кодировщика контейнера .icns."""
from __future__ import annotations

import struct

import pytest

from iconforge.services import icns_service
from iconforge.services.errors import ContainerEncodeError
from iconforge.services.icns_service import ICNS_TYPE_MAP, IcnsEncoder, read_entries


class TestSelectEntries:
    """Отбор записей: дедупликация, фильтр, сортировка."""

    def setup_method(self):
        self.encoder = IcnsEncoder()

    def test_first_seen_wins_for_shared_edge(self, make_variant):
        first = make_variant(16, 2, b"first")
        second = make_variant(32, 1, b"second")
        entries = self.encoder.select_entries([first, second])
        assert len(entries) == 1
        assert entries[0].size == 32
        assert entries[0].data == b"first"

    def test_unknown_edges_are_dropped(self, make_variant):
        entries = self.encoder.select_entries([make_variant(48), make_variant(16), make_variant(20, 2)])
        assert [e.size for e in entries] == [16]

    def test_sorted_ascending(self, make_variant):
        variants = [make_variant(512, 2), make_variant(16), make_variant(128), make_variant(32, 2)]
        entries = self.encoder.select_entries(variants)
        assert [e.size for e in entries] == [16, 64, 128, 1024]
        assert [e.type_tag for e in entries] == ["icp4", "icp6", "ic07", "ic10"]

    def test_full_table_of_tags(self):
        assert ICNS_TYPE_MAP == {
            16: "icp4", 32: "icp5", 64: "icp6", 128: "ic07", 256: "ic08", 512: "ic09", 1024: "ic10",
        }


class TestEncode:
    """Бинарная раскладка контейнера."""

    def setup_method(self):
        self.encoder = IcnsEncoder()

    def test_layout(self, make_variant):
        blob = self.encoder.encode([make_variant(32, data=b"bb"), make_variant(16, data=b"a")])
        assert blob[:4] == b"icns"
        assert struct.unpack(">I", blob[4:8])[0] == len(blob) == 8 + 9 + 10
        assert blob[8:12] == b"icp4"
        assert struct.unpack(">I", blob[12:16])[0] == 9
        assert blob[16:17] == b"a"
        assert blob[17:21] == b"icp5"
        assert struct.unpack(">I", blob[21:25])[0] == 10
        assert blob[25:27] == b"bb"

    def test_empty_list_gives_header_only(self):
        assert self.encoder.encode([]) == b"icns" + struct.pack(">I", 8)

    def test_invalid_tag_raises(self, make_variant, monkeypatch):
        monkeypatch.setitem(icns_service.ICNS_TYPE_MAP, 48, "bad")
        with pytest.raises(ContainerEncodeError):
            self.encoder.encode([make_variant(48)])

    def test_generated_variants(self, generated_variants):
        blob = self.encoder.encode(generated_variants)
        entries = read_entries(blob)
        assert [e.size for e in entries] == [16, 32, 64, 128, 256, 512, 1024]
        assert [e.type_tag for e in entries] == ["icp4", "icp5", "icp6", "ic07", "ic08", "ic09", "ic10"]
        by_id = {v.id: v for v in generated_variants}
        assert entries[1].data == by_id["16@2"].png_bytes
        assert entries[5].data == by_id["256@2"].png_bytes
        assert entries[6].data == by_id["512@2"].png_bytes
        for entry in entries:
            assert entry.length == 8 + len(entry.data)


class TestReadEntries:
    """Разбор контейнера отвергает повреждённые длины."""

    def test_wrong_magic(self):
        with pytest.raises(ValueError):
            read_entries(b"abcd" + struct.pack(">I", 8))

    def test_total_length_mismatch(self):
        with pytest.raises(ValueError):
            read_entries(b"icns" + struct.pack(">I", 99))

    def test_chunk_length_overflow(self):
        blob = b"icns" + struct.pack(">I", 20) + b"icp4" + struct.pack(">I", 50) + b"xxxx"
        with pytest.raises(ValueError):
            read_entries(blob)
