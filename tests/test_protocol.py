"""
Tests for the distance vector wire codec.

Covers:
- vectors built from tables
- the v1 byte layout
- rejection of everything outside the legal envelope
"""

import pytest

from dvroute.core.protocol import ENTRY, HEADER, MAGIC, MAX_DATAGRAM, VERSION, DecodeError, decode, encode
from dvroute.messages import DistanceVectorMessage, build_vector, vector_from_table
from dvroute.state import MAX_DIST, NodeID, RoutingTableEntry, others
from dvroute.utils import pretty_vector

from tests.mocks import make_state


def _raw(sender: bytes, entries, neighbor_count: int = 1, count=None, magic=MAGIC, version=VERSION) -> bytes:
    count = len(entries) if count is None else count
    body = b"".join(ENTRY.pack(d, dist) for d, dist in entries)
    return HEADER.pack(magic, version, sender, neighbor_count, count) + body


class TestBuildVector:
    def test_one_entry_per_other_node_in_order(self, state_a) -> None:
        vector = build_vector(state_a)
        assert vector.sender is NodeID.A
        assert [d for d, _ in vector.entries] == list(others(NodeID.A))
        assert vector.neighbor_count == 1

    def test_unreachable_entries_are_sent_explicitly(self, state_a) -> None:
        vector = build_vector(state_a)
        assert vector.distance_to(NodeID.C) == MAX_DIST
        assert vector.reachable() == (NodeID.B,)

    def test_pretty_vector_marks_unreachable_entries(self, state_a) -> None:
        lines = pretty_vector(build_vector(state_a)).splitlines()
        row = {l.split("\t")[0]: l for l in lines[3:]}
        assert row["B"] == "B\t1"
        assert row["C"].endswith("(unreachable)")
        assert len(row) == len(others(NodeID.A))

    def test_reflects_current_distances(self, state_a) -> None:
        state_a.table[NodeID.C] = RoutingTableEntry(NodeID.C, 2, NodeID.B)
        vector = vector_from_table(state_a.table, NodeID.A)
        assert vector.as_dict()[NodeID.C] == 2


class TestEncodeDecode:
    def test_round_trip_of_table_vector(self) -> None:
        state = make_state(NodeID.D, {NodeID.A: 4, NodeID.G: 999})
        state.table[NodeID.B] = RoutingTableEntry(NodeID.B, 7, NodeID.A)
        vector = build_vector(state)

        decoded = decode(encode(vector))

        assert decoded == vector
        assert decoded.sender is NodeID.D
        assert decoded.as_dict() == {e.dest: e.distance for e in state.table.snapshot()}

    def test_layout_is_big_endian_without_padding(self) -> None:
        vector = DistanceVectorMessage(NodeID.B, ((NodeID.A, 1), (NodeID.C, 258)), neighbor_count=2)
        assert encode(vector) == b"DV\x01B\x02\x02" + b"A\x00\x00\x00\x01" + b"C\x00\x00\x01\x02"

    def test_full_vector_fits_max_datagram(self, state_b) -> None:
        assert len(encode(build_vector(state_b))) == MAX_DATAGRAM

    def test_decode_accepts_fewer_entries(self) -> None:
        decoded = decode(_raw(b"C", [(b"A", 3)]))
        assert decoded.entries == ((NodeID.A, 3),)

    def test_decode_accepts_bytearray(self) -> None:
        raw = bytearray(_raw(b"C", [(b"A", 3)]))
        assert decode(raw).sender is NodeID.C

    def test_encode_rejects_too_many_entries(self) -> None:
        entries = tuple((n, 1) for n in NodeID)
        with pytest.raises(ValueError):
            encode(DistanceVectorMessage(NodeID.A, entries))


class TestDecodeErrors:
    @pytest.mark.parametrize(
        "raw",
        [
            b"",
            b"DV\x01",
            _raw(b"A", [], magic=b"XX"),
            _raw(b"A", [], version=2),
            _raw(b"Z", [(b"B", 1)]),
            _raw(b"\xff", [(b"B", 1)]),
            _raw(b"A", [(b"B", 1)], count=2),
            _raw(b"A", [(b"B", 1)]) + b"\x00",
            _raw(b"A", [(b"Q", 1)]),
            _raw(b"A", [(b"A", 1)]),
            _raw(b"A", [(b"B", 1), (b"B", 2)]),
            _raw(b"A", [(b"B", MAX_DIST + 1)]),
            _raw(b"A", [], neighbor_count=7),
        ],
        ids=[
            "empty",
            "short-header",
            "bad-magic",
            "bad-version",
            "unknown-sender",
            "non-ascii-sender",
            "count-mismatch",
            "trailing-byte",
            "unknown-destination",
            "self-destination",
            "duplicate-destination",
            "distance-above-max",
            "neighbor-count-above-max",
        ],
    )
    def test_malformed_datagrams_raise_decode_error(self, raw: bytes) -> None:
        with pytest.raises(DecodeError):
            decode(raw)

    def test_entry_count_above_capacity(self) -> None:
        entries = [(n.value.encode(), 1) for n in NodeID if n is not NodeID.A]
        raw = HEADER.pack(MAGIC, VERSION, b"A", 1, 7) + b"".join(ENTRY.pack(d, x) for d, x in entries) + ENTRY.pack(b"B", 1)
        with pytest.raises(DecodeError):
            decode(raw)

    def test_text_payload_is_rejected(self) -> None:
        with pytest.raises(DecodeError):
            decode("DV")

    def test_decode_error_is_value_error(self) -> None:
        assert issubclass(DecodeError, ValueError)
