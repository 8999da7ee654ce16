# tests/core/chain/test_walker.py
"""Tests for chain walking (order reconstruction)."""

import pytest

from chainverify.contracts import ChainCycleDetectedError, InvalidChainHeadError, StoredRow
from chainverify.core.chain import build_chain_index, walk_chain

TERMINATOR = b"\x00"


def _index(links: dict[bytes, bytes | None]):
    """Index where each key points at the given predecessor."""
    rows = [StoredRow(key=key, columns={"id": key, "predecessor": pred}) for key, pred in links.items()]
    return build_chain_index(rows, "id")


class TestWalkChain:
    """Order reconstruction from head to terminator."""

    def test_three_record_chain_is_oldest_first(self) -> None:
        index = _index({b"r1": TERMINATOR, b"r2": b"r1", b"r3": b"r2"})

        assert walk_chain(index, b"r3", TERMINATOR) == (b"r1", b"r2", b"r3")

    def test_single_record_chain(self) -> None:
        """A head pointing straight at the terminator walks to [head]."""
        index = _index({b"only": TERMINATOR})

        assert walk_chain(index, b"only", TERMINATOR) == (b"only",)

    def test_null_predecessor_terminates(self) -> None:
        index = _index({b"r1": None, b"r2": b"r1"})

        assert walk_chain(index, b"r2", TERMINATOR) == (b"r1", b"r2")

    def test_walk_starting_mid_chain_ignores_newer_records(self) -> None:
        index = _index({b"r1": TERMINATOR, b"r2": b"r1", b"r3": b"r2"})

        assert walk_chain(index, b"r2", TERMINATOR) == (b"r1", b"r2")

    def test_missing_predecessor_record_ends_walk(self) -> None:
        """A link to a key with no record is kept in the order and ends the walk."""
        index = _index({b"r2": b"r1", b"r3": b"r2"})

        assert walk_chain(index, b"r3", TERMINATOR) == (b"r1", b"r2", b"r3")

    def test_head_not_in_index(self) -> None:
        index = _index({b"r1": TERMINATOR})

        assert walk_chain(index, b"ghost", TERMINATOR) == (b"ghost",)

    def test_custom_predecessor_column(self) -> None:
        rows = [
            StoredRow(key=b"r1", columns={"id": b"r1", "prev": TERMINATOR}),
            StoredRow(key=b"r2", columns={"id": b"r2", "prev": b"r1"}),
        ]
        index = build_chain_index(rows, "id")

        assert walk_chain(index, b"r2", TERMINATOR, predecessor_column="prev") == (b"r1", b"r2")

    def test_unrelated_records_not_in_order(self) -> None:
        index = _index({b"r1": TERMINATOR, b"r2": b"r1", b"stray": TERMINATOR})

        assert walk_chain(index, b"r2", TERMINATOR) == (b"r1", b"r2")


class TestWalkPreconditions:
    """Failure modes of the walk."""

    def test_none_head_raises(self) -> None:
        index = _index({b"r1": TERMINATOR})

        with pytest.raises(InvalidChainHeadError):
            walk_chain(index, None, TERMINATOR)

    def test_two_record_cycle_detected(self) -> None:
        index = _index({b"a": b"b", b"b": b"a"})

        with pytest.raises(ChainCycleDetectedError) as exc_info:
            walk_chain(index, b"a", TERMINATOR)

        assert exc_info.value.key == b"a"
        assert exc_info.value.visited == 2

    def test_self_loop_detected(self) -> None:
        index = _index({b"a": b"a"})

        with pytest.raises(ChainCycleDetectedError):
            walk_chain(index, b"a", TERMINATOR)

    def test_cycle_behind_valid_prefix_detected(self) -> None:
        index = _index({b"r1": b"r3", b"r2": b"r1", b"r3": b"r2", b"r4": b"r3"})

        with pytest.raises(ChainCycleDetectedError) as exc_info:
            walk_chain(index, b"r4", TERMINATOR)

        assert exc_info.value.key == b"r3"
