"""Hash recomputation over a reconstructed chain.

HashVerifier is a small state machine:

    START -> VERIFYING -> VERIFIED
                       -> BROKEN

Each instance verifies exactly one order. A broken link stops the pass
immediately; nothing after the break is examined.

Linkage (see HashLinkage):
    PREDECESSOR: the stored hash of record N must equal the hash recomputed
        for record N-1 (the empty string for the oldest record). Tampering
        with record N-1 is therefore reported at record N's slot, and the
        head's own recomputed hash is what the caller compares against the
        trusted hash.
    SELF: the stored hash of record N must equal the hash recomputed from
        record N itself, chained onto the previous stored hash.
"""

from __future__ import annotations

from collections.abc import Sequence

from chainverify.contracts.chain import CellValue, ChainIndex, ChainLayout, RowSnapshot
from chainverify.contracts.enums import ChainState, HashLinkage
from chainverify.contracts.errors import BrokenChainError
from chainverify.contracts.protocols import HashFunction
from chainverify.core.chain._helpers import describe_key
from chainverify.core.logging import get_logger

slog = get_logger(__name__)


class HashVerifier:
    """Recomputes and checks every hash along a verification order.

    Attributes:
        state: Current ChainState
        records_verified: Records whose stored hash has been accepted
        gaps: Keys in the order that had no index entry
    """

    def __init__(
        self,
        index: ChainIndex,
        hash_fn: HashFunction,
        blockchain_id_column: str,
        *,
        columns: Sequence[str],
        layout: ChainLayout | None = None,
        linkage: HashLinkage = HashLinkage.PREDECESSOR,
    ) -> None:
        self._index = index
        self._hash_fn = hash_fn
        self._columns = tuple(columns)
        self._layout = layout or ChainLayout()
        self._linkage = linkage
        self._excluded = frozenset({index.key_column, blockchain_id_column})
        self.state = ChainState.START
        self.records_verified = 0
        self.gaps: list[bytes] = []

    def _partition(self, snapshot: RowSnapshot) -> tuple[list[CellValue], CellValue, CellValue]:
        """Split a record into (value payload, timestamp, raw stored hash).

        Columns are taken in schema order. A schema column missing from the
        snapshot contributes None, like any other column with no value.
        """
        payload: list[CellValue] = []
        timestamp: CellValue = None
        stored_hash: CellValue = None

        for column in self._columns:
            if column in self._excluded:
                continue
            value = snapshot.get(column)
            if column == self._layout.timestamp_column:
                timestamp = value
            elif column == self._layout.hash_column:
                stored_hash = value
            else:
                payload.append(value)

        return payload, timestamp, stored_hash

    def _break(self, key: bytes, expected: str, actual: str) -> BrokenChainError:
        self.state = ChainState.BROKEN
        slog.error(
            "chain_broken",
            key=describe_key(key),
            expected=expected,
            actual=actual,
            linkage=self._linkage.value,
            records_verified=self.records_verified,
        )
        return BrokenChainError(key, expected=expected, actual=actual)

    def verify(self, order: Sequence[bytes]) -> str:
        """Verify every record in order, oldest first.

        Args:
            order: Verification order from walk_chain()

        Returns:
            The last accepted hash

        Raises:
            BrokenChainError: On the first stored hash that does not match
            RuntimeError: If this verifier has already run
        """
        if self.state is not ChainState.START:
            raise RuntimeError(f"HashVerifier already used (state={self.state.value})")
        self.state = ChainState.VERIFYING

        running_hash = ""
        for key in order:
            snapshot = self._index.get(key)
            if snapshot is None:
                self.gaps.append(key)
                slog.debug("chain_gap_skipped", key=describe_key(key))
                continue

            payload, timestamp, stored_cell = self._partition(snapshot)
            calculated = self._hash_fn(key, payload, timestamp, running_hash)

            stored_hash = ""
            if stored_cell is not None:
                try:
                    stored_hash = stored_cell.decode("utf-8")
                except UnicodeDecodeError:
                    # Not text, so it cannot equal any computed hash
                    linked = running_hash if self._linkage is HashLinkage.PREDECESSOR else calculated
                    raise self._break(key, expected=stored_cell.hex(), actual=linked) from None

            if self._linkage is HashLinkage.PREDECESSOR:
                if stored_hash != running_hash:
                    raise self._break(key, expected=stored_hash, actual=running_hash)
                running_hash = calculated
            else:
                if calculated != stored_hash:
                    raise self._break(key, expected=stored_hash, actual=calculated)
                running_hash = stored_hash

            self.records_verified += 1
            slog.debug("chain_record_verified", key=describe_key(key), hash=running_hash)

        self.state = ChainState.VERIFIED
        return running_hash


def verify_hashes(
    index: ChainIndex,
    order: Sequence[bytes],
    hash_fn: HashFunction,
    blockchain_id_column: str,
    *,
    columns: Sequence[str],
    layout: ChainLayout | None = None,
    linkage: HashLinkage = HashLinkage.PREDECESSOR,
) -> str:
    """Verify a reconstructed chain and return its final hash.

    Convenience wrapper around a single-use HashVerifier.

    Raises:
        BrokenChainError: On the first stored hash that does not match
    """
    verifier = HashVerifier(
        index,
        hash_fn,
        blockchain_id_column,
        columns=columns,
        layout=layout,
        linkage=linkage,
    )
    return verifier.verify(order)
