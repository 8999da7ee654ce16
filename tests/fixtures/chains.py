# tests/fixtures/chains.py
"""Chain fixtures: build correctly sealed hash-chained tables.

chainverify has no write path, so tests seal their own chains here using
the same linkage rules the verifier checks.

Usage:
    from tests.fixtures.chains import make_chain

    chain = make_chain([b"r1", b"r2", b"r3"])
    verifier = chain.verifier()
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from sqlalchemy import Column, LargeBinary, MetaData, Table

from chainverify.contracts import CellValue, HashFunction, HashLinkage
from chainverify.core.canonical import chain_hash
from chainverify.core.chain import ChainVerifier
from chainverify.core.store import InMemoryTable, InMemoryTableStore, StaticChainHead

TABLE = "ledger"
KEY_COLUMN = "id"
BLOCKCHAIN_ID_COLUMN = "blockchain_id"
TERMINATOR = b"\x00"
COLUMNS = ("id", "blockchain_id", "data", "amount", "predecessor", "timestamp", "hash")
PAYLOAD_COLUMNS = ("data", "amount", "predecessor")


def ledger_table(metadata: MetaData, name: str = TABLE) -> Table:
    """SQLAlchemy table matching COLUMNS, every column stored as raw bytes."""
    return Table(
        name,
        metadata,
        Column("id", LargeBinary, primary_key=True),
        Column("blockchain_id", LargeBinary),
        Column("data", LargeBinary),
        Column("amount", LargeBinary),
        Column("predecessor", LargeBinary),
        Column("timestamp", LargeBinary),
        Column("hash", LargeBinary),
    )


@dataclass
class ChainFixture:
    """A sealed chain held in an in-memory store."""

    store: InMemoryTableStore
    rows: list[dict[str, CellValue]]
    head: StaticChainHead
    linkage: HashLinkage

    def row(self, key: bytes) -> dict[str, CellValue]:
        for row in self.rows:
            if row[KEY_COLUMN] == key:
                return row
        raise KeyError(key)

    def verifier(self, hash_fn: HashFunction = chain_hash, *, reject_duplicates: bool = False) -> ChainVerifier:
        return ChainVerifier(
            self.store,
            self.store,
            self.head,
            hash_fn,
            linkage=self.linkage,
            reject_duplicates=reject_duplicates,
        )


def seal_rows(
    keys: Sequence[bytes],
    *,
    values: Mapping[bytes, Mapping[str, CellValue]] | None = None,
    linkage: HashLinkage = HashLinkage.PREDECESSOR,
    hash_fn: HashFunction = chain_hash,
) -> tuple[list[dict[str, CellValue]], str]:
    """Seal records oldest-first and return (rows, head hash).

    Args:
        keys: Record keys, oldest first
        values: Optional per-key overrides for data/amount/timestamp
        linkage: Which linkage rule to seal with
        hash_fn: Record hash

    Returns:
        Rows in chain order, and the hash a verifier should end on
    """
    values = values or {}
    rows: list[dict[str, CellValue]] = []
    running = ""
    previous_key = TERMINATOR

    for position, key in enumerate(keys):
        row: dict[str, CellValue] = {
            "id": key,
            "blockchain_id": b"chain-1",
            "data": b"payload-" + key,
            "amount": str(position * 10).encode(),
            "predecessor": previous_key,
            "timestamp": f"2024-01-01T00:00:{position:02d}".encode(),
        }
        row.update(values.get(key, {}))
        payload = [row[column] for column in PAYLOAD_COLUMNS]
        calculated = hash_fn(key, payload, row["timestamp"], running)

        if linkage is HashLinkage.PREDECESSOR:
            row["hash"] = running.encode() if running else None
        else:
            row["hash"] = calculated.encode()
        running = calculated

        rows.append(row)
        previous_key = key

    return rows, running


def make_chain(
    keys: Sequence[bytes],
    *,
    values: Mapping[bytes, Mapping[str, CellValue]] | None = None,
    linkage: HashLinkage = HashLinkage.PREDECESSOR,
    hash_fn: HashFunction = chain_hash,
) -> ChainFixture:
    """Build an in-memory store holding one correctly sealed chain."""
    rows, head_hash = seal_rows(keys, values=values, linkage=linkage, hash_fn=hash_fn)
    store = InMemoryTableStore({TABLE: InMemoryTable(key_column=KEY_COLUMN, columns=COLUMNS, rows=rows)})
    head = StaticChainHead(
        head_key=keys[-1],
        terminator=TERMINATOR,
        trusted_hash=head_hash,
        blockchain_id_column=BLOCKCHAIN_ID_COLUMN,
    )
    return ChainFixture(store=store, rows=rows, head=head, linkage=linkage)
