"""Value types passed between the chain verification stages.

These are plain frozen dataclasses. Mapping fields are wrapped in
MappingProxyType so a snapshot or index cannot be mutated after
construction; frozen=True alone only blocks attribute reassignment.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# A single raw cell. None means "no value stored", which is distinct from b"".
CellValue = bytes | None


@dataclass(frozen=True, slots=True)
class StoredRow:
    """One row as returned by a RecordStore.

    `columns` may still contain the primary-key column; the index builder
    strips it out.
    """

    key: bytes
    columns: Mapping[str, CellValue]


@dataclass(frozen=True, slots=True)
class RowSnapshot:
    """Immutable view of one record.

    Invariant: `fields` never contains the primary-key column, which is
    tracked separately as `key`.
    """

    key: bytes
    fields: Mapping[str, CellValue]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, column: str) -> CellValue:
        """Return a column's raw value, or None when the column is absent."""
        return self.fields.get(column)


@dataclass(frozen=True, slots=True)
class ChainIndex:
    """Key -> RowSnapshot mapping for one table, built once per run.

    Read-only after construction and never shared between verification runs.
    """

    key_column: str
    rows: Mapping[bytes, RowSnapshot]

    def __post_init__(self) -> None:
        object.__setattr__(self, "rows", MappingProxyType(dict(self.rows)))

    def __contains__(self, key: object) -> bool:
        return key in self.rows

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.rows)

    def get(self, key: bytes) -> RowSnapshot | None:
        return self.rows.get(key)


@dataclass(frozen=True, slots=True)
class ChainLayout:
    """Names of the columns with a special role in the chain."""

    timestamp_column: str = "timestamp"
    hash_column: str = "hash"
    predecessor_column: str = "predecessor"


@dataclass(frozen=True, slots=True)
class VerificationReport:
    """Outcome of a verification run that completed without a broken link.

    A report is only produced when every record's stored hash matched.
    `verified` additionally requires the final hash to equal the hash the
    chain head oracle trusts.
    """

    table: str
    order: tuple[bytes, ...]
    records_verified: int
    final_hash: str
    trusted_hash: str
    gaps: tuple[bytes, ...] = field(default=())

    @property
    def verified(self) -> bool:
        return self.final_hash == self.trusted_hash
