"""Protocols for the collaborators chain verification depends on.

The verifier never opens a database or chooses a digest algorithm. It
consumes these interfaces:

- RecordStore: every row of a table as raw bytes
- SchemaProvider: primary-key column and declared column order
- ChainHeadOracle: head key, terminator, and the externally trusted hash
- HashFunction: the deterministic record hash
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from chainverify.contracts.chain import CellValue, StoredRow


@runtime_checkable
class RecordStore(Protocol):
    """Source of raw table rows."""

    def fetch_all_rows(self, table: str) -> Sequence[StoredRow]:
        """Return every row of a table.

        Args:
            table: Table identifier

        Returns:
            All rows, in no particular order
        """
        ...


@runtime_checkable
class SchemaProvider(Protocol):
    """Source of table schema information."""

    def get_primary_key_column(self, table: str) -> str:
        """Return the name of the table's primary-key column."""
        ...

    def get_ordered_columns(self, table: str) -> Sequence[str]:
        """Return every column name in declared (schema) order."""
        ...


@runtime_checkable
class ChainHeadOracle(Protocol):
    """Trusted, out-of-table facts about the chain."""

    def get_head_key(self) -> bytes | None:
        """Key of the most recent record."""
        ...

    def get_terminator_value(self) -> bytes:
        """Sentinel predecessor value meaning "no earlier record"."""
        ...

    def get_trusted_predecessor_hash(self) -> str:
        """Hash the fully verified chain must end on."""
        ...

    def get_blockchain_id_column(self) -> str:
        """Column holding the chain identifier, excluded from hash input."""
        ...


class HashFunction(Protocol):
    """Deterministic record hash.

    Must keep None and b"" distinct in `values` and `timestamp`.
    """

    def __call__(
        self,
        key: bytes,
        values: Sequence[CellValue],
        timestamp: CellValue,
        previous_hash: str,
    ) -> str: ...
