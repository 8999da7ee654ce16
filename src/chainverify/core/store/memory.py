# src/chainverify/core/store/memory.py
"""In-memory record store and schema provider.

Used for fixtures and for hosts that already hold the table in memory.
One InMemoryTableStore serves as both RecordStore and SchemaProvider.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from chainverify.contracts.chain import CellValue, StoredRow
from chainverify.contracts.errors import SchemaError, TableNotFoundError


@dataclass
class InMemoryTable:
    """Declared schema plus raw rows of one table.

    Rows are column-name -> raw value mappings including the key column.
    """

    key_column: str
    columns: Sequence[str]
    rows: list[Mapping[str, CellValue]] = field(default_factory=list)


class InMemoryTableStore:
    """RecordStore + SchemaProvider over tables held in a dict."""

    def __init__(self, tables: Mapping[str, InMemoryTable] | None = None) -> None:
        self._tables: dict[str, InMemoryTable] = dict(tables or {})

    def add_table(self, name: str, table: InMemoryTable) -> None:
        self._tables[name] = table

    def _table(self, name: str) -> InMemoryTable:
        try:
            return self._tables[name]
        except KeyError:
            raise TableNotFoundError(name) from None

    def get_primary_key_column(self, table: str) -> str:
        return self._table(table).key_column

    def get_ordered_columns(self, table: str) -> Sequence[str]:
        return list(self._table(table).columns)

    def fetch_all_rows(self, table: str) -> Sequence[StoredRow]:
        held = self._table(table)
        rows: list[StoredRow] = []
        for row in held.rows:
            key = row[held.key_column]
            if key is None:
                raise SchemaError(f"Row in table '{table}' has no value for key column '{held.key_column}'")
            rows.append(StoredRow(key=key, columns=dict(row)))
        return rows
