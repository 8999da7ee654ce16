# src/chainverify/core/store/sql.py
"""SQLAlchemy-backed record store and schema provider.

Tables are reflected at call time, so any existing table with a
hash-chain layout can be verified without declaring a model for it.

Driver values are turned into raw bytes before they reach the verifier:

    None              -> None (no value stored)
    bytes-like        -> bytes, unchanged
    str               -> UTF-8
    bool              -> b"true" / b"false"
    int/float/Decimal -> str(value) as UTF-8
    date/datetime     -> ISO-8601 as UTF-8
    UUID              -> canonical hyphenated text as UTF-8
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import MetaData, Table, select
from sqlalchemy.exc import NoSuchTableError

from chainverify.contracts.chain import CellValue, StoredRow
from chainverify.contracts.errors import SchemaError, TableNotFoundError
from chainverify.core.store.database import ChainDB


def to_cell_bytes(value: Any) -> CellValue:
    """Convert a driver value into a raw cell.

    Raises:
        TypeError: If the driver returned a type with no byte encoding
    """
    if value is None:
        return None
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return b"true" if value else b"false"
    if isinstance(value, int | float | Decimal):
        return str(value).encode("utf-8")
    if isinstance(value, datetime | date | time):
        return value.isoformat().encode("utf-8")
    if isinstance(value, UUID):
        return str(value).encode("utf-8")
    raise TypeError(f"Cannot convert column value of type {type(value).__name__} to bytes")


def _cell(table: str, column: str, value: Any) -> CellValue:
    try:
        return to_cell_bytes(value)
    except TypeError as e:
        raise SchemaError(f"Column '{column}' in table '{table}': {e}") from e


def _reflect_table(db: ChainDB, table: str, schema: str | None) -> Table:
    try:
        return Table(table, MetaData(), autoload_with=db.engine, schema=schema)
    except NoSuchTableError as e:
        raise TableNotFoundError(table) from e


def _resolve_key_column(reflected: Table, key_column: str | None) -> str:
    """Pick the chain key column: the explicit override, else the single primary key."""
    if key_column is not None:
        if key_column not in reflected.columns:
            raise SchemaError(f"Key column '{key_column}' not found in table '{reflected.name}'")
        return key_column

    pk_columns = [column.name for column in reflected.primary_key.columns]
    if len(pk_columns) != 1:
        raise SchemaError(
            f"Table '{reflected.name}' must have exactly one primary-key column to carry a chain, "
            f"found {len(pk_columns)}: {pk_columns}. Configure the key column explicitly."
        )
    return pk_columns[0]


class SqlSchemaProvider:
    """SchemaProvider backed by SQLAlchemy table reflection."""

    def __init__(self, db: ChainDB, *, schema: str | None = None, key_column: str | None = None) -> None:
        self._db = db
        self._schema = schema
        self._key_column = key_column

    def get_primary_key_column(self, table: str) -> str:
        return _resolve_key_column(_reflect_table(self._db, table, self._schema), self._key_column)

    def get_ordered_columns(self, table: str) -> Sequence[str]:
        return [column.name for column in _reflect_table(self._db, table, self._schema).columns]


class SqlRecordStore:
    """RecordStore that reads every row of a reflected table."""

    def __init__(self, db: ChainDB, *, schema: str | None = None, key_column: str | None = None) -> None:
        self._db = db
        self._schema = schema
        self._key_column = key_column

    def fetch_all_rows(self, table: str) -> Sequence[StoredRow]:
        """Load every row of a table as raw bytes.

        Raises:
            TableNotFoundError: If the table does not exist
            SchemaError: If the key column cannot be determined, a row has no
                key value, or a column holds a type with no byte encoding
        """
        reflected = _reflect_table(self._db, table, self._schema)
        key_column = _resolve_key_column(reflected, self._key_column)

        rows: list[StoredRow] = []
        with self._db.connection() as conn:
            for row in conn.execute(select(reflected)).mappings():
                columns = {name: _cell(table, name, value) for name, value in row.items()}
                key = columns[key_column]
                if key is None:
                    raise SchemaError(f"Row in table '{table}' has no value for key column '{key_column}'")
                rows.append(StoredRow(key=key, columns=columns))
        return rows
