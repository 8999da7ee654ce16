"""Chain index construction.

Turns the full set of stored rows into a key -> RowSnapshot mapping. The
index is built once per verification run and is read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable

from chainverify.contracts.chain import CellValue, ChainIndex, RowSnapshot, StoredRow
from chainverify.contracts.errors import DuplicateKeyError
from chainverify.core.chain._helpers import describe_key
from chainverify.core.logging import get_logger

slog = get_logger(__name__)


def build_chain_index(
    rows: Iterable[StoredRow],
    key_column: str,
    *,
    reject_duplicates: bool = False,
) -> ChainIndex:
    """Build the key -> snapshot index for one table.

    The key column is split off from every row; all other columns are kept,
    including those with no stored value (kept as None, never dropped).

    Duplicate keys are resolved last-write-wins and logged, unless
    reject_duplicates is set.

    Args:
        rows: Every row of the table
        key_column: Name of the primary-key column
        reject_duplicates: Raise instead of overwriting on a repeated key

    Returns:
        ChainIndex with one entry per distinct key

    Raises:
        DuplicateKeyError: If reject_duplicates is set and a key repeats
    """
    snapshots: dict[bytes, RowSnapshot] = {}
    duplicates = 0

    for row in rows:
        fields: dict[str, CellValue] = {name: value for name, value in row.columns.items() if name != key_column}

        if row.key in snapshots:
            if reject_duplicates:
                raise DuplicateKeyError(row.key)
            duplicates += 1
            slog.warning("duplicate_chain_key", key=describe_key(row.key), policy="last_write_wins")

        snapshots[row.key] = RowSnapshot(key=row.key, fields=fields)

    slog.debug(
        "chain_index_built",
        key_column=key_column,
        records=len(snapshots),
        duplicates_overwritten=duplicates,
    )
    return ChainIndex(key_column=key_column, rows=snapshots)
