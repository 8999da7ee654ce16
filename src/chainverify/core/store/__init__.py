"""Collaborator implementations: SQL and in-memory stores, static chain head."""

from chainverify.core.store.database import ChainDB
from chainverify.core.store.memory import InMemoryTable, InMemoryTableStore
from chainverify.core.store.oracle import StaticChainHead
from chainverify.core.store.sql import SqlRecordStore, SqlSchemaProvider, to_cell_bytes

__all__ = [
    "ChainDB",
    "InMemoryTable",
    "InMemoryTableStore",
    "SqlRecordStore",
    "SqlSchemaProvider",
    "StaticChainHead",
    "to_cell_bytes",
]
