"""Shared contracts for chain verification.

This package is a LEAF MODULE with no outbound dependencies to core.

Import patterns:
    from chainverify.contracts import RowSnapshot, BrokenChainError, RecordStore
"""

from chainverify.contracts.chain import (
    CellValue,
    ChainIndex,
    ChainLayout,
    RowSnapshot,
    StoredRow,
    VerificationReport,
)
from chainverify.contracts.enums import ChainState, HashLinkage
from chainverify.contracts.errors import (
    BrokenChainError,
    ChainCycleDetectedError,
    ChainVerificationError,
    DuplicateKeyError,
    InvalidChainHeadError,
    SchemaError,
    TableNotFoundError,
)
from chainverify.contracts.protocols import (
    ChainHeadOracle,
    HashFunction,
    RecordStore,
    SchemaProvider,
)

__all__ = [
    # chain
    "CellValue",
    "ChainIndex",
    "ChainLayout",
    "RowSnapshot",
    "StoredRow",
    "VerificationReport",
    # enums
    "ChainState",
    "HashLinkage",
    # errors
    "BrokenChainError",
    "ChainCycleDetectedError",
    "ChainVerificationError",
    "DuplicateKeyError",
    "InvalidChainHeadError",
    "SchemaError",
    "TableNotFoundError",
    # protocols
    "ChainHeadOracle",
    "HashFunction",
    "RecordStore",
    "SchemaProvider",
]
