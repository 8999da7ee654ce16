# src/chainverify/core/store/oracle.py
"""Chain head oracle holding trusted values supplied by the caller."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StaticChainHead:
    """ChainHeadOracle with fixed values.

    The values must come from somewhere the verified table cannot influence
    (configuration, a separate trusted store, an operator). Reading them from
    the table itself would defeat the check.
    """

    head_key: bytes | None
    terminator: bytes
    trusted_hash: str
    blockchain_id_column: str

    def get_head_key(self) -> bytes | None:
        return self.head_key

    def get_terminator_value(self) -> bytes:
        return self.terminator

    def get_trusted_predecessor_hash(self) -> str:
        return self.trusted_hash

    def get_blockchain_id_column(self) -> str:
        return self.blockchain_id_column
