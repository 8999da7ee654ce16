"""Verification orchestrator: the single entry point for verifying a table.

    schema -> rows -> index -> walk -> verify -> compare with trusted hash

Every run builds its own ChainIndex. Nothing is cached between runs, so
concurrent runs against the same table never share state.
"""

from __future__ import annotations

from chainverify.contracts.chain import ChainLayout, VerificationReport
from chainverify.contracts.enums import HashLinkage
from chainverify.contracts.protocols import ChainHeadOracle, HashFunction, RecordStore, SchemaProvider
from chainverify.core.chain._helpers import describe_key
from chainverify.core.chain.index import build_chain_index
from chainverify.core.chain.verifier import HashVerifier
from chainverify.core.chain.walker import walk_chain
from chainverify.core.logging import get_logger

slog = get_logger(__name__)


class ChainVerifier:
    """Verifies that a table holds an unbroken hash chain.

    Example:
        verifier = ChainVerifier(store, schema, head, chain_hash)
        if not verifier.verify_table("ledger"):
            ...  # chain intact, but does not end on the trusted hash

    BrokenChainError, InvalidChainHeadError, ChainCycleDetectedError and
    DuplicateKeyError propagate to the caller. They are never turned into
    a False result.
    """

    def __init__(
        self,
        record_store: RecordStore,
        schema_provider: SchemaProvider,
        head_oracle: ChainHeadOracle,
        hash_fn: HashFunction,
        *,
        layout: ChainLayout | None = None,
        linkage: HashLinkage = HashLinkage.PREDECESSOR,
        reject_duplicates: bool = False,
    ) -> None:
        self._record_store = record_store
        self._schema_provider = schema_provider
        self._head_oracle = head_oracle
        self._hash_fn = hash_fn
        self._layout = layout or ChainLayout()
        self._linkage = linkage
        self._reject_duplicates = reject_duplicates

    def order(self, table: str) -> tuple[bytes, ...]:
        """Reconstruct a table's verification order without checking hashes."""
        key_column = self._schema_provider.get_primary_key_column(table)
        index = build_chain_index(
            self._record_store.fetch_all_rows(table),
            key_column,
            reject_duplicates=self._reject_duplicates,
        )
        return walk_chain(
            index,
            self._head_oracle.get_head_key(),
            self._head_oracle.get_terminator_value(),
            predecessor_column=self._layout.predecessor_column,
        )

    def run(self, table: str) -> VerificationReport:
        """Verify a table and return the detailed outcome.

        Args:
            table: Table identifier understood by the record store

        Returns:
            VerificationReport; report.verified is True iff the final hash
            equals the oracle's trusted predecessor hash

        Raises:
            BrokenChainError: A stored hash did not match
            InvalidChainHeadError: The oracle has no head key
            ChainCycleDetectedError: Predecessor links form a cycle
            DuplicateKeyError: Repeated key with duplicates rejected
        """
        log = slog.bind(table=table, linkage=self._linkage.value)

        key_column = self._schema_provider.get_primary_key_column(table)
        columns = tuple(self._schema_provider.get_ordered_columns(table))
        rows = self._record_store.fetch_all_rows(table)
        index = build_chain_index(rows, key_column, reject_duplicates=self._reject_duplicates)

        head_key = self._head_oracle.get_head_key()
        order = walk_chain(
            index,
            head_key,
            self._head_oracle.get_terminator_value(),
            predecessor_column=self._layout.predecessor_column,
        )

        verifier = HashVerifier(
            index,
            self._hash_fn,
            self._head_oracle.get_blockchain_id_column(),
            columns=columns,
            layout=self._layout,
            linkage=self._linkage,
        )
        final_hash = verifier.verify(order)
        trusted_hash = self._head_oracle.get_trusted_predecessor_hash()

        report = VerificationReport(
            table=table,
            order=order,
            records_verified=verifier.records_verified,
            final_hash=final_hash,
            trusted_hash=trusted_hash,
            gaps=tuple(verifier.gaps),
        )

        if report.verified:
            log.info(
                "chain_verification_complete",
                head=describe_key(head_key),
                records_verified=report.records_verified,
                gaps=len(report.gaps),
            )
        else:
            log.warning(
                "chain_head_hash_mismatch",
                head=describe_key(head_key),
                final_hash=final_hash,
                trusted_hash=trusted_hash,
            )
        return report

    def verify_table(self, table: str) -> bool:
        """Return True iff the table's chain is intact and ends on the trusted hash."""
        return self.run(table).verified
