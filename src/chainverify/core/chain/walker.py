"""Chain walking: head -> terminator, reported oldest-first."""

from __future__ import annotations

from chainverify.contracts.chain import ChainIndex
from chainverify.contracts.errors import ChainCycleDetectedError, InvalidChainHeadError
from chainverify.core.chain._helpers import describe_key
from chainverify.core.logging import get_logger

slog = get_logger(__name__)


def walk_chain(
    index: ChainIndex,
    head_key: bytes | None,
    terminator: bytes,
    *,
    predecessor_column: str = "predecessor",
) -> tuple[bytes, ...]:
    """Reconstruct the verification order by following predecessor links.

    Starting at the head, every visited key is recorded. The walk stops when:
    - the current key has no index entry (the chain is shorter than the
      links claim; the missing key is still part of the order and is
      treated as a gap by the verifier), or
    - the predecessor is None or equals the terminator.

    Args:
        index: Chain index for the table
        head_key: Key of the most recent record
        terminator: Sentinel predecessor meaning "no earlier record"
        predecessor_column: Column holding the predecessor key

    Returns:
        Keys ordered oldest to newest

    Raises:
        InvalidChainHeadError: If head_key is None
        ChainCycleDetectedError: If a predecessor link revisits a key
    """
    if head_key is None:
        raise InvalidChainHeadError()

    newest_first: list[bytes] = []
    visited: set[bytes] = set()
    key = head_key

    while True:
        newest_first.append(key)
        visited.add(key)

        snapshot = index.get(key)
        if snapshot is None:
            slog.debug("chain_walk_missing_record", key=describe_key(key))
            break

        predecessor = snapshot.get(predecessor_column)
        slog.debug("chain_walk_step", key=describe_key(key), predecessor=describe_key(predecessor))

        if predecessor is None or predecessor == terminator:
            break
        if predecessor in visited:
            raise ChainCycleDetectedError(predecessor, visited=len(visited))
        key = predecessor

    newest_first.reverse()
    slog.debug("chain_walk_complete", length=len(newest_first))
    return tuple(newest_first)
