"""Chain verification stages: index, walk, verify, orchestrate."""

from chainverify.core.chain.index import build_chain_index
from chainverify.core.chain.orchestrator import ChainVerifier
from chainverify.core.chain.verifier import HashVerifier, verify_hashes
from chainverify.core.chain.walker import walk_chain

__all__ = [
    "ChainVerifier",
    "HashVerifier",
    "build_chain_index",
    "verify_hashes",
    "walk_chain",
]
