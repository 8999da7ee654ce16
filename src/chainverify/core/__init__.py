# src/chainverify/core/__init__.py
"""Core infrastructure: chain stages, stores, canonical hashing, configuration, logging."""

from chainverify.core.canonical import (
    CANONICAL_VERSION,
    canonical_json,
    chain_hash,
    stable_hash,
)
from chainverify.core.chain import (
    ChainVerifier,
    HashVerifier,
    build_chain_index,
    verify_hashes,
    walk_chain,
)
from chainverify.core.config import (
    ChainHeadSettings,
    ChainLayoutSettings,
    ChainVerifySettings,
    DatabaseSettings,
    VerifierSettings,
    load_settings,
)
from chainverify.core.logging import configure_logging, get_logger

__all__ = [
    # canonical
    "CANONICAL_VERSION",
    "canonical_json",
    "chain_hash",
    "stable_hash",
    # chain
    "ChainVerifier",
    "HashVerifier",
    "build_chain_index",
    "verify_hashes",
    "walk_chain",
    # config
    "ChainHeadSettings",
    "ChainLayoutSettings",
    "ChainVerifySettings",
    "DatabaseSettings",
    "VerifierSettings",
    "load_settings",
    # logging
    "configure_logging",
    "get_logger",
]
