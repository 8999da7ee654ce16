# tests/core/test_canonical.py
"""Tests for canonical JSON and the default record hash."""

import pytest

from chainverify.core.canonical import CANONICAL_VERSION, canonical_json, chain_hash, stable_hash


class TestCanonicalJson:
    """Canonical serialization."""

    def test_keys_sorted_no_whitespace(self) -> None:
        assert canonical_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_bytes_encoded_as_base64_object(self) -> None:
        assert canonical_json(b"\x00\xff") == '{"__bytes__":"AP8="}'

    def test_none_is_null(self) -> None:
        assert canonical_json([None, b""]) == '[null,{"__bytes__":""}]'

    def test_unsupported_type_rejected(self) -> None:
        with pytest.raises(TypeError):
            canonical_json({"x": object()})

    def test_stable_hash_is_sha256_hex(self) -> None:
        digest = stable_hash({"a": 1})

        assert len(digest) == 64
        assert digest == stable_hash({"a": 1})


class TestChainHash:
    """Default record hash."""

    def test_deterministic(self) -> None:
        args = (b"k", [b"a", None], b"2024-01-01", "prev")

        assert chain_hash(*args) == chain_hash(*args)

    def test_null_differs_from_empty(self) -> None:
        assert chain_hash(b"k", [None], None, "") != chain_hash(b"k", [b""], None, "")

    def test_null_differs_from_omitted(self) -> None:
        assert chain_hash(b"k", [b"a", None], None, "") != chain_hash(b"k", [b"a"], None, "")

    def test_every_input_matters(self) -> None:
        base = chain_hash(b"k", [b"a"], b"t", "p")

        assert chain_hash(b"K", [b"a"], b"t", "p") != base
        assert chain_hash(b"k", [b"b"], b"t", "p") != base
        assert chain_hash(b"k", [b"a"], b"T", "p") != base
        assert chain_hash(b"k", [b"a"], b"t", "P") != base

    def test_value_order_matters(self) -> None:
        assert chain_hash(b"k", [b"a", b"b"], None, "") != chain_hash(b"k", [b"b", b"a"], None, "")

    def test_version_is_part_of_hash_input(self) -> None:
        expected = stable_hash(
            {"version": CANONICAL_VERSION, "key": b"k", "values": [], "timestamp": None, "previous": ""}
        )

        assert chain_hash(b"k", [], None, "") == expected
