"""Tests for hash module."""

import pytest
from hypothesis import given, strategies as st

from uiforge.core.hash import Algorithm, create_hasher, hash_files, hash_string


def test_hash_string_xxhash():
    """Test xxhash string hashing."""
    result = hash_string("test", Algorithm.XXHASH64)
    assert len(result) == 16  # xxhash64 produces 16 hex chars
    assert hash_string("test", Algorithm.XXHASH64) == result


def test_hash_string_sha256():
    """Test SHA256 string hashing."""
    result = hash_string("test", Algorithm.SHA256)
    assert len(result) == 64
    assert hash_string("test", Algorithm.SHA256, truncate=16) == result[:16]


def test_create_hasher_invalid():
    """Test invalid algorithm."""
    with pytest.raises(ValueError):
        create_hasher("invalid")  # type: ignore


def test_hash_files_order_independent():
    """File digests ignore mapping order but not paths."""
    a = {"a.ts": "x", "b.ts": "y"}
    b = {"b.ts": "y", "a.ts": "x"}

    assert hash_files(a) == hash_files(b)
    assert hash_files(a) != hash_files({"a.ts": "y", "b.ts": "x"})
    assert len(hash_files(a)) == 64


@given(st.text(min_size=1, max_size=1000))
def test_hash_deterministic(text):
    """Property test: hashing is deterministic."""
    assert hash_string(text) == hash_string(text)
