"""Tests for hash and id modules."""

import pytest
from hypothesis import given, strategies as st

from selfgen.core.hash import Algorithm, create_hasher, hash_fields, hash_string
from selfgen.core.id import (
    extract_timestamp,
    new_fallback_id,
    new_generation_id,
    new_node_id,
    short_suffix,
)


@pytest.mark.unit
def test_hash_string_lengths():
    assert len(hash_string("btn-1")) == 16
    assert len(hash_string("btn-1", Algorithm.SHA256)) == 64
    assert len(hash_string("btn-1", Algorithm.SHA256, truncate=12)) == 12


@pytest.mark.unit
def test_hash_fields_separates_boundaries():
    """Field boundaries are part of the digest."""
    assert hash_fields("ab", "c") != hash_fields("a", "bc")
    assert hash_fields("a", "b") != hash_fields("b", "a")


@pytest.mark.unit
def test_create_hasher_rejects_unknown():
    with pytest.raises(ValueError):
        create_hasher("md5")  # type: ignore[arg-type]


@given(st.lists(st.text(), min_size=1, max_size=6))
def test_hash_fields_deterministic(fields):
    """Property test: same fields always give the same digest."""
    assert hash_fields(*fields) == hash_fields(*fields)


@pytest.mark.unit
def test_prefixed_ids():
    assert new_node_id().startswith("node_")
    assert new_fallback_id().startswith("fallback-")
    assert new_generation_id().startswith("gen_")
    assert new_node_id() != new_node_id()


@pytest.mark.unit
def test_short_suffix():
    suffix = short_suffix()
    assert len(suffix) == 6
    assert suffix == suffix.lower()


@pytest.mark.unit
def test_extract_timestamp():
    assert extract_timestamp(new_generation_id()) is not None
    assert extract_timestamp(new_fallback_id()) is not None
    assert extract_timestamp("not-an-id") is None
