"""Tests for the key operation set."""

import pytest

from jsonwebkey import JsonWebKey, KeyOp, KeyOps, KeyParseError


def test_empty_set():
    """Test a new set is empty."""
    ops = KeyOps()
    assert ops.is_empty()
    assert len(ops) == 0
    assert not ops


def test_insert_and_contains():
    """Test inserting registered and unregistered tokens."""
    ops = KeyOps()
    ops.insert(KeyOp.SIGN)
    ops.insert("verify")
    ops.insert("sign")
    ops.insert("frobnicate")

    assert len(ops) == 3
    assert ops.contains("sign")
    assert KeyOp.VERIFY in ops
    assert "frobnicate" in ops
    assert "decrypt" not in ops


def test_order_insensitive_equality():
    """Test that equality ignores insertion order."""
    assert KeyOps(["sign", "verify"]) == KeyOps([KeyOp.VERIFY, KeyOp.SIGN])
    assert KeyOps(["sign"]) != KeyOps(["verify"])


def test_union():
    """Test union semantics collapse duplicates."""
    merged = KeyOps(["sign"]) | KeyOps(["sign", "wrapKey"])
    assert merged == KeyOps(["sign", "wrapKey"])


def test_to_list_is_stable():
    """Test registered tokens come first in declaration order."""
    ops = KeyOps(["zzz", "deriveBits", "custom", "sign"])
    assert ops.to_list() == ["sign", "deriveBits", "custom", "zzz"]
    assert list(ops) == [KeyOp.SIGN, KeyOp.DERIVE_BITS, "custom", "zzz"]


def test_rejects_non_strings():
    """Test that tokens must be strings."""
    with pytest.raises(TypeError):
        KeyOps([1])


def test_key_ops_omitted_when_empty():
    """Test that an empty set is left out of the JSON."""
    jwk = JsonWebKey.parse('{"kty":"oct","k":"AQAB","key_ops":[]}')
    assert jwk.key_ops.is_empty()
    assert "key_ops" not in jwk.to_json()


def test_key_ops_missing_and_empty_are_equivalent():
    """Test that a missing key_ops and [] read the same."""
    missing = JsonWebKey.parse('{"kty":"oct","k":"AQAB"}')
    empty = JsonWebKey.parse('{"kty":"oct","k":"AQAB","key_ops":[]}')
    assert missing.key_ops == empty.key_ops


def test_key_ops_round_trip_with_unknown_token():
    """Test that unregistered tokens survive a round trip."""
    jwk = JsonWebKey.parse('{"kty":"oct","k":"AQAB","key_ops":["verify","x-custom","sign"]}')
    assert jwk.key_ops == KeyOps(["sign", "verify", "x-custom"])
    assert jwk.to_dict()["key_ops"] == ["sign", "verify", "x-custom"]


def test_key_ops_must_be_array():
    """Test that a non-array key_ops fails to parse."""
    with pytest.raises(KeyParseError):
        JsonWebKey.parse('{"kty":"oct","k":"AQAB","key_ops":"sign"}')


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
