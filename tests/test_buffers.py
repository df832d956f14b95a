"""Tests for zeroizing byte buffers."""

import copy
import gc

import pytest

from jsonwebkey import (
    Base64DecodeError,
    ByteLengthError,
    FixedByteBuffer,
    VariableByteBuffer,
    configure,
)
from jsonwebkey.core.buffers import zeroizing

BYTES = bytes([1, 2, 3, 4, 5, 6, 7])
BASE64 = "AQIDBAUGBw"


def test_fixed_buffer_base64_round_trip():
    """Test encoding to unpadded base64url and decoding back."""
    buf = FixedByteBuffer[7](BYTES)
    assert buf.to_base64() == BASE64

    decoded = FixedByteBuffer[7].from_base64(BASE64)
    assert bytes(decoded) == BYTES
    assert decoded == buf


def test_fixed_buffer_accepts_padded_and_standard_alphabet():
    """Test that padded and standard-alphabet input decode too."""
    assert bytes(FixedByteBuffer[7].from_base64("AQIDBAUGBw==")) == BYTES

    raw = bytes([0xFB, 0xFF, 0xBF])
    assert bytes(FixedByteBuffer[3].from_base64("-_-_")) == raw
    assert bytes(FixedByteBuffer[3].from_base64("+/+/")) == raw


@pytest.mark.parametrize("size", [1, 7, 32])
def test_fixed_buffer_length_invariant(size):
    """Test from_bytes succeeds only for exactly N bytes."""
    assert len(FixedByteBuffer[size].from_bytes(bytes(size))) == size

    for length in (size - 1, size + 1):
        with pytest.raises(ByteLengthError) as exc_info:
            FixedByteBuffer[size].from_bytes(bytes(length))
        assert exc_info.value.expected == size
        assert exc_info.value.actual == length


def test_fixed_buffer_decode_too_long():
    """Test decoding 7 bytes into a 6-byte buffer."""
    with pytest.raises(ByteLengthError) as exc_info:
        FixedByteBuffer[6].from_base64(BASE64)
    assert exc_info.value.expected == 6
    assert exc_info.value.actual == 7


def test_fixed_buffer_decode_too_short():
    """Test decoding 7 bytes into an 8-byte buffer."""
    with pytest.raises(ByteLengthError):
        FixedByteBuffer[8].from_base64(BASE64)


@pytest.mark.parametrize("value", ["Z", "AQ!D", "AQ==AQ==", "é"])
def test_invalid_base64(value):
    """Test that malformed base64 fails before any length check."""
    with pytest.raises(Base64DecodeError):
        FixedByteBuffer[0].from_base64(value)


def test_non_string_base64():
    """Test that non-string input is rejected."""
    with pytest.raises(Base64DecodeError):
        VariableByteBuffer.from_base64(123)


def test_sized_classes_are_cached():
    """Test that FixedByteBuffer[N] is the same class each time."""
    assert FixedByteBuffer[32] is FixedByteBuffer[32]
    assert FixedByteBuffer[32].size == 32
    assert FixedByteBuffer[32] is not FixedByteBuffer[16]


def test_unsized_fixed_buffer_rejected():
    """Test that a length must be chosen."""
    with pytest.raises(TypeError):
        FixedByteBuffer(b"abc")
    with pytest.raises(TypeError):
        FixedByteBuffer[-1]


def test_equality_is_bytewise():
    """Test buffer equality."""
    assert FixedByteBuffer[3](b"abc") == FixedByteBuffer[3](b"abc")
    assert FixedByteBuffer[3](b"abc") != FixedByteBuffer[3](b"abd")
    assert VariableByteBuffer(b"abc") != FixedByteBuffer[3](b"abc")


def test_buffers_are_unhashable():
    """Test that mutable key storage cannot be hashed."""
    with pytest.raises(TypeError):
        hash(VariableByteBuffer(b"abc"))


def test_variable_buffer_any_length():
    """Test that VariableByteBuffer accepts any length."""
    assert len(VariableByteBuffer(b"")) == 0
    assert len(VariableByteBuffer(bytes(513))) == 513
    assert bytes(VariableByteBuffer.from_base64(BASE64)) == BYTES


def test_variable_buffer_integers():
    """Test big-endian integer conversion."""
    assert VariableByteBuffer.from_int(65537).to_base64() == "AQAB"
    assert bytes(VariableByteBuffer.from_int(0)) == b"\x00"
    assert VariableByteBuffer(b"\x01\x00").to_int() == 256

    with pytest.raises(ValueError):
        VariableByteBuffer.from_int(-1)


def test_zeroize_on_drop():
    """Test that the backing memory is wiped when a buffer is dropped."""
    buf = FixedByteBuffer[7](BYTES)
    backing = buf._data
    assert backing == bytearray(BYTES)

    del buf
    gc.collect()

    assert backing == bytearray(7)


def test_zeroize_on_context_exit():
    """Test that leaving a with-block wipes the buffer."""
    with VariableByteBuffer(BYTES) as buf:
        backing = buf._data
        assert bytes(buf) == BYTES
    assert backing == bytearray(7)


def test_copy_is_independent():
    """Test that copies do not share storage."""
    original = VariableByteBuffer(BYTES)
    duplicate = copy.deepcopy(original)
    original.zeroize()

    assert bytes(duplicate) == BYTES
    assert bytes(original) == bytes(7)


def test_zeroizing_scratch_wiped_on_error():
    """Test that scratch buffers are wiped even when decoding fails."""
    scratch = bytearray(BYTES)
    with pytest.raises(ByteLengthError):
        with zeroizing(scratch) as data:
            FixedByteBuffer[32](data)
    assert scratch == bytearray(7)


def test_repr_hides_key_material():
    """Test that repr shows only the type and size by default."""
    assert repr(FixedByteBuffer[7](BYTES)) == "FixedByteBuffer[7]"
    assert repr(VariableByteBuffer(BYTES)) == "VariableByteBuffer(7 bytes)"
    assert BASE64 not in repr(VariableByteBuffer(BYTES))


def test_repr_reveals_key_material_in_debug():
    """Test that the debug setting shows the base64 form."""
    configure(reveal_key_material=True)
    assert BASE64 in repr(FixedByteBuffer[7](BYTES))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
