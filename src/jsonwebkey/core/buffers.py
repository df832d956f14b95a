"""Zeroizing byte containers with base64url transport.

Key material lives in ``bytearray`` storage owned by a buffer object. The
storage is overwritten with zeros when the buffer is zeroized explicitly,
when it is used as a context manager and the block exits, and when the buffer
is garbage collected.

Python cannot wipe immutable ``bytes`` objects, so copies handed out by
``bytes(buffer)`` or produced while encoding are outside this guarantee.
"""

import base64
import hmac
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, ClassVar, Optional, Union

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .config import get_settings
from .errors import Base64DecodeError, ByteLengthError

BytesLike = Union[bytes, bytearray, memoryview]


def base64url_encode(data: BytesLike) -> str:
    """Encode bytes as unpadded base64url (RFC 7515 section 2)."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_decode(value: str) -> bytearray:
    """Decode base64url or standard base64, with or without padding.

    Raises:
        Base64DecodeError: If value is not a valid base64 string
    """
    if not isinstance(value, str):
        raise Base64DecodeError(
            f"expected a base64 string, got {type(value).__name__}"
        )
    padded = value + "=" * (-len(value) % 4)
    try:
        return bytearray(base64.b64decode(padded, altchars=b"-_", validate=True))
    except ValueError as e:
        raise Base64DecodeError(f"invalid base64: {e}") from e


def wipe(data: bytearray) -> None:
    """Overwrite a bytearray with zeros in place."""
    data[:] = bytes(len(data))


@contextmanager
def zeroizing(data: bytearray) -> Iterator[bytearray]:
    """Yield a scratch bytearray and zero it on every exit path."""
    try:
        yield data
    finally:
        wipe(data)


class _ByteBuffer:
    """Shared storage, zeroization and pydantic hooks."""

    __slots__ = ("_data",)

    def __init__(self, data: BytesLike = b""):
        self._data = bytearray(data)

    @classmethod
    def from_bytes(cls, data: BytesLike):
        return cls(data)

    @classmethod
    def from_base64(cls, value: str):
        """Decode a base64url string into a new buffer.

        Raises:
            Base64DecodeError: If value is not valid base64
            ByteLengthError: If the decoded length is wrong for this buffer
        """
        with zeroizing(base64url_decode(value)) as scratch:
            return cls(scratch)

    def to_base64(self) -> str:
        return base64url_encode(self._data)

    def copy(self):
        return type(self)(self._data)

    def zeroize(self) -> None:
        """Overwrite the key material with zeros."""
        data: Optional[bytearray] = getattr(self, "_data", None)
        if data is not None:
            wipe(data)

    def __del__(self):
        self.zeroize()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.zeroize()

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return hmac.compare_digest(self._data, other._data)

    __hash__ = None  # type: ignore[assignment]

    def _describe(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        if get_settings().reveal_key_material:
            return f"{type(self).__name__}({self.to_base64()!r})"
        return self._describe()

    @classmethod
    def _validate(cls, value: Any):
        if isinstance(value, cls):
            return value
        if isinstance(value, _ByteBuffer):
            return cls(value._data)
        if isinstance(value, str):
            return cls.from_base64(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(value)
        raise Base64DecodeError(
            f"expected a base64 string, got {type(value).__name__}"
        )

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda buffer: buffer.to_base64()
            ),
        )


class FixedByteBuffer(_ByteBuffer):
    """A zeroizing container for exactly ``size`` bytes.

    Parametrize with the length before use::

        Scalar = FixedByteBuffer[32]
        d = Scalar.from_base64("...")
    """

    __slots__ = ()

    size: ClassVar[Optional[int]] = None

    def __init__(self, data: BytesLike):
        if self.size is None:
            raise TypeError("use FixedByteBuffer[N] to choose a length")
        if len(data) != self.size:
            raise ByteLengthError(expected=self.size, actual=len(data))
        super().__init__(data)

    def __class_getitem__(cls, size: int) -> type["FixedByteBuffer"]:
        return _sized_buffer(size)

    def _describe(self) -> str:
        return type(self).__name__


@lru_cache(maxsize=None)
def _sized_buffer(size: int) -> type[FixedByteBuffer]:
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise TypeError(f"buffer length must be a non-negative int, not {size!r}")
    name = f"FixedByteBuffer[{size}]"
    return type(name, (FixedByteBuffer,), {"__slots__": (), "size": size, "__qualname__": name})


class VariableByteBuffer(_ByteBuffer):
    """A zeroizing container for a big-endian unsigned integer of any length."""

    __slots__ = ()

    @classmethod
    def from_int(cls, value: int) -> "VariableByteBuffer":
        if value < 0:
            raise ValueError("value must be non-negative")
        length = max(1, (value.bit_length() + 7) // 8)
        return cls(value.to_bytes(length, "big"))

    def to_int(self) -> int:
        return int.from_bytes(self._data, "big")

    def _describe(self) -> str:
        return f"{type(self).__name__}({len(self)} bytes)"
