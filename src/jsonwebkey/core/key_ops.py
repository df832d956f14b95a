"""Permitted key operations (RFC 7517 section 4.3)."""

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any, Union

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .errors import KeyParseError


class KeyOp(str, Enum):
    """Operation tokens registered for ``key_ops``."""

    SIGN = "sign"
    VERIFY = "verify"
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"
    WRAP_KEY = "wrapKey"
    UNWRAP_KEY = "unwrapKey"
    DERIVE_KEY = "deriveKey"
    DERIVE_BITS = "deriveBits"


_KNOWN = {op.value: op for op in KeyOp}
_ORDER = {op.value: index for index, op in enumerate(KeyOp)}


def _token(op: Union[KeyOp, str]) -> str:
    if isinstance(op, KeyOp):
        return op.value
    if not isinstance(op, str):
        raise TypeError(f"key operation must be a string, not {type(op).__name__}")
    return str(op)


class KeyOps:
    """An unordered set of key operations.

    Registered tokens are exposed as ``KeyOp`` members; any other string is
    kept as-is so that it survives a parse/serialize round trip.
    """

    def __init__(self, ops: Iterable[Union[KeyOp, str]] = ()):
        self._ops: set[str] = set()
        for op in ops:
            self.insert(op)

    def is_empty(self) -> bool:
        return not self._ops

    def contains(self, op: Union[KeyOp, str]) -> bool:
        return _token(op) in self._ops

    def insert(self, op: Union[KeyOp, str]) -> None:
        self._ops.add(_token(op))

    def union(self, other: Iterable[Union[KeyOp, str]]) -> "KeyOps":
        result = KeyOps(self)
        for op in other:
            result.insert(op)
        return result

    def to_list(self) -> list[str]:
        """Tokens in a stable order: registered ones first, then the rest sorted."""
        known = sorted((op for op in self._ops if op in _KNOWN), key=_ORDER.__getitem__)
        unknown = sorted(op for op in self._ops if op not in _KNOWN)
        return known + unknown

    def __or__(self, other: Iterable[Union[KeyOp, str]]) -> "KeyOps":
        return self.union(other)

    def __contains__(self, op: object) -> bool:
        return isinstance(op, str) and self.contains(op)

    def __iter__(self) -> Iterator[Union[KeyOp, str]]:
        for op in self.to_list():
            yield _KNOWN.get(op, op)

    def __len__(self) -> int:
        return len(self._ops)

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, KeyOps):
            return self._ops == other._ops
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"KeyOps({self.to_list()!r})"

    @classmethod
    def _validate(cls, value: Any) -> "KeyOps":
        if isinstance(value, KeyOps):
            return value
        if value is None:
            return cls()
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise KeyParseError("key_ops must be an array of strings")
        if not all(isinstance(op, str) for op in value):
            raise KeyParseError("key_ops must only contain strings")
        return cls(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda ops: ops.to_list()
            ),
        )
