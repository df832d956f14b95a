"""The JSON Web Key record: a key plus its RFC 7517 envelope members."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field, model_serializer, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.enums import Algorithm, KeyUse
from ..core.errors import MismatchedAlgorithmError, from_validation_error
from ..core.key_ops import KeyOps
from ..keys.model import AnyKey, Key

ENVELOPE_MEMBERS = ("use", "key_ops", "kid", "alg")


class JsonWebKey(BaseModel):
    """A JSON Web Key.

    The key's own members (``kty``, ``k``, ``crv``, ``x``, ...) are flattened
    into the same JSON object as the envelope members. Serialization emits the
    key members first, then ``use``, ``key_ops``, ``kid`` and ``alg``, leaving
    out anything unset.
    """

    key: AnyKey
    key_use: Optional[KeyUse] = Field(default=None, alias="use")
    key_ops: KeyOps = Field(default_factory=KeyOps)
    key_id: Optional[str] = Field(default=None, alias="kid")
    algorithm: Optional[Algorithm] = Field(default=None, alias="alg")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def _nest_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and "key" not in data:
            nested = {k: v for k, v in data.items() if k in ENVELOPE_MEMBERS}
            nested["key"] = {k: v for k, v in data.items() if k not in ENVELOPE_MEMBERS}
            return nested
        return data

    @model_validator(mode="after")
    def _check_algorithm(self) -> "JsonWebKey":
        if self.algorithm is not None:
            self.validate_algorithm(self.algorithm, self.key)
        return self

    @model_serializer
    def _flatten(self) -> dict[str, Any]:
        data = self.key.to_dict()
        if self.key_use is not None:
            data["use"] = self.key_use.value
        if not self.key_ops.is_empty():
            data["key_ops"] = self.key_ops.to_list()
        if self.key_id is not None:
            data["kid"] = self.key_id
        if self.algorithm is not None:
            data["alg"] = self.algorithm.value
        return data

    @classmethod
    def new(cls, key: Key) -> "JsonWebKey":
        """Wrap a key with every envelope member unset."""
        return cls(key=key)

    @classmethod
    def parse(cls, data: Union[str, bytes]) -> "JsonWebKey":
        """Parse a JWK from JSON text.

        Args:
            data: JSON document

        Returns:
            JsonWebKey instance

        Raises:
            DecodeError: If the JSON, base64 or a key member is malformed
            MismatchedAlgorithmError: If ``alg`` does not fit the key
        """
        try:
            return cls.model_validate_json(data)
        except PydanticValidationError as e:
            raise from_validation_error(e) from e

    @classmethod
    def from_dict(cls, data: Any) -> "JsonWebKey":
        """Parse a JWK from an already-decoded JSON object."""
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise from_validation_error(e) from e

    @staticmethod
    def validate_algorithm(algorithm: Algorithm, key: Key) -> None:
        """Raise MismatchedAlgorithmError unless algorithm suits key."""
        if not key.is_algorithm_compatible(algorithm):
            raise MismatchedAlgorithmError(
                f"algorithm {Algorithm(algorithm).value} cannot be used with {key.kty} keys"
            )

    def set_algorithm(self, algorithm: Algorithm) -> None:
        """Set ``alg`` after checking it against the key.

        Raises:
            MismatchedAlgorithmError: If incompatible; the record is unchanged
        """
        algorithm = Algorithm(algorithm)
        self.validate_algorithm(algorithm, self.key)
        self.algorithm = algorithm

    @property
    def is_private(self) -> bool:
        return self.key.is_private

    def to_public(self) -> Optional["JsonWebKey"]:
        """Return a record for the public half, keeping the envelope members.

        Symmetric keys have no public half and yield None. The new record
        never shares buffers with this one.
        """
        public = self.key.to_public()
        if public is None:
            return None
        if public is self.key:
            public = public.model_copy(deep=True)
        return JsonWebKey(
            key=public,
            key_use=self.key_use,
            key_ops=KeyOps(self.key_ops),
            key_id=self.key_id,
            algorithm=self.algorithm,
        )

    def thumbprint(self) -> str:
        """RFC 7638 SHA-256 thumbprint of the key."""
        return self.key.thumbprint()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

    def to_json(self) -> str:
        return self.model_dump_json()

    def to_json_pretty(self) -> str:
        return self.model_dump_json(indent=2)

    def zeroize(self) -> None:
        self.key.zeroize()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.zeroize()

    def __str__(self) -> str:
        return self.to_json()
