"""Key models for the three supported key types.

A key is exactly one of ``EllipticCurveKey`` (``kty`` "EC"), ``RsaKey``
(``kty`` "RSA") or ``SymmetricKey`` (``kty`` "oct"). ``AnyKey`` is the
discriminated union pydantic uses to pick the variant from ``kty``.
"""

import hashlib
import json
import logging
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import (
    BaseModel,
    Field,
    GetCoreSchemaHandler,
    TypeAdapter,
    model_serializer,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import core_schema

from ..core.buffers import FixedByteBuffer, VariableByteBuffer, base64url_encode
from ..core.enums import Algorithm
from ..core.errors import (
    ConversionError,
    InvalidExponentError,
    KeyParseError,
    MissingRsaParamsError,
    NotAsymmetricError,
    from_validation_error,
)
from . import pkcs8

logger = logging.getLogger(__name__)

P256_COORDINATE_SIZE = 32

PUBLIC_EXPONENT = 65537
PUBLIC_EXPONENT_B64 = "AQAB"
PUBLIC_EXPONENT_B64_PADDED = "AQABAA=="

P256Coordinate = FixedByteBuffer[P256_COORDINATE_SIZE]


class PublicExponent:
    """The standard RSA public exponent, 65537. No other value is representable."""

    __slots__ = ()

    @classmethod
    def from_base64(cls, value: Any) -> "PublicExponent":
        """Parse the base64url exponent.

        Raises:
            InvalidExponentError: Unless value is "AQAB" or "AQABAA=="
        """
        if value in (PUBLIC_EXPONENT_B64, PUBLIC_EXPONENT_B64_PADDED):
            return cls()
        raise InvalidExponentError(f"public exponent must be {PUBLIC_EXPONENT}")

    def to_base64(self) -> str:
        return PUBLIC_EXPONENT_B64

    def __int__(self) -> int:
        return PUBLIC_EXPONENT

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PublicExponent):
            return True
        return NotImplemented

    def __hash__(self) -> int:
        return hash(PUBLIC_EXPONENT)

    def __repr__(self) -> str:
        return "PublicExponent(65537)"

    @classmethod
    def _validate(cls, value: Any) -> "PublicExponent":
        if isinstance(value, cls):
            return value
        return cls.from_base64(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda e: e.to_base64()
            ),
        )


class P256Curve(BaseModel):
    """Parameters of the prime256v1 (P-256) curve."""

    crv: Literal["P-256"] = "P-256"
    x: P256Coordinate = Field(description="Curve point x coordinate")
    y: P256Coordinate = Field(description="Curve point y coordinate")
    d: Optional[P256Coordinate] = Field(default=None, description="Private scalar")

    @property
    def is_private(self) -> bool:
        return self.d is not None

    def to_dict(self) -> dict[str, Any]:
        data = {"crv": self.crv, "x": self.x.to_base64(), "y": self.y.to_base64()}
        if self.d is not None:
            data["d"] = self.d.to_base64()
        return data

    @model_serializer
    def _serialize(self) -> dict[str, Any]:
        return self.to_dict()


# Only P-256 is supported; further curves join this alias as a union on "crv".
Curve = P256Curve


class RsaPublic(BaseModel):
    """Public RSA parameters."""

    e: PublicExponent = Field(description="The standard public exponent, 65537")
    n: VariableByteBuffer = Field(description="The modulus, p*q")


class RsaPrivate(BaseModel):
    """Private RSA parameters. Only ``d`` is required to parse."""

    CRT_MEMBERS: ClassVar[tuple[str, ...]] = ("p", "q", "dp", "dq", "qi")

    d: VariableByteBuffer = Field(description="Private exponent")
    p: Optional[VariableByteBuffer] = Field(default=None, description="First prime factor")
    q: Optional[VariableByteBuffer] = Field(default=None, description="Second prime factor")
    dp: Optional[VariableByteBuffer] = Field(
        default=None, description="First factor CRT exponent"
    )
    dq: Optional[VariableByteBuffer] = Field(
        default=None, description="Second factor CRT exponent"
    )
    qi: Optional[VariableByteBuffer] = Field(default=None, description="First CRT coefficient")

    @property
    def has_crt_params(self) -> bool:
        return all(getattr(self, name) is not None for name in self.CRT_MEMBERS)

    def buffers(self) -> list[VariableByteBuffer]:
        found = [self.d]
        for name in self.CRT_MEMBERS:
            value = getattr(self, name)
            if value is not None:
                found.append(value)
        return found


class Key(BaseModel):
    """Behaviour shared by every key type."""

    kty: str

    @classmethod
    def parse(cls, data: Any) -> "Key":
        """Validate a bare key (no ``use``/``kid``/``alg`` envelope) from a dict.

        Raises:
            DecodeError: If the key is malformed
        """
        try:
            return _KEY_ADAPTER.validate_python(data)
        except PydanticValidationError as e:
            raise from_validation_error(e) from e

    @classmethod
    def parse_json(cls, data: Union[str, bytes]) -> "Key":
        """Validate a bare key from JSON text."""
        try:
            return _KEY_ADAPTER.validate_json(data)
        except PydanticValidationError as e:
            raise from_validation_error(e) from e

    @property
    def is_private(self) -> bool:
        """True for symmetric keys and asymmetric keys with private components."""
        raise NotImplementedError

    def to_public(self) -> Optional["Key"]:
        """Return the public part of this key (symmetric keys have none)."""
        raise NotImplementedError

    def is_algorithm_compatible(self, algorithm: Algorithm) -> bool:
        raise NotImplementedError

    def try_to_der(self) -> bytes:
        """Encode this key as PKCS#8 DER.

        Raises:
            NotAsymmetricError: If this is a symmetric key
            MissingRsaParamsError: If an RSA private key lacks CRT parameters
        """
        raise NotAsymmetricError()

    def to_der(self) -> bytes:
        """Unwrapping ``try_to_der`` for callers that know the key is exportable."""
        try:
            return self.try_to_der()
        except ConversionError as e:
            raise RuntimeError(f"key cannot be encoded as PKCS#8: {e}") from e

    def try_to_pem(self) -> str:
        """Encode this key as PKCS#8 with PEM armoring."""
        der = self.try_to_der()
        return pkcs8.to_pem(der, private=self.is_private)

    def to_pem(self) -> str:
        """Unwrapping ``try_to_pem``."""
        try:
            return self.try_to_pem()
        except ConversionError as e:
            raise RuntimeError(f"key cannot be encoded as PKCS#8: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """JWK members of this key, base64url-encoded, absent members omitted."""
        raise NotImplementedError

    def to_json(self) -> str:
        return self.model_dump_json()

    def thumbprint_members(self) -> dict[str, str]:
        """Required members hashed for an RFC 7638 thumbprint."""
        raise NotImplementedError

    def thumbprint(self) -> str:
        """RFC 7638 SHA-256 thumbprint, base64url-encoded."""
        canonical = json.dumps(
            self.thumbprint_members(), sort_keys=True, separators=(",", ":")
        )
        return base64url_encode(hashlib.sha256(canonical.encode("utf-8")).digest())

    def buffers(self) -> list[Union[FixedByteBuffer, VariableByteBuffer]]:
        raise NotImplementedError

    def zeroize(self) -> None:
        """Overwrite every byte buffer owned by this key."""
        for buffer in self.buffers():
            buffer.zeroize()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.zeroize()

    @model_serializer
    def _serialize(self) -> dict[str, Any]:
        return self.to_dict()


class EllipticCurveKey(Key):
    """An elliptic curve key, as per RFC 7518 section 6.2."""

    kty: Literal["EC"] = "EC"
    curve: Curve

    @model_validator(mode="before")
    @classmethod
    def _nest_curve(cls, data: Any) -> Any:
        # JWK members are flat; the curve parameters sit beside "kty".
        if isinstance(data, dict) and "curve" not in data:
            if "crv" not in data:
                raise KeyParseError('EC key is missing the "crv" member')
            nested: dict[str, Any] = {
                "curve": {k: v for k, v in data.items() if k != "kty"}
            }
            if "kty" in data:
                nested["kty"] = data["kty"]
            return nested
        return data

    @property
    def is_private(self) -> bool:
        return self.curve.is_private

    def to_public(self) -> "EllipticCurveKey":
        if not self.is_private:
            return self
        return EllipticCurveKey(
            curve=P256Curve(x=self.curve.x.copy(), y=self.curve.y.copy())
        )

    def is_algorithm_compatible(self, algorithm: Algorithm) -> bool:
        return algorithm == Algorithm.ES256 and isinstance(self.curve, P256Curve)

    def try_to_der(self) -> bytes:
        curve = self.curve
        if curve.d is not None:
            der = pkcs8.encode_ec_private(bytes(curve.d), bytes(curve.x), bytes(curve.y))
        else:
            der = pkcs8.encode_ec_public(bytes(curve.x), bytes(curve.y))
        logger.debug("Encoded %s EC key as PKCS#8 (%d bytes)", curve.crv, len(der))
        return der

    def to_dict(self) -> dict[str, Any]:
        return {"kty": self.kty, **self.curve.to_dict()}

    def thumbprint_members(self) -> dict[str, str]:
        return {
            "crv": self.curve.crv,
            "kty": self.kty,
            "x": self.curve.x.to_base64(),
            "y": self.curve.y.to_base64(),
        }

    def buffers(self) -> list[Union[FixedByteBuffer, VariableByteBuffer]]:
        found = [self.curve.x, self.curve.y]
        if self.curve.d is not None:
            found.append(self.curve.d)
        return found


class RsaKey(Key):
    """An RSA key, as per RFC 7518 section 6.3. See also RFC 3447."""

    PUBLIC_MEMBERS: ClassVar[tuple[str, ...]] = ("e", "n")
    PRIVATE_MEMBERS: ClassVar[tuple[str, ...]] = ("d", "p", "q", "dp", "dq", "qi")

    kty: Literal["RSA"] = "RSA"
    public: RsaPublic
    private: Optional[RsaPrivate] = None

    @model_validator(mode="before")
    @classmethod
    def _nest_params(cls, data: Any) -> Any:
        if isinstance(data, dict) and "public" not in data:
            nested: dict[str, Any] = {
                "public": {k: data[k] for k in cls.PUBLIC_MEMBERS if k in data}
            }
            if "d" in data:
                nested["private"] = {k: data[k] for k in cls.PRIVATE_MEMBERS if k in data}
            if "kty" in data:
                nested["kty"] = data["kty"]
            return nested
        return data

    @classmethod
    def from_numbers(
        cls,
        n: int,
        e: int = PUBLIC_EXPONENT,
        d: Optional[int] = None,
        p: Optional[int] = None,
        q: Optional[int] = None,
        dp: Optional[int] = None,
        dq: Optional[int] = None,
        qi: Optional[int] = None,
    ) -> "RsaKey":
        """Build a key from integer components.

        Raises:
            InvalidExponentError: If e is not 65537
        """
        if e != PUBLIC_EXPONENT:
            raise InvalidExponentError(f"public exponent must be {PUBLIC_EXPONENT}")

        private = None
        if d is not None:
            crt = {"p": p, "q": q, "dp": dp, "dq": dq, "qi": qi}
            private = RsaPrivate(
                d=VariableByteBuffer.from_int(d),
                **{
                    name: VariableByteBuffer.from_int(value)
                    for name, value in crt.items()
                    if value is not None
                },
            )
        return cls(
            public=RsaPublic(e=PublicExponent(), n=VariableByteBuffer.from_int(n)),
            private=private,
        )

    @property
    def is_private(self) -> bool:
        return self.private is not None

    def to_public(self) -> "RsaKey":
        if not self.is_private:
            return self
        return RsaKey(public=RsaPublic(e=self.public.e, n=self.public.n.copy()))

    def is_algorithm_compatible(self, algorithm: Algorithm) -> bool:
        return algorithm == Algorithm.RS256

    def try_to_der(self) -> bytes:
        n = self.public.n.to_int()
        e = int(self.public.e)
        private = self.private

        if private is None:
            der = pkcs8.encode_rsa_public(n, e)
        elif not private.has_crt_params:
            raise MissingRsaParamsError()
        else:
            der = pkcs8.encode_rsa_private(
                n,
                e,
                private.d.to_int(),
                private.p.to_int(),
                private.q.to_int(),
                private.dp.to_int(),
                private.dq.to_int(),
                private.qi.to_int(),
            )
        logger.debug("Encoded RSA key as PKCS#8 (%d bytes)", len(der))
        return der

    def to_dict(self) -> dict[str, Any]:
        data = {"kty": self.kty, "e": self.public.e.to_base64(), "n": self.public.n.to_base64()}
        if self.private is not None:
            for name in self.PRIVATE_MEMBERS:
                value = getattr(self.private, name)
                if value is not None:
                    data[name] = value.to_base64()
        return data

    def thumbprint_members(self) -> dict[str, str]:
        return {
            "e": self.public.e.to_base64(),
            "kty": self.kty,
            "n": self.public.n.to_base64(),
        }

    def buffers(self) -> list[Union[FixedByteBuffer, VariableByteBuffer]]:
        found: list[Union[FixedByteBuffer, VariableByteBuffer]] = [self.public.n]
        if self.private is not None:
            found.extend(self.private.buffers())
        return found


class SymmetricKey(Key):
    """A symmetric key, as per RFC 7518 section 6.4."""

    kty: Literal["oct"] = "oct"
    key: VariableByteBuffer = Field(alias="k")

    model_config = {"populate_by_name": True}

    @property
    def is_private(self) -> bool:
        return True

    def to_public(self) -> None:
        return None

    def is_algorithm_compatible(self, algorithm: Algorithm) -> bool:
        return algorithm == Algorithm.HS256

    def to_dict(self) -> dict[str, Any]:
        return {"kty": self.kty, "k": self.key.to_base64()}

    def thumbprint_members(self) -> dict[str, str]:
        return {"k": self.key.to_base64(), "kty": self.kty}

    def buffers(self) -> list[Union[FixedByteBuffer, VariableByteBuffer]]:
        return [self.key]


AnyKey = Annotated[
    Union[EllipticCurveKey, RsaKey, SymmetricKey], Field(discriminator="kty")
]

_KEY_ADAPTER: TypeAdapter[Union[EllipticCurveKey, RsaKey, SymmetricKey]] = TypeAdapter(AnyKey)
