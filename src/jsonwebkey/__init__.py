"""jsonwebkey - JSON Web Key (JWK) (de)serialization, generation, and conversion."""

import logging

from .core import (
    Algorithm,
    KeyOp,
    KeyOps,
    KeyUse,
    FixedByteBuffer,
    VariableByteBuffer,
    JsonWebKeyError,
    DecodeError,
    Base64DecodeError,
    ByteLengthError,
    InvalidExponentError,
    KeyParseError,
    ValidationError,
    MismatchedAlgorithmError,
    ConversionError,
    NotAsymmetricError,
    MissingRsaParamsError,
    NotPrivateError,
    KeySetError,
    Settings,
    configure,
    get_settings,
)
from .envelope import JsonWebKey, JsonWebKeySet
from .keys import (
    AnyKey,
    Curve,
    EllipticCurveKey,
    Key,
    P256Curve,
    PublicExponent,
    RsaKey,
    RsaPrivate,
    RsaPublic,
    SymmetricKey,
    generate_p256,
    generate_symmetric,
)

__version__ = "0.2.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Records
    "JsonWebKey",
    "JsonWebKeySet",
    "Algorithm",
    "KeyUse",
    "KeyOp",
    "KeyOps",
    # Keys
    "AnyKey",
    "Curve",
    "EllipticCurveKey",
    "Key",
    "P256Curve",
    "PublicExponent",
    "RsaKey",
    "RsaPrivate",
    "RsaPublic",
    "SymmetricKey",
    "generate_p256",
    "generate_symmetric",
    # Buffers
    "FixedByteBuffer",
    "VariableByteBuffer",
    # Errors
    "JsonWebKeyError",
    "DecodeError",
    "Base64DecodeError",
    "ByteLengthError",
    "InvalidExponentError",
    "KeyParseError",
    "ValidationError",
    "MismatchedAlgorithmError",
    "ConversionError",
    "NotAsymmetricError",
    "MissingRsaParamsError",
    "NotPrivateError",
    "KeySetError",
    # Config
    "Settings",
    "configure",
    "get_settings",
]
