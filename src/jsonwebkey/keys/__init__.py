"""Key types, PKCS#8 export and generation."""

from .generate import generate_p256, generate_symmetric
from .model import (
    AnyKey,
    Curve,
    EllipticCurveKey,
    Key,
    P256Coordinate,
    P256Curve,
    PublicExponent,
    RsaKey,
    RsaPrivate,
    RsaPublic,
    SymmetricKey,
)

__all__ = [
    # Model
    "AnyKey",
    "Curve",
    "EllipticCurveKey",
    "Key",
    "P256Coordinate",
    "P256Curve",
    "PublicExponent",
    "RsaKey",
    "RsaPrivate",
    "RsaPublic",
    "SymmetricKey",
    # Generation
    "generate_p256",
    "generate_symmetric",
]
