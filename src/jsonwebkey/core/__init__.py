"""Core functionality for jsonwebkey."""

from .buffers import (
    FixedByteBuffer,
    VariableByteBuffer,
    base64url_decode,
    base64url_encode,
    zeroizing,
)
from .config import Settings, configure, get_settings, reset_settings
from .enums import Algorithm, KeyUse
from .errors import (
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
)
from .key_ops import KeyOp, KeyOps

__all__ = [
    # Buffers
    "FixedByteBuffer",
    "VariableByteBuffer",
    "base64url_decode",
    "base64url_encode",
    "zeroizing",
    # Config
    "Settings",
    "configure",
    "get_settings",
    "reset_settings",
    # Enums
    "Algorithm",
    "KeyUse",
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
    # Key operations
    "KeyOp",
    "KeyOps",
]
