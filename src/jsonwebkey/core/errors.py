"""Exception hierarchy for jsonwebkey."""

from typing import Optional

import pydantic


class JsonWebKeyError(Exception):
    """Base exception for all jsonwebkey errors."""

    pass


# Structural decode errors
class DecodeError(JsonWebKeyError, ValueError):
    """Base exception for malformed key material or JSON."""

    pass


class Base64DecodeError(DecodeError):
    """Value is not valid base64 or base64url."""

    pass


class ByteLengthError(DecodeError):
    """Byte string does not have the length its field requires."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"expected {expected} bytes but got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidExponentError(DecodeError):
    """RSA public exponent is not 65537."""

    pass


class KeyParseError(DecodeError):
    """JSON is malformed or does not describe a supported key."""

    pass


# Semantic validation errors
class ValidationError(JsonWebKeyError, ValueError):
    """Base exception for structurally valid but inconsistent keys."""

    pass


class MismatchedAlgorithmError(ValidationError):
    """Algorithm cannot be used with the key type or curve."""

    pass


# Conversion errors
class ConversionError(JsonWebKeyError):
    """Base exception for key export errors."""

    pass


class NotAsymmetricError(ConversionError):
    """A symmetric key has no PKCS#8 encoding."""

    def __init__(self, message: str = "a symmetric key can not be encoded using PKCS#8"):
        super().__init__(message)


class MissingRsaParamsError(ConversionError):
    """Private RSA export requires every CRT parameter."""

    def __init__(
        self,
        message: str = "encoding RSA JWK as PKCS#8 requires specifying all of p, q, dp, dq, qi",
    ):
        super().__init__(message)


class NotPrivateError(ConversionError):
    """A signing key was requested from a public key."""

    def __init__(self, message: str = "a public key cannot be used as a signing key"):
        super().__init__(message)


# Key set errors
class KeySetError(JsonWebKeyError):
    """Key set could not be loaded, fetched or saved."""

    pass


def from_validation_error(exc: pydantic.ValidationError) -> JsonWebKeyError:
    """Recover the jsonwebkey error behind a pydantic validation failure.

    Validators raise jsonwebkey errors, which pydantic collects into a single
    ``ValidationError``. The first such error is returned unchanged so callers
    see the precise kind; anything else (malformed JSON, unknown ``kty``,
    missing members) becomes a ``KeyParseError``.
    """
    for error in exc.errors():
        cause: Optional[BaseException] = (error.get("ctx") or {}).get("error")
        if isinstance(cause, JsonWebKeyError):
            return cause

    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    )
    return KeyParseError(details or str(exc))
