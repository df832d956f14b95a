"""Enumerations shared by keys and key records."""

from enum import Enum


class Algorithm(str, Enum):
    """JWS algorithms a key record can be tagged with."""

    HS256 = "HS256"
    RS256 = "RS256"
    ES256 = "ES256"


class KeyUse(str, Enum):
    """Intended use of a public key (RFC 7517 section 4.2)."""

    SIGNING = "sig"
    ENCRYPTION = "enc"
