"""Key records and key sets."""

from .keyset import JsonWebKeySet
from .record import JsonWebKey

__all__ = ["JsonWebKey", "JsonWebKeySet"]
