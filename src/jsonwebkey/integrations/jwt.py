"""PyJWT integration for jsonwebkey.

Converts keys into the objects ``jwt.encode`` and ``jwt.decode`` accept:
raw bytes for HMAC secrets and ``cryptography`` key objects for EC and RSA.
"""

from typing import Any, Optional, Union

import jwt
from jwt.algorithms import Algorithm as JwtAlgorithm
from jwt.algorithms import get_default_algorithms

from ..core.enums import Algorithm
from ..core.errors import NotPrivateError
from ..envelope.record import JsonWebKey
from ..keys.model import EllipticCurveKey, Key, RsaKey, SymmetricKey


def to_jwt_algorithm(algorithm: Algorithm) -> JwtAlgorithm:
    """Return PyJWT's implementation of the algorithm."""
    return get_default_algorithms()[Algorithm(algorithm).value]


def default_algorithm(key: Key) -> Algorithm:
    """The algorithm a key type signs with when a record carries no ``alg``."""
    if isinstance(key, SymmetricKey):
        return Algorithm.HS256
    if isinstance(key, EllipticCurveKey):
        return Algorithm.ES256
    if isinstance(key, RsaKey):
        return Algorithm.RS256
    raise TypeError(f"unsupported key type: {type(key).__name__}")


def to_signing_key(key: Key) -> Any:
    """Convert a private key into a PyJWT signing key.

    Raises:
        NotPrivateError: If the key has no private components
        MissingRsaParamsError: If an RSA key lacks CRT parameters
    """
    if not key.is_private:
        raise NotPrivateError()
    algorithm = to_jwt_algorithm(default_algorithm(key))
    if isinstance(key, SymmetricKey):
        return algorithm.prepare_key(bytes(key.key))
    return algorithm.prepare_key(key.try_to_pem())


def to_verification_key(key: Key) -> Any:
    """Convert any key into a PyJWT verification key.

    Asymmetric keys are always reduced to their public half first.
    """
    algorithm = to_jwt_algorithm(default_algorithm(key))
    if isinstance(key, SymmetricKey):
        return algorithm.prepare_key(bytes(key.key))
    # Every EC and RSA key has a public half, so this never raises.
    return algorithm.prepare_key(key.to_public().to_pem())


def _algorithm_for(jwk: JsonWebKey) -> Algorithm:
    return jwk.algorithm if jwk.algorithm is not None else default_algorithm(jwk.key)


def encode_token(
    claims: dict[str, Any],
    jwk: JsonWebKey,
    headers: Optional[dict[str, Any]] = None,
) -> str:
    """Sign claims with a private JWK.

    The record's ``kid`` is added to the header when set.

    Args:
        claims: Token payload
        jwk: Private key record
        headers: Extra JOSE header members

    Returns:
        Compact JWS string
    """
    headers = dict(headers or {})
    if jwk.key_id is not None:
        headers.setdefault("kid", jwk.key_id)
    return jwt.encode(
        claims,
        to_signing_key(jwk.key),
        algorithm=_algorithm_for(jwk).value,
        headers=headers or None,
    )


def decode_token(token: Union[str, bytes], jwk: JsonWebKey, **options: Any) -> dict[str, Any]:
    """Verify a token against a JWK and return its claims.

    Extra keyword arguments go to ``jwt.decode`` (e.g. ``audience``, ``options``).
    """
    return jwt.decode(
        token,
        to_verification_key(jwk.key),
        algorithms=[_algorithm_for(jwk).value],
        **options,
    )
