"""Key generation for symmetric and P-256 keys."""

import logging
import secrets

from cryptography.hazmat.primitives.asymmetric import ec

from ..core.buffers import VariableByteBuffer, zeroizing
from .model import P256_COORDINATE_SIZE, EllipticCurveKey, P256Coordinate, P256Curve, SymmetricKey

logger = logging.getLogger(__name__)

# Order of the P-256 base point.
P256_ORDER = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551


def fill_random(buffer: bytearray) -> None:
    """Fill a buffer in place with bytes from the OS CSPRNG."""
    buffer[:] = secrets.token_bytes(len(buffer))


def p256_public_point(scalar: int) -> tuple[bytes, bytes]:
    """Multiply the P-256 generator by scalar and return affine (x, y).

    Args:
        scalar: Private scalar in [1, n-1]

    Returns:
        Tuple of 32-byte big-endian x and y coordinates
    """
    private_key = ec.derive_private_key(scalar, ec.SECP256R1())
    numbers = private_key.public_key().public_numbers()
    return (
        numbers.x.to_bytes(P256_COORDINATE_SIZE, "big"),
        numbers.y.to_bytes(P256_COORDINATE_SIZE, "big"),
    )


def generate_symmetric(num_bits: int = 256) -> SymmetricKey:
    """Generate a new symmetric key with the given number of bits.

    Best used with one of the HS algorithms (e.g. HS256). The key is
    ``num_bits // 8`` bytes long; a partial trailing byte is dropped.

    Raises:
        ValueError: If num_bits is less than 8
    """
    num_bytes = num_bits // 8
    if num_bytes <= 0:
        raise ValueError(f"num_bits must be at least 8, got {num_bits}")

    with zeroizing(bytearray(num_bytes)) as scratch:
        fill_random(scratch)
        key = VariableByteBuffer(scratch)
    logger.debug("Generated %d-bit symmetric key", num_bits)
    return SymmetricKey(key=key)


def generate_p256() -> EllipticCurveKey:
    """Generate a new EC keypair on the prime256v1 curve, for use with ES256."""
    with zeroizing(bytearray(P256_COORDINATE_SIZE)) as scratch:
        while True:
            fill_random(scratch)
            scalar = int.from_bytes(scratch, "big")
            if 0 < scalar < P256_ORDER:
                break
        d = P256Coordinate(scratch)

    x, y = p256_public_point(scalar)
    logger.debug("Generated P-256 keypair")
    return EllipticCurveKey(
        curve=P256Curve(d=d, x=P256Coordinate(x), y=P256Coordinate(y))
    )
