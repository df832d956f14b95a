"""Shared fixtures for jsonwebkey tests."""

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from jsonwebkey import RsaKey, generate_p256, generate_symmetric
from jsonwebkey.core.config import reset_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop settings overrides between tests."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(scope="session")
def rsa_private_key():
    """A real 2048-bit RSA key from cryptography."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def rsa_key(rsa_private_key):
    """Full private RSA JWK key (with CRT parameters)."""
    numbers = rsa_private_key.private_numbers()
    return RsaKey.from_numbers(
        n=numbers.public_numbers.n,
        d=numbers.d,
        p=numbers.p,
        q=numbers.q,
        dp=numbers.dmp1,
        dq=numbers.dmq1,
        qi=numbers.iqmp,
    )


@pytest.fixture
def rsa_public_key(rsa_private_key):
    """Public-only RSA JWK key."""
    return RsaKey.from_numbers(n=rsa_private_key.public_key().public_numbers().n)


@pytest.fixture
def ec_key():
    """Freshly generated private P-256 key."""
    return generate_p256()


@pytest.fixture
def symmetric_key():
    """Freshly generated 256-bit symmetric key."""
    return generate_symmetric(256)
