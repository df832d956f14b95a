"""PKCS#8 DER and PEM encoding of asymmetric keys.

ASN.1 definitions follow RFC 5208 (PrivateKeyInfo), RFC 5280
(SubjectPublicKeyInfo), RFC 5915 (ECPrivateKey) and RFC 8017 (RSA keys).
"""

import base64
from collections.abc import Iterator

from pyasn1.codec.der import encoder as der_encoder
from pyasn1.type import base, namedtype, tag, univ

PEM_LINE_LENGTH = 64

ID_EC_PUBLIC_KEY = univ.ObjectIdentifier((1, 2, 840, 10045, 2, 1))
PRIME256V1 = univ.ObjectIdentifier((1, 2, 840, 10045, 3, 1, 7))
RSA_ENCRYPTION = univ.ObjectIdentifier((1, 2, 840, 113549, 1, 1, 1))

EC_UNCOMPRESSED_POINT = b"\x04"


# AlgorithmIdentifier ::= SEQUENCE {
#     algorithm   OBJECT IDENTIFIER,
#     parameters  ANY DEFINED BY algorithm OPTIONAL }
class AlgorithmIdentifier(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("algorithm", univ.ObjectIdentifier()),
        namedtype.OptionalNamedType("parameters", univ.Any()),
    )


# PrivateKeyInfo ::= SEQUENCE {
#     version              INTEGER,
#     privateKeyAlgorithm  AlgorithmIdentifier,
#     privateKey           OCTET STRING }
class PrivateKeyInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("version", univ.Integer()),
        namedtype.NamedType("privateKeyAlgorithm", AlgorithmIdentifier()),
        namedtype.NamedType("privateKey", univ.OctetString()),
    )


# SubjectPublicKeyInfo ::= SEQUENCE {
#     algorithm         AlgorithmIdentifier,
#     subjectPublicKey  BIT STRING }
class SubjectPublicKeyInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("algorithm", AlgorithmIdentifier()),
        namedtype.NamedType("subjectPublicKey", univ.BitString()),
    )


EC_PARAMETERS_TAG = tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 0)
EC_PUBLIC_KEY_TAG = tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 1)


# ECPrivateKey ::= SEQUENCE {
#     version        INTEGER { ecPrivkeyVer1(1) },
#     privateKey     OCTET STRING,
#     parameters [0] ECParameters {{ NamedCurve }} OPTIONAL,
#     publicKey  [1] BIT STRING OPTIONAL }
class ECPrivateKey(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("version", univ.Integer()),
        namedtype.NamedType("privateKey", univ.OctetString()),
        namedtype.OptionalNamedType(
            "parameters", univ.ObjectIdentifier().subtype(explicitTag=EC_PARAMETERS_TAG)
        ),
        namedtype.OptionalNamedType(
            "publicKey", univ.BitString().subtype(explicitTag=EC_PUBLIC_KEY_TAG)
        ),
    )


# RSAPublicKey ::= SEQUENCE {
#     modulus         INTEGER,  -- n
#     publicExponent  INTEGER   -- e }
class RSAPublicKey(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("modulus", univ.Integer()),
        namedtype.NamedType("publicExponent", univ.Integer()),
    )


# RSAPrivateKey ::= SEQUENCE {
#     version          Version,
#     modulus          INTEGER,  -- n
#     publicExponent   INTEGER,  -- e
#     privateExponent  INTEGER,  -- d
#     prime1           INTEGER,  -- p
#     prime2           INTEGER,  -- q
#     exponent1        INTEGER,  -- d mod (p-1)
#     exponent2        INTEGER,  -- d mod (q-1)
#     coefficient      INTEGER   -- (inverse of q) mod p }
class RSAPrivateKey(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("version", univ.Integer()),
        namedtype.NamedType("modulus", univ.Integer()),
        namedtype.NamedType("publicExponent", univ.Integer()),
        namedtype.NamedType("privateExponent", univ.Integer()),
        namedtype.NamedType("prime1", univ.Integer()),
        namedtype.NamedType("prime2", univ.Integer()),
        namedtype.NamedType("exponent1", univ.Integer()),
        namedtype.NamedType("exponent2", univ.Integer()),
        namedtype.NamedType("coefficient", univ.Integer()),
    )


def _algorithm(oid: univ.ObjectIdentifier, parameters: base.Asn1Item) -> AlgorithmIdentifier:
    algorithm = AlgorithmIdentifier()
    algorithm["algorithm"] = oid
    algorithm["parameters"] = univ.Any(der_encoder.encode(parameters))
    return algorithm


def _ec_algorithm() -> AlgorithmIdentifier:
    return _algorithm(ID_EC_PUBLIC_KEY, PRIME256V1)


def _rsa_algorithm() -> AlgorithmIdentifier:
    return _algorithm(RSA_ENCRYPTION, univ.Null(""))


def _private_key_info(algorithm: AlgorithmIdentifier, private_key: bytes) -> bytes:
    info = PrivateKeyInfo()
    info["version"] = 0
    info["privateKeyAlgorithm"] = algorithm
    info["privateKey"] = private_key
    return der_encoder.encode(info)


def _public_key_info(algorithm: AlgorithmIdentifier, public_key: bytes) -> bytes:
    info = SubjectPublicKeyInfo()
    info["algorithm"] = algorithm
    info["subjectPublicKey"] = univ.BitString(hexValue=public_key.hex())
    return der_encoder.encode(info)


def ec_point(x: bytes, y: bytes) -> bytes:
    """Uncompressed SEC1 point encoding: 0x04 || x || y."""
    return EC_UNCOMPRESSED_POINT + x + y


def encode_ec_private(d: bytes, x: bytes, y: bytes) -> bytes:
    """Encode a P-256 private key as PKCS#8 PrivateKeyInfo.

    The named curve is only written in the outer algorithm identifier. The
    optional ``[0] parameters`` field of ECPrivateKey is left out: OpenSSL
    writes it, but several JWT consumers reject keys that carry it.
    """
    ec_key = ECPrivateKey()
    ec_key["version"] = 1
    ec_key["privateKey"] = d
    ec_key["publicKey"] = univ.BitString(hexValue=ec_point(x, y).hex()).subtype(
        explicitTag=EC_PUBLIC_KEY_TAG
    )
    return _private_key_info(_ec_algorithm(), der_encoder.encode(ec_key))


def encode_ec_public(x: bytes, y: bytes) -> bytes:
    """Encode a P-256 public key as SubjectPublicKeyInfo."""
    return _public_key_info(_ec_algorithm(), ec_point(x, y))


def encode_rsa_private(
    n: int, e: int, d: int, p: int, q: int, dp: int, dq: int, qi: int
) -> bytes:
    """Encode a two-prime RSA private key as PKCS#8 PrivateKeyInfo."""
    rsa_key = RSAPrivateKey()
    rsa_key["version"] = 0
    rsa_key["modulus"] = n
    rsa_key["publicExponent"] = e
    rsa_key["privateExponent"] = d
    rsa_key["prime1"] = p
    rsa_key["prime2"] = q
    rsa_key["exponent1"] = dp
    rsa_key["exponent2"] = dq
    rsa_key["coefficient"] = qi
    return _private_key_info(_rsa_algorithm(), der_encoder.encode(rsa_key))


def encode_rsa_public(n: int, e: int) -> bytes:
    """Encode an RSA public key as SubjectPublicKeyInfo."""
    rsa_key = RSAPublicKey()
    rsa_key["modulus"] = n
    rsa_key["publicExponent"] = e
    return _public_key_info(_rsa_algorithm(), der_encoder.encode(rsa_key))


def _lines(text: str, width: int) -> Iterator[str]:
    for start in range(0, len(text), width):
        yield text[start : start + width]


def to_pem(der: bytes, private: bool) -> str:
    """Armor DER bytes as a PEM ``PRIVATE KEY`` or ``PUBLIC KEY`` block."""
    label = "PRIVATE KEY" if private else "PUBLIC KEY"
    body = base64.b64encode(der).decode("ascii")
    lines = [f"-----BEGIN {label}-----", *_lines(body, PEM_LINE_LENGTH), f"-----END {label}-----"]
    return "\n".join(lines) + "\n"
