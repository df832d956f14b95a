"""Tests for the JSON Web Key record."""

import json

import pytest
from pyasn1.codec.der import decoder as der_decoder

from jsonwebkey import (
    Algorithm,
    ByteLengthError,
    JsonWebKey,
    KeyOps,
    KeyParseError,
    KeyUse,
    MismatchedAlgorithmError,
    generate_p256,
)
from jsonwebkey.keys import pkcs8

HS256_JSON = '{"kty":"oct","use":"sig","kid":"my signing key","k":"Wpj30SfkzM_m0Sa_B2NqNw","alg":"HS256"}'


def test_symmetric_end_to_end():
    """Test parsing and re-serializing a symmetric signing key."""
    jwk = JsonWebKey.parse(HS256_JSON)

    assert jwk.is_private
    assert jwk.to_public() is None
    assert jwk.key_use == KeyUse.SIGNING
    assert jwk.key_id == "my signing key"
    assert jwk.algorithm == Algorithm.HS256
    assert jwk.to_json() == (
        '{"kty":"oct","k":"Wpj30SfkzM_m0Sa_B2NqNw",'
        '"use":"sig","kid":"my signing key","alg":"HS256"}'
    )


def test_ec_end_to_end():
    """Test a generated P-256 key through ES256 and public export."""
    jwk = JsonWebKey.new(generate_p256())
    jwk.set_algorithm(Algorithm.ES256)
    assert jwk.is_private

    public = jwk.to_public()
    assert not public.is_private
    assert "d" not in public.to_dict()
    assert public.algorithm == Algorithm.ES256
    assert public.key.is_algorithm_compatible(public.algorithm)

    info, rest = der_decoder.decode(
        public.key.to_der(), asn1Spec=pkcs8.SubjectPublicKeyInfo()
    )
    assert rest == b""
    assert info["algorithm"]["algorithm"] == pkcs8.ID_EC_PUBLIC_KEY


def test_new_has_no_envelope_members(symmetric_key):
    """Test that a new record only carries the key members."""
    jwk = JsonWebKey.new(symmetric_key)
    assert jwk.key_use is None
    assert jwk.key_ops.is_empty()
    assert jwk.key_id is None
    assert jwk.algorithm is None
    assert set(jwk.to_dict()) == {"kty", "k"}


def _keys(ec_key, rsa_key, symmetric_key):
    return {
        "EC": ec_key,
        "EC public": ec_key.to_public(),
        "RSA": rsa_key,
        "oct": symmetric_key,
    }


COMPATIBLE = {
    ("EC", Algorithm.ES256),
    ("EC public", Algorithm.ES256),
    ("RSA", Algorithm.RS256),
    ("oct", Algorithm.HS256),
}


@pytest.mark.parametrize("name", ["EC", "EC public", "RSA", "oct"])
@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_set_algorithm_gating(name, algorithm, ec_key, rsa_key, symmetric_key):
    """Test set_algorithm succeeds only for matching pairs."""
    jwk = JsonWebKey.new(_keys(ec_key, rsa_key, symmetric_key)[name])

    if (name, algorithm) in COMPATIBLE:
        jwk.set_algorithm(algorithm)
        assert jwk.algorithm == algorithm
    else:
        with pytest.raises(MismatchedAlgorithmError):
            jwk.set_algorithm(algorithm)
        assert jwk.algorithm is None


def test_set_algorithm_failure_keeps_previous_value(symmetric_key):
    """Test a rejected algorithm leaves the record unchanged."""
    jwk = JsonWebKey.new(symmetric_key)
    jwk.set_algorithm(Algorithm.HS256)
    before = jwk.to_json()

    with pytest.raises(MismatchedAlgorithmError):
        jwk.set_algorithm(Algorithm.ES256)

    assert jwk.algorithm == Algorithm.HS256
    assert jwk.to_json() == before


@pytest.mark.parametrize("algorithm", ["RS256", "ES256"])
def test_parse_rejects_mismatched_algorithm(algorithm):
    """Test that an embedded alg is checked during parsing."""
    data = json.loads(HS256_JSON)
    data["alg"] = algorithm
    with pytest.raises(MismatchedAlgorithmError):
        JsonWebKey.parse(json.dumps(data))


def test_parse_rejects_unknown_algorithm():
    """Test that algorithms outside HS256, RS256 and ES256 are rejected."""
    data = json.loads(HS256_JSON)
    data["alg"] = "HS512"
    with pytest.raises(KeyParseError):
        JsonWebKey.parse(json.dumps(data))


@pytest.mark.parametrize(
    "document",
    [
        "",
        "not json",
        "[]",
        '{"use":"sig"}',
        '{"kty":"oct"}',
        '{"kty":"oct","k":"AQAB","use":"other"}',
        '{"kty":"oct","k":"AQAB","kid":5}',
    ],
)
def test_parse_rejects_malformed(document):
    """Test structurally invalid documents raise KeyParseError."""
    with pytest.raises(KeyParseError):
        JsonWebKey.parse(document)


def test_parse_reports_byte_length():
    """Test that a short EC scalar surfaces as ByteLengthError."""
    jwk = JsonWebKey.new(generate_p256())
    data = jwk.to_dict()
    data["d"] = "AQAB"
    with pytest.raises(ByteLengthError):
        JsonWebKey.parse(json.dumps(data))


def test_round_trip_all_key_types(ec_key, rsa_key, rsa_public_key, symmetric_key):
    """Test parse(serialize(record)) == record for every key type."""
    for key in (ec_key, ec_key.to_public(), rsa_key, rsa_public_key, symmetric_key):
        jwk = JsonWebKey(
            key=key,
            key_use=KeyUse.SIGNING,
            key_ops=KeyOps(["sign", "verify"]),
            key_id="k1",
        )
        assert JsonWebKey.parse(jwk.to_json()) == jwk


def test_field_order(rsa_key):
    """Test key members come first, then use, key_ops, kid and alg."""
    jwk = JsonWebKey(
        key=rsa_key,
        algorithm=Algorithm.RS256,
        key_id="rsa",
        key_ops=KeyOps(["sign"]),
        key_use=KeyUse.SIGNING,
    )
    assert list(jwk.to_dict()) == [
        "kty", "e", "n", "d", "p", "q", "dp", "dq", "qi",
        "use", "key_ops", "kid", "alg",
    ]


def test_unset_members_are_absent_not_null(ec_key):
    """Test that no member is ever serialized as null."""
    text = JsonWebKey.new(ec_key.to_public()).to_json()
    assert "null" not in text
    assert set(json.loads(text)) == {"kty", "crv", "x", "y"}


def test_to_json_pretty():
    """Test pretty output holds the same members."""
    jwk = JsonWebKey.parse(HS256_JSON)
    pretty = jwk.to_json_pretty()
    assert "\n" in pretty
    assert json.loads(pretty) == json.loads(jwk.to_json())


def test_to_public_keeps_envelope(ec_key):
    """Test the public record carries over use, key_ops and kid."""
    jwk = JsonWebKey(key=ec_key, key_use=KeyUse.SIGNING, key_ops=KeyOps(["verify"]), key_id="ec")
    public = jwk.to_public()

    assert public.key_use == KeyUse.SIGNING
    assert public.key_id == "ec"
    assert public.key_ops == jwk.key_ops
    assert public.key_ops is not jwk.key_ops


def test_to_public_of_public_record_does_not_share_buffers(ec_key):
    """Test zeroizing a derived record leaves an already-public source intact."""
    original = JsonWebKey(key=ec_key.to_public(), key_id="ec")
    x = bytes(original.key.curve.x)

    with original.to_public() as derived:
        assert derived.key == original.key
        assert derived.key is not original.key

    assert bytes(derived.key.curve.x) == bytes(32)
    assert bytes(original.key.curve.x) == x


def test_unknown_members_ignored():
    """Test that unrecognized members are dropped."""
    jwk = JsonWebKey.parse('{"kty":"oct","k":"AQAB","x5u":"https://example.com"}')
    assert jwk.to_dict() == {"kty": "oct", "k": "AQAB"}


def test_record_zeroize(symmetric_key):
    """Test zeroizing the record wipes the key."""
    with JsonWebKey.new(symmetric_key) as jwk:
        pass
    assert bytes(jwk.key.key) == bytes(32)


def test_thumbprint_matches_key(rsa_public_key):
    """Test the record thumbprint ignores envelope members."""
    jwk = JsonWebKey(key=rsa_public_key, key_id="whatever")
    assert jwk.thumbprint() == rsa_public_key.thumbprint()


def test_str_is_json():
    """Test str() gives the compact JSON form."""
    jwk = JsonWebKey.parse(HS256_JSON)
    assert str(jwk) == jwk.to_json()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
