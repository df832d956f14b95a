#!/usr/bin/env python3
"""
Basic example demonstrating the jsonwebkey workflow:
1. Parse a symmetric signing key from JSON
2. Generate a P-256 key and bind it to ES256
3. Publish the public half and export it as PKCS#8
"""

from jsonwebkey import (
    Algorithm,
    JsonWebKey,
    KeyOp,
    KeyUse,
    MismatchedAlgorithmError,
    generate_p256,
)


def main():
    print("=== jsonwebkey - Basic Example ===\n")

    # ============================================================================
    # STEP 1: Parse an existing HMAC key
    # ============================================================================
    print("1. Parsing symmetric key...")
    hmac_jwk = JsonWebKey.parse(
        '{"kty":"oct","use":"sig","kid":"my signing key",'
        '"k":"Wpj30SfkzM_m0Sa_B2NqNw","alg":"HS256"}'
    )
    print(f"   ✓ Key ID: {hmac_jwk.key_id}")
    print(f"   - Private: {hmac_jwk.is_private}")
    print(f"   - Public half: {hmac_jwk.to_public()}")
    print(f"   - Serialized: {hmac_jwk.to_json()}\n")

    # ============================================================================
    # STEP 2: Generate an EC key for ES256
    # ============================================================================
    print("2. Generating P-256 key...")
    ec_jwk = JsonWebKey.new(generate_p256())
    ec_jwk.key_use = KeyUse.SIGNING
    ec_jwk.key_ops.insert(KeyOp.SIGN)
    ec_jwk.key_ops.insert(KeyOp.VERIFY)
    ec_jwk.key_id = ec_jwk.thumbprint()
    ec_jwk.set_algorithm(Algorithm.ES256)
    print(f"   ✓ Thumbprint kid: {ec_jwk.key_id}")
    print(f"   - Key material in repr: {ec_jwk.key.curve.d!r}\n")

    # ============================================================================
    # STEP 3: Algorithm gating
    # ============================================================================
    print("3. Trying to use the EC key with RS256...")
    try:
        ec_jwk.set_algorithm(Algorithm.RS256)
        print("   ✗ Unexpected success\n")
    except MismatchedAlgorithmError as e:
        print(f"   ✓ Rejected: {e}")
        print(f"   - Algorithm unchanged: {ec_jwk.algorithm.value}\n")

    # ============================================================================
    # STEP 4: Publish the public half
    # ============================================================================
    print("4. Deriving public key...")
    public_jwk = ec_jwk.to_public()
    print(public_jwk.to_json_pretty())
    print()
    print(public_jwk.key.to_pem())

    # ============================================================================
    # STEP 5: Wipe private material
    # ============================================================================
    print("5. Zeroizing private key...")
    ec_jwk.zeroize()
    hmac_jwk.zeroize()
    print(f"   ✓ d is now all zeros: {not any(ec_jwk.key.curve.d)}\n")

    print("=== Example Complete ===")


if __name__ == "__main__":
    main()
