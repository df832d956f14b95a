#!/usr/bin/env python3
"""Key set example - publish keys, then sign and verify a JWT by kid."""

import tempfile
from pathlib import Path

from jsonwebkey import Algorithm, JsonWebKey, JsonWebKeySet, generate_p256, generate_symmetric
from jsonwebkey.integrations.jwt import decode_token, encode_token


def main():
    print("=== Key Set Example ===\n")

    # Issuer builds its private key set
    print("1. Building key set...")
    private_set = JsonWebKeySet()
    private_set.add(JsonWebKey(key=generate_p256(), key_id="es-2024", algorithm=Algorithm.ES256))
    private_set.add(JsonWebKey(key=generate_symmetric(256), key_id="internal"))
    print(f"   ✓ {len(private_set)} keys\n")

    # Save and reload
    print("2. Saving to YAML...")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "keys.yaml"
        private_set.save(path)
        reloaded = JsonWebKeySet.from_config(path)
    print(f"   ✓ Reloaded {len(reloaded)} keys\n")

    # What goes on /.well-known/jwks.json
    print("3. Public key set (symmetric keys are dropped)...")
    public_set = reloaded.to_public()
    for jwk in public_set:
        print(f"   • {jwk.key_id}: {jwk.key.kty}")
    print()

    # Sign with the private key, verify with the published one
    print("4. Signing token...")
    token = encode_token({"sub": "agent-1"}, reloaded.get("es-2024"))
    print(f"   ✓ {token[:40]}...")

    claims = decode_token(token, public_set.get("es-2024"))
    print(f"   ✓ Verified claims: {claims}\n")

    private_set.zeroize()
    reloaded.zeroize()


if __name__ == "__main__":
    main()
