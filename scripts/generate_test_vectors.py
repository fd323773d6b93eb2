#!/usr/bin/env python3
"""
Generate cross-platform two-step test vectors.
Python is the source of truth.
"""
import json
import sys
from pathlib import Path

# Add project root to path for imports
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from twostep.crypto.derivations import (
    PBKDF2SecurePasswordDerivation,
    SHA512SecurePasswordDerivation,
    SRPPasswordDerivation,
    SRPSessionChallenge,
)
from twostep.crypto.notifications import NotificationKey, encrypt_notification_payload
from twostep.crypto.secure_values import update_secure_derivation
from twostep.crypto.srp import derive_updated_verifier, prove_knowledge
from tests.utils.crypto_test_utils import DeterministicRandom
from tests.utils.srp_reference import RFC5054_G, RFC5054_N, ReferenceSRPServer


def generate_vectors():
    vectors = {
        "version": "1.0",
        "description": "Cross-platform two-step verification test vectors",
        "srp_verifier": [],
        "srp_proof": [],
        "secure_values": [],
        "notification_payload": [],
    }

    derivation = SRPPasswordDerivation(
        salt1=bytes.fromhex("4a6f1c2e9b8d7a60"),
        salt2=bytes.fromhex("f00dfacecafebeef0123456789abcdef"),
        g=RFC5054_G,
        p=RFC5054_N,
    )

    # Verifier vectors
    for password in ["123456", "correct horse battery staple", "пароль"]:
        seed = f"verifier:{password}".encode()
        verifier, stored = derive_updated_verifier(password, derivation, DeterministicRandom(seed))
        vectors["srp_verifier"].append({
            "description": f"Password update ({password})",
            "password": password,
            "salt1_hex": derivation.salt1.hex(),
            "salt2_hex": derivation.salt2.hex(),
            "g": derivation.g,
            "p_hex": derivation.p.hex(),
            "random_seed_hex": seed.hex(),
            "expected_salt1_hex": stored.salt1.hex(),
            "expected_verifier_hex": verifier.hex(),
        })

    # Proof vector with a fixed server secret
    verifier, stored = derive_updated_verifier("123456", derivation, DeterministicRandom(b"proof-registration"))
    server = ReferenceSRPServer(stored.salt1, stored.salt2, stored.g, stored.p, verifier, b=0x1234567890ABCDEF)
    challenge = SRPSessionChallenge(session_id=7, B=server.B_bytes)
    proof = prove_knowledge("123456", stored, challenge, DeterministicRandom(b"proof-ephemeral"))
    vectors["srp_proof"].append({
        "description": "Login proof",
        "password": "123456",
        "salt1_hex": stored.salt1.hex(),
        "salt2_hex": stored.salt2.hex(),
        "g": stored.g,
        "p_hex": stored.p.hex(),
        "srp_id": challenge.session_id,
        "B_hex": challenge.B.hex(),
        "random_seed_hex": b"proof-ephemeral".hex(),
        "expected_A_hex": proof.A.hex(),
        "expected_M1_hex": proof.M1.hex(),
        "server_accepts": server.verify(proof.A, proof.M1),
    })

    # Secure value vectors
    for secure in [SHA512SecurePasswordDerivation(salt=b"\x01" * 8), PBKDF2SecurePasswordDerivation(salt=b"\x01" * 8)]:
        value, next_derivation = update_secure_derivation("123456", secure, DeterministicRandom(b"secure"))
        vectors["secure_values"].append({
            "description": type(secure).__name__,
            "password": "123456",
            "salt_hex": secure.salt.hex(),
            "expected_salt_hex": next_derivation.salt.hex(),
            "expected_hash_hex": value.hex(),
        })

    # Notification payload vectors
    key = NotificationKey(data=DeterministicRandom(b"notification-key")(256))
    for plaintext in [b"", b"Hello, World!", b'{"loc_key":"MESSAGE_TEXT","loc_args":["Alice","hi"]}']:
        payload = encrypt_notification_payload(key, plaintext, DeterministicRandom(b"padding"))
        vectors["notification_payload"].append({
            "description": f"{len(plaintext)}-byte payload",
            "key_hex": key.data.hex(),
            "key_id_hex": key.id.hex(),
            "plaintext_hex": plaintext.hex(),
            "payload_hex": payload.hex(),
        })

    output = project_dir / "tests" / "fixtures" / "twostep_test_vectors.json"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(vectors, indent=2))

    print(f"Generated: {output}")


if __name__ == "__main__":
    generate_vectors()
