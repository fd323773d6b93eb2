"""
Login password derivation and proof (client side of SRP-6a).

Two operations share one password hash:

- derive_updated_verifier: registration and password change. Rotates salt1
  and returns the verifier v = g^x mod p for the server to store.
- prove_knowledge: login. Answers a server challenge (session id, B) with
  (A, M1) without revealing the password or x.

x = SHA256(salt2 ++ PBKDF2-HMAC-SHA512(inner, salt1, 100000) ++ salt2)
where inner = SHA256(salt2 ++ SHA256(salt1 ++ password ++ salt1) ++ salt2).

Both functions are pure. Randomness is injected through `random_bytes` so
results are reproducible in tests.
"""

from typing import Callable, Tuple

from twostep.constants import SALT_SUFFIX_LENGTH
from twostep.crypto.derivations import (
    PasswordDerivation,
    SRPPasswordDerivation,
    SRPProof,
    SRPSessionChallenge,
)
from twostep.crypto.errors import (
    PasswordEncodingError,
    SafetyCheckError,
    UnknownAlgorithmError,
)
from twostep.crypto.primitives import (
    bytes_to_int,
    check_is_safe_b,
    check_is_safe_ga_or_b,
    generate_random_bytes,
    int32_to_bytes,
    int_to_bytes,
    is_zero,
    pad_to_length,
    padded_xor,
    pbkdf2_hmac_sha512,
    sha256_digest,
)

RandomBytes = Callable[[int], bytes]


def encode_password(password: str) -> bytes:
    """
    UTF-8 encode a password, replacing anything UTF-8 cannot represent.

    Raises:
        PasswordEncodingError: If password is not text
    """
    if not isinstance(password, str):
        raise PasswordEncodingError("Password must be a string")
    return password.encode("utf-8", errors="replace")


def srp_password_hash(password: bytes, salt1: bytes, salt2: bytes, iterations: int) -> bytes:
    """Compute x (32 bytes) from the encoded password and both salts."""
    inner = sha256_digest(salt2 + sha256_digest(salt1 + password + salt1) + salt2)
    stretched = pbkdf2_hmac_sha512(inner, salt1, iterations)
    return sha256_digest(salt2 + stretched + salt2)


def _require_srp(derivation: PasswordDerivation) -> SRPPasswordDerivation:
    if not isinstance(derivation, SRPPasswordDerivation):
        raise UnknownAlgorithmError(f"Unsupported password derivation: {type(derivation).__name__}")
    return derivation


def derive_updated_verifier(
    password: str,
    derivation: PasswordDerivation,
    random_bytes: RandomBytes = generate_random_bytes,
) -> Tuple[bytes, SRPPasswordDerivation]:
    """
    Compute a new SRP verifier and the rotated descriptor for a password update.

    salt1 is extended with 32 fresh random bytes; salt2, g and p are kept.
    The caller must send the verifier with the returned descriptor and store
    that descriptor in place of the old one.

    Args:
        password: New password
        derivation: Server-offered "new password" descriptor
        random_bytes: Source of the salt suffix (default: CSPRNG)

    Returns:
        Tuple of (verifier, next_derivation). The verifier is g^x mod p,
        unsigned big-endian, minimal length.

    Raises:
        UnknownAlgorithmError: If the descriptor is not SRP
        PasswordEncodingError: If password is not text
    """
    srp = _require_srp(derivation)
    password_bytes = encode_password(password)

    next_derivation = srp.with_salt1(srp.salt1 + random_bytes(SALT_SUFFIX_LENGTH))
    x = srp_password_hash(password_bytes, next_derivation.salt1, next_derivation.salt2, next_derivation.iterations)

    p = bytes_to_int(srp.p)
    verifier = int_to_bytes(pow(bytes_to_int(int32_to_bytes(srp.g)), bytes_to_int(x), p))

    return verifier, next_derivation


def prove_knowledge(
    password: str,
    derivation: PasswordDerivation,
    challenge: SRPSessionChallenge,
    random_bytes: RandomBytes = generate_random_bytes,
) -> SRPProof:
    """
    Answer an SRP login challenge.

    Steps:
    1. Draw secret a (len(p) random bytes), A = g^a mod p
    2. Reject B outside (1, p - 1)
    3. u = SHA256(A ++ B), reject u == 0
    4. k = SHA256(p ++ pad(g)), s1 = (B - k * g^x) mod p, range-check s1
    5. S = s1^(a + u * x) mod p, K = SHA256(pad(S))
    6. M1 = SHA256((H(p) ^ H(pad(g))) ++ H(salt1) ++ H(salt2) ++ A ++ B ++ K)

    A, B, S and g are padded with leading zeros to len(p) wherever hashed.

    Args:
        password: Password being proven
        derivation: Current password descriptor (no salt rotation)
        challenge: Server session id and public value B
        random_bytes: Source of the ephemeral secret (default: CSPRNG)

    Returns:
        SRPProof with the challenge's session id, A and M1

    Raises:
        UnknownAlgorithmError: If the descriptor is not SRP
        PasswordEncodingError: If password is not text
        SafetyCheckError: If B, u or s1 fail validation
    """
    srp = _require_srp(derivation)
    password_bytes = encode_password(password)

    p_bytes = srp.p
    p = bytes_to_int(p_bytes)
    p_length = len(p_bytes)
    g_bytes = int32_to_bytes(srp.g)
    g = bytes_to_int(g_bytes)
    padded_g = pad_to_length(g_bytes, p_length)

    a = bytes_to_int(random_bytes(p_length))

    if not check_is_safe_b(challenge.B, p_bytes):
        raise SafetyCheckError("Server public value B is out of range")

    B = pad_to_length(challenge.B, p_length)
    A = pad_to_length(int_to_bytes(pow(g, a, p)), p_length)

    u_bytes = sha256_digest(A + B)
    if is_zero(u_bytes):
        raise SafetyCheckError("Scrambling parameter u is zero")
    u = bytes_to_int(u_bytes)

    x = bytes_to_int(srp_password_hash(password_bytes, srp.salt1, srp.salt2, srp.iterations))
    gx = pow(g, x, p)

    k = bytes_to_int(sha256_digest(p_bytes + padded_g))
    s1 = (bytes_to_int(B) - k * gx) % p
    if not check_is_safe_ga_or_b(int_to_bytes(s1), p_bytes):
        raise SafetyCheckError("B - k*g^x failed the group range check")

    S = pow(s1, a + u * x, p)
    K = sha256_digest(pad_to_length(int_to_bytes(S), p_length))

    m1 = padded_xor(sha256_digest(p_bytes), sha256_digest(padded_g))
    m2 = sha256_digest(srp.salt1)
    m3 = sha256_digest(srp.salt2)
    M1 = sha256_digest(m1 + m2 + m3 + A + B + K)

    return SRPProof(session_id=challenge.session_id, A=A, M1=M1)
