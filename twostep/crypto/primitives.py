"""
Cryptographic primitives for two-step verification and push payloads.

Security Properties:
- All randomness from secrets module (CSPRNG)
- Digests, PBKDF2 and the AES block cipher come from `cryptography`
- Modular arithmetic uses Python's arbitrary-precision integers (built-in pow)
- Secret comparisons are constant time (hmac.compare_digest)

Byte conventions (must match the server):
- Big integers are unsigned big-endian, minimal length unless padded
- SRP values are left-padded with zero bytes to the byte length of p
- g is a 4-byte big-endian signed integer
"""

import hmac
import secrets

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from twostep.constants import SRP_G_LENGTH

AES_BLOCK_SIZE = 16

# g^a, g^b and B - k*g^x must stay this many bits away from 0 and p.
SRP_SAFETY_MARGIN_BITS = 64


# =============================================================================
# Randomness
# =============================================================================


def generate_random_bytes(length: int = 32) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes to generate (default: 32)

    Returns:
        Random bytes of specified length
    """
    return secrets.token_bytes(length)


# =============================================================================
# Digests and KDFs
# =============================================================================


def _digest(algorithm: hashes.HashAlgorithm, data: bytes) -> bytes:
    digest = hashes.Hash(algorithm)
    digest.update(data)
    return digest.finalize()


def sha1_digest(data: bytes) -> bytes:
    return _digest(hashes.SHA1(), data)


def sha256_digest(data: bytes) -> bytes:
    return _digest(hashes.SHA256(), data)


def sha512_digest(data: bytes) -> bytes:
    return _digest(hashes.SHA512(), data)


def pbkdf2_hmac_sha512(password: bytes, salt: bytes, iterations: int) -> bytes:
    """
    Derive 64 bytes with PBKDF2-HMAC-SHA512.

    The output length equals the SHA-512 digest size, which is what both the
    SRP password hash and the secure-value hash expect.

    Args:
        password: Secret input (raw bytes, not necessarily text)
        salt: Salt bytes (any length)
        iterations: Iteration count

    Returns:
        64-byte derived key

    Raises:
        ValueError: If iterations is not positive
    """
    if iterations <= 0:
        raise ValueError("Iterations must be positive")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA512(),
        length=64,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password)


# =============================================================================
# AES-256-IGE
# =============================================================================


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def _check_ige_arguments(data: bytes, key: bytes, iv: bytes) -> None:
    if len(key) != 32:
        raise ValueError("Key must be 32 bytes")
    if len(iv) != 32:
        raise ValueError("IV must be 32 bytes")
    if len(data) % AES_BLOCK_SIZE != 0:
        raise ValueError("Data length must be a multiple of 16 bytes")


def aes_ige_encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    Encrypt with AES-256 in IGE mode.

    IGE chains both the previous ciphertext block and the previous plaintext
    block: c[i] = E(p[i] ^ c[i-1]) ^ p[i-1], seeded with c[-1] = iv[:16] and
    p[-1] = iv[16:].

    Args:
        plaintext: Data to encrypt, a whole number of 16-byte blocks
        key: 32-byte AES key
        iv: 32-byte IGE initialization vector

    Returns:
        Ciphertext of the same length

    Raises:
        ValueError: If key/iv/data lengths are wrong
    """
    _check_ige_arguments(plaintext, key, iv)

    encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
    prev_cipher = iv[:AES_BLOCK_SIZE]
    prev_plain = iv[AES_BLOCK_SIZE:]
    out = bytearray()
    for offset in range(0, len(plaintext), AES_BLOCK_SIZE):
        block = plaintext[offset:offset + AES_BLOCK_SIZE]
        encrypted = _xor(encryptor.update(_xor(block, prev_cipher)), prev_plain)
        out += encrypted
        prev_cipher = encrypted
        prev_plain = block
    encryptor.finalize()
    return bytes(out)


def aes_ige_decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    Decrypt AES-256-IGE: p[i] = D(c[i] ^ p[i-1]) ^ c[i-1].

    IGE provides no authentication. Callers must verify integrity separately.

    Raises:
        ValueError: If key/iv/data lengths are wrong
    """
    _check_ige_arguments(ciphertext, key, iv)

    decryptor = Cipher(algorithms.AES(key), modes.ECB()).decryptor()
    prev_cipher = iv[:AES_BLOCK_SIZE]
    prev_plain = iv[AES_BLOCK_SIZE:]
    out = bytearray()
    for offset in range(0, len(ciphertext), AES_BLOCK_SIZE):
        block = ciphertext[offset:offset + AES_BLOCK_SIZE]
        decrypted = _xor(decryptor.update(_xor(block, prev_plain)), prev_cipher)
        out += decrypted
        prev_cipher = block
        prev_plain = decrypted
    decryptor.finalize()
    return bytes(out)


# =============================================================================
# Big-integer encoding and SRP helpers
# =============================================================================


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, "big")


def int_to_bytes(value: int) -> bytes:
    """Minimal unsigned big-endian encoding (zero encodes as no bytes)."""
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def int32_to_bytes(value: int) -> bytes:
    """Encode g the way the wire carries it: 4-byte big-endian signed."""
    return value.to_bytes(SRP_G_LENGTH, "big", signed=True)


def pad_to_length(data: bytes, length: int) -> bytes:
    """
    Left-pad with zero bytes up to `length`.

    Never truncates: data already at least `length` bytes is returned as is.
    """
    if len(data) >= length:
        return data
    return bytes(length - len(data)) + data


def padded_xor(a: bytes, b: bytes) -> bytes:
    """XOR two byte strings after left-padding both to the longer length."""
    length = max(len(a), len(b))
    return _xor(pad_to_length(a, length), pad_to_length(b, length))


def check_is_safe_b(b: bytes, p: bytes) -> bool:
    """
    Check that the server's public value lies strictly inside (1, p - 1).

    B = 0, 1, p - 1 or anything >= p would let an attacker force a known
    shared secret.
    """
    b_value = bytes_to_int(b)
    p_value = bytes_to_int(p)
    return 1 < b_value < p_value - 1


def check_is_safe_ga_or_b(value: bytes, p: bytes) -> bool:
    """
    Range check for g^a, g^b and derived group elements.

    Requires 1 < value < p - 1 and
    2^(bits(p) - 64) <= value <= p - 2^(bits(p) - 64).
    """
    v = bytes_to_int(value)
    p_value = bytes_to_int(p)
    if not 1 < v < p_value - 1:
        return False

    margin_bits = p_value.bit_length() - SRP_SAFETY_MARGIN_BITS
    if margin_bits <= 0:
        return False
    margin = 1 << margin_bits
    return margin <= v <= p_value - margin


def is_zero(data: bytes) -> bool:
    return not any(data)


# =============================================================================
# Utilities
# =============================================================================


def secure_compare(a: bytes, b: bytes) -> bool:
    """
    Compare two byte strings in constant time.

    Prevents timing attacks when comparing secrets (like integrity tags).

    Args:
        a: First byte string
        b: Second byte string

    Returns:
        True if equal, False otherwise
    """
    return hmac.compare_digest(a, b)
