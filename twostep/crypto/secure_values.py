"""
Secure-value password hashing.

Secure values (identity documents, personal details) are encrypted with a
key derived from the same password as login, through a separate KDF family
so that the login verifier reveals nothing about it.
"""

from typing import Tuple

from twostep.constants import SALT_SUFFIX_LENGTH
from twostep.crypto.derivations import (
    PBKDF2SecurePasswordDerivation,
    SecurePasswordDerivation,
    SHA512SecurePasswordDerivation,
)
from twostep.crypto.errors import UnknownAlgorithmError
from twostep.crypto.primitives import generate_random_bytes, pbkdf2_hmac_sha512, sha512_digest
from twostep.crypto.srp import RandomBytes, encode_password


def _secure_hash(password_bytes: bytes, derivation: SecurePasswordDerivation) -> bytes:
    if isinstance(derivation, SHA512SecurePasswordDerivation):
        return sha512_digest(derivation.salt + password_bytes + derivation.salt)
    if isinstance(derivation, PBKDF2SecurePasswordDerivation):
        return pbkdf2_hmac_sha512(password_bytes, derivation.salt, derivation.iterations)
    raise UnknownAlgorithmError(f"Unsupported secure password derivation: {type(derivation).__name__}")


def _rotated(derivation: SecurePasswordDerivation, random_bytes: RandomBytes) -> SecurePasswordDerivation:
    if isinstance(derivation, SHA512SecurePasswordDerivation):
        return SHA512SecurePasswordDerivation(salt=derivation.salt + random_bytes(SALT_SUFFIX_LENGTH))
    if isinstance(derivation, PBKDF2SecurePasswordDerivation):
        return PBKDF2SecurePasswordDerivation(salt=derivation.salt + random_bytes(SALT_SUFFIX_LENGTH))
    raise UnknownAlgorithmError(f"Unsupported secure password derivation: {type(derivation).__name__}")


def update_secure_derivation(
    password: str,
    derivation: SecurePasswordDerivation,
    random_bytes: RandomBytes = generate_random_bytes,
) -> Tuple[bytes, SecurePasswordDerivation]:
    """
    Hash a password for a new secure-value registration.

    The salt gets 32 fresh random bytes appended before hashing, the same
    rotation rule as the login password.

    Args:
        password: Password protecting the secure values
        derivation: Server-offered descriptor
        random_bytes: Source of the salt suffix (default: CSPRNG)

    Returns:
        Tuple of (hash, next_derivation). The hash is 64 bytes for both
        supported algorithms.

    Raises:
        UnknownAlgorithmError: If the descriptor is unknown
        PasswordEncodingError: If password is not text
    """
    next_derivation = _rotated(derivation, random_bytes)
    return _secure_hash(encode_password(password), next_derivation), next_derivation


def derive_secure(password: str, derivation: SecurePasswordDerivation) -> bytes:
    """
    Re-derive the hash for an already registered secure-value password.

    Raises:
        UnknownAlgorithmError: If the descriptor is unknown
        PasswordEncodingError: If password is not text
    """
    return _secure_hash(encode_password(password), derivation)
