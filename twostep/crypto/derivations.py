"""
Password derivation descriptors.

Each KDF family is a closed set of frozen dataclasses with an explicit
"unknown" member for algorithms the server may introduce later. The fixed
iteration counts are not constructor arguments: the wire tags imply them and
have no field to carry any other value.
"""

from dataclasses import dataclass, field
from typing import Union

from twostep.constants import SECURE_PBKDF2_ITERATIONS, SRP_PBKDF2_ITERATIONS

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


# =============================================================================
# Login password (SRP)
# =============================================================================


@dataclass(frozen=True)
class UnknownPasswordDerivation:
    """Password KDF this client does not implement."""


@dataclass(frozen=True)
class SRPPasswordDerivation:
    """
    sha256_sha256_PBKDF2_HMAC_sha512_sha256_srp parameters.

    Attributes:
        salt1: Client salt, extended by 32 random bytes on every update
        salt2: Server salt, never changed by the client
        g: Group generator (32-bit signed on the wire)
        p: Group modulus, unsigned big-endian
        iterations: Always 100000
    """

    salt1: bytes
    salt2: bytes
    g: int
    p: bytes
    iterations: int = field(default=SRP_PBKDF2_ITERATIONS, init=False)

    def __post_init__(self):
        if not INT32_MIN <= self.g <= INT32_MAX:
            raise ValueError("g must fit in a signed 32-bit integer")
        if not self.p:
            raise ValueError("p cannot be empty")

    def with_salt1(self, salt1: bytes) -> "SRPPasswordDerivation":
        return SRPPasswordDerivation(salt1=salt1, salt2=self.salt2, g=self.g, p=self.p)


PasswordDerivation = Union[UnknownPasswordDerivation, SRPPasswordDerivation]


# =============================================================================
# Secure values
# =============================================================================


@dataclass(frozen=True)
class UnknownSecurePasswordDerivation:
    """Secure-value KDF this client does not implement."""


@dataclass(frozen=True)
class SHA512SecurePasswordDerivation:
    """hash = SHA512(salt ++ password ++ salt)."""

    salt: bytes


@dataclass(frozen=True)
class PBKDF2SecurePasswordDerivation:
    """hash = PBKDF2-HMAC-SHA512(password, salt, 100000)."""

    salt: bytes
    iterations: int = field(default=SECURE_PBKDF2_ITERATIONS, init=False)


SecurePasswordDerivation = Union[
    UnknownSecurePasswordDerivation,
    SHA512SecurePasswordDerivation,
    PBKDF2SecurePasswordDerivation,
]


# =============================================================================
# SRP exchange values
# =============================================================================


@dataclass(frozen=True)
class SRPSessionChallenge:
    """
    Server side of an SRP login attempt.

    Attributes:
        session_id: Opaque, server-assigned 64-bit id
        B: Server public value, unsigned big-endian
    """

    session_id: int
    B: bytes


@dataclass(frozen=True)
class SRPProof:
    """
    Client proof of password knowledge, sent back with the session id.

    Only the server can tell whether M1 is correct.
    """

    session_id: int
    A: bytes
    M1: bytes

    def __post_init__(self):
        if len(self.M1) != 32:
            raise ValueError("M1 must be 32 bytes")
