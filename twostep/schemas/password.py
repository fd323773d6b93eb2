"""
Pydantic schemas for the two-step verification wire formats.

All byte fields are lowercase hex strings. Descriptor schemas convert to
and from the bytes-based descriptors in twostep.crypto.derivations; tags
this client does not recognize decode to the "unknown" descriptor instead
of failing, so a server rolling out a new KDF does not break parsing.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from twostep.crypto.derivations import (
    PasswordDerivation,
    PBKDF2SecurePasswordDerivation,
    SecurePasswordDerivation,
    SHA512SecurePasswordDerivation,
    SRPPasswordDerivation,
    SRPProof,
    SRPSessionChallenge,
    UnknownPasswordDerivation,
    UnknownSecurePasswordDerivation,
)

PASSWORD_KDF_UNKNOWN = "unknown"
PASSWORD_KDF_SRP = "sha256_sha256_PBKDF2_HMAC_sha512_sha256_srp"

SECURE_KDF_UNKNOWN = "unknown"
SECURE_KDF_SHA512 = "sha512"
SECURE_KDF_PBKDF2 = "pbkdf2_hmac_sha512_iter100000"

FLAG_HAS_RECOVERY = 1 << 0
FLAG_HAS_SECURE_VALUES = 1 << 1


def validate_hex_string(value: str, expected_length: Optional[int] = None) -> str:
    """Check a hex-encoded wire field, optionally its length, and lowercase it."""
    try:
        bytes.fromhex(value)
    except ValueError:
        raise ValueError("Must be a valid hex string") from None

    if expected_length is not None and len(value) != expected_length:
        raise ValueError(f"Must be {expected_length} hex characters")

    return value.lower()


def _optional_hex(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return validate_hex_string(value)


class PasswordKdfAlgo(BaseModel):
    """Login password KDF descriptor as sent by the server."""

    type: str = Field(..., description="KDF tag")
    salt1: Optional[str] = Field(None, description="Client salt (hex)")
    salt2: Optional[str] = Field(None, description="Server salt (hex)")
    g: Optional[int] = Field(None, ge=-(2 ** 31), le=2 ** 31 - 1, description="Group generator")
    p: Optional[str] = Field(None, description="Group modulus (hex, big-endian)")

    @field_validator("salt1", "salt2", "p")
    @classmethod
    def validate_hex_fields(cls, v: Optional[str]) -> Optional[str]:
        return _optional_hex(v)

    @model_validator(mode="after")
    def validate_srp_fields(self) -> "PasswordKdfAlgo":
        if self.type == PASSWORD_KDF_SRP:
            if self.salt1 is None or self.salt2 is None or self.g is None or not self.p:
                raise ValueError("SRP descriptor requires salt1, salt2, g and p")
        return self

    def to_derivation(self) -> PasswordDerivation:
        if self.type == PASSWORD_KDF_SRP:
            return SRPPasswordDerivation(
                salt1=bytes.fromhex(self.salt1),
                salt2=bytes.fromhex(self.salt2),
                g=self.g,
                p=bytes.fromhex(self.p),
            )
        return UnknownPasswordDerivation()

    @classmethod
    def from_derivation(cls, derivation: PasswordDerivation) -> "PasswordKdfAlgo":
        if isinstance(derivation, SRPPasswordDerivation):
            return cls(
                type=PASSWORD_KDF_SRP,
                salt1=derivation.salt1.hex(),
                salt2=derivation.salt2.hex(),
                g=derivation.g,
                p=derivation.p.hex(),
            )
        return cls(type=PASSWORD_KDF_UNKNOWN)


class SecurePasswordKdfAlgo(BaseModel):
    """Secure-value password KDF descriptor as sent by the server."""

    type: str = Field(..., description="KDF tag")
    salt: Optional[str] = Field(None, description="Salt (hex)")

    @field_validator("salt")
    @classmethod
    def validate_salt(cls, v: Optional[str]) -> Optional[str]:
        return _optional_hex(v)

    @model_validator(mode="after")
    def validate_salt_present(self) -> "SecurePasswordKdfAlgo":
        if self.type in (SECURE_KDF_SHA512, SECURE_KDF_PBKDF2) and self.salt is None:
            raise ValueError(f"{self.type} descriptor requires salt")
        return self

    def to_derivation(self) -> SecurePasswordDerivation:
        if self.type == SECURE_KDF_SHA512:
            return SHA512SecurePasswordDerivation(salt=bytes.fromhex(self.salt))
        if self.type == SECURE_KDF_PBKDF2:
            return PBKDF2SecurePasswordDerivation(salt=bytes.fromhex(self.salt))
        return UnknownSecurePasswordDerivation()

    @classmethod
    def from_derivation(cls, derivation: SecurePasswordDerivation) -> "SecurePasswordKdfAlgo":
        if isinstance(derivation, SHA512SecurePasswordDerivation):
            return cls(type=SECURE_KDF_SHA512, salt=derivation.salt.hex())
        if isinstance(derivation, PBKDF2SecurePasswordDerivation):
            return cls(type=SECURE_KDF_PBKDF2, salt=derivation.salt.hex())
        return cls(type=SECURE_KDF_UNKNOWN)


class PasswordConfiguration(BaseModel):
    """
    Current two-step verification state of an account.

    current_algo is present only when a password is set. srp_id and srp_B
    together form the login challenge for that password.
    """

    has_recovery: bool = False
    has_secure_values: bool = False
    current_algo: Optional[PasswordKdfAlgo] = None
    srp_B: Optional[str] = Field(None, description="Server SRP public value (hex)")
    srp_id: Optional[int] = Field(None, description="SRP session id")
    hint: Optional[str] = None
    email_unconfirmed_pattern: Optional[str] = None
    new_algo: PasswordKdfAlgo
    new_secure_algo: SecurePasswordKdfAlgo
    secure_random: str = Field("", description="Server-provided randomness (hex)")

    @field_validator("srp_B")
    @classmethod
    def validate_srp_b(cls, v: Optional[str]) -> Optional[str]:
        return _optional_hex(v)

    @field_validator("secure_random")
    @classmethod
    def validate_secure_random(cls, v: str) -> str:
        return validate_hex_string(v)

    @field_validator("new_secure_algo")
    @classmethod
    def validate_new_secure_algo(cls, v: SecurePasswordKdfAlgo) -> SecurePasswordKdfAlgo:
        if v.type == SECURE_KDF_SHA512:
            raise ValueError("Server must not offer sha512 for new secure values")
        return v

    @classmethod
    def from_flags(cls, flags: int, **fields) -> "PasswordConfiguration":
        """Build from the raw response, decoding the recovery/secure-values flag bits."""
        return cls(
            has_recovery=bool(flags & FLAG_HAS_RECOVERY),
            has_secure_values=bool(flags & FLAG_HAS_SECURE_VALUES),
            **fields,
        )

    @property
    def has_password(self) -> bool:
        return self.current_algo is not None

    def current_derivation(self) -> Optional[PasswordDerivation]:
        return self.current_algo.to_derivation() if self.current_algo else None

    def srp_challenge(self) -> Optional[SRPSessionChallenge]:
        if self.srp_B is None or self.srp_id is None:
            return None
        return SRPSessionChallenge(session_id=self.srp_id, B=bytes.fromhex(self.srp_B))


class CheckPasswordSRPRequest(BaseModel):
    """Login proof sent to the server: {srp_id, A, M1}."""

    srp_id: int
    A: str = Field(..., min_length=2, description="Client public value (hex, padded to len(p))")
    M1: str = Field(..., min_length=64, max_length=64, description="Proof (32 bytes hex)")

    @field_validator("A")
    @classmethod
    def validate_a(cls, v: str) -> str:
        return validate_hex_string(v)

    @field_validator("M1")
    @classmethod
    def validate_m1(cls, v: str) -> str:
        return validate_hex_string(v, 64)

    @classmethod
    def from_proof(cls, proof: SRPProof) -> "CheckPasswordSRPRequest":
        return cls(srp_id=proof.session_id, A=proof.A.hex(), M1=proof.M1.hex())

    def to_proof(self) -> SRPProof:
        return SRPProof(session_id=self.srp_id, A=bytes.fromhex(self.A), M1=bytes.fromhex(self.M1))


class PasswordInputSettings(BaseModel):
    """
    New password registration: rotated descriptor plus verifier.

    The secure-value pair is present only when the account stores secure
    values, which must be re-encrypted under the new password.
    """

    new_algo: PasswordKdfAlgo
    new_password_hash: str = Field(..., description="SRP verifier g^x mod p (hex)")
    hint: str = ""
    new_secure_algo: Optional[SecurePasswordKdfAlgo] = None
    new_secure_password_hash: Optional[str] = Field(None, description="Secure-value password hash (hex)")

    @field_validator("new_password_hash")
    @classmethod
    def validate_new_password_hash(cls, v: str) -> str:
        return validate_hex_string(v)

    @field_validator("new_secure_password_hash")
    @classmethod
    def validate_new_secure_password_hash(cls, v: Optional[str]) -> Optional[str]:
        return _optional_hex(v)

    @model_validator(mode="after")
    def validate_secure_pair(self) -> "PasswordInputSettings":
        if (self.new_secure_algo is None) != (self.new_secure_password_hash is None):
            raise ValueError("new_secure_algo and new_secure_password_hash must be set together")
        return self

