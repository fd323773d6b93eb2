"""Password derivation, SRP proof and notification payload cryptography."""

from .derivations import (
    PasswordDerivation,
    UnknownPasswordDerivation,
    SRPPasswordDerivation,
    SecurePasswordDerivation,
    UnknownSecurePasswordDerivation,
    SHA512SecurePasswordDerivation,
    PBKDF2SecurePasswordDerivation,
    SRPSessionChallenge,
    SRPProof,
)
from .errors import (
    TwoStepError,
    UnknownAlgorithmError,
    PasswordEncodingError,
    SafetyCheckError,
    IntegrityCheckError,
    StorageFailureError,
    AccountNotReadyError,
)
from .notifications import (
    NotificationKey,
    decrypt_notification_payload,
    encrypt_notification_payload,
)
from .secure_values import derive_secure, update_secure_derivation
from .srp import derive_updated_verifier, prove_knowledge

__all__ = [
    "PasswordDerivation",
    "UnknownPasswordDerivation",
    "SRPPasswordDerivation",
    "SecurePasswordDerivation",
    "UnknownSecurePasswordDerivation",
    "SHA512SecurePasswordDerivation",
    "PBKDF2SecurePasswordDerivation",
    "SRPSessionChallenge",
    "SRPProof",
    "TwoStepError",
    "UnknownAlgorithmError",
    "PasswordEncodingError",
    "SafetyCheckError",
    "IntegrityCheckError",
    "StorageFailureError",
    "AccountNotReadyError",
    "NotificationKey",
    "decrypt_notification_payload",
    "encrypt_notification_payload",
    "derive_secure",
    "update_secure_derivation",
    "derive_updated_verifier",
    "prove_knowledge",
]
