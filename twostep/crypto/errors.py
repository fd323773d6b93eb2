"""
Error types for two-step verification and notification key operations.
"""


class TwoStepError(Exception):
    """Base exception for two-step verification crypto operations."""
    pass


class UnknownAlgorithmError(TwoStepError):
    """The derivation descriptor names an algorithm this client does not know.

    Permanent for the given descriptor: the caller must refresh the password
    configuration from the server.
    """
    pass


class PasswordEncodingError(TwoStepError):
    """The password could not be encoded for derivation."""
    pass


class SafetyCheckError(TwoStepError):
    """SRP group parameters or the server's public value failed validation.

    Abort this challenge. A fresh challenge may be requested.
    """
    pass


class IntegrityCheckError(TwoStepError):
    """A notification payload failed structural or integrity validation."""
    pass


class StorageFailureError(TwoStepError):
    """Keychain persistence did not durably complete."""
    pass


class AccountNotReadyError(TwoStepError):
    """The account did not finish initializing within the allowed time."""
    pass
