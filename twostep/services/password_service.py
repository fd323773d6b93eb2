"""
Password Service - builds two-step verification requests.

Security Note:
- Passwords never leave this module; only SRP values and verifiers do
- Requests are returned to the caller, which owns the transport
- No retries: a rejected proof means the caller fetches a fresh
  configuration (new challenge) and tries again
"""
import logging
from typing import Tuple

from twostep.crypto.derivations import SecurePasswordDerivation
from twostep.crypto.secure_values import derive_secure, update_secure_derivation
from twostep.crypto.srp import derive_updated_verifier, prove_knowledge
from twostep.schemas.password import (
    CheckPasswordSRPRequest,
    PasswordConfiguration,
    PasswordInputSettings,
    PasswordKdfAlgo,
    SecurePasswordKdfAlgo,
)

logger = logging.getLogger(__name__)


class PasswordServiceError(Exception):
    """Base exception for password service errors."""
    pass


class NoPasswordSetError(PasswordServiceError):
    """The account has no password, or the server sent no SRP challenge."""
    pass


class PasswordService:
    """Turns a password configuration plus a password into wire requests."""

    @staticmethod
    def check_password_request(config: PasswordConfiguration, password: str) -> CheckPasswordSRPRequest:
        """
        Build the login proof for the account's current password.

        Args:
            config: Freshly fetched password configuration
            password: Password entered by the user

        Returns:
            CheckPasswordSRPRequest with srp_id, A and M1

        Raises:
            NoPasswordSetError: If there is no current password or challenge
            UnknownAlgorithmError: If the current KDF is not supported
            SafetyCheckError: If the server's SRP values are unsafe
        """
        derivation = config.current_derivation()
        challenge = config.srp_challenge()
        if derivation is None or challenge is None:
            raise NoPasswordSetError("Account has no password or no SRP challenge")

        proof = prove_knowledge(password, derivation, challenge)
        logger.debug("Built SRP proof for session %s", proof.session_id)
        return CheckPasswordSRPRequest.from_proof(proof)

    @staticmethod
    def new_password_settings(
        config: PasswordConfiguration,
        new_password: str,
        hint: str = "",
    ) -> PasswordInputSettings:
        """
        Build the registration payload for a new or changed password.

        The returned new_algo carries the rotated salt1; the caller stores it
        once the server accepts the change. If the account has secure values,
        the payload also carries the rotated secure-value descriptor and the
        new secure-value hash.

        Raises:
            UnknownAlgorithmError: If an offered KDF is not supported
        """
        verifier, next_derivation = derive_updated_verifier(new_password, config.new_algo.to_derivation())
        secure_fields = {}
        if config.has_secure_values:
            secure_hash, next_secure = update_secure_derivation(new_password, config.new_secure_algo.to_derivation())
            secure_fields = {
                "new_secure_algo": SecurePasswordKdfAlgo.from_derivation(next_secure),
                "new_secure_password_hash": secure_hash.hex(),
            }

        return PasswordInputSettings(
            new_algo=PasswordKdfAlgo.from_derivation(next_derivation),
            new_password_hash=verifier.hex(),
            hint=hint,
            **secure_fields,
        )

    @staticmethod
    def new_secure_password_hash(
        config: PasswordConfiguration,
        password: str,
    ) -> Tuple[bytes, SecurePasswordDerivation]:
        """
        Hash the password for protecting secure values under the offered KDF.

        Returns:
            Tuple of (hash, next_derivation); the hash stays on the client

        Raises:
            UnknownAlgorithmError: If the offered KDF is not supported
        """
        return update_secure_derivation(password, config.new_secure_algo.to_derivation())

    @staticmethod
    def secure_password_hash(password: str, derivation: SecurePasswordDerivation) -> bytes:
        """Re-derive the secure-value hash for an existing registration."""
        return derive_secure(password, derivation)
