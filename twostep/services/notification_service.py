"""
Notification Service - decrypts push payloads for one account.
"""
import logging
from typing import Optional

from twostep.crypto.errors import TwoStepError
from twostep.crypto.notifications import decrypt_notification_payload
from twostep.services.notification_key_store import NotificationKeyStore

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Decrypt payloads delivered by the push transport.

    Key access is lenient: a payload can arrive before the account has
    finished initializing, and decryption must not block on it.
    """

    def __init__(self, key_store: NotificationKeyStore):
        self.key_store = key_store

    def decrypt(self, payload: bytes) -> Optional[bytes]:
        """
        Returns:
            Plaintext, or None if the payload is undecryptable or no key
            could be obtained
        """
        try:
            key = self.key_store.get_key(strict=False)
        except TwoStepError as e:
            logger.error("Notification key unavailable: %s", e)
            return None
        return decrypt_notification_payload(key, payload)
