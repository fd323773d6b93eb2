"""
Notification Key Store - the account's push payload key.

Lifecycle:
- Unset until first access
- First access loads the key from the keychain, or generates 256 random
  bytes and persists them before anyone can see them
- Cached afterwards; the keychain is never read again by this store

There is exactly one store per account. It is passed by reference to the
code that needs the key; nothing is cached at process level.
"""
import json
import logging
import threading
from pathlib import Path
from typing import Optional, Union

from twostep.config import settings
from twostep.constants import NOTIFICATION_KEY_LENGTH, NOTIFICATION_KEYCHAIN_KEY
from twostep.crypto.errors import AccountNotReadyError
from twostep.crypto.notifications import NotificationKey
from twostep.crypto.primitives import generate_random_bytes
from twostep.crypto.srp import RandomBytes
from twostep.services.keychain_service import Keychain

logger = logging.getLogger(__name__)

_UNSET = object()


class NotificationKeyStore:
    """
    Generate-once, persist-forever notification key for one account.

    Concurrent first accesses are serialized: one caller loads or generates
    the key, the rest wait and receive the same cached object.
    """

    def __init__(
        self,
        keychain: Keychain,
        account_ready: Optional[threading.Event] = None,
        random_bytes: RandomBytes = generate_random_bytes,
        ready_timeout=_UNSET,
    ):
        """
        Args:
            keychain: The account's keychain
            account_ready: Set once the account finished initializing. If
                None, the account is treated as ready.
            random_bytes: Source of new key material (default: CSPRNG)
            ready_timeout: Seconds a strict read waits for account_ready;
                None waits forever. Defaults to settings.ACCOUNT_READY_TIMEOUT.
        """
        self.keychain = keychain
        self.account_ready = account_ready
        self._random_bytes = random_bytes
        self._ready_timeout = settings.ACCOUNT_READY_TIMEOUT if ready_timeout is _UNSET else ready_timeout
        self._key: Optional[NotificationKey] = None
        self._lock = threading.Lock()

    @property
    def cached_key(self) -> Optional[NotificationKey]:
        return self._key

    def get_key(self, strict: bool = True) -> NotificationKey:
        """
        Return the account's notification key, creating it on first use.

        Args:
            strict: If True, wait for the account to finish initializing
                before touching the keychain. If False, read immediately.

        Returns:
            The cached NotificationKey

        Raises:
            AccountNotReadyError: Strict mode timed out waiting for the account
            StorageFailureError: The keychain could not be read, or a new key
                could not be persisted
        """
        key = self._key
        if key is not None:
            return key

        if strict:
            self._wait_until_ready()

        with self._lock:
            if self._key is None:
                self._key = self._load_or_create()
            return self._key

    def _wait_until_ready(self) -> None:
        if self.account_ready is None:
            return
        if not self.account_ready.wait(timeout=self._ready_timeout):
            raise AccountNotReadyError(
                f"Account not ready after {self._ready_timeout} seconds"
            )

    def _load_or_create(self) -> NotificationKey:
        value = self.keychain.get(NOTIFICATION_KEYCHAIN_KEY)
        if value:
            key = NotificationKey(data=value)
            logger.info("Loaded notification key %s", key.id.hex())
            return key

        secret = self._random_bytes(NOTIFICATION_KEY_LENGTH)
        # Persist before caching. A failed write leaves the store unset.
        self.keychain.set(NOTIFICATION_KEYCHAIN_KEY, secret)
        key = NotificationKey(data=secret)
        logger.info("Generated notification key %s", key.id.hex())
        return key

    def export_key_file(self, base_path: Union[str, Path], strict: bool = True) -> Path:
        """
        Write the key where the notification service extension can read it.

        The file holds JSON {"id": base64, "data": base64}.

        Returns:
            Path of the written file
        """
        key = self.get_key(strict=strict)
        path = Path(base_path) / settings.NOTIFICATION_KEY_FILENAME
        path.write_text(json.dumps(key.to_dict()), encoding="utf-8")
        logger.info("Exported notification key %s to %s", key.id.hex(), path)
        return path


def load_key_file(path: Union[str, Path]) -> NotificationKey:
    """
    Read a key written by NotificationKeyStore.export_key_file.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is not a valid notification key
    """
    try:
        value = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid notification key file: {e}") from e
    return NotificationKey.from_dict(value)
