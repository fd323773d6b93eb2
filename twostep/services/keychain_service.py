"""
Keychain Service - per-account secret storage.

A keychain maps logical key names to raw secret bytes for one account.
`set` either durably stores the value before returning or raises
StorageFailureError; callers rely on this to never hand out a secret that
was not saved.

ExclusiveKeychainRegistry hands out per-account handles where only the most
recently issued handle may touch storage, so an account torn down and
reopened cannot be written by code still holding the old handle.
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from twostep.crypto.errors import StorageFailureError
from twostep.models.keychain_entry import KeychainEntry

logger = logging.getLogger(__name__)


class Keychain(ABC):
    """Read/write contract for account secrets."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or None if absent.

        Raises:
            StorageFailureError: If the store could not be read
        """

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Durably store value.

        Raises:
            StorageFailureError: If the value was not persisted
        """

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the value if present."""


class InMemoryKeychain(Keychain):
    """Process-local keychain for tests and ephemeral accounts."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._values: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._values[key] = bytes(value)

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)


class DatabaseKeychain(Keychain):
    """
    Keychain backed by the keychain_entries table.

    Each call runs in its own session; `set` commits before returning.
    """

    def __init__(self, session_factory: sessionmaker, account_id: str):
        self.session_factory = session_factory
        self.account_id = account_id

    def _select(self, key: str):
        return select(KeychainEntry).where(
            KeychainEntry.account_id == self.account_id,
            KeychainEntry.key == key,
        )

    def get(self, key: str) -> Optional[bytes]:
        with self.session_factory() as session:
            try:
                entry = session.execute(self._select(key)).scalar_one_or_none()
            except SQLAlchemyError as e:
                logger.error("Failed to read keychain entry %s for account %s", key, self.account_id)
                raise StorageFailureError(f"Failed to read keychain entry {key}: {e}") from e
            return entry.value if entry else None

    def set(self, key: str, value: bytes) -> None:
        with self.session_factory() as session:
            try:
                entry = session.execute(self._select(key)).scalar_one_or_none()
                if entry:
                    entry.value = bytes(value)
                else:
                    session.add(KeychainEntry(account_id=self.account_id, key=key, value=bytes(value)))
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("Failed to store keychain entry %s for account %s", key, self.account_id)
                raise StorageFailureError(f"Failed to store keychain entry {key}: {e}") from e

    def remove(self, key: str) -> None:
        with self.session_factory() as session:
            try:
                entry = session.execute(self._select(key)).scalar_one_or_none()
                if entry:
                    session.delete(entry)
                    session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("Failed to remove keychain entry %s for account %s", key, self.account_id)
                raise StorageFailureError(f"Failed to remove keychain entry {key}: {e}") from e


class ExclusiveKeychain(Keychain):
    """Handle that only works while it is the account's current handle."""

    def __init__(self, registry: "ExclusiveKeychainRegistry", account_id: str, generation: int, keychain: Keychain):
        self._registry = registry
        self.account_id = account_id
        self.generation = generation
        self._keychain = keychain

    @property
    def is_current(self) -> bool:
        return self._registry.current_generation(self.account_id) == self.generation

    def get(self, key: str) -> Optional[bytes]:
        if not self.is_current:
            logger.warning("Couldn't get %s for account %s: keychain handle not current", key, self.account_id)
            return None
        return self._keychain.get(key)

    def set(self, key: str, value: bytes) -> None:
        if not self.is_current:
            logger.warning("Couldn't set %s for account %s: keychain handle not current", key, self.account_id)
            raise StorageFailureError(f"Keychain handle for account {self.account_id} is not current")
        self._keychain.set(key, value)

    def remove(self, key: str) -> None:
        if not self.is_current:
            logger.warning("Couldn't remove %s for account %s: keychain handle not current", key, self.account_id)
            return
        self._keychain.remove(key)


class ExclusiveKeychainRegistry:
    """Tracks the current keychain handle generation for each account."""

    def __init__(self):
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    def make_exclusive(self, account_id: str, keychain: Keychain) -> ExclusiveKeychain:
        """
        Issue a new handle for an account, invalidating any previous one.

        The first handle for an account has generation 0.
        """
        with self._lock:
            generation = self._generations.get(account_id, -1) + 1
            self._generations[account_id] = generation
        return ExclusiveKeychain(self, account_id, generation, keychain)

    def current_generation(self, account_id: str) -> Optional[int]:
        with self._lock:
            return self._generations.get(account_id)
