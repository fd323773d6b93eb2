from .keychain_service import (
    Keychain,
    InMemoryKeychain,
    DatabaseKeychain,
    ExclusiveKeychain,
    ExclusiveKeychainRegistry,
)
from .notification_key_store import NotificationKeyStore, load_key_file
from .notification_service import NotificationService
from .password_service import PasswordService, PasswordServiceError, NoPasswordSetError

__all__ = [
    "Keychain",
    "InMemoryKeychain",
    "DatabaseKeychain",
    "ExclusiveKeychain",
    "ExclusiveKeychainRegistry",
    "NotificationKeyStore",
    "load_key_file",
    "NotificationService",
    "PasswordService",
    "PasswordServiceError",
    "NoPasswordSetError",
]
