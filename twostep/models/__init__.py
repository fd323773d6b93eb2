"""Database models for account keychain storage."""

from .base import Base
from .keychain_entry import KeychainEntry

__all__ = [
    "Base",
    "KeychainEntry",
]
