"""
Keychain entry model.

Security Note:
- Values are raw secret bytes (e.g. the 256-byte notification key)
- One row per (account, key); writes replace the value in place
- Derived values such as key ids are never stored here
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, LargeBinary, String, UniqueConstraint

from .base import Base


class KeychainEntry(Base):
    """Per-account secret value addressed by a logical key name."""

    __tablename__ = "keychain_entries"
    __table_args__ = (
        UniqueConstraint("account_id", "key", name="uq_keychain_account_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String, nullable=False, index=True)
    key = Column(String, nullable=False)  # e.g. "master-notification-secret"
    value = Column(LargeBinary, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<KeychainEntry account_id={self.account_id} key={self.key}>"
