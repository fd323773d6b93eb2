import os
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_ACCOUNT_READY_TIMEOUT = 30.0


class Settings(BaseSettings):
    PROJECT_NAME: str = "Two-Step Core"

    # Environment mode
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "")

    # Keychain database (DatabaseKeychain)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./twostep.db")

    # Seconds a strict notification key read waits for the account to finish
    # initializing. None or a non-positive value waits forever.
    ACCOUNT_READY_TIMEOUT: Optional[float] = DEFAULT_ACCOUNT_READY_TIMEOUT

    # File name of the exported notification key, read by the notification
    # service extension.
    NOTIFICATION_KEY_FILENAME: str = os.getenv("NOTIFICATION_KEY_FILENAME", "notificationsKey")

    @field_validator("ACCOUNT_READY_TIMEOUT", mode="before")
    @classmethod
    def validate_account_ready_timeout(cls, v):
        if v == "" or v is None:
            return DEFAULT_ACCOUNT_READY_TIMEOUT
        v = float(v)
        if v <= 0:
            return None
        return v

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
