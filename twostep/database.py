from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from twostep.config import settings
from twostep.models import Base


def create_keychain_engine(url: Optional[str] = None) -> Engine:
    """Create an engine for the keychain database.

    In-memory SQLite URLs share one connection across threads so every
    session sees the same database.
    """
    url = url or settings.DATABASE_URL
    kwargs = {"echo": settings.DEBUG}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def init_keychain_db(engine: Engine) -> None:
    """Create keychain tables if they do not exist."""
    Base.metadata.create_all(engine)


def get_session_factory(engine: Engine) -> sessionmaker:
    """Session factory for DatabaseKeychain."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def check_db_health(engine: Engine) -> bool:
    """Verify database connectivity."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
