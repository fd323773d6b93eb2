"""
Shared test fixtures for two-step core tests.

Keychain database tests use in-memory SQLite shared across threads, so no
external database is needed.
"""
import threading
from typing import Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from twostep.crypto.derivations import (
    PBKDF2SecurePasswordDerivation,
    SHA512SecurePasswordDerivation,
    SRPPasswordDerivation,
)
from twostep.database import create_keychain_engine, get_session_factory, init_keychain_db
from twostep.services.keychain_service import InMemoryKeychain
from tests.utils.crypto_test_utils import DeterministicRandom
from tests.utils.srp_reference import RFC5054_G, RFC5054_N

TEST_SALT1 = bytes.fromhex("4a6f1c2e9b8d7a60")
TEST_SALT2 = bytes.fromhex("f00dfacecafebeef0123456789abcdef")
TEST_SECURE_SALT = bytes.fromhex("5ec0de5a17")


@pytest.fixture
def srp_derivation() -> SRPPasswordDerivation:
    """Server-offered SRP descriptor over the RFC 5054 2048-bit group."""
    return SRPPasswordDerivation(salt1=TEST_SALT1, salt2=TEST_SALT2, g=RFC5054_G, p=RFC5054_N)


@pytest.fixture
def sha512_secure_derivation() -> SHA512SecurePasswordDerivation:
    return SHA512SecurePasswordDerivation(salt=TEST_SECURE_SALT)


@pytest.fixture
def pbkdf2_secure_derivation() -> PBKDF2SecurePasswordDerivation:
    return PBKDF2SecurePasswordDerivation(salt=TEST_SECURE_SALT)


@pytest.fixture
def deterministic_random() -> DeterministicRandom:
    return DeterministicRandom()


@pytest.fixture
def keychain() -> InMemoryKeychain:
    return InMemoryKeychain()


@pytest.fixture
def account_ready() -> threading.Event:
    event = threading.Event()
    event.set()
    return event


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """In-memory keychain database with tables created."""
    engine = create_keychain_engine("sqlite://")
    init_keychain_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> sessionmaker:
    return get_session_factory(db_engine)


@pytest.fixture
def uninitialized_session_factory() -> Generator[sessionmaker, None, None]:
    """Session factory for a keychain database whose tables were never created."""
    engine = create_keychain_engine("sqlite://")
    yield get_session_factory(engine)
    engine.dispose()
