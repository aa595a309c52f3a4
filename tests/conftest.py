import math
import threading
import time
from types import SimpleNamespace

import pytest
from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from dating_auth.config import TestingConfig
from dating_auth.crypto import SecretHasher
from dating_auth.directory import UserDirectory
from dating_auth.models import Base
from dating_auth.session import SessionManager
from dating_auth.store import KeyValueStore
from dating_auth.tokens import AccessTokenSigner

# Initialize Faker for generating test data
fake = Faker()


class MemoryStore(KeyValueStore):
    """In-process TTL store with the same semantics SessionManager expects from Redis"""

    def __init__(self):
        self._data = {}
        self._lock = threading.Lock()

    def _live(self, key):
        item = self._data.get(key)
        if item is None:
            return None
        value, expires = item
        if expires is not None and expires <= time.monotonic():
            del self._data[key]
            return None
        return item

    def get(self, key):
        with self._lock:
            item = self._live(key)
            return item[0] if item else None

    def set(self, key, value, ttl_seconds):
        with self._lock:
            self._data[key] = (value, time.monotonic() + ttl_seconds)

    def delete(self, key):
        with self._lock:
            self._data.pop(key, None)

    def exists(self, key):
        with self._lock:
            return self._live(key) is not None

    def ttl(self, key):
        with self._lock:
            item = self._live(key)
            if item is None:
                return -2
            if item[1] is None:
                return -1
            return math.ceil(item[1] - time.monotonic())

    def get_and_delete(self, key):
        with self._lock:
            item = self._live(key)
            if item is None:
                return None
            del self._data[key]
            return item[0]

    def keys(self, prefix=""):
        with self._lock:
            return [k for k in list(self._data) if k.startswith(prefix) and self._live(k)]


class FakeDirectory:
    """Dict-backed user directory"""

    def __init__(self):
        self.users = {}

    def add(self, user):
        self.users[str(user.id)] = user
        return user

    def find_user_by_id(self, user_id):
        return self.users.get(str(user_id))


def make_user(**overrides):
    base = {
        'id': fake.uuid4(),
        'email': fake.email(),
        'role': 'user',
    }
    base.update(overrides)
    return SimpleNamespace(**base)


@pytest.fixture
def config():
    return TestingConfig()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def hasher(config):
    return SecretHasher(config)


@pytest.fixture
def signer(config):
    return AccessTokenSigner(config)


@pytest.fixture
def directory():
    return FakeDirectory()


@pytest.fixture
def user(directory):
    return directory.add(make_user())


@pytest.fixture
def user_factory(directory):
    def _create(**overrides):
        return directory.add(make_user(**overrides))
    return _create


@pytest.fixture
def sessions(store, signer, directory, config, hasher):
    return SessionManager(store, signer, directory, config, hasher)


@pytest.fixture
def db_session():
    """SQLite in-memory session with all tables created"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def user_directory(db_session, hasher):
    return UserDirectory(db_session, hasher)
