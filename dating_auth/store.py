"""
Key-value storage for session state.

The session manager only needs per-key operations with TTLs plus one
atomic get-and-delete, so any store offering those can stand in for Redis.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Optional

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from .errors import StoreUnavailableError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Minimal TTL key-value interface used by SessionManager."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    def ttl(self, key: str) -> int:
        """Remaining lifetime in seconds, -2 if missing, -1 if no expiry"""

    @abstractmethod
    def get_and_delete(self, key: str) -> Optional[str]:
        """Atomically read and remove ``key``. Only one caller gets the value."""


class RedisStore(KeyValueStore):
    """
    Redis-backed store. Connection and timeout failures are raised as
    StoreUnavailableError so callers can retry them as transient.
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str, socket_timeout: float = None) -> 'RedisStore':
        # decode_responses=True means all get/set values are plain strings
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
        )
        return cls(client)

    @contextmanager
    def _guard(self, operation: str, key: str):
        try:
            yield
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.error("Redis %s failed for %s: %s", operation, key.split(':', 1)[0], e)
            raise StoreUnavailableError() from e

    def get(self, key: str) -> Optional[str]:
        with self._guard('GET', key):
            return self.client.get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._guard('SET', key):
            self.client.set(key, value, ex=ttl_seconds)

    def delete(self, key: str) -> None:
        with self._guard('DEL', key):
            self.client.delete(key)

    def exists(self, key: str) -> bool:
        with self._guard('EXISTS', key):
            return bool(self.client.exists(key))

    def ttl(self, key: str) -> int:
        with self._guard('TTL', key):
            return self.client.ttl(key)

    def get_and_delete(self, key: str) -> Optional[str]:
        # MULTI/GET/DEL/EXEC runs as one unit on the server
        with self._guard('GETDEL', key):
            pipe = self.client.pipeline(transaction=True)
            pipe.get(key)
            pipe.delete(key)
            value, _ = pipe.execute()
            return value

    def ping(self) -> bool:
        """Health-check helper"""
        try:
            return bool(self.client.ping())
        except (RedisConnectionError, RedisTimeoutError):
            return False
