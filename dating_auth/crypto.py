import logging
import secrets
import threading

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from .config import SecurityConfig

logger = logging.getLogger(__name__)


def generate_token(length_bytes: int = 32) -> str:
    """Generates cryptographically secure URL-safe token"""
    return secrets.token_urlsafe(length_bytes)


class SecretHasher:
    """
    Argon2id hashing for refresh-token secrets and passwords.

    Hashing is deliberately slow, so the number of hash operations running
    at once is capped by a semaphore shared by every caller of this instance.
    """

    def __init__(self, config: SecurityConfig):
        self.ph = PasswordHasher(
            time_cost=config.ARGON2_TIME_COST,
            memory_cost=config.ARGON2_MEMORY_COST,
            parallelism=config.ARGON2_PARALLELISM,
            hash_len=config.ARGON2_HASH_LENGTH,
            salt_len=config.ARGON2_SALT_LENGTH,
        )
        self._slots = threading.BoundedSemaphore(config.HASH_MAX_CONCURRENCY)

    def hash(self, secret: str) -> str:
        with self._slots:
            return self.ph.hash(secret)

    def verify(self, hashed: str, secret: str) -> bool:
        with self._slots:
            try:
                return self.ph.verify(hashed, secret)
            except VerifyMismatchError:
                return False
            except (VerificationError, InvalidHashError):
                logger.warning("Stored hash could not be verified")
                return False
