"""
Session and token lifecycle for the dating platform backend.
"""

from .auth import AuthService
from .config import SecurityConfig, get_config
from .crypto import SecretHasher
from .directory import UserDirectory
from .session import AuthenticatedUser, SessionManager
from .store import KeyValueStore, RedisStore
from .tokens import AccessTokenSigner


def create_session_manager(config: SecurityConfig, directory, store: KeyValueStore = None) -> SessionManager:
    """Wire a SessionManager from configuration, using Redis unless a store is given"""
    if store is None:
        store = RedisStore.from_url(config.REDIS_URL, socket_timeout=config.REDIS_SOCKET_TIMEOUT)
    return SessionManager(
        store=store,
        signer=AccessTokenSigner(config),
        directory=directory,
        config=config,
        hasher=getattr(directory, 'hasher', None),
    )


__all__ = [
    'AccessTokenSigner',
    'AuthService',
    'AuthenticatedUser',
    'KeyValueStore',
    'RedisStore',
    'SecretHasher',
    'SecurityConfig',
    'SessionManager',
    'UserDirectory',
    'create_session_manager',
    'get_config',
]
