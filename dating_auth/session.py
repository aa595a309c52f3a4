"""
Session/Token Lifecycle Management

Issues, rotates, validates and revokes the credentials of a user:
- Opaque refresh tokens "<refreshId>.<secret>", secret stored only as an
  Argon2id hash
- One active refresh chain per user, rotated on every use
- Stateless access tokens, revocable before expiry through a blacklist

All state lives in the key-value store:
    refresh:<refreshId>        JSON {"userId", "hash"}   refresh lifetime
    refresh_token:<userId>     opaque refresh token       refresh lifetime
    blacklist:<accessToken>    "true"                     remaining access life
"""

import json
import logging
import time
from typing import Any, Dict, NamedTuple, Optional, Tuple

from .config import SecurityConfig
from .crypto import SecretHasher, generate_token
from .errors import (
    InvalidSecretError,
    InvalidStructureError,
    NotFoundOrRevokedError,
    NotLoggedInError,
    TokenMismatchError,
    TokenRevokedError,
    UserNotFoundError,
)
from .store import KeyValueStore
from .tokens import AccessTokenSigner

logger = logging.getLogger(__name__)

REFRESH_KEY = 'refresh:{}'
USER_REFRESH_KEY = 'refresh_token:{}'
BLACKLIST_KEY = 'blacklist:{}'


class AuthenticatedUser(NamedTuple):
    id: str
    email: Optional[str]
    role: Optional[str]
    claims: Dict[str, Any]


def split_refresh_token(refresh_token: str) -> Tuple[str, str]:
    """Split "<refreshId>.<secret>", rejecting anything else"""
    if not refresh_token or not isinstance(refresh_token, str):
        raise InvalidStructureError()
    parts = refresh_token.split('.')
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidStructureError()
    return parts[0], parts[1]


class SessionManager:
    """
    Manages the access/refresh credential lifecycle of user identities.

    Args:
        store: key-value store holding all session state
        signer: access token signer
        directory: user directory used to re-materialize claims on refresh
        config: security configuration
        hasher: secret hasher; built from ``config`` when omitted
    """

    def __init__(
        self,
        store: KeyValueStore,
        signer: AccessTokenSigner,
        directory,
        config: SecurityConfig,
        hasher: Optional[SecretHasher] = None,
    ):
        self.store = store
        self.signer = signer
        self.directory = directory
        self.config = config
        self.hasher = hasher or SecretHasher(config)

    # ==================== ISSUE ====================

    def issue(self, user) -> Dict[str, Any]:
        """
        Create a fresh session for ``user`` (login or registration).

        Any refresh token the user already holds stops being valid: only
        one refresh chain per user is active at a time.

        Returns:
            dict with access_token, refresh_token, token_type, expires_in
        """
        user_id = str(user.id)
        user_key = USER_REFRESH_KEY.format(user_id)

        if self.store.get(user_key) is not None:
            self.store.delete(user_key)
            logger.info("Superseding existing session for user %s", user_id)

        access_token = self.signer.sign(user_id, user.email, self._role_of(user))
        refresh_token = self._create_refresh_token(user_id)

        return {
            'access_token': access_token,
            'refresh_token': refresh_token,
            'token_type': 'bearer',
            'expires_in': self.config.access_token_seconds,
        }

    def _create_refresh_token(self, user_id: str) -> str:
        refresh_id = generate_token(self.config.REFRESH_ID_BYTES)
        secret = generate_token(self.config.REFRESH_SECRET_BYTES)
        combined = f"{refresh_id}.{secret}"
        ttl = self.config.refresh_token_seconds

        record = json.dumps({'userId': user_id, 'hash': self.hasher.hash(secret)})
        self.store.set(REFRESH_KEY.format(refresh_id), record, ttl)
        self.store.set(USER_REFRESH_KEY.format(user_id), combined, ttl)
        return combined

    def _role_of(self, user) -> str:
        role = getattr(user, 'role', None)
        if role is None:
            return self.config.DEFAULT_ROLE
        # Enum roles are stored by value
        return getattr(role, 'value', role)

    # ==================== REFRESH ====================

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        """
        Exchange a refresh token for a new token pair (rotation on use).

        Raises:
            InvalidStructureError: token is not "<refreshId>.<secret>"
            NotFoundOrRevokedError: unknown, expired, rotated or concurrently consumed id
            InvalidSecretError: secret does not match; the record is burned
            TokenMismatchError: valid secret but not the user's active chain
            UserNotFoundError: the owning user no longer exists
        """
        refresh_id, secret = split_refresh_token(refresh_token)
        key = REFRESH_KEY.format(refresh_id)

        user_id, hashed = self._load_record(key, NotFoundOrRevokedError)

        if not self.hasher.verify(hashed, secret):
            # Possible theft of the id half - revoke that chain immediately
            self.store.delete(key)
            logger.warning("Refresh secret mismatch for id %s; record revoked", refresh_id)
            raise InvalidSecretError()

        user_key = USER_REFRESH_KEY.format(user_id)
        if self.store.get(user_key) != refresh_token:
            # Superseded token can never become active again
            self.store.delete(key)
            logger.warning("Superseded refresh token reused for user %s", user_id)
            raise TokenMismatchError()

        if self.store.get_and_delete(key) is None:
            logger.warning("Concurrent refresh lost the race for id %s", refresh_id)
            raise NotFoundOrRevokedError()
        self.store.delete(user_key)

        user = self.directory.find_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        return self.issue(user)

    def _load_record(self, key: str, missing_error) -> Tuple[str, str]:
        raw = self.store.get(key)
        if raw is None:
            raise missing_error()
        try:
            parsed = json.loads(raw)
            return str(parsed['userId']), parsed['hash']
        except (ValueError, KeyError, TypeError):
            # Unreadable record cannot back a session
            self.store.delete(key)
            logger.error("Corrupt refresh record at %s removed", key)
            raise missing_error()

    # ==================== LOGOUT ====================

    def logout(self, refresh_token: str, access_token: Optional[str] = None) -> None:
        """
        Revoke the refresh chain and, optionally, blacklist the access token.

        Only the refresh id has to exist; the secret is checked when
        LOGOUT_REQUIRES_SECRET is set. An access token that cannot be
        decoded is ignored, the refresh chain is still revoked.
        """
        refresh_id, secret = split_refresh_token(refresh_token)
        key = REFRESH_KEY.format(refresh_id)

        user_id, hashed = self._load_record(key, NotLoggedInError)

        if self.config.LOGOUT_REQUIRES_SECRET and not self.hasher.verify(hashed, secret):
            logger.warning("Logout with wrong secret for id %s rejected", refresh_id)
            raise InvalidSecretError()

        self.store.delete(key)
        self.store.delete(USER_REFRESH_KEY.format(user_id))
        logger.info("User %s logged out", user_id)

        if access_token:
            self.blacklist(access_token)

    def blacklist(self, access_token: str) -> bool:
        """
        Deny ``access_token`` for the rest of its natural lifetime.
        Returns False when the token has no readable expiry or already expired.
        """
        exp = self.signer.read_expiry(access_token)
        if exp is None:
            logger.debug("Access token not blacklisted: expiry unreadable")
            return False

        ttl = exp - int(time.time())
        if ttl <= 0:
            return False

        self.store.set(BLACKLIST_KEY.format(access_token), 'true', ttl)
        return True

    def revoke_all(self, user_id) -> bool:
        """Panic Button / Password Reset / Account deactivation"""
        user_key = USER_REFRESH_KEY.format(user_id)
        current = self.store.get(user_key)
        if current is None:
            return False

        refresh_id = current.split('.', 1)[0]
        self.store.delete(REFRESH_KEY.format(refresh_id))
        self.store.delete(user_key)
        logger.info("All sessions revoked for user %s", user_id)
        return True

    # ==================== VALIDATE ====================

    def validate_access_token(self, access_token: str) -> AuthenticatedUser:
        """
        Authorize a request bearing ``access_token``.

        Revocation is blacklist-based: a correctly signed, unexpired token is
        accepted unless it was explicitly blacklisted.
        """
        if self.store.exists(BLACKLIST_KEY.format(access_token)):
            raise TokenRevokedError()

        claims = self.signer.verify(access_token)
        return AuthenticatedUser(
            id=claims['sub'],
            email=claims.get('email'),
            role=claims.get('role'),
            claims=claims,
        )
