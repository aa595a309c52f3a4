"""
Authentication Module
Registration and login entry points that end in a fresh session.
"""

import logging
from typing import Any, Dict

from .directory import UserDirectory
from .errors import InvalidCredentialsError
from .models import UserRole
from .session import SessionManager

logger = logging.getLogger(__name__)


class AuthService:
    """Ties credential checks in the directory to session issuance"""

    def __init__(self, directory: UserDirectory, sessions: SessionManager):
        self.directory = directory
        self.sessions = sessions

    def register_user(
        self,
        email: str,
        password: str,
        role: UserRole = UserRole.USER
    ) -> Dict[str, Any]:
        """
        Register new user and log them in.

        Raises:
            EmailAlreadyRegisteredError: email is taken
        """
        user = self.directory.create_user(email, password, role)
        return self.sessions.issue(user)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Verify credentials and issue a session, superseding any previous one.
        """
        user = self.directory.verify_credentials(email, password)
        if not user:
            # Same error for unknown email and wrong password
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()
        return self.sessions.issue(user)

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        return self.sessions.refresh(refresh_token)

    def logout(self, refresh_token: str, access_token: str = None) -> None:
        self.sessions.logout(refresh_token, access_token)
