"""
User Directory

Looks up identities and verifies credentials. The session manager only
ever calls find_user_by_id; password checks happen here, before a session
is issued, so plaintext passwords never reach the session layer.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession

from .crypto import SecretHasher
from .errors import EmailAlreadyRegisteredError
from .models import User, UserRole

logger = logging.getLogger(__name__)


class UserDirectory:
    """SQLAlchemy-backed user lookup"""

    def __init__(self, db: DBSession, hasher: SecretHasher):
        self.db = db
        self.hasher = hasher

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.get(User, str(user_id))

    def find_user_by_email(self, email: str) -> Optional[User]:
        email = email.lower().strip()
        return self.db.query(User).filter(User.email == email).first()

    def verify_credentials(self, email: str, password: str) -> Optional[User]:
        """Return the user when the password matches, otherwise None"""
        user = self.find_user_by_email(email)
        if not user:
            return None
        if not self.hasher.verify(user.password_hash, password):
            return None
        return user

    def create_user(self, email: str, password: str, role: UserRole = UserRole.USER) -> User:
        """
        Create a user with an Argon2id password hash.

        Raises:
            EmailAlreadyRegisteredError: email is taken
        """
        email = email.lower().strip()
        if self.find_user_by_email(email):
            raise EmailAlreadyRegisteredError()

        user = User(
            email=email,
            password_hash=self.hasher.hash(password),
            role=role,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            self.db.rollback()
            raise EmailAlreadyRegisteredError()

        logger.info("User %s registered", user.id)
        return user
