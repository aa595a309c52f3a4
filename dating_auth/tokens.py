"""
JWT Access Token Management
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt

from .config import SecurityConfig
from .errors import InvalidAccessTokenError

logger = logging.getLogger(__name__)


class AccessTokenSigner:
    """Signs and verifies short-lived access tokens (HS256 by default)"""

    def __init__(self, config: SecurityConfig):
        self.secret_key = config.JWT_ACCESS_SECRET
        self.algorithm = config.JWT_ALGORITHM
        self.issuer = config.JWT_ISSUER
        self.lifetime = config.ACCESS_TOKEN_LIFETIME

    def sign(self, user_id: str, email: str, role: str) -> str:
        """
        Short-lived JWT for API access carrying the caller's identity.
        """
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_id),
            'email': email,
            'role': role,
            'iss': self.issuer,
            'iat': now,
            'exp': now + self.lifetime,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """Verify signature, expiry and issuer; return the claims"""
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={'require': ['sub', 'exp', 'iss']},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidAccessTokenError('Access token expired')
        except jwt.InvalidTokenError as e:
            logger.debug("Access token rejected: %s", e)
            raise InvalidAccessTokenError()

    @staticmethod
    def read_expiry(token: str) -> Optional[int]:
        """
        Return the ``exp`` claim without checking the signature, or None
        when the token cannot be decoded or carries no usable expiry.
        """
        try:
            claims = jwt.decode(token, options={'verify_signature': False})
        except jwt.PyJWTError:
            return None
        exp = claims.get('exp')
        if isinstance(exp, (int, float)) and not isinstance(exp, bool):
            return int(exp)
        return None
