"""
Authentication error taxonomy.

Every failure the session manager reports is an AuthError carrying a
machine-readable code and the HTTP status the web layer should use.
"""


class AuthError(Exception):
    code = 'UNAUTHORIZED'
    status = 401
    default_message = 'Unauthorized'

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidStructureError(AuthError):
    code = 'INVALID_STRUCTURE'
    default_message = 'Invalid refresh token structure'


class NotFoundOrRevokedError(AuthError):
    code = 'NOT_FOUND_OR_REVOKED'
    default_message = 'Refresh token not found or revoked'


class NotLoggedInError(NotFoundOrRevokedError):
    code = 'NOT_LOGGED_IN_OR_INVALID'
    default_message = 'User is not logged in or token is invalid'


class InvalidSecretError(AuthError):
    code = 'INVALID_SECRET'
    default_message = 'Invalid refresh token'


class TokenMismatchError(AuthError):
    code = 'MISMATCH'
    default_message = 'Refresh token mismatch'


class UserNotFoundError(AuthError):
    code = 'USER_NOT_FOUND'
    default_message = 'User not found'


class TokenRevokedError(AuthError):
    code = 'REVOKED'
    default_message = 'Token has been revoked'


class InvalidAccessTokenError(AuthError):
    code = 'INVALID_ACCESS_TOKEN'
    default_message = 'Invalid access token'


class InvalidCredentialsError(AuthError):
    code = 'INVALID_CREDENTIALS'
    default_message = 'Invalid email or password'


class EmailAlreadyRegisteredError(AuthError):
    code = 'EMAIL_TAKEN'
    status = 409
    default_message = 'User with this email already exists'


class StoreUnavailableError(AuthError):
    """Transient key-value store failure. Never proof of token invalidity."""
    code = 'STORE_UNAVAILABLE'
    status = 503
    default_message = 'Session store unavailable'
