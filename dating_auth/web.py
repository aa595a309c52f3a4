"""
Flask integration for protected requests.

    app = Flask(__name__)
    init_app(app, session_manager)

    @app.route('/me')
    @login_required
    def me():
        return {'id': g.current_user.id}
"""

import logging
from functools import wraps

from flask import current_app, g, jsonify, request

from .errors import AuthError, InvalidAccessTokenError
from .session import SessionManager

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'dating_auth.sessions'


def error_response(error: str, message: str, status: int):
    payload = {"error": error, "message": message, "status": status}
    return jsonify(payload), status


def init_app(app, sessions: SessionManager):
    """Attach the session manager and the auth error envelope to ``app``"""
    app.extensions[EXTENSION_KEY] = sessions

    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        return error_response(err.code, err.message, err.status)

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        return response

    return app


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise InvalidAccessTokenError("Missing or invalid Authorization header")
    token = auth.split(" ", 1)[1].strip()
    if not token:
        raise InvalidAccessTokenError("Missing or invalid Authorization header")
    return token


def login_required(fn):
    """Reject the request unless it carries a valid, non-blacklisted access token"""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = bearer_token()
        sessions = current_app.extensions[EXTENSION_KEY]
        g.current_user = sessions.validate_access_token(token)
        g.access_token = token
        return fn(*args, **kwargs)

    return wrapper
