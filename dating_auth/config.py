"""
Configuration Module for the Dating Platform Session/Token Manager

All tunable security parameters live here with documented defaults.
Environment variables are read only by get_config(); everything else
receives a config object through its constructor.
"""

import os
from datetime import timedelta
from typing import Optional


class SecurityConfig:
    """
    Central configuration for token issuance, rotation and revocation.
    """

    # ==================== ACCESS TOKENS ====================

    # CRITICAL: override via JWT_ACCESS_SECRET in every real deployment
    JWT_ACCESS_SECRET = 'dev_secret'
    JWT_ALGORITHM = 'HS256'
    JWT_ISSUER = 'my-app'

    # Short-lived, stateless; revocable only through the blacklist
    ACCESS_TOKEN_LIFETIME = timedelta(seconds=900)

    # ==================== REFRESH TOKENS ====================

    # Opaque refresh token lifetime (both store entries share it)
    REFRESH_TOKEN_LIFETIME = timedelta(seconds=1209600)

    # Entropy of the two halves of "<refreshId>.<secret>"
    REFRESH_ID_BYTES = 16
    REFRESH_SECRET_BYTES = 32

    # Logout only checks that the refresh id exists unless this is set
    LOGOUT_REQUIRES_SECRET = False

    # ==================== HASHING ====================

    # Argon2id parameters for refresh secrets and passwords
    ARGON2_TIME_COST = 3
    ARGON2_MEMORY_COST = 65536  # 64 MB
    ARGON2_PARALLELISM = 4
    ARGON2_HASH_LENGTH = 32
    ARGON2_SALT_LENGTH = 16

    # Upper bound on hash operations running at once in this process
    HASH_MAX_CONCURRENCY = 4

    # ==================== STORAGE ====================

    REDIS_URL = 'redis://localhost:6379/0'
    REDIS_SOCKET_TIMEOUT = 5.0
    DATABASE_URL = 'sqlite:///dating_auth.db'

    # ==================== ROLES ====================

    DEFAULT_ROLE = 'user'

    @property
    def access_token_seconds(self) -> int:
        return int(self.ACCESS_TOKEN_LIFETIME.total_seconds())

    @property
    def refresh_token_seconds(self) -> int:
        return int(self.REFRESH_TOKEN_LIFETIME.total_seconds())


class DevelopmentConfig(SecurityConfig):
    """Development configuration - local Redis, verbose defaults"""
    REDIS_URL = 'redis://localhost:6379/1'


class TestingConfig(SecurityConfig):
    """Testing configuration - cheap hashing so suites stay fast"""
    JWT_ACCESS_SECRET = 'test-secret-key-with-enough-length-for-hs256'
    ARGON2_TIME_COST = 1
    ARGON2_MEMORY_COST = 1024
    ARGON2_PARALLELISM = 1
    DATABASE_URL = 'sqlite:///:memory:'


class ProductionConfig(SecurityConfig):
    """Production configuration - maximum security"""
    HASH_MAX_CONCURRENCY = 8


_PROFILES = {
    'development': DevelopmentConfig,
    'dev': DevelopmentConfig,
    'testing': TestingConfig,
    'test': TestingConfig,
    'production': ProductionConfig,
    'prod': ProductionConfig,
}


def get_config(env: Optional[str] = None) -> SecurityConfig:
    """
    Returns the configuration profile for ``env`` (or APP_ENV), with
    environment overrides applied. Defaults to production for safety.
    """
    name = (env or os.getenv('APP_ENV', 'production')).lower()
    config = _PROFILES.get(name, ProductionConfig)()

    secret = os.getenv('JWT_ACCESS_SECRET')
    if secret:
        config.JWT_ACCESS_SECRET = secret

    issuer = os.getenv('JWT_ISSUER')
    if issuer:
        config.JWT_ISSUER = issuer

    access_seconds = os.getenv('JWT_ACCESS_EXPIRY_SECONDS')
    if access_seconds:
        config.ACCESS_TOKEN_LIFETIME = timedelta(seconds=int(access_seconds))

    refresh_seconds = os.getenv('REFRESH_TOKEN_TTL_SECONDS')
    if refresh_seconds:
        config.REFRESH_TOKEN_LIFETIME = timedelta(seconds=int(refresh_seconds))

    config.REDIS_URL = os.getenv('REDIS_URL', config.REDIS_URL)
    config.DATABASE_URL = os.getenv('DATABASE_URL', config.DATABASE_URL)

    return config
