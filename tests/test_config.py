from datetime import timedelta

from dating_auth.config import (
    DevelopmentConfig,
    ProductionConfig,
    SecurityConfig,
    TestingConfig,
    get_config,
)


def test_defaults():
    config = SecurityConfig()

    assert config.access_token_seconds == 900
    assert config.refresh_token_seconds == 1209600
    assert config.JWT_ISSUER == 'my-app'
    assert config.LOGOUT_REQUIRES_SECRET is False


def test_profile_selection(monkeypatch):
    monkeypatch.delenv('APP_ENV', raising=False)

    assert isinstance(get_config(), ProductionConfig)
    assert isinstance(get_config('development'), DevelopmentConfig)
    assert isinstance(get_config('test'), TestingConfig)
    assert isinstance(get_config('unknown'), ProductionConfig)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv('JWT_ACCESS_SECRET', 'from-env')
    monkeypatch.setenv('JWT_ISSUER', 'dating-app')
    monkeypatch.setenv('JWT_ACCESS_EXPIRY_SECONDS', '300')
    monkeypatch.setenv('REFRESH_TOKEN_TTL_SECONDS', '86400')
    monkeypatch.setenv('REDIS_URL', 'redis://cache:6379/2')

    config = get_config('production')

    assert config.JWT_ACCESS_SECRET == 'from-env'
    assert config.JWT_ISSUER == 'dating-app'
    assert config.ACCESS_TOKEN_LIFETIME == timedelta(seconds=300)
    assert config.refresh_token_seconds == 86400
    assert config.REDIS_URL == 'redis://cache:6379/2'


def test_overrides_do_not_leak_between_instances(monkeypatch):
    monkeypatch.setenv('JWT_ACCESS_EXPIRY_SECONDS', '60')
    get_config('production')

    assert ProductionConfig().access_token_seconds == 900
