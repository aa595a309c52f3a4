from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from dating_auth.errors import StoreUnavailableError
from dating_auth.store import RedisStore


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def redis_store(client):
    return RedisStore(client)


def test_set_uses_expiry(redis_store, client):
    redis_store.set('refresh:abc', '{}', 60)

    client.set.assert_called_once_with('refresh:abc', '{}', ex=60)


def test_get_delete_exists_ttl(redis_store, client):
    client.get.return_value = 'value'
    client.exists.return_value = 1
    client.ttl.return_value = 42

    assert redis_store.get('k') == 'value'
    assert redis_store.exists('k') is True
    assert redis_store.ttl('k') == 42
    redis_store.delete('k')

    client.delete.assert_called_once_with('k')


def test_get_and_delete_runs_in_transaction(redis_store, client):
    pipe = client.pipeline.return_value
    pipe.execute.return_value = ['payload', 1]

    assert redis_store.get_and_delete('refresh:abc') == 'payload'

    client.pipeline.assert_called_once_with(transaction=True)
    pipe.get.assert_called_once_with('refresh:abc')
    pipe.delete.assert_called_once_with('refresh:abc')


def test_get_and_delete_missing_key(redis_store, client):
    client.pipeline.return_value.execute.return_value = [None, 0]

    assert redis_store.get_and_delete('refresh:gone') is None


@pytest.mark.parametrize('error', [RedisConnectionError('down'), RedisTimeoutError('slow')])
def test_transient_failures_are_wrapped(redis_store, client, error):
    client.get.side_effect = error

    with pytest.raises(StoreUnavailableError) as exc_info:
        redis_store.get('refresh:abc')

    assert exc_info.value.status == 503
    assert exc_info.value.__cause__ is error


def test_ping(redis_store, client):
    client.ping.return_value = True
    assert redis_store.ping() is True

    client.ping.side_effect = RedisConnectionError('down')
    assert redis_store.ping() is False


def test_from_url_decodes_responses():
    with patch('dating_auth.store.redis.Redis.from_url') as from_url:
        RedisStore.from_url('redis://localhost:6379/3', socket_timeout=2.0)

    from_url.assert_called_once_with(
        'redis://localhost:6379/3', decode_responses=True, socket_timeout=2.0
    )
