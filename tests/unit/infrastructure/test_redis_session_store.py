"""
Name: Redis Session Store Tests

Responsibilities:
  - JSON payload + TTL on SET
  - Corrupt payloads are dropped (session counts as missing)
  - Redis failures raise SessionStoreError (fail closed)

Notes:
  - redis.Redis is replaced by a Mock; no server required
"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock
from uuid import uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from backoffice.crosscutting.exceptions import SessionStoreError
from backoffice.domain.entities import SessionRecord, UserRole
from backoffice.identity.sessions import SessionManager
from backoffice.infrastructure.sessions import RedisSessionStore

pytestmark = pytest.mark.unit


def _record(hours: int = 24) -> SessionRecord:
    now = datetime.now(timezone.utc)
    return SessionRecord(
        user_id=uuid4(),
        user_name="Alice",
        user_role=UserRole.ADMIN,
        created_at=now,
        expires_at=now + timedelta(hours=hours),
    )


def test_put_sets_json_with_expiry():
    client = Mock()
    store = RedisSessionStore(client)
    record = _record()

    store.put("abc", record)

    args, kwargs = client.set.call_args
    assert args[0] == "backoffice:session:abc"
    payload = json.loads(args[1])
    assert payload["user_role"] == "admin"
    assert payload["user_id"] == str(record.user_id)
    assert 86300 <= kwargs["ex"] <= 86400


def test_put_expired_record_uses_minimum_ttl():
    client = Mock()
    store = RedisSessionStore(client)

    store.put("abc", _record(hours=-1))

    assert client.set.call_args.kwargs["ex"] == 1


def test_get_decodes_payload():
    client = Mock()
    store = RedisSessionStore(client)
    record = _record()
    store.put("abc", record)
    client.get.return_value = client.set.call_args.args[1]

    loaded = store.get("abc")

    assert loaded == record
    client.get.assert_called_with("backoffice:session:abc")


def test_get_missing_returns_none():
    client = Mock()
    client.get.return_value = None

    assert RedisSessionStore(client).get("abc") is None


def test_corrupt_payload_is_deleted():
    client = Mock()
    client.get.return_value = "{not json"
    store = RedisSessionStore(client)

    assert store.get("abc") is None
    client.delete.assert_called_once_with("backoffice:session:abc")


def test_unknown_role_in_payload_is_deleted():
    client = Mock()
    client.get.return_value = json.dumps(
        {
            "user_id": str(uuid4()),
            "user_name": "X",
            "user_role": "root",
            "created_at": datetime.now(timezone.utc).isoformat(),
            "expires_at": datetime.now(timezone.utc).isoformat(),
        }
    )
    store = RedisSessionStore(client)

    assert store.get("abc") is None
    client.delete.assert_called_once()


@pytest.mark.parametrize("method", ["get", "delete"])
def test_redis_errors_fail_closed(method):
    client = Mock()
    getattr(client, method).side_effect = RedisConnectionError("down")
    store = RedisSessionStore(client)

    with pytest.raises(SessionStoreError):
        getattr(store, method)("abc")


def test_put_error_fails_closed():
    client = Mock()
    client.set.side_effect = RedisConnectionError("down")

    with pytest.raises(SessionStoreError):
        RedisSessionStore(client).put("abc", _record())


def test_session_manager_validate_propagates_store_outage():
    client = Mock()
    client.get.side_effect = RedisConnectionError("down")
    manager = SessionManager(RedisSessionStore(client), secret="s")

    with pytest.raises(SessionStoreError):
        manager.validate("some-token")


def test_ping_false_on_error():
    client = Mock()
    client.ping.side_effect = RedisConnectionError("down")

    assert RedisSessionStore(client).ping() is False


def test_from_url_requires_url():
    with pytest.raises(ValueError):
        RedisSessionStore.from_url("")
