"""Connection validation: stored row checks, throttled ping, deactivation"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from database import connections
from mailchimp import validation
from mailchimp.client import MailchimpClient
from mailchimp.errors import ErrorCodes, MailchimpAuthError, MailchimpConnectionError
from mailchimp.schemas.common import ProblemDetail

CREDENTIALS = {"access_token": "tok", "server_prefix": "us6"}


@pytest.fixture
def store(monkeypatch):
    """Patched connection repository; returns the mocks by name"""
    mocks = {
        "find_connection": AsyncMock(return_value={
            "user_id": "admin", "is_active": True, "server_prefix": "us6",
            "last_validated_at": datetime.now(timezone.utc),
        }),
        "get_decrypted_token": AsyncMock(return_value=dict(CREDENTIALS)),
        "deactivate_connection": AsyncMock(return_value=True),
        "touch_validation": AsyncMock(),
    }
    for name, mock in mocks.items():
        monkeypatch.setattr(connections, name, mock)
    return mocks


@pytest.fixture
def ping(monkeypatch):
    mock = AsyncMock(return_value={"health_status": "Everything's Chimpy!"})
    monkeypatch.setattr(MailchimpClient, "get", mock)
    return mock


def _stale(store):
    store["find_connection"].return_value["last_validated_at"] = datetime.now(timezone.utc) - timedelta(days=2)


async def test_missing_user(store):
    result = await validation.validate_connection(None)
    assert not result.is_valid
    assert result.error == ErrorCodes.NOT_AUTHENTICATED
    store["find_connection"].assert_not_called()


async def test_no_connection(store):
    store["find_connection"].return_value = None
    result = await validation.validate_connection("admin")
    assert result.error == ErrorCodes.NOT_CONNECTED


async def test_inactive_connection(store):
    store["find_connection"].return_value["is_active"] = False
    result = await validation.validate_connection("admin")
    assert result.error == ErrorCodes.CONNECTION_INACTIVE


async def test_undecryptable_token(store):
    store["get_decrypted_token"].return_value = None
    result = await validation.validate_connection("admin")
    assert result.error == ErrorCodes.NOT_CONNECTED


async def test_recently_validated_skips_ping(store, ping):
    result = await validation.validate_connection("admin")

    assert result.is_valid
    assert result.credentials == CREDENTIALS
    ping.assert_not_called()
    store["touch_validation"].assert_not_called()


async def test_naive_timestamp_counts_as_utc(store, ping):
    store["find_connection"].return_value["last_validated_at"] = datetime.utcnow()
    assert (await validation.validate_connection("admin")).is_valid
    ping.assert_not_called()


async def test_stale_connection_is_pinged(store, ping):
    _stale(store)

    result = await validation.validate_connection("admin")

    assert result.is_valid
    ping.assert_awaited_once_with("/ping")
    store["touch_validation"].assert_awaited_once_with("admin")


async def test_never_validated_is_pinged(store, ping):
    store["find_connection"].return_value["last_validated_at"] = None
    assert (await validation.validate_connection("admin")).is_valid
    ping.assert_awaited_once()


async def test_rejected_token_deactivates(store, ping):
    _stale(store)
    ping.side_effect = MailchimpAuthError(ProblemDetail(title="API Key Invalid", status=401), 401)

    result = await validation.validate_connection("admin")

    assert result.error == ErrorCodes.TOKEN_INVALID
    store["deactivate_connection"].assert_awaited_once_with("admin")
    store["touch_validation"].assert_not_called()


async def test_repository_failure(store):
    store["find_connection"].side_effect = ConnectionError("pool closed")
    result = await validation.validate_connection("admin")
    assert result.error == ErrorCodes.VALIDATION_FAILED


async def test_user_client(store):
    client = await validation.get_user_client("admin")
    assert client.base_url == "https://us6.api.mailchimp.com/3.0"


async def test_user_client_without_connection(store):
    store["find_connection"].return_value = None

    with pytest.raises(MailchimpConnectionError) as exc:
        await validation.get_user_client("admin")

    assert exc.value.error_code == ErrorCodes.NOT_CONNECTED
    assert "not connected" in str(exc.value)
