"""Page helpers: error classification, clean-URL redirects, dotted lookups"""
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from admin_panel.utils import pages
from mailchimp.dal import ApiResult
from mailchimp.errors import ErrorCodes
from mailchimp.schemas import CampaignsQuery, MailchimpList


def _request(path="/mailchimp/campaigns", query=""):
    return Request({"type": "http", "method": "GET", "path": path, "query_string": query.encode(), "headers": []})


@pytest.mark.parametrize("message", [
    "Resource Not Found",
    "HTTP 404",
    "List does not exist",
])
def test_not_found_messages(message):
    assert pages.is_not_found(message)


def test_other_messages_are_not_404():
    assert not pages.is_not_found("Rate limit exceeded")
    assert not pages.is_not_found(None)


def test_handle_api_error():
    assert pages.handle_api_error(ApiResult(success=True, data={})) is None
    assert pages.handle_api_error(ApiResult(success=False), "Failed to load lists") == "Failed to load lists"

    with pytest.raises(HTTPException) as exc:
        pages.handle_api_error(ApiResult(success=False, error="Resource Not Found"))
    assert exc.value.status_code == 404


def test_handle_api_error_uses_status_code():
    missing = ApiResult(success=False, error="The requested resource could not be found.", status_code=404)
    with pytest.raises(HTTPException) as exc:
        pages.handle_api_error(missing)
    assert exc.value.status_code == 404
    assert exc.value.detail == "The requested resource could not be found."

    forbidden = ApiResult(success=False, error="The requested resource could not be found.", status_code=403)
    assert pages.handle_api_error(forbidden) == "The requested resource could not be found."


def test_page_state_success():
    state = pages.page_state(ApiResult(success=True, data={"x": 1}))
    assert state["data"] == {"x": 1}
    assert state["error"] is None
    assert state["connection_error"] is None


def test_page_state_connection_error():
    state = pages.page_state(ApiResult(
        success=False, error="Mailchimp account not connected.", error_code=ErrorCodes.NOT_CONNECTED,
    ))
    assert state["connection_error"] == "Mailchimp account not connected."
    assert state["error"] is None
    assert state["data"] is None


def test_page_state_inline_error():
    state = pages.page_state(ApiResult(success=False, error="Rate limit exceeded.", error_code=ErrorCodes.RATE_LIMIT))
    assert state["error"] == "Rate limit exceeded."
    assert state["connection_error"] is None


def test_list_params_builds_query():
    pagination, query = pages.list_params(_request(query="page=2&perPage=25"), CampaignsQuery, status="sent")
    assert pagination.page == 2
    assert query.to_params() == {"count": 25, "offset": 25, "status": "sent"}


def test_list_params_invalid_filter_keeps_paging():
    _, query = pages.list_params(_request(query="page=3"), CampaignsQuery, status="bogus")
    assert query.to_params() == {"count": 10, "offset": 20}


def test_list_params_invalid_filter_keeps_valid_filters():
    _, query = pages.list_params(_request(query="page=2"), CampaignsQuery, status="bogus", type="rss")
    assert query.to_params() == {"count": 10, "offset": 10, "type": "rss"}


def test_list_params_redirects_explicit_defaults():
    with pytest.raises(HTTPException) as exc:
        pages.list_params(_request(query="page=1&status=sent"), CampaignsQuery)
    assert exc.value.status_code == 307
    assert exc.value.headers["Location"] == "/mailchimp/campaigns?status=sent"


async def test_server_prefix_survives_missing_pool(monkeypatch):
    monkeypatch.setattr(pages.connections, "find_connection",
                        AsyncMock(side_effect=RuntimeError("Panel database pool not initialized")))
    assert await pages.server_prefix_for("admin") is None


async def test_server_prefix_from_connection(monkeypatch):
    monkeypatch.setattr(pages.connections, "find_connection", AsyncMock(return_value={"server_prefix": "us19"}))
    assert await pages.server_prefix_for("admin") == "us19"


def test_resolve():
    audience = MailchimpList(id="l1", name="News", stats={"member_count": 5})
    assert pages.resolve(audience, "stats.member_count") == 5
    assert pages.resolve({"a": {"b": 2}}, "a.b") == 2
    assert pages.resolve({"a": None}, "a.b") is None
    assert pages.resolve(audience, "missing.field") is None
