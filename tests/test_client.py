"""MailchimpClient against an in-process aiohttp server"""
import asyncio

import pytest
from aiohttp import web

from mailchimp.client import MailchimpClient, build_query, close_http_session
from mailchimp.errors import (
    MailchimpAPIError, MailchimpAuthError, MailchimpNetworkError, MailchimpRateLimitError,
)


def client_for(server, timeout=None) -> MailchimpClient:
    return MailchimpClient("token-123", "us6", timeout=timeout, base_url=str(server.make_url("/3.0")))


def respond(response):
    async def handler(request):
        return response
    return handler


def problem(status, title="Resource Not Found", detail="The requested resource could not be found."):
    return web.json_response(
        {"type": "https://mailchimp.com/developer/marketing/docs/errors/", "title": title,
         "status": status, "detail": detail, "instance": "abc"},
        status=status,
    )


def test_build_query():
    assert build_query({
        "count": 10, "offset": 0, "fields": ["id", "name"], "include_cleaned": True, "status": None,
    }) == {"count": "10", "offset": "0", "fields": "id,name", "include_cleaned": "true"}
    assert build_query(None) == {}


def test_base_url_uses_server_prefix():
    assert MailchimpClient("t", "us19").base_url == "https://us19.api.mailchimp.com/3.0"


async def test_get_sends_bearer_token_and_query(serve):
    seen = {}

    async def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["query"] = dict(request.query)
        return web.json_response({"campaigns": [], "total_items": 0}, headers={
            "X-RateLimit-Remaining": "9", "X-RateLimit-Limit": "10", "X-RateLimit-Reset": "1700000000",
        })

    server = await serve(web.get("/3.0/campaigns", handler))
    client = client_for(server)

    data = await client.get("/campaigns", {"count": 25, "offset": 50, "type": None})

    assert data == {"campaigns": [], "total_items": 0}
    assert seen["auth"] == "Bearer token-123"
    assert seen["query"] == {"count": "25", "offset": "50"}
    assert client.rate_limit.remaining == 9
    assert client.rate_limit.limit == 10
    assert client.rate_limit.reset_time.timestamp() == 1700000000


async def test_no_content_returns_none(serve):
    async def handler(request):
        return web.Response(status=204)

    server = await serve(web.delete("/3.0/lists/l1", handler))
    assert await client_for(server).delete("/lists/l1") is None


async def test_problem_document_raises_api_error(serve):
    server = await serve(web.get("/3.0/campaigns/missing", respond(problem(404))))

    with pytest.raises(MailchimpAPIError) as exc_info:
        await client_for(server).get("/campaigns/missing")

    assert exc_info.value.status_code == 404
    assert str(exc_info.value) == "The requested resource could not be found."
    assert exc_info.value.problem.title == "Resource Not Found"


@pytest.mark.parametrize("status", [401, 403])
async def test_auth_failures(serve, status):
    server = await serve(web.get("/3.0/ping", respond(problem(status, "API Key Invalid", "Invalid token"))))

    with pytest.raises(MailchimpAuthError) as exc_info:
        await client_for(server).get("/ping")
    assert exc_info.value.status_code == status


async def test_rate_limit(serve):
    async def handler(request):
        return web.json_response(
            {"title": "Too Many Requests", "status": 429, "detail": "Slow down"},
            status=429, headers={"Retry-After": "30", "X-RateLimit-Limit": "10"},
        )

    server = await serve(web.get("/3.0/reports", handler))

    with pytest.raises(MailchimpRateLimitError) as exc_info:
        await client_for(server).get("/reports")
    assert exc_info.value.retry_after == 30
    assert exc_info.value.limit == 10
    assert exc_info.value.status_code == 429


async def test_rate_limit_defaults(serve):
    async def handler(request):
        return web.json_response({"title": "Too Many Requests", "status": 429}, status=429)

    server = await serve(web.get("/3.0/reports", handler))

    with pytest.raises(MailchimpRateLimitError) as exc_info:
        await client_for(server).get("/reports")
    assert exc_info.value.retry_after == 60
    assert exc_info.value.limit == 0


async def test_non_json_error_body(serve):
    server = await serve(web.get("/3.0/ping", respond(web.Response(status=500, text="<html>oops</html>"))))

    with pytest.raises(MailchimpNetworkError, match="HTTP 500: Internal Server Error"):
        await client_for(server).get("/ping")


async def test_error_body_without_title_or_detail(serve):
    server = await serve(web.get("/3.0/ping", respond(web.json_response({"status": 400}, status=400))))

    with pytest.raises(MailchimpNetworkError, match="Invalid error response from Mailchimp API"):
        await client_for(server).get("/ping")


async def test_timeout(serve):
    async def slow(request):
        await asyncio.sleep(1)
        return web.json_response({})

    server = await serve(web.get("/3.0/ping", slow))

    with pytest.raises(MailchimpNetworkError, match="Request timeout after 0.1s"):
        await client_for(server, timeout=0.1).get("/ping")


async def test_connection_refused():
    client = MailchimpClient("token", "us6", base_url="http://127.0.0.1:1/3.0")

    with pytest.raises(MailchimpNetworkError, match="Network request failed"):
        await client.get("/ping")


@pytest.fixture(autouse=True)
async def shared_session():
    yield
    await close_http_session()
