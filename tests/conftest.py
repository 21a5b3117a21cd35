"""
Shared test fixtures and configuration for entire test suite.

Provides: env defaults, Mailchimp payload factories, fake API client, in-process aiohttp server
Dependencies: pytest, pytest-asyncio, aiohttp
"""
import base64
import os

# Settings are read at import time, so they must exist before config is imported
os.environ.setdefault("ADMIN_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_PANEL_USER", "admin")
os.environ.setdefault("ADMIN_PANEL_PASSWORD", "test-password")
os.environ.setdefault("ENCRYPTION_KEY", base64.b64encode(b"k" * 32).decode())
os.environ.setdefault("MAILCHIMP_CLIENT_ID", "client-123")
os.environ.setdefault("MAILCHIMP_CLIENT_SECRET", "secret-456")
os.environ.setdefault("MAILCHIMP_REDIRECT_URI", "http://localhost:8000/api/auth/mailchimp/callback")

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from mailchimp.client import close_http_session
from utils import crypto


@pytest.fixture(autouse=True)
def reset_encryption_key():
    crypto.reset_key_cache()
    yield
    crypto.reset_key_cache()


@pytest.fixture
async def serve():
    """
    Start an in-process aiohttp server with the given routes.

    Returns:
        Callable: async (*routes) -> TestServer
    """
    servers = []

    async def _serve(*routes):
        app = web.Application()
        app.add_routes(list(routes))
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return server

    yield _serve

    for server in servers:
        await server.close()
    await close_http_session()


@pytest.fixture
def fake_client():
    """
    Stand-in for MailchimpClient.

    Returns:
        MagicMock: .get is an AsyncMock, .rate_limit is None
    """
    client = MagicMock()
    client.get = AsyncMock()
    client.rate_limit = None
    return client


def make_report(report_id="c1", emails_sent=100, open_rate=0.25, click_rate=0.05, **extra):
    report = {
        "id": report_id,
        "campaign_title": f"Campaign {report_id}",
        "type": "regular",
        "list_id": "l1",
        "list_name": "Newsletter",
        "emails_sent": emails_sent,
        "abuse_reports": 0,
        "unsubscribed": 1,
        "send_time": "2024-03-01T10:00:00+00:00",
        "bounces": {"hard_bounces": 1, "soft_bounces": 2, "syntax_errors": 0},
        "opens": {"opens_total": 40, "unique_opens": 25, "open_rate": open_rate},
        "clicks": {"clicks_total": 8, "unique_clicks": 5, "click_rate": click_rate},
    }
    report.update(extra)
    return report


def make_list(list_id="l1", member_count=100, open_rate=30.0, click_rate=4.0, avg_sub_rate=2.0, **extra):
    audience = {
        "id": list_id,
        "web_id": 123,
        "name": f"List {list_id}",
        "date_created": "2023-01-01T00:00:00+00:00",
        "stats": {
            "member_count": member_count,
            "open_rate": open_rate,
            "click_rate": click_rate,
            "avg_sub_rate": avg_sub_rate,
        },
    }
    audience.update(extra)
    return audience


def make_campaign(campaign_id="c1", status="sent", **extra):
    campaign = {
        "id": campaign_id,
        "web_id": 42,
        "type": "regular",
        "status": status,
        "create_time": "2024-02-28T09:00:00+00:00",
        "send_time": "2024-03-01T10:00:00+00:00",
        "emails_sent": 100,
        "recipients": {"list_id": "l1", "list_name": "Newsletter", "recipient_count": 100},
        "settings": {"title": f"Spring sale {campaign_id}", "subject_line": "Spring is here"},
    }
    campaign.update(extra)
    return campaign


def make_member(email="jane@example.com", list_id="l1", status="subscribed", **extra):
    from utils.formatting import subscriber_hash
    member = {
        "id": subscriber_hash(email),
        "email_address": email,
        "full_name": "Jane Doe",
        "status": status,
        "list_id": list_id,
        "stats": {"avg_open_rate": 0.5, "avg_click_rate": 0.1},
    }
    member.update(extra)
    return member
