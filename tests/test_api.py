"""JSON API: dashboard filters, summaries, reports, auth health"""
from unittest.mock import AsyncMock

import pytest
from aiohttp import web
from fastapi.testclient import TestClient

import config
from admin_panel.app import app
from admin_panel.routers import api, auth
from conftest import make_list, make_report
from mailchimp import dal
from mailchimp.dal import ApiResult
from mailchimp.errors import ErrorCodes
from mailchimp.schemas import ListCollection, Report, ReportList


@pytest.fixture
def client():
    client = TestClient(app)
    client.cookies.set("access_token", auth.create_token("admin"))
    return client


@pytest.fixture
def mailchimp_data(monkeypatch):
    reports = AsyncMock(return_value=ApiResult(success=True, data=ReportList.model_validate({
        "reports": [make_report("c1", open_rate=0.3, click_rate=0.1)], "total_items": 4,
    })))
    lists = AsyncMock(return_value=ApiResult(success=True, data=ListCollection.model_validate({
        "lists": [make_list("l1", member_count=10)], "total_items": 1,
    })))
    monkeypatch.setattr(dal, "fetch_campaign_reports", reports)
    monkeypatch.setattr(dal, "fetch_lists", lists)
    return reports


class TestDashboardFilters:
    def test_defaults(self):
        filters = api.parse_dashboard_filters({})
        assert (filters.limit, filters.page, filters.campaign_type) == (10, 1, None)
        assert not filters.is_active

    @pytest.mark.parametrize("query, message", [
        ({"limit": "0"}, "limit must be between 1 and 100"),
        ({"limit": "101"}, "limit must be between 1 and 100"),
        ({"limit": "ten"}, "limit must be an integer"),
        ({"page": "0"}, "page must be at least 1"),
        ({"startDate": "01/02/2024"}, "startDate must be a date in YYYY-MM-DD format"),
        ({"startDate": "2024-1-5"}, "startDate must be a date in YYYY-MM-DD format"),
        ({"endDate": "2024-02-30"}, "endDate must be a date in YYYY-MM-DD format"),
        ({"startDate": "2024-02-01", "endDate": "2024-01-01"}, "startDate must not be after endDate"),
    ])
    def test_invalid(self, query, message):
        with pytest.raises(api.FilterError, match=message):
            api.parse_dashboard_filters(query)

    def test_unknown_type_passes_through(self):
        filters = api.parse_dashboard_filters({"type": "automation-email"})
        assert filters.campaign_type == "automation-email"
        assert filters.is_active

    def test_date_range(self):
        filters = api.parse_dashboard_filters({"startDate": "2024-01-01", "endDate": "2024-01-01"})
        assert filters.has_date_range
        assert filters.is_active


def test_dashboard(client, mailchimp_data):
    response = client.get("/api/mailchimp/dashboard?limit=5&page=2&type=regular&startDate=2024-01-01")

    assert response.status_code == 200
    body = response.json()
    assert body["campaigns"]["totalCampaigns"] == 4
    assert body["campaigns"]["filteredCount"] == 1
    assert body["campaigns"]["avgOpenRate"] == 30.0
    assert body["audiences"]["totalSubscribers"] == 10
    assert body["appliedFilters"] == {
        "limit": 5,
        "page": 2,
        "type": "regular",
        "dateRange": {"startDate": "2024-01-01", "endDate": None},
        "hasActiveFilters": True,
    }
    assert body["metadata"]["lastUpdated"]
    query = mailchimp_data.await_args.args[1]
    assert (query.count, query.offset, query.type) == (5, 5, "regular")


def test_dashboard_without_filters(client, mailchimp_data):
    body = client.get("/api/mailchimp/dashboard").json()
    assert body["appliedFilters"]["dateRange"] is None
    assert body["appliedFilters"]["hasActiveFilters"] is False
    assert body["campaigns"]["filteredCount"] is None


def test_dashboard_passes_type_to_reports(client, mailchimp_data):
    response = client.get("/api/mailchimp/dashboard?type=automation-email")

    assert response.status_code == 200
    assert response.json()["appliedFilters"]["type"] == "automation-email"
    assert mailchimp_data.await_args.args[1].type == "automation-email"


def test_dashboard_invalid_params(client):
    response = client.get("/api/mailchimp/dashboard?limit=500")
    assert response.status_code == 400
    assert response.json() == {
        "success": False, "error": "Invalid query parameters", "details": "limit must be between 1 and 100",
    }


def test_dashboard_upstream_failure(client, mailchimp_data, monkeypatch):
    monkeypatch.setattr(dal, "fetch_lists", AsyncMock(return_value=ApiResult(
        success=False, error="Mailchimp account not connected.", error_code=ErrorCodes.NOT_CONNECTED, status_code=401,
    )))

    response = client.get("/api/mailchimp/dashboard")

    assert response.status_code == 502
    assert response.json()["error_code"] == ErrorCodes.NOT_CONNECTED


def test_dashboard_crash(client, monkeypatch):
    monkeypatch.setattr(api, "get_campaign_summary", AsyncMock(side_effect=RuntimeError("boom")))
    monkeypatch.setattr(api, "get_audience_summary", AsyncMock(return_value=ApiResult(success=True, data={})))

    response = client.get("/api/mailchimp/dashboard")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to build dashboard"


def test_requires_login():
    response = TestClient(app).get("/api/mailchimp/campaigns", follow_redirects=False)
    assert response.status_code == 303


def test_campaigns_reject_invalid_params(client, monkeypatch):
    fetch = AsyncMock()
    monkeypatch.setattr(dal, "fetch_campaigns", fetch)

    response = client.get("/api/mailchimp/campaigns?count=5000&status=sent")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Invalid query parameters"
    assert len(body["details"]) == 1
    assert body["details"][0].startswith("count: ")
    fetch.assert_not_awaited()


def test_reports_reject_invalid_params(client, monkeypatch):
    monkeypatch.setattr(dal, "fetch_campaign_reports", AsyncMock())

    response = client.get("/api/mailchimp/reports?sort_dir=sideways")

    assert response.status_code == 400
    assert response.json()["details"][0].startswith("sort_dir: ")


def test_campaigns_pass_valid_params(client, monkeypatch):
    fetch = AsyncMock(return_value=ApiResult(success=True, data={"campaigns": [], "total_items": 0}))
    monkeypatch.setattr(dal, "fetch_campaigns", fetch)

    response = client.get("/api/mailchimp/campaigns?count=5&status=sent&fields=campaigns.id,total_items")

    assert response.status_code == 200
    assert response.json() == {"campaigns": [], "total_items": 0}
    assert fetch.await_args.args[1].to_params() == {
        "count": 5, "offset": 0, "status": "sent", "fields": ["campaigns.id", "total_items"],
    }


def test_report(client, monkeypatch):
    report = Report.model_validate(make_report("c1"))
    monkeypatch.setattr(dal, "fetch_campaign_report", AsyncMock(return_value=ApiResult(success=True, data=report)))

    body = client.get("/api/mailchimp/reports/c1").json()

    assert body["id"] == "c1"
    assert body["opens"]["open_rate"] == 0.25


def test_report_not_found(client, monkeypatch):
    monkeypatch.setattr(dal, "fetch_campaign_report", AsyncMock(return_value=ApiResult(
        success=False, error="The requested resource could not be found.", error_code=ErrorCodes.API_ERROR,
        status_code=404,
    )))

    response = client.get("/api/mailchimp/reports/missing")

    assert response.status_code == 404
    assert response.json()["error"] == "Campaign report not found"


def test_api_404_stays_json(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}


class TestAuthHealth:
    def test_healthy(self, monkeypatch):
        monkeypatch.setattr(api, "_check_oauth_service", AsyncMock(return_value={
            "name": "mailchimp_oauth", "status": "available", "responseTime": 12,
        }))
        monkeypatch.setattr(api, "check_db_health", AsyncMock(return_value=True))

        response = TestClient(app).get("/api/health/auth")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert [s["name"] for s in body["services"]] == ["mailchimp_oauth", "database"]
        assert "error" not in body["services"][1]

    def test_degraded(self, monkeypatch):
        monkeypatch.setattr(api, "_check_oauth_service", AsyncMock(return_value={
            "name": "mailchimp_oauth", "status": "available", "responseTime": 12,
        }))
        monkeypatch.setattr(api, "check_db_health", AsyncMock(return_value=False))

        response = TestClient(app).get("/api/health/auth")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
        assert response.json()["services"][1]["error"] == "Database unreachable"


async def test_oauth_service_check(serve, monkeypatch):
    async def token(request):
        return web.Response(status=405)

    server = await serve(web.head("/oauth2/token", token))
    monkeypatch.setattr(config, "MAILCHIMP_TOKEN_URL", str(server.make_url("/oauth2/token")))

    service = await api._check_oauth_service()

    assert service["status"] == "available"
    assert service["responseTime"] >= 0


async def test_oauth_service_down(monkeypatch):
    monkeypatch.setattr(config, "MAILCHIMP_TOKEN_URL", "http://127.0.0.1:1/oauth2/token")

    service = await api._check_oauth_service()

    assert service["status"] == "unavailable"
    assert service["error"]
