"""JSON API router: dashboard summaries, campaigns, reports, auth health"""
from fastapi import APIRouter, Request, Depends
from datetime import date, datetime, timezone
from typing import Dict, Optional, Type
import asyncio
import logging
import re
import time

import aiohttp
from pydantic import ValidationError

import config
from admin_panel.core import RouterConfig, user_key
from admin_panel.utils import responses
from database import check_db_health
from mailchimp import dal
from mailchimp.schemas import CampaignsQuery, QueryParams, ReportsQuery
from mailchimp.schemas.common import describe_errors
from mailchimp.summaries import CampaignFilters, get_audience_summary, get_campaign_summary

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["api"])

MAX_LIMIT = 100
HEALTH_CHECK_TIMEOUT = 5
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class FilterError(ValueError):
    pass


def _int_param(value: Optional[str], name: str, default: int, minimum: int, maximum: Optional[int] = None) -> int:
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except ValueError:
        raise FilterError(f"{name} must be an integer")
    if number < minimum or (maximum is not None and number > maximum):
        bounds = f"between {minimum} and {maximum}" if maximum is not None else f"at least {minimum}"
        raise FilterError(f"{name} must be {bounds}")
    return number


def _date_param(value: Optional[str], name: str) -> Optional[date]:
    if not value:
        return None
    if not DATE_PATTERN.fullmatch(value):
        raise FilterError(f"{name} must be a date in YYYY-MM-DD format")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise FilterError(f"{name} must be a date in YYYY-MM-DD format")


def parse_dashboard_filters(query) -> CampaignFilters:
    """Validate dashboard query params; raises FilterError with a user-facing message"""
    filters = CampaignFilters(
        limit=_int_param(query.get("limit"), "limit", 10, 1, MAX_LIMIT),
        page=_int_param(query.get("page"), "page", 1, 1),
        campaign_type=query.get("type") or None,
        start_date=_date_param(query.get("startDate"), "startDate"),
        end_date=_date_param(query.get("endDate"), "endDate"),
    )
    if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
        raise FilterError("startDate must not be after endDate")
    return filters


def _strict_query(query_cls: Type[QueryParams], request: Request):
    """(query, None) or (None, 400 response) for a JSON endpoint"""
    try:
        return query_cls.parse(dict(request.query_params)), None
    except ValidationError as e:
        return None, responses.error("Invalid query parameters", details=describe_errors(e), status_code=400)


async def _check_oauth_service() -> Dict:
    start = time.perf_counter()
    try:
        timeout = aiohttp.ClientTimeout(total=HEALTH_CHECK_TIMEOUT)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.head(config.MAILCHIMP_TOKEN_URL) as response:
                available = response.status < 500
                status_code = response.status
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        return {"name": "mailchimp_oauth", "status": "unavailable",
                "responseTime": round((time.perf_counter() - start) * 1000), "error": str(e) or type(e).__name__}
    service = {"name": "mailchimp_oauth", "status": "available" if available else "unavailable",
               "responseTime": round((time.perf_counter() - start) * 1000)}
    if not available:
        service["error"] = f"HTTP {status_code}"
    return service


async def _check_database() -> Dict:
    start = time.perf_counter()
    healthy = await check_db_health()
    service = {"name": "database", "status": "available" if healthy else "unavailable",
               "responseTime": round((time.perf_counter() - start) * 1000)}
    if not healthy:
        service["error"] = "Database unreachable"
    return service


def setup_routes(cfg: RouterConfig):
    """Setup routes with dependencies"""

    @router.get("/mailchimp/dashboard")
    async def dashboard(request: Request, user: Dict = Depends(cfg.get_current_user)):
        try:
            filters = parse_dashboard_filters(request.query_params)
        except FilterError as e:
            return responses.error("Invalid query parameters", details=str(e), status_code=400)

        uid = user_key(user)
        try:
            campaigns, audiences = await asyncio.gather(
                get_campaign_summary(uid, filters), get_audience_summary(uid)
            )
        except Exception as e:
            logger.exception(f"Dashboard summary failed for {uid}")
            return responses.server_error("Failed to build dashboard", details=str(e))

        for result in (campaigns, audiences):
            if not result.success:
                return responses.error(
                    result.error or "Failed to fetch dashboard data", status_code=502, error_code=result.error_code,
                )

        return responses.success({
            "campaigns": campaigns.data,
            "audiences": audiences.data,
            "appliedFilters": {
                "limit": filters.limit,
                "page": filters.page,
                "type": filters.campaign_type,
                "dateRange": {
                    "startDate": filters.start_date.isoformat() if filters.start_date else None,
                    "endDate": filters.end_date.isoformat() if filters.end_date else None,
                } if filters.has_date_range else None,
                "hasActiveFilters": filters.is_active,
            },
            "metadata": {
                "lastUpdated": datetime.now(timezone.utc).isoformat(),
                "rateLimit": campaigns.rate_limit or audiences.rate_limit,
            },
        })

    @router.get("/mailchimp/campaigns")
    async def campaigns(request: Request, user: Dict = Depends(cfg.get_current_user)):
        query, invalid = _strict_query(CampaignsQuery, request)
        if invalid is not None:
            return invalid
        result = await dal.fetch_campaigns(user_key(user), query)
        return responses.from_result(result, "Failed to fetch campaigns")

    @router.get("/mailchimp/reports")
    async def reports(request: Request, user: Dict = Depends(cfg.get_current_user)):
        query, invalid = _strict_query(ReportsQuery, request)
        if invalid is not None:
            return invalid
        result = await dal.fetch_campaign_reports(user_key(user), query)
        return responses.from_result(result, "Failed to fetch campaign reports")

    @router.get("/mailchimp/reports/{campaign_id}")
    async def report(campaign_id: str, user: Dict = Depends(cfg.get_current_user)):
        result = await dal.fetch_campaign_report(user_key(user), campaign_id)
        if not result.success and result.status_code == 404:
            return responses.not_found("Campaign report not found")
        return responses.from_result(result, "Failed to fetch campaign report")

    @router.get("/health/auth")
    async def auth_health():
        services = list(await asyncio.gather(_check_oauth_service(), _check_database()))
        healthy = all(s["status"] == "available" for s in services)
        if not healthy:
            logger.warning(f"⚠️  Auth health degraded: {[s['name'] for s in services if s['status'] != 'available']}")
        return responses.success({
            "status": "healthy" if healthy else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": services,
        }, status_code=200 if healthy else 503)

    return router
