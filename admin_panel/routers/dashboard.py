"""Dashboard router: overview, account, automations, webhooks, landing pages, member search"""
from fastapi import APIRouter, Request, Depends
from fastapi.responses import HTMLResponse
from typing import Dict, Optional
import asyncio
import logging

from admin_panel.core import RouterConfig, user_key
from admin_panel.utils.pages import Column, list_params, page_state, render_page
from mailchimp import dal
from mailchimp.schemas import AutomationsQuery, LandingPagesQuery, PaginationQuery, SearchMembersQuery
from mailchimp.summaries import get_audience_summary, get_campaign_summary
from utils.formatting import subscriber_hash

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard"])

# ?error=... values set by the OAuth callback
CALLBACK_ERRORS = {
    "missing_parameters": "Mailchimp did not return an authorization code. Please try again.",
    "invalid_state": "The authorization request expired or was tampered with. Please try again.",
    "unauthorized": "Your panel session expired during authorization. Sign in and connect again.",
    "connection_failed": "Could not complete the Mailchimp connection. Please try again.",
    "access_denied": "Access to Mailchimp was denied.",
}


def _member_link(item) -> Optional[str]:
    if not item.list_id:
        return None
    return f"/mailchimp/lists/{item.list_id}/members/{subscriber_hash(item.email_address)}"


def setup_routes(cfg: RouterConfig):
    """Setup routes with dependencies"""

    @router.get("/mailchimp", response_class=HTMLResponse)
    async def dashboard(request: Request, user: Dict = Depends(cfg.get_current_user)):
        uid = user_key(user)
        campaigns, audiences = await asyncio.gather(get_campaign_summary(uid), get_audience_summary(uid))

        notice = "Mailchimp account connected." if request.query_params.get("connected") == "true" else None
        callback_error = request.query_params.get("error")
        if callback_error:
            callback_error = CALLBACK_ERRORS.get(callback_error, f"Mailchimp authorization failed: {callback_error}")

        return cfg.render(
            request, "mailchimp/dashboard.html", user=user, title="Dashboard",
            campaigns=page_state(campaigns, "Failed to load campaigns"),
            audiences=page_state(audiences, "Failed to load audiences"),
            notice=notice, callback_error=callback_error,
        )

    @router.get("/mailchimp/account", response_class=HTMLResponse)
    async def account(request: Request, user: Dict = Depends(cfg.get_current_user)):
        result = await dal.fetch_api_root(user_key(user))
        return render_page(cfg, request, "mailchimp/account.html", result, "Failed to load account",
                           user=user, title="Account")

    @router.get("/mailchimp/automations", response_class=HTMLResponse)
    async def automations(request: Request, user: Dict = Depends(cfg.get_current_user)):
        pagination, query = list_params(request, AutomationsQuery, status=request.query_params.get("status"))
        result = await dal.fetch_automations(user_key(user), query)
        return render_page(
            cfg, request, "mailchimp/collection.html", result, "Failed to load automations",
            user=user, title="Automations", items_key="automations", pagination=pagination,
            columns=[
                Column("Title", "settings.title"),
                Column("Status", "status", "badge"),
                Column("Audience", "recipients.list_name"),
                Column("Emails sent", "emails_sent", "number"),
                Column("Open rate", "report_summary.open_rate", "fraction"),
                Column("Started", "start_time", "datetime"),
            ],
        )

    @router.get("/mailchimp/batch-webhooks", response_class=HTMLResponse)
    async def batch_webhooks(request: Request, user: Dict = Depends(cfg.get_current_user)):
        pagination, query = list_params(request, PaginationQuery)
        result = await dal.fetch_batch_webhooks(user_key(user), query)
        return render_page(
            cfg, request, "mailchimp/collection.html", result, "Failed to load batch webhooks",
            user=user, title="Batch webhooks", items_key="webhooks", pagination=pagination,
            columns=[
                Column("URL", "url"),
                Column("Enabled", "enabled", "bool"),
                Column("Created", "created_at", "datetime"),
                Column("Updated", "updated_at", "datetime"),
            ],
        )

    @router.get("/mailchimp/search/members", response_class=HTMLResponse)
    async def search_members(request: Request, user: Dict = Depends(cfg.get_current_user)):
        term = (request.query_params.get("query") or "").strip()
        list_id = request.query_params.get("list_id") or None
        state = {"data": None, "error": None, "connection_error": None}
        if term:
            result = await dal.search_members(user_key(user), SearchMembersQuery(query=term, list_id=list_id))
            state = page_state(result, "Member search failed")
        return cfg.render(
            request, "mailchimp/search_members.html", user=user, title="Search members",
            query=term, list_id=list_id, member_link=_member_link, **state,
        )

    @router.get("/mailchimp/landing-pages", response_class=HTMLResponse)
    async def landing_pages(request: Request, user: Dict = Depends(cfg.get_current_user)):
        pagination, query = list_params(
            request, LandingPagesQuery,
            sort_field=request.query_params.get("sortField"), sort_dir=request.query_params.get("sortDir"),
        )
        result = await dal.fetch_landing_pages(user_key(user), query)
        return render_page(
            cfg, request, "mailchimp/collection.html", result, "Failed to load landing pages",
            user=user, title="Landing pages", items_key="landing_pages", pagination=pagination,
            columns=[
                Column("Name", "name", link=lambda p: f"/mailchimp/landing-pages/{p.id}"),
                Column("Title", "title"),
                Column("Status", "status", "badge"),
                Column("Published", "published_at", "datetime"),
                Column("Report", "id", "report", link=lambda p: f"/mailchimp/reporting/landing-pages/{p.id}"),
            ],
        )

    @router.get("/mailchimp/landing-pages/{page_id}", response_class=HTMLResponse)
    async def landing_page_detail(page_id: str, request: Request, user: Dict = Depends(cfg.get_current_user)):
        result = await dal.fetch_landing_page(user_key(user), page_id)
        return render_page(cfg, request, "mailchimp/landing_page.html", result, "Failed to load landing page",
                           user=user, title="Landing page", page_id=page_id)

    @router.get("/mailchimp/reporting/landing-pages/{outreach_id}", response_class=HTMLResponse)
    async def landing_page_report(outreach_id: str, request: Request, user: Dict = Depends(cfg.get_current_user)):
        result = await dal.fetch_landing_page_report(user_key(user), outreach_id)
        return render_page(cfg, request, "mailchimp/landing_page_report.html", result,
                           "Failed to load landing page report",
                           user=user, title="Landing page report", outreach_id=outreach_id)

    return router
