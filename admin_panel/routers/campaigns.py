"""Campaigns router: campaigns, content, send checklist, reports and report sub-pages"""
from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import HTMLResponse
from typing import Dict
import logging

from admin_panel.core import RouterConfig, user_key
from admin_panel.utils.pages import Column, Section, list_params, render_page, render_section, server_prefix_for
from mailchimp import dal
from mailchimp.schemas import CampaignsQuery, EmailActivityQuery, OpenDetailsQuery, PaginationQuery, ReportsQuery

logger = logging.getLogger(__name__)
router = APIRouter(tags=["campaigns"])

CAMPAIGN_TYPES = ("regular", "plaintext", "absplit", "rss", "variate")
CAMPAIGN_STATUSES = ("save", "paused", "schedule", "sending", "sent")

REPORT_SECTIONS = {
    "opens": Section("Opens", "fetch_campaign_open_list", "members", [
        Column("Email", "email_address"),
        Column("Opens", "opens_count", "number"),
        Column("Status", "contact_status", "badge"),
        Column("VIP", "vip", "bool"),
    ], OpenDetailsQuery),
    "clicks": Section("Clicks", "fetch_campaign_click_details", "urls_clicked", [
        Column("URL", "url"),
        Column("Total clicks", "total_clicks", "number"),
        Column("Unique clicks", "unique_clicks", "number"),
        Column("Share of clicks", "click_percentage", "percent"),
        Column("Last click", "last_click", "datetime"),
    ], PaginationQuery),
    "abuse-reports": Section("Abuse reports", "fetch_campaign_abuse_reports", "abuse_reports", [
        Column("Email", "email_address"),
        Column("VIP", "vip", "bool"),
        Column("Date", "date", "datetime"),
    ], PaginationQuery),
    "unsubscribes": Section("Unsubscribes", "fetch_campaign_unsubscribes", "unsubscribes", [
        Column("Email", "email_address"),
        Column("Reason", "reason"),
        Column("Date", "timestamp", "datetime"),
    ], PaginationQuery),
    "email-activity": Section("Email activity", "fetch_campaign_email_activity", "emails", [
        Column("Email", "email_address"),
        Column("Events", "activity", "count"),
    ], EmailActivityQuery),
    "sent-to": Section("Recipients", "fetch_campaign_sent_to", "sent_to", [
        Column("Email", "email_address"),
        Column("Status", "status", "badge"),
        Column("Opens", "open_count", "number"),
        Column("Last open", "last_open", "datetime"),
    ], PaginationQuery),
    "locations": Section("Locations", "fetch_campaign_locations", "locations", [
        Column("Country", "country_code"),
        Column("Region", "region_name"),
        Column("Opens", "opens", "number"),
    ], PaginationQuery),
    "advice": Section("Advice", "fetch_campaign_advice", "advice", [
        Column("Type", "type", "badge"),
        Column("Message", "message", "striptags"),
    ]),
    "domain-performance": Section("Domain performance", "fetch_domain_performance", "domains", [
        Column("Domain", "domain"),
        Column("Sent", "emails_sent", "number"),
        Column("Share of emails", "emails_pct", "fraction"),
        Column("Delivered", "delivered", "number"),
        Column("Opens", "opens", "number"),
        Column("Open rate", "opens_pct", "fraction"),
        Column("Clicks", "clicks", "number"),
        Column("Bounces", "bounces", "number"),
        Column("Unsubscribes", "unsubs", "number"),
    ]),
}


def setup_routes(cfg: RouterConfig):
    """Setup routes with dependencies"""

    # === Campaigns ===

    @router.get("/mailchimp/campaigns", response_class=HTMLResponse)
    async def campaigns_list(request: Request, user: Dict = Depends(cfg.get_current_user)):
        qp = request.query_params
        pagination, query = list_params(
            request, CampaignsQuery,
            type=qp.get("type"), status=qp.get("status"), list_id=qp.get("list_id"),
            sort_field=qp.get("sortField") or "create_time", sort_dir=qp.get("sortDir") or "DESC",
        )
        result = await dal.fetch_campaigns(user_key(user), query)
        return render_page(
            cfg, request, "mailchimp/campaigns.html", result, "Failed to load campaigns",
            user=user, title="Campaigns", pagination=pagination, query=query,
            campaign_types=CAMPAIGN_TYPES, campaign_statuses=CAMPAIGN_STATUSES,
        )

    @router.get("/mailchimp/campaigns/{campaign_id}", response_class=HTMLResponse)
    async def campaign_detail(campaign_id: str, request: Request, user: Dict = Depends(cfg.get_current_user)):
        uid = user_key(user)
        result = await dal.fetch_campaign(uid, campaign_id)
        return render_page(cfg, request, "mailchimp/campaign.html", result, "Failed to load campaign",
                           user=user, title="Campaign", campaign_id=campaign_id,
                           server_prefix=await server_prefix_for(uid))

    @router.get("/mailchimp/campaigns/{campaign_id}/content", response_class=HTMLResponse)
    async def campaign_content(campaign_id: str, request: Request, user: Dict = Depends(cfg.get_current_user)):
        result = await dal.fetch_campaign_content(user_key(user), campaign_id)
        return render_page(cfg, request, "mailchimp/campaign_content.html", result,
                           "Failed to load campaign content",
                           user=user, title="Campaign content", campaign_id=campaign_id)

    @router.get("/mailchimp/campaigns/{campaign_id}/send-checklist", response_class=HTMLResponse)
    async def send_checklist(campaign_id: str, request: Request, user: Dict = Depends(cfg.get_current_user)):
        result = await dal.fetch_campaign_send_checklist(user_key(user), campaign_id)
        return render_page(cfg, request, "mailchimp/send_checklist.html", result,
                           "Failed to load send checklist",
                           user=user, title="Send checklist", campaign_id=campaign_id)

    # === Reports ===

    @router.get("/mailchimp/reports", response_class=HTMLResponse)
    async def reports_list(request: Request, user: Dict = Depends(cfg.get_current_user)):
        pagination, query = list_params(
            request, ReportsQuery,
            type=request.query_params.get("type"), sort_field="send_time",
            sort_dir=request.query_params.get("sortDir") or "DESC",
        )
        result = await dal.fetch_campaign_reports(user_key(user), query)
        return render_page(
            cfg, request, "mailchimp/reports.html", result, "Failed to load reports",
            user=user, title="Reports", pagination=pagination, query=query, campaign_types=CAMPAIGN_TYPES,
        )

    @router.get("/mailchimp/reports/{campaign_id}", response_class=HTMLResponse)
    async def report_detail(campaign_id: str, request: Request, user: Dict = Depends(cfg.get_current_user)):
        result = await dal.fetch_campaign_report(user_key(user), campaign_id)
        return render_page(cfg, request, "mailchimp/report.html", result, "Failed to load report",
                           user=user, title="Report", campaign_id=campaign_id, sections=REPORT_SECTIONS)

    @router.get("/mailchimp/reports/{campaign_id}/{section}", response_class=HTMLResponse)
    async def report_section(campaign_id: str, section: str, request: Request,
                             user: Dict = Depends(cfg.get_current_user)):
        if section not in REPORT_SECTIONS:
            raise HTTPException(status_code=404, detail="Page not found")
        return await render_section(
            cfg, request, user, REPORT_SECTIONS[section], campaign_id,
            back_url=f"/mailchimp/reports/{campaign_id}", back_label="Report",
        )

    return router
