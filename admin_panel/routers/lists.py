"""Audiences router: lists, list sub-pages, segments, interests, members"""
from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import HTMLResponse
from typing import Dict
import logging

from admin_panel.core import RouterConfig, user_key
from admin_panel.utils.pages import Column, Section, list_params, render_page, render_section, server_prefix_for
from mailchimp import dal
from mailchimp.schemas import (
    GrowthHistoryQuery, ListsQuery, MemberActivityQuery, MemberNotesQuery, MembersQuery,
    PaginationQuery, SegmentMembersQuery, SegmentsQuery,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["lists"])

MEMBER_STATUSES = ("subscribed", "unsubscribed", "cleaned", "pending", "transactional", "archived")


def _member_url(member) -> str:
    return f"/mailchimp/lists/{member.list_id}/members/{member.id}"


LIST_SECTIONS = {
    "activity": Section("Recent activity", "fetch_list_activity", "activity", [
        Column("Day", "day", "date"),
        Column("Emails sent", "emails_sent", "number"),
        Column("Unique opens", "unique_opens", "number"),
        Column("Clicks", "recipient_clicks", "number"),
        Column("Subscribes", "subs", "number"),
        Column("Unsubscribes", "unsubs", "number"),
        Column("Hard bounces", "hard_bounce", "number"),
    ], PaginationQuery),
    "growth-history": Section("Growth history", "fetch_list_growth_history", "history", [
        Column("Month", "month"),
        Column("Existing", "existing", "number"),
        Column("Opt-ins", "optins", "number"),
        Column("Imports", "imports", "number"),
        Column("Subscribed", "subscribed", "number"),
        Column("Unsubscribed", "unsubscribed", "number"),
        Column("Cleaned", "cleaned", "number"),
    ], GrowthHistoryQuery),
    "locations": Section("Locations", "fetch_list_locations", "locations", [
        Column("Country", "country"),
        Column("Code", "cc"),
        Column("Subscribers", "total", "number"),
        Column("Share", "percent", "percent"),
    ]),
    "interest-categories": Section("Interest categories", "fetch_list_interest_categories", "categories", [
        Column("Title", "title", link=lambda c: f"/mailchimp/lists/{c.list_id}/interest-categories/{c.id}"),
        Column("Type", "type", "badge"),
        Column("Display order", "display_order"),
    ], PaginationQuery),
    "segments": Section("Segments", "fetch_list_segments", "segments", [
        Column("Name", "name", link=lambda s: f"/mailchimp/lists/{s.list_id}/segments/{s.id}/members"),
        Column("Type", "type", "badge"),
        Column("Members", "member_count", "number"),
        Column("Updated", "updated_at", "datetime"),
    ], SegmentsQuery),
}

MEMBER_COLUMNS = [
    Column("Email", "email_address", link=_member_url),
    Column("Name", "full_name"),
    Column("Status", "status", "badge"),
    Column("Rating", "member_rating"),
    Column("Avg. open rate", "stats.avg_open_rate", "fraction"),
    Column("Last changed", "last_changed", "datetime"),
]

MEMBER_SECTIONS = {
    "tags": Section("Tags", "fetch_member_tags", "tags", [
        Column("Tag", "name"),
        Column("Added", "date_added", "datetime"),
    ], PaginationQuery),
    "notes": Section("Notes", "fetch_member_notes", "notes", [
        Column("Note", "note"),
        Column("Author", "created_by"),
        Column("Created", "created_at", "datetime"),
    ], MemberNotesQuery),
    "activity": Section("Activity", "fetch_member_activity", "activity", [
        Column("Event", "activity_type", "badge"),
        Column("Campaign", "campaign_title"),
        Column("Link", "link_clicked"),
        Column("When", "created_at_timestamp", "datetime"),
    ], MemberActivityQuery),
    "goals": Section("Goals", "fetch_member_goals", "goals", [
        Column("Event", "event"),
        Column("Data", "data"),
        Column("Last visit", "last_visited_at", "datetime"),
    ]),
}


def setup_routes(cfg: RouterConfig):
    """Setup routes with dependencies"""

    @router.get("/mailchimp/lists", response_class=HTMLResponse)
    async def lists_page(request: Request, user: Dict = Depends(cfg.get_current_user)):
        pagination, query = list_params(
            request, ListsQuery,
            sort_field=request.query_params.get("sortField"), sort_dir=request.query_params.get("sortDir"),
        )
        result = await dal.fetch_lists(user_key(user), query)
        return render_page(
            cfg, request, "mailchimp/collection.html", result, "Failed to load audiences",
            user=user, title="Audiences", items_key="lists", pagination=pagination,
            columns=[
                Column("Name", "name", link=lambda lst: f"/mailchimp/lists/{lst.id}"),
                Column("Subscribers", "stats.member_count", "number"),
                Column("Open rate", "stats.open_rate", "percent"),
                Column("Click rate", "stats.click_rate", "percent"),
                Column("Campaigns", "stats.campaign_count", "number"),
                Column("Created", "date_created", "date"),
            ],
        )

    @router.get("/mailchimp/lists/{list_id}", response_class=HTMLResponse)
    async def list_detail(list_id: str, request: Request, user: Dict = Depends(cfg.get_current_user)):
        uid = user_key(user)
        result = await dal.fetch_list(uid, list_id)
        return render_page(cfg, request, "mailchimp/list.html", result, "Failed to load audience",
                           user=user, title="Audience", list_id=list_id, sections=LIST_SECTIONS,
                           server_prefix=await server_prefix_for(uid))

    # === Members ===

    @router.get("/mailchimp/lists/{list_id}/members", response_class=HTMLResponse)
    async def members_page(list_id: str, request: Request, user: Dict = Depends(cfg.get_current_user)):
        status = request.query_params.get("status")
        pagination, query = list_params(request, MembersQuery, status=status)
        result = await dal.fetch_list_members(user_key(user), list_id, query)
        return render_page(
            cfg, request, "mailchimp/collection.html", result, "Failed to load members",
            user=user, title="Members", items_key="members", pagination=pagination, columns=MEMBER_COLUMNS,
            status_filter=status, member_statuses=MEMBER_STATUSES,
            back_url=f"/mailchimp/lists/{list_id}", back_label="Audience",
        )

    @router.get("/mailchimp/lists/{list_id}/members/{subscriber_hash}", response_class=HTMLResponse)
    async def member_detail(list_id: str, subscriber_hash: str, request: Request,
                            user: Dict = Depends(cfg.get_current_user)):
        result = await dal.fetch_member(user_key(user), list_id, subscriber_hash)
        return render_page(cfg, request, "mailchimp/member.html", result, "Failed to load member",
                           user=user, title="Member", list_id=list_id, subscriber_hash=subscriber_hash,
                           sections=MEMBER_SECTIONS)

    @router.get("/mailchimp/lists/{list_id}/members/{subscriber_hash}/{section}", response_class=HTMLResponse)
    async def member_section(list_id: str, subscriber_hash: str, section: str, request: Request,
                             user: Dict = Depends(cfg.get_current_user)):
        if section not in MEMBER_SECTIONS:
            raise HTTPException(status_code=404, detail="Page not found")
        return await render_section(
            cfg, request, user, MEMBER_SECTIONS[section], list_id, subscriber_hash,
            back_url=f"/mailchimp/lists/{list_id}/members/{subscriber_hash}", back_label="Member",
        )

    # === Segments & interests ===

    @router.get("/mailchimp/lists/{list_id}/segments/{segment_id}/members", response_class=HTMLResponse)
    async def segment_members(list_id: str, segment_id: str, request: Request,
                              user: Dict = Depends(cfg.get_current_user)):
        section = Section("Segment members", "fetch_segment_members", "members", MEMBER_COLUMNS, SegmentMembersQuery)
        return await render_section(
            cfg, request, user, section, list_id, segment_id,
            back_url=f"/mailchimp/lists/{list_id}/segments", back_label="Segments",
        )

    @router.get("/mailchimp/lists/{list_id}/interest-categories/{category_id}", response_class=HTMLResponse)
    async def interest_category(list_id: str, category_id: str, request: Request,
                                user: Dict = Depends(cfg.get_current_user)):
        result = await dal.fetch_interest_category(user_key(user), list_id, category_id)
        return render_page(cfg, request, "mailchimp/interest_category.html", result,
                           "Failed to load interest category",
                           user=user, title="Interest category", list_id=list_id, category_id=category_id)

    @router.get("/mailchimp/lists/{list_id}/interest-categories/{category_id}/interests",
                response_class=HTMLResponse)
    async def interests(list_id: str, category_id: str, request: Request,
                        user: Dict = Depends(cfg.get_current_user)):
        section = Section("Interests", "fetch_list_interests", "interests", [
            Column("Name", "name"),
            Column("Subscribers", "subscriber_count"),
            Column("Display order", "display_order"),
        ], PaginationQuery)
        return await render_section(
            cfg, request, user, section, list_id, category_id,
            back_url=f"/mailchimp/lists/{list_id}/interest-categories/{category_id}", back_label="Category",
        )

    # Generic list sub-pages go last so the explicit routes above win
    @router.get("/mailchimp/lists/{list_id}/{section}", response_class=HTMLResponse)
    async def list_section(list_id: str, section: str, request: Request,
                           user: Dict = Depends(cfg.get_current_user)):
        if section not in LIST_SECTIONS:
            raise HTTPException(status_code=404, detail="Page not found")
        return await render_section(
            cfg, request, user, LIST_SECTIONS[section], list_id,
            back_url=f"/mailchimp/lists/{list_id}", back_label="Audience",
        )

    return router
