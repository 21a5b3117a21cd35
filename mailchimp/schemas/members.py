"""List member schemas: members and their sub-resources, member search"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from mailchimp.schemas.common import (
    MailchimpModel, MemberStatusInclusion, PaginatedResponse, PaginationQuery, QueryParams, SortDirection
)

MemberStatus = Literal["subscribed", "unsubscribed", "cleaned", "pending", "transactional", "archived"]


class MemberStats(MailchimpModel):
    avg_open_rate: float = 0
    avg_click_rate: float = 0


class MemberLocation(MailchimpModel):
    latitude: float = 0
    longitude: float = 0
    country_code: str = ""
    timezone: str = ""


class MemberTagRef(MailchimpModel):
    id: int
    name: str


class MemberLastNote(MailchimpModel):
    note_id: int
    created_at: Optional[str] = None
    created_by: Optional[str] = None
    note: str = ""


class Member(MailchimpModel):
    id: str
    email_address: str
    unique_email_id: Optional[str] = None
    contact_id: Optional[str] = None
    full_name: str = ""
    web_id: Optional[int] = None
    email_type: Optional[str] = None
    status: str
    unsubscribe_reason: Optional[str] = None
    merge_fields: Dict[str, Any] = Field(default_factory=dict)
    interests: Dict[str, bool] = Field(default_factory=dict)
    stats: MemberStats = MemberStats()
    ip_signup: str = ""
    timestamp_signup: str = ""
    ip_opt: str = ""
    timestamp_opt: str = ""
    member_rating: int = 0
    last_changed: Optional[str] = None
    language: str = ""
    vip: bool = False
    email_client: str = ""
    location: Optional[MemberLocation] = None
    source: Optional[str] = None
    tags_count: int = 0
    tags: List[MemberTagRef] = Field(default_factory=list)
    last_note: Optional[MemberLastNote] = None
    list_id: Optional[str] = None


class MemberList(PaginatedResponse):
    list_id: Optional[str] = None
    members: List[Member] = Field(default_factory=list)


class MembersQuery(PaginationQuery, MemberStatusInclusion):
    email_type: Optional[Literal["html", "text"]] = None
    status: Optional[MemberStatus] = None
    since_timestamp_opt: Optional[datetime] = None
    before_timestamp_opt: Optional[datetime] = None
    since_last_changed: Optional[datetime] = None
    before_last_changed: Optional[datetime] = None
    vip_only: Optional[bool] = None
    sort_field: Optional[Literal["timestamp_opt", "timestamp_signup", "last_changed"]] = None
    sort_dir: Optional[SortDirection] = None


# === Member sub-resources ===

class MemberTag(MailchimpModel):
    id: int
    name: str
    date_added: Optional[str] = None


class MemberTagList(PaginatedResponse):
    tags: List[MemberTag] = Field(default_factory=list)


class MemberNote(MailchimpModel):
    id: int
    created_at: Optional[str] = None
    created_by: Optional[str] = None
    updated_at: Optional[str] = None
    note: str = ""
    list_id: Optional[str] = None
    email_id: Optional[str] = None
    contact_id: Optional[str] = None


class MemberNotes(PaginatedResponse):
    email_id: Optional[str] = None
    list_id: Optional[str] = None
    notes: List[MemberNote] = Field(default_factory=list)


class MemberNotesQuery(PaginationQuery):
    sort_field: Optional[Literal["created_at", "updated_at"]] = None
    sort_dir: Optional[SortDirection] = None


class MemberActivityEvent(MailchimpModel):
    activity_type: str
    created_at_timestamp: Optional[str] = None
    campaign_id: Optional[str] = None
    campaign_title: Optional[str] = None
    link_clicked: Optional[str] = None


class MemberActivityFeed(PaginatedResponse):
    email_id: Optional[str] = None
    list_id: Optional[str] = None
    contact_id: Optional[str] = None
    activity: List[MemberActivityEvent] = Field(default_factory=list)


class MemberActivityQuery(PaginationQuery):
    activity_filters: Optional[List[str]] = None


class MemberGoal(MailchimpModel):
    goal_id: int
    event: str
    last_visited_at: Optional[str] = None
    data: Optional[str] = None


class MemberGoals(PaginatedResponse):
    email_id: Optional[str] = None
    list_id: Optional[str] = None
    goals: List[MemberGoal] = Field(default_factory=list)


# === Search ===

class SearchMatches(MailchimpModel):
    members: List[Member] = Field(default_factory=list)
    total_items: int = 0


class SearchMembers(MailchimpModel):
    exact_matches: SearchMatches = SearchMatches()
    full_search: SearchMatches = SearchMatches()


class SearchMembersQuery(QueryParams):
    query: str = Field(min_length=1)
    list_id: Optional[str] = None
