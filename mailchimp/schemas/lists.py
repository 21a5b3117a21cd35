"""Audience (list) schemas"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from mailchimp.schemas.common import MailchimpModel, PaginatedResponse, PaginationQuery, SortDirection


class ListContact(MailchimpModel):
    company: str = ""
    address1: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""


class CampaignDefaults(MailchimpModel):
    from_name: str = ""
    from_email: str = ""
    subject: str = ""
    language: str = ""


class AudienceStats(MailchimpModel):
    member_count: int = 0
    total_contacts: int = 0
    unsubscribe_count: int = 0
    cleaned_count: int = 0
    member_count_since_send: int = 0
    unsubscribe_count_since_send: int = 0
    cleaned_count_since_send: int = 0
    campaign_count: int = 0
    campaign_last_sent: Optional[str] = None
    merge_field_count: int = 0
    avg_sub_rate: float = 0
    avg_unsub_rate: float = 0
    target_sub_rate: float = 0
    open_rate: float = 0
    click_rate: float = 0
    last_sub_date: Optional[str] = None
    last_unsub_date: Optional[str] = None


class MailchimpList(MailchimpModel):
    id: str
    web_id: Optional[int] = None
    name: str
    contact: Optional[ListContact] = None
    permission_reminder: str = ""
    campaign_defaults: Optional[CampaignDefaults] = None
    date_created: Optional[str] = None
    list_rating: int = 0
    email_type_option: bool = False
    subscribe_url_short: Optional[str] = None
    subscribe_url_long: Optional[str] = None
    visibility: Optional[str] = None
    double_optin: bool = False
    has_welcome: bool = False
    stats: AudienceStats = AudienceStats()


class ListCollection(PaginatedResponse):
    lists: List[MailchimpList] = Field(default_factory=list)


class ListsQuery(PaginationQuery):
    before_date_created: Optional[datetime] = None
    since_date_created: Optional[datetime] = None
    before_campaign_last_sent: Optional[datetime] = None
    since_campaign_last_sent: Optional[datetime] = None
    email: Optional[str] = None
    sort_field: Optional[Literal["date_created"]] = None
    sort_dir: Optional[SortDirection] = None
    has_ecommerce_store: Optional[bool] = None
    include_total_contacts: Optional[bool] = None


# === List sub-resources ===

class ListActivityDay(MailchimpModel):
    day: str
    emails_sent: int = 0
    unique_opens: int = 0
    recipient_clicks: int = 0
    hard_bounce: int = 0
    soft_bounce: int = 0
    subs: int = 0
    unsubs: int = 0
    other_adds: int = 0
    other_removes: int = 0


class ListActivity(PaginatedResponse):
    list_id: Optional[str] = None
    activity: List[ListActivityDay] = Field(default_factory=list)


class GrowthHistoryMonth(MailchimpModel):
    list_id: Optional[str] = None
    month: str
    existing: int = 0
    imports: int = 0
    optins: int = 0
    subscribed: int = 0
    unsubscribed: int = 0
    reconfirm: int = 0
    cleaned: int = 0
    pending: int = 0
    deleted: int = 0
    transactional: int = 0


class GrowthHistory(PaginatedResponse):
    list_id: Optional[str] = None
    history: List[GrowthHistoryMonth] = Field(default_factory=list)


class GrowthHistoryQuery(PaginationQuery):
    sort_field: Optional[Literal["month"]] = None
    sort_dir: Optional[SortDirection] = None


class ListLocation(MailchimpModel):
    country: str
    cc: str = ""
    percent: float = 0
    total: int = 0


class ListLocations(MailchimpModel):
    list_id: Optional[str] = None
    locations: List[ListLocation] = Field(default_factory=list)
    total_items: int = 0


class InterestCategory(MailchimpModel):
    list_id: Optional[str] = None
    id: str
    title: str
    display_order: int = 0
    type: Optional[str] = None


class InterestCategoryList(PaginatedResponse):
    list_id: Optional[str] = None
    categories: List[InterestCategory] = Field(default_factory=list)


class Interest(MailchimpModel):
    category_id: Optional[str] = None
    list_id: Optional[str] = None
    id: str
    name: str
    subscriber_count: Optional[str] = None
    display_order: int = 0


class InterestList(PaginatedResponse):
    list_id: Optional[str] = None
    category_id: Optional[str] = None
    interests: List[Interest] = Field(default_factory=list)
