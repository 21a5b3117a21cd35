"""Landing page schemas and landing page reports"""
from typing import List, Literal, Optional

from pydantic import Field

from mailchimp.schemas.common import MailchimpModel, PaginatedResponse, PaginationQuery, SortDirection


class LandingPageTracking(MailchimpModel):
    track_with_mailchimp: bool = False
    enable_restricted_data_processing: bool = False


class LandingPage(MailchimpModel):
    id: str
    name: str = ""
    title: str = ""
    description: str = ""
    template_id: Optional[int] = None
    status: str
    list_id: Optional[str] = None
    store_id: Optional[str] = None
    web_id: Optional[int] = None
    created_at: Optional[str] = None
    published_at: Optional[str] = None
    unpublished_at: Optional[str] = None
    updated_at: Optional[str] = None
    url: Optional[str] = None
    tracking: Optional[LandingPageTracking] = None


class LandingPageList(PaginatedResponse):
    landing_pages: List[LandingPage] = Field(default_factory=list)


class LandingPagesQuery(PaginationQuery):
    sort_field: Optional[Literal["created_at", "updated_at"]] = None
    sort_dir: Optional[SortDirection] = None


class LandingPageTimeseriesPoint(MailchimpModel):
    date: str
    val: int = 0


class LandingPageTimeseries(MailchimpModel):
    daily_stats: List[LandingPageTimeseriesPoint] = Field(default_factory=list)
    weekly_stats: List[LandingPageTimeseriesPoint] = Field(default_factory=list)


class LandingPageReport(MailchimpModel):
    id: str
    name: str = ""
    title: str = ""
    url: Optional[str] = None
    published_at: Optional[str] = None
    unpublished_at: Optional[str] = None
    status: Optional[str] = None
    list_id: Optional[str] = None
    list_name: Optional[str] = None
    web_id: Optional[int] = None
    visits: int = 0
    unique_visits: int = 0
    subscribes: int = 0
    clicks: int = 0
    conversion_rate: float = 0
    timeseries: Optional[LandingPageTimeseries] = None
