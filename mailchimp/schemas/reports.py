"""Campaign report schemas: summary report and its sub-resources"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from mailchimp.schemas.common import MailchimpModel, PaginatedResponse, PaginationQuery, SortDirection


class Bounces(MailchimpModel):
    hard_bounces: int = 0
    soft_bounces: int = 0
    syntax_errors: int = 0

    @property
    def total(self) -> int:
        return self.hard_bounces + self.soft_bounces + self.syntax_errors


class Forwards(MailchimpModel):
    forwards_count: int = 0
    forwards_opens: int = 0


class Opens(MailchimpModel):
    opens_total: int = 0
    unique_opens: int = 0
    open_rate: float = 0
    last_open: Optional[str] = None


class Clicks(MailchimpModel):
    clicks_total: int = 0
    unique_clicks: int = 0
    unique_subscriber_clicks: int = 0
    click_rate: float = 0
    last_click: Optional[str] = None


class IndustryStats(MailchimpModel):
    type: Optional[str] = None
    open_rate: float = 0
    click_rate: float = 0
    bounce_rate: float = 0
    unopen_rate: float = 0
    unsub_rate: float = 0
    abuse_rate: float = 0


class ListStats(MailchimpModel):
    sub_rate: float = 0
    unsub_rate: float = 0
    open_rate: float = 0
    click_rate: float = 0


class Ecommerce(MailchimpModel):
    total_orders: int = 0
    total_spent: float = 0
    total_revenue: float = 0
    currency_code: Optional[str] = None


class DeliveryStatus(MailchimpModel):
    enabled: bool = False
    can_cancel: bool = False
    status: Optional[str] = None
    emails_sent: int = 0
    emails_canceled: int = 0


class ShareReport(MailchimpModel):
    share_url: Optional[str] = None
    share_password: Optional[str] = None


class TimeseriesPoint(MailchimpModel):
    timestamp: str
    emails_sent: int = 0
    unique_opens: int = 0
    recipients_clicks: int = 0


class Report(MailchimpModel):
    id: str
    campaign_title: str = ""
    type: Optional[str] = None
    list_id: Optional[str] = None
    list_is_active: bool = True
    list_name: Optional[str] = None
    subject_line: Optional[str] = None
    preview_text: Optional[str] = None
    emails_sent: int = 0
    abuse_reports: int = 0
    unsubscribed: int = 0
    send_time: Optional[str] = None
    bounces: Bounces = Bounces()
    forwards: Forwards = Forwards()
    opens: Opens = Opens()
    clicks: Clicks = Clicks()
    industry_stats: Optional[IndustryStats] = None
    list_stats: Optional[ListStats] = None
    ab_split: Optional[Dict[str, Any]] = None
    timewarp: List[Dict[str, Any]] = Field(default_factory=list)
    timeseries: List[TimeseriesPoint] = Field(default_factory=list)
    share_report: Optional[ShareReport] = None
    ecommerce: Optional[Ecommerce] = None
    delivery_status: Optional[DeliveryStatus] = None


class ReportList(PaginatedResponse):
    reports: List[Report] = Field(default_factory=list)


class ReportsQuery(PaginationQuery):
    type: Optional[str] = None
    before_send_time: Optional[datetime] = None
    since_send_time: Optional[datetime] = None
    sort_field: Optional[Literal["send_time"]] = None
    sort_dir: Optional[SortDirection] = None


# === Sub-resources ===

class OpenEvent(MailchimpModel):
    timestamp: str


class OpenMember(MailchimpModel):
    email_id: Optional[str] = None
    email_address: str
    merge_fields: Dict[str, Any] = Field(default_factory=dict)
    vip: bool = False
    contact_status: Optional[str] = None
    opens_count: int = 0
    opens: List[OpenEvent] = Field(default_factory=list)


class OpenDetails(PaginatedResponse):
    campaign_id: Optional[str] = None
    total_opens: int = 0
    members: List[OpenMember] = Field(default_factory=list)


class OpenDetailsQuery(PaginationQuery):
    since: Optional[datetime] = None


class ClickedUrl(MailchimpModel):
    id: str
    url: str
    total_clicks: int = 0
    click_percentage: float = 0
    unique_clicks: int = 0
    unique_click_percentage: float = 0
    last_click: Optional[str] = None


class ClickDetails(PaginatedResponse):
    campaign_id: Optional[str] = None
    urls_clicked: List[ClickedUrl] = Field(default_factory=list)


class AbuseReport(MailchimpModel):
    id: int
    campaign_id: Optional[str] = None
    list_id: Optional[str] = None
    email_id: Optional[str] = None
    email_address: str
    merge_fields: Dict[str, Any] = Field(default_factory=dict)
    vip: bool = False
    date: Optional[str] = None


class AbuseReportList(PaginatedResponse):
    campaign_id: Optional[str] = None
    abuse_reports: List[AbuseReport] = Field(default_factory=list)


class Unsubscribe(MailchimpModel):
    email_id: Optional[str] = None
    email_address: str
    merge_fields: Dict[str, Any] = Field(default_factory=dict)
    vip: bool = False
    timestamp: Optional[str] = None
    reason: Optional[str] = None


class UnsubscribeList(PaginatedResponse):
    campaign_id: Optional[str] = None
    unsubscribes: List[Unsubscribe] = Field(default_factory=list)


class EmailActivityEvent(MailchimpModel):
    action: str
    type: Optional[str] = None
    timestamp: Optional[str] = None
    url: Optional[str] = None
    ip: Optional[str] = None


class EmailActivity(MailchimpModel):
    email_id: Optional[str] = None
    email_address: str
    activity: List[EmailActivityEvent] = Field(default_factory=list)


class EmailActivityList(PaginatedResponse):
    campaign_id: Optional[str] = None
    emails: List[EmailActivity] = Field(default_factory=list)


class EmailActivityQuery(PaginationQuery):
    since: Optional[datetime] = None


class SentToRecipient(MailchimpModel):
    email_id: Optional[str] = None
    email_address: str
    merge_fields: Dict[str, Any] = Field(default_factory=dict)
    vip: bool = False
    status: Optional[str] = None
    open_count: int = 0
    last_open: Optional[str] = None
    absplit_group: Optional[str] = None


class SentToList(PaginatedResponse):
    campaign_id: Optional[str] = None
    sent_to: List[SentToRecipient] = Field(default_factory=list)


class LocationActivity(MailchimpModel):
    country_code: str
    region: Optional[str] = None
    region_name: Optional[str] = None
    opens: int = 0


class LocationActivityList(PaginatedResponse):
    campaign_id: Optional[str] = None
    locations: List[LocationActivity] = Field(default_factory=list)


class Advice(MailchimpModel):
    type: str = "neutral"
    message: str


class AdviceList(PaginatedResponse):
    campaign_id: Optional[str] = None
    advice: List[Advice] = Field(default_factory=list)


class DomainStats(MailchimpModel):
    domain: str
    emails_sent: int = 0
    bounces: int = 0
    opens: int = 0
    clicks: int = 0
    unsubs: int = 0
    delivered: int = 0
    emails_pct: float = 0
    bounces_pct: float = 0
    opens_pct: float = 0
    clicks_pct: float = 0
    unsubs_pct: float = 0


class DomainPerformance(PaginatedResponse):
    campaign_id: str
    total_sent: int = 0
    domains: List[DomainStats] = Field(default_factory=list)
