"""Campaign schemas: campaigns, content, send checklist"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from mailchimp.schemas.common import MailchimpModel, PaginatedResponse, PaginationQuery, SortDirection

CampaignType = Literal["regular", "plaintext", "absplit", "rss", "variate"]
CampaignStatus = Literal["save", "paused", "schedule", "sending", "sent"]


class CampaignRecipients(MailchimpModel):
    list_id: Optional[str] = None
    list_is_active: bool = True
    list_name: Optional[str] = None
    segment_text: Optional[str] = None
    recipient_count: int = 0


class CampaignSettings(MailchimpModel):
    subject_line: Optional[str] = None
    preview_text: Optional[str] = None
    title: Optional[str] = None
    from_name: Optional[str] = None
    reply_to: Optional[str] = None
    to_name: Optional[str] = None
    template_id: Optional[int] = None


class CampaignTracking(MailchimpModel):
    opens: bool = False
    html_clicks: bool = False
    text_clicks: bool = False
    goal_tracking: bool = False
    ecomm360: bool = False
    google_analytics: Optional[str] = None


class CampaignReportSummary(MailchimpModel):
    opens: int = 0
    unique_opens: int = 0
    open_rate: float = 0
    clicks: int = 0
    subscriber_clicks: int = 0
    click_rate: float = 0


class Campaign(MailchimpModel):
    id: str
    web_id: Optional[int] = None
    type: str
    status: str
    create_time: Optional[str] = None
    send_time: Optional[str] = None
    archive_url: Optional[str] = None
    long_archive_url: Optional[str] = None
    emails_sent: int = 0
    content_type: Optional[str] = None
    recipients: CampaignRecipients = CampaignRecipients()
    settings: CampaignSettings = CampaignSettings()
    tracking: CampaignTracking = CampaignTracking()
    report_summary: Optional[CampaignReportSummary] = None

    @property
    def title(self) -> str:
        return self.settings.title or self.settings.subject_line or self.id


class CampaignList(PaginatedResponse):
    campaigns: List[Campaign] = Field(default_factory=list)


class CampaignContent(MailchimpModel):
    plain_text: Optional[str] = None
    html: Optional[str] = None
    archive_html: Optional[str] = None
    variate_contents: Optional[List[Dict[str, Any]]] = None


class SendChecklistItem(MailchimpModel):
    type: str
    id: int
    heading: str
    details: str = ""


class SendChecklist(MailchimpModel):
    is_ready: bool
    items: List[SendChecklistItem] = Field(default_factory=list)


class CampaignsQuery(PaginationQuery):
    type: Optional[CampaignType] = None
    status: Optional[CampaignStatus] = None
    list_id: Optional[str] = None
    folder_id: Optional[str] = None
    before_send_time: Optional[datetime] = None
    since_send_time: Optional[datetime] = None
    before_create_time: Optional[datetime] = None
    since_create_time: Optional[datetime] = None
    sort_field: Optional[Literal["create_time", "send_time"]] = None
    sort_dir: Optional[SortDirection] = None
