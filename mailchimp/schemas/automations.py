"""Classic automation workflows"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from mailchimp.schemas.common import MailchimpModel, PaginatedResponse, PaginationQuery

AutomationStatus = Literal["save", "paused", "sending"]


class AutomationRecipients(MailchimpModel):
    list_id: Optional[str] = None
    list_is_active: bool = True
    list_name: Optional[str] = None
    store_id: Optional[str] = None


class AutomationSettings(MailchimpModel):
    title: Optional[str] = None
    from_name: Optional[str] = None
    reply_to: Optional[str] = None


class AutomationReportSummary(MailchimpModel):
    opens: int = 0
    unique_opens: int = 0
    open_rate: float = 0
    clicks: int = 0
    subscriber_clicks: int = 0
    click_rate: float = 0


class Automation(MailchimpModel):
    id: str
    create_time: Optional[str] = None
    start_time: Optional[str] = None
    status: str
    emails_sent: int = 0
    recipients: AutomationRecipients = AutomationRecipients()
    settings: AutomationSettings = AutomationSettings()
    report_summary: Optional[AutomationReportSummary] = None


class AutomationList(PaginatedResponse):
    automations: List[Automation] = Field(default_factory=list)


class AutomationsQuery(PaginationQuery):
    status: Optional[AutomationStatus] = None
    before_create_time: Optional[datetime] = None
    since_create_time: Optional[datetime] = None
    before_start_time: Optional[datetime] = None
    since_start_time: Optional[datetime] = None
