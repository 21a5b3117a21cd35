"""Batch webhooks"""
from typing import List, Optional

from pydantic import Field

from mailchimp.schemas.common import MailchimpModel, PaginatedResponse


class BatchWebhook(MailchimpModel):
    id: str
    url: str
    enabled: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class BatchWebhookList(PaginatedResponse):
    webhooks: List[BatchWebhook] = Field(default_factory=list)
