"""Segment schemas"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from mailchimp.schemas.common import MailchimpModel, MemberStatusInclusion, PaginatedResponse, PaginationQuery

SegmentType = Literal["saved", "static", "fuzzy"]


class SegmentOptions(MailchimpModel):
    match: Optional[str] = None
    conditions: List[Dict[str, Any]] = Field(default_factory=list)


class Segment(MailchimpModel):
    id: int
    name: str
    member_count: int = 0
    type: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    options: Optional[SegmentOptions] = None
    list_id: Optional[str] = None


class SegmentList(PaginatedResponse):
    list_id: Optional[str] = None
    segments: List[Segment] = Field(default_factory=list)


class SegmentsQuery(PaginationQuery, MemberStatusInclusion):
    type: Optional[SegmentType] = None
    since_created_at: Optional[datetime] = None
    before_created_at: Optional[datetime] = None
    since_updated_at: Optional[datetime] = None
    before_updated_at: Optional[datetime] = None


class SegmentMember(MailchimpModel):
    id: str
    email_address: str
    full_name: str = ""
    status: Optional[str] = None
    member_rating: int = 0
    last_changed: Optional[str] = None
    vip: bool = False
    list_id: Optional[str] = None


class SegmentMembers(PaginatedResponse):
    members: List[SegmentMember] = Field(default_factory=list)


class SegmentMembersQuery(PaginationQuery, MemberStatusInclusion):
    pass
