"""
Mailchimp schemas - pydantic mirrors of the Marketing API resources the panel reads
"""
from mailchimp.schemas.common import (
    Link, ProblemDetail, PaginatedResponse, QueryParams, PaginationQuery, MemberStatusInclusion,
)
from mailchimp.schemas.root import ApiRoot
from mailchimp.schemas.campaigns import (
    Campaign, CampaignList, CampaignContent, SendChecklist, CampaignsQuery,
)
from mailchimp.schemas.reports import (
    Report, ReportList, ReportsQuery, OpenDetails, OpenDetailsQuery, ClickDetails,
    AbuseReportList, UnsubscribeList, EmailActivityList, EmailActivityQuery,
    SentToList, LocationActivityList, AdviceList, DomainPerformance,
)
from mailchimp.schemas.lists import (
    MailchimpList, ListCollection, ListsQuery, ListActivity, GrowthHistory, GrowthHistoryQuery,
    ListLocations, InterestCategory, InterestCategoryList, InterestList,
)
from mailchimp.schemas.members import (
    Member, MemberList, MembersQuery, MemberTagList, MemberNotes, MemberNotesQuery,
    MemberActivityFeed, MemberActivityQuery, MemberGoals, SearchMembers, SearchMembersQuery,
)
from mailchimp.schemas.segments import SegmentList, SegmentsQuery, SegmentMembers, SegmentMembersQuery
from mailchimp.schemas.landing_pages import LandingPage, LandingPageList, LandingPagesQuery, LandingPageReport
from mailchimp.schemas.automations import AutomationList, AutomationsQuery
from mailchimp.schemas.webhooks import BatchWebhookList
from mailchimp.schemas.oauth import OAuthToken, OAuthMetadata

__all__ = [
    'Link', 'ProblemDetail', 'PaginatedResponse', 'QueryParams', 'PaginationQuery', 'MemberStatusInclusion',
    'ApiRoot',
    'Campaign', 'CampaignList', 'CampaignContent', 'SendChecklist', 'CampaignsQuery',
    'Report', 'ReportList', 'ReportsQuery', 'OpenDetails', 'OpenDetailsQuery', 'ClickDetails',
    'AbuseReportList', 'UnsubscribeList', 'EmailActivityList', 'EmailActivityQuery',
    'SentToList', 'LocationActivityList', 'AdviceList', 'DomainPerformance',
    'MailchimpList', 'ListCollection', 'ListsQuery', 'ListActivity', 'GrowthHistory', 'GrowthHistoryQuery',
    'ListLocations', 'InterestCategory', 'InterestCategoryList', 'InterestList',
    'Member', 'MemberList', 'MembersQuery', 'MemberTagList', 'MemberNotes', 'MemberNotesQuery',
    'MemberActivityFeed', 'MemberActivityQuery', 'MemberGoals', 'SearchMembers', 'SearchMembersQuery',
    'SegmentList', 'SegmentsQuery', 'SegmentMembers', 'SegmentMembersQuery',
    'LandingPage', 'LandingPageList', 'LandingPagesQuery', 'LandingPageReport',
    'AutomationList', 'AutomationsQuery',
    'BatchWebhookList',
    'OAuthToken', 'OAuthMetadata',
]
