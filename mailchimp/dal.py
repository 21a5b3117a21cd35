"""
Mailchimp data access layer

Every page and JSON endpoint goes through here: one function per API
endpoint, each returning an ApiResult instead of raising.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional, Type

from pydantic import BaseModel, ValidationError

from mailchimp.client import MailchimpClient, RateLimitInfo
from mailchimp.errors import (
    ErrorCodes, MailchimpAPIError, MailchimpAuthError, MailchimpConnectionError,
    MailchimpNetworkError, MailchimpRateLimitError,
)
from mailchimp.schemas import (
    ApiRoot, CampaignList, Campaign, CampaignContent, SendChecklist,
    ReportList, Report, OpenDetails, ClickDetails, AbuseReportList, UnsubscribeList,
    EmailActivityList, SentToList, LocationActivityList, AdviceList, DomainPerformance,
    ListCollection, MailchimpList, ListActivity, GrowthHistory, ListLocations,
    InterestCategoryList, InterestCategory, InterestList,
    SegmentList, SegmentMembers, MemberList, Member, MemberTagList, MemberNotes,
    MemberActivityFeed, MemberGoals, SearchMembers,
    LandingPageList, LandingPage, LandingPageReport, AutomationList, BatchWebhookList,
    QueryParams,
)
from mailchimp.validation import get_user_client

logger = logging.getLogger(__name__)


class ApiResult(BaseModel):
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    status_code: Optional[int] = None
    rate_limit: Optional[RateLimitInfo] = None


async def mailchimp_api_call(user_id: Optional[str], fn: Callable[[MailchimpClient], Awaitable[Any]]) -> ApiResult:
    """Run fn with the user's client and map every failure to an ApiResult"""
    client = None
    try:
        client = await get_user_client(user_id)
        data = await fn(client)
        return ApiResult(success=True, data=data, rate_limit=client.rate_limit)
    except MailchimpConnectionError as e:
        return ApiResult(success=False, error=str(e), error_code=e.error_code, status_code=401)
    except MailchimpRateLimitError as e:
        logger.warning(f"🐢 Mailchimp rate limit hit for user {user_id}, retry in {e.retry_after}s")
        return ApiResult(
            success=False,
            error=f"Rate limit exceeded. Try again in {e.retry_after} seconds.",
            error_code=ErrorCodes.RATE_LIMIT,
            status_code=429,
            rate_limit=RateLimitInfo(
                remaining=0, limit=e.limit,
                reset_time=datetime.now(timezone.utc) + timedelta(seconds=e.retry_after),
            ),
        )
    except MailchimpAuthError as e:
        return ApiResult(success=False, error=str(e), error_code=ErrorCodes.TOKEN_INVALID, status_code=e.status_code)
    except MailchimpAPIError as e:
        return ApiResult(success=False, error=str(e), error_code=ErrorCodes.API_ERROR, status_code=e.status_code)
    except MailchimpNetworkError as e:
        logger.error(f"Mailchimp network error for user {user_id}: {e}")
        return ApiResult(success=False, error=str(e), error_code=ErrorCodes.API_ERROR, status_code=503)
    except Exception as e:
        logger.exception(f"Unexpected error calling Mailchimp for user {user_id}")
        return ApiResult(success=False, error=str(e) or "Unknown error occurred",
                         error_code=ErrorCodes.UNKNOWN_ERROR, status_code=500)


def _params(params: Optional[QueryParams]):
    return params.to_params() if params is not None else None


async def _get(user_id: Optional[str], endpoint: str, params: Optional[QueryParams] = None,
               schema: Optional[Type[BaseModel]] = None, label: str = "response") -> ApiResult:
    """GET an endpoint and, when a schema is given, validate the payload with it"""
    result = await mailchimp_api_call(user_id, lambda client: client.get(endpoint, _params(params)))
    if not result.success or schema is None:
        return result
    try:
        return result.model_copy(update={"data": schema.model_validate(result.data)})
    except ValidationError as e:
        logger.warning(f"Unexpected {label} payload from {endpoint}: {e.error_count()} validation error(s)")
        return ApiResult(
            success=False,
            error=f"Invalid {label} data format",
            error_code=ErrorCodes.SCHEMA_VALIDATION,
            status_code=502,
        )


# === Account ===

async def fetch_api_root(user_id, params: QueryParams = None):
    return await _get(user_id, "/", params, ApiRoot, "account")


async def health_check(user_id):
    return await _get(user_id, "/ping")


# === Campaigns ===

async def fetch_campaigns(user_id, params: QueryParams = None):
    return await _get(user_id, "/campaigns", params, CampaignList, "campaigns")


async def fetch_campaign(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/campaigns/{campaign_id}", params, Campaign, "campaign")


async def fetch_campaign_content(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/campaigns/{campaign_id}/content", params, CampaignContent, "campaign content")


async def fetch_campaign_send_checklist(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/campaigns/{campaign_id}/send-checklist", params, SendChecklist, "send checklist")


# === Reports ===

async def fetch_campaign_reports(user_id, params: QueryParams = None):
    return await _get(user_id, "/reports", params, ReportList, "reports")


async def fetch_campaign_report(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}", params, Report, "report")


async def fetch_campaign_open_list(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}/open-details", params, OpenDetails, "open details")


async def fetch_campaign_click_details(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}/click-details", params, ClickDetails, "click details")


async def fetch_campaign_abuse_reports(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}/abuse-reports", params, AbuseReportList, "abuse reports")


async def fetch_campaign_unsubscribes(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}/unsubscribed", params, UnsubscribeList, "unsubscribes")


async def fetch_campaign_email_activity(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}/email-activity", params, EmailActivityList, "email activity")


async def fetch_campaign_sent_to(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}/sent-to", params, SentToList, "sent-to")


async def fetch_campaign_locations(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}/locations", params, LocationActivityList, "location activity")


async def fetch_campaign_advice(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}/advice", params, AdviceList, "advice")


async def fetch_domain_performance(user_id, campaign_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reports/{campaign_id}/domain-performance", params, DomainPerformance,
                      "domain performance")


# === Lists ===

async def fetch_lists(user_id, params: QueryParams = None):
    return await _get(user_id, "/lists", params, ListCollection, "lists")


async def fetch_list(user_id, list_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}", params, MailchimpList, "list")


async def fetch_list_activity(user_id, list_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/activity", params, ListActivity, "list activity")


async def fetch_list_growth_history(user_id, list_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/growth-history", params, GrowthHistory, "growth history")


async def fetch_list_locations(user_id, list_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/locations", params, ListLocations, "list locations")


async def fetch_list_interest_categories(user_id, list_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/interest-categories", params, InterestCategoryList,
                      "interest categories")


async def fetch_interest_category(user_id, list_id: str, category_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/interest-categories/{category_id}", params, InterestCategory,
                      "interest category")


async def fetch_list_interests(user_id, list_id: str, category_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/interest-categories/{category_id}/interests", params,
                      InterestList, "interests")


async def fetch_list_segments(user_id, list_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/segments", params, SegmentList, "segments")


async def fetch_segment_members(user_id, list_id: str, segment_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/segments/{segment_id}/members", params, SegmentMembers,
                      "segment members")


# === Members ===

async def fetch_list_members(user_id, list_id: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/members", params, MemberList, "members")


async def fetch_member(user_id, list_id: str, subscriber_hash: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/members/{subscriber_hash}", params, Member, "member")


async def fetch_member_tags(user_id, list_id: str, subscriber_hash: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/members/{subscriber_hash}/tags", params, MemberTagList,
                      "member tags")


async def fetch_member_notes(user_id, list_id: str, subscriber_hash: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/members/{subscriber_hash}/notes", params, MemberNotes,
                      "member notes")


async def fetch_member_activity(user_id, list_id: str, subscriber_hash: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/members/{subscriber_hash}/activity-feed", params,
                      MemberActivityFeed, "member activity")


async def fetch_member_goals(user_id, list_id: str, subscriber_hash: str, params: QueryParams = None):
    return await _get(user_id, f"/lists/{list_id}/members/{subscriber_hash}/goals", params, MemberGoals,
                      "member goals")


async def search_members(user_id, params: QueryParams = None):
    return await _get(user_id, "/search-members", params, SearchMembers, "member search")


# === Landing pages, automations, webhooks ===

async def fetch_landing_pages(user_id, params: QueryParams = None):
    return await _get(user_id, "/landing-pages", params, LandingPageList, "landing pages")


async def fetch_landing_page(user_id, page_id: str, params: QueryParams = None):
    return await _get(user_id, f"/landing-pages/{page_id}", params, LandingPage, "landing page")


async def fetch_landing_page_report(user_id, outreach_id: str, params: QueryParams = None):
    return await _get(user_id, f"/reporting/landing-pages/{outreach_id}", params, LandingPageReport,
                      "landing page report")


async def fetch_automations(user_id, params: QueryParams = None):
    return await _get(user_id, "/automations", params, AutomationList, "automations")


async def fetch_batch_webhooks(user_id, params: QueryParams = None):
    return await _get(user_id, "/batch-webhooks", params, BatchWebhookList, "batch webhooks")
