"""
Dashboard aggregation over campaign reports and audiences

Rates coming from /reports are fractions (0.215); the summaries expose
them as percentages with two decimals (21.5). List stats are already
percentages and are only rounded.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

from mailchimp import dal
from mailchimp.schemas import ListCollection, ListsQuery, ReportList, ReportsQuery

AUDIENCE_LIST_LIMIT = 50
TOP_LISTS = 5


@dataclass
class CampaignFilters:
    limit: int = 10
    page: int = 1
    campaign_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def has_date_range(self) -> bool:
        return bool(self.start_date or self.end_date)

    @property
    def is_active(self) -> bool:
        return bool(self.has_date_range or self.campaign_type)


def _round2(value: float) -> float:
    """Round half up to 2 decimals"""
    return math.floor(value * 100 + 0.5) / 100


def rate_to_percent(rate: Optional[float]) -> float:
    return _round2((rate or 0) * 100)


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0


def build_reports_query(filters: CampaignFilters) -> ReportsQuery:
    query = ReportsQuery(
        count=filters.limit,
        offset=(filters.page - 1) * filters.limit,
        sort_field="send_time",
        sort_dir="DESC",
        type=filters.campaign_type or None,
    )
    if filters.start_date:
        query.since_send_time = datetime.combine(filters.start_date, time.min, tzinfo=timezone.utc)
    if filters.end_date:
        # whole end day is included
        query.before_send_time = datetime.combine(filters.end_date, time(23, 59, 59), tzinfo=timezone.utc)
    return query


def summarize_reports(reports: ReportList, filters: CampaignFilters) -> Dict[str, Any]:
    rows = reports.reports
    sent = [r for r in rows if r.emails_sent > 0]
    return {
        "totalCampaigns": reports.total_items,
        "filteredCount": len(rows) if filters.is_active else None,
        "sentCampaigns": len(sent),
        "avgOpenRate": rate_to_percent(_mean([r.opens.open_rate for r in sent])),
        "avgClickRate": rate_to_percent(_mean([r.clicks.click_rate for r in sent])),
        "totalEmailsSent": sum(r.emails_sent for r in rows),
        "recentCampaigns": [
            {
                "id": r.id,
                "title": r.campaign_title,
                # reports only exist for sent campaigns
                "status": "sent",
                "emailsSent": r.emails_sent,
                "openRate": rate_to_percent(r.opens.open_rate),
                "clickRate": rate_to_percent(r.clicks.click_rate),
                "sendTime": r.send_time,
            }
            for r in rows
        ],
    }


def summarize_lists(collection: ListCollection) -> Dict[str, Any]:
    lists = collection.lists
    top = sorted(lists, key=lambda lst: lst.stats.member_count, reverse=True)[:TOP_LISTS]
    return {
        "totalLists": collection.total_items,
        "totalSubscribers": sum(lst.stats.member_count for lst in lists),
        "avgGrowthRate": _round2(_mean([lst.stats.avg_sub_rate or 0 for lst in lists])),
        "avgOpenRate": _round2(_mean([lst.stats.open_rate or 0 for lst in lists])),
        "avgClickRate": _round2(_mean([lst.stats.click_rate or 0 for lst in lists])),
        "topLists": [
            {
                "id": lst.id,
                "name": lst.name,
                "memberCount": lst.stats.member_count,
                "growthRate": _round2(lst.stats.avg_sub_rate or 0),
                "openRate": _round2(lst.stats.open_rate or 0),
                "clickRate": _round2(lst.stats.click_rate or 0),
            }
            for lst in top
        ],
    }


async def get_campaign_summary(user_id: str, filters: Optional[CampaignFilters] = None) -> dal.ApiResult:
    filters = filters or CampaignFilters()
    result = await dal.fetch_campaign_reports(user_id, build_reports_query(filters))
    if not result.success:
        return result.model_copy(update={"error": result.error or "Failed to fetch campaign reports"})
    return result.model_copy(update={"data": summarize_reports(result.data, filters)})


async def get_audience_summary(user_id: str) -> dal.ApiResult:
    result = await dal.fetch_lists(user_id, ListsQuery(count=AUDIENCE_LIST_LIMIT))
    if not result.success:
        return result.model_copy(update={"error": result.error or "Failed to fetch audience lists"})
    return result.model_copy(update={"data": summarize_lists(result.data)})
