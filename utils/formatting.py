"""Display helpers shared by templates (registered as Jinja filters)"""
import hashlib
from datetime import datetime
from typing import Optional, Union

import pytz

import config

PRICING_PLAN_LABELS = {
    "monthly": "Monthly",
    "pay_as_you_go": "Pay As You Go",
    "forever_free": "Forever Free",
}


def format_pricing_plan(plan_type: Optional[str]) -> str:
    return PRICING_PLAN_LABELS.get(plan_type, plan_type or "")


def format_number(value: Union[int, float, None]) -> str:
    if value is None:
        return "0"
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.2f}"
    return f"{int(value):,}"


def format_percent(value: Optional[float], fraction: bool = False) -> str:
    """Mailchimp mixes 0..1 fractions (reports) and ready percentages (lists)"""
    if value is None:
        return "0%"
    if fraction:
        value = value * 100
    return f"{value:.1f}%"


def parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt


def format_datetime(value: Union[str, datetime, None], fmt: str = "%d.%m.%Y %H:%M") -> str:
    """Render an API timestamp in the panel's TIMEZONE"""
    dt = parse_datetime(value)
    if dt is None:
        return "-" if not value else str(value)
    return dt.astimezone(config.TIMEZONE).strftime(fmt)


def format_date(value: Union[str, datetime, None]) -> str:
    return format_datetime(value, "%d.%m.%Y")


def subscriber_hash(email: str) -> str:
    """Mailchimp member id: md5 of the lowercased address"""
    return hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()


# === Mailchimp admin links ===

def mailchimp_list_url(server_prefix: Optional[str], web_id: Optional[int]) -> Optional[str]:
    if not server_prefix or web_id is None:
        return None
    return f"https://{server_prefix}.admin.mailchimp.com/lists/members/?id={web_id}"


def mailchimp_campaign_url(server_prefix: Optional[str], web_id: Optional[int]) -> Optional[str]:
    if not server_prefix or web_id is None:
        return None
    return f"https://{server_prefix}.admin.mailchimp.com/campaigns/show/?id={web_id}"


def mailchimp_report_url(server_prefix: Optional[str], web_id: Optional[int]) -> Optional[str]:
    if not server_prefix or web_id is None:
        return None
    return f"https://{server_prefix}.admin.mailchimp.com/reports/summary?id={web_id}"


def register_filters(env):
    """Attach helpers to a Jinja2 environment"""
    env.filters.update({
        "pricing_plan": format_pricing_plan,
        "number": format_number,
        "percent": format_percent,
        "datetime": format_datetime,
        "date": format_date,
        "subscriber_hash": subscriber_hash,
    })
    env.globals.update({
        "mailchimp_list_url": mailchimp_list_url,
        "mailchimp_campaign_url": mailchimp_campaign_url,
        "mailchimp_report_url": mailchimp_report_url,
    })
