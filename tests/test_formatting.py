"""Template filters"""
import pytz

import config
from utils import formatting


def test_number():
    assert formatting.format_number(1234567) == "1,234,567"
    assert formatting.format_number(1234.5) == "1,234.50"
    assert formatting.format_number(3.0) == "3"
    assert formatting.format_number(None) == "0"


def test_percent():
    assert formatting.format_percent(21.5) == "21.5%"
    assert formatting.format_percent(0.215, fraction=True) == "21.5%"
    assert formatting.format_percent(None) == "0%"


def test_datetime_in_panel_timezone(monkeypatch):
    monkeypatch.setattr(config, "TIMEZONE", pytz.timezone("Europe/Moscow"))
    assert formatting.format_datetime("2024-03-01T10:00:00+00:00") == "01.03.2024 13:00"
    assert formatting.format_datetime("2024-03-01T10:00:00Z") == "01.03.2024 13:00"
    assert formatting.format_date("2024-03-01T22:30:00+00:00") == "02.03.2024"


def test_datetime_edge_values(monkeypatch):
    monkeypatch.setattr(config, "TIMEZONE", pytz.utc)
    assert formatting.format_datetime(None) == "-"
    assert formatting.format_datetime("") == "-"
    assert formatting.format_datetime("not a date") == "not a date"
    assert formatting.format_datetime("2024-03-01T10:00:00") == "01.03.2024 10:00"


def test_subscriber_hash_ignores_case_and_spaces():
    assert formatting.subscriber_hash(" Jane@Example.com ") == formatting.subscriber_hash("jane@example.com")
    assert len(formatting.subscriber_hash("jane@example.com")) == 32


def test_pricing_plan():
    assert formatting.format_pricing_plan("pay_as_you_go") == "Pay As You Go"
    assert formatting.format_pricing_plan("enterprise") == "enterprise"
    assert formatting.format_pricing_plan(None) == ""


def test_admin_links():
    assert formatting.mailchimp_list_url("us6", 123) == "https://us6.admin.mailchimp.com/lists/members/?id=123"
    assert formatting.mailchimp_campaign_url("us6", 42) == "https://us6.admin.mailchimp.com/campaigns/show/?id=42"
    assert formatting.mailchimp_report_url(None, 42) is None
    assert formatting.mailchimp_list_url("us6", None) is None
