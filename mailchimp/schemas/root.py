"""API root (account information)"""
from typing import Optional

from mailchimp.schemas.common import MailchimpModel


class AccountContact(MailchimpModel):
    company: str = ""
    addr1: str = ""
    addr2: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""


class AccountIndustryStats(MailchimpModel):
    open_rate: float = 0
    bounce_rate: float = 0
    click_rate: float = 0


class ApiRoot(MailchimpModel):
    account_id: str
    login_id: Optional[str] = None
    account_name: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    avatar_url: Optional[str] = None
    role: Optional[str] = None
    member_since: Optional[str] = None
    pricing_plan_type: str
    first_payment: Optional[str] = None
    account_timezone: Optional[str] = None
    account_industry: Optional[str] = None
    last_login: Optional[str] = None
    pro_enabled: bool = False
    total_subscribers: int = 0
    contact: AccountContact = AccountContact()
    industry_stats: Optional[AccountIndustryStats] = None
