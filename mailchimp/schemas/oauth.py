"""OAuth2 token and metadata responses from login.mailchimp.com"""
from typing import Optional

from pydantic import Field

from mailchimp.schemas.common import MailchimpModel


class OAuthToken(MailchimpModel):
    access_token: str = Field(min_length=1)
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    scope: Optional[str] = None


class OAuthLogin(MailchimpModel):
    email: str = ""
    avatar: Optional[str] = None
    login_id: Optional[int] = None
    login_name: str = ""
    login_email: str = ""


class OAuthMetadata(MailchimpModel):
    dc: str = Field(min_length=1)
    role: Optional[str] = None
    accountname: str = ""
    user_id: Optional[int] = None
    login: Optional[OAuthLogin] = None
    login_url: Optional[str] = None
    api_endpoint: Optional[str] = None
