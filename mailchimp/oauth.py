"""
Mailchimp OAuth2 flow

Authorization code grant against login.mailchimp.com. Mailchimp tokens do
not expire, so there is no refresh step; the metadata call tells us which
data center (server prefix) the account lives in.
"""
import logging
import secrets
from dataclasses import dataclass
from typing import Tuple
from urllib.parse import urlencode

import aiohttp
from pydantic import ValidationError

import config
from mailchimp.client import get_http_session
from mailchimp.errors import MailchimpOAuthError
from mailchimp.schemas.oauth import OAuthMetadata, OAuthToken

logger = logging.getLogger(__name__)

STATE_LENGTH = 32


@dataclass
class OAuthResult:
    access_token: str
    server_prefix: str
    metadata: OAuthMetadata


def generate_authorization_url() -> Tuple[str, str]:
    """Build the consent URL. Returns (url, state)."""
    state = secrets.token_urlsafe(STATE_LENGTH)
    params = urlencode({
        "response_type": "code",
        "client_id": config.MAILCHIMP_CLIENT_ID,
        "redirect_uri": config.MAILCHIMP_REDIRECT_URI,
        "state": state,
    })
    return f"{config.MAILCHIMP_AUTHORIZE_URL}?{params}", state


async def exchange_code_for_token(code: str) -> OAuthToken:
    session = await get_http_session()
    form = {
        "grant_type": "authorization_code",
        "client_id": config.MAILCHIMP_CLIENT_ID,
        "client_secret": config.MAILCHIMP_CLIENT_SECRET,
        "redirect_uri": config.MAILCHIMP_REDIRECT_URI,
        "code": code,
    }
    try:
        async with session.post(config.MAILCHIMP_TOKEN_URL, data=form) as resp:
            if resp.status != 200:
                logger.error(f"Token exchange failed: HTTP {resp.status} {await resp.text()}")
                raise MailchimpOAuthError(f"Failed to exchange code for token: {resp.reason}")
            return OAuthToken.model_validate(await resp.json(content_type=None))
    except (aiohttp.ClientError, ValueError, ValidationError) as e:
        raise MailchimpOAuthError(f"Failed to exchange code for token: {e}") from e


async def get_metadata(access_token: str) -> OAuthMetadata:
    session = await get_http_session()
    headers = {"Authorization": f"OAuth {access_token}"}
    try:
        async with session.get(config.MAILCHIMP_METADATA_URL, headers=headers) as resp:
            if resp.status != 200:
                logger.error(f"Metadata fetch failed: HTTP {resp.status} {await resp.text()}")
                raise MailchimpOAuthError(f"Failed to fetch metadata: {resp.reason}")
            return OAuthMetadata.model_validate(await resp.json(content_type=None))
    except (aiohttp.ClientError, ValueError, ValidationError) as e:
        raise MailchimpOAuthError(f"Failed to fetch metadata: {e}") from e


async def complete_oauth_flow(code: str) -> OAuthResult:
    """Exchange the code, then resolve the account's data center"""
    token = await exchange_code_for_token(code)
    metadata = await get_metadata(token.access_token)
    logger.info(f"🔗 Mailchimp OAuth completed for account '{metadata.accountname}' ({metadata.dc})")
    return OAuthResult(access_token=token.access_token, server_prefix=metadata.dc, metadata=metadata)
