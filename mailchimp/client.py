"""Mailchimp Marketing API client (aiohttp)"""
import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import aiohttp
from pydantic import ValidationError

import config
from mailchimp.errors import (
    MailchimpAPIError, MailchimpAuthError, MailchimpNetworkError, MailchimpRateLimitError,
)
from mailchimp.schemas.common import ProblemDetail

logger = logging.getLogger(__name__)
_session: Optional[aiohttp.ClientSession] = None
_session_lock = asyncio.Lock()


async def init_http_session():
    """Initialize the shared HTTP session (call once at startup)."""
    global _session
    if _session is None:
        _session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=100, limit_per_host=20),
            timeout=aiohttp.ClientTimeout(total=config.MAILCHIMP_TIMEOUT, connect=10)
        )


async def close_http_session():
    """Close the shared HTTP session (call at shutdown)."""
    global _session
    if _session:
        await _session.close()
        _session = None


async def get_http_session() -> aiohttp.ClientSession:
    """Return the shared session, creating it on first use."""
    if _session is None:
        async with _session_lock:
            # Double-check after acquiring lock
            if _session is None:
                await init_http_session()
    return _session


def build_query(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Flatten params into a query string mapping: None dropped, bools lowercase, lists comma-joined"""
    query = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple, set)):
            query[key] = ",".join(str(v) for v in value)
        else:
            query[key] = str(value)
    return query


@dataclass
class RateLimitInfo:
    remaining: int
    limit: int
    reset_time: datetime


class MailchimpClient:
    """Thin wrapper around one access token; cheap to build per request"""

    def __init__(self, access_token: str, server_prefix: str, timeout: Optional[float] = None,
                 base_url: Optional[str] = None):
        self.base_url = base_url or f"https://{server_prefix}.api.mailchimp.com/3.0"
        self._access_token = access_token
        self.timeout = timeout if timeout is not None else config.MAILCHIMP_TIMEOUT
        self.rate_limit: Optional[RateLimitInfo] = None

    def __repr__(self):
        return f"<MailchimpClient {self.base_url}>"

    async def request(self, method: str, endpoint: str, params: Dict[str, Any] = None, body: Any = None) -> Any:
        session = await get_http_session()
        url = f"{self.base_url}{endpoint}"
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }
        try:
            async with session.request(
                method, url,
                params=build_query(params),
                data=json.dumps(body) if body is not None else None,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                self._track_rate_limit(resp.headers)
                if resp.status >= 400:
                    await self._raise_for_error(resp)
                if resp.status == 204:
                    return None
                return await resp.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise MailchimpNetworkError(f"Request timeout after {self.timeout:g}s", e)
        except aiohttp.ClientError as e:
            logger.warning(f"Mailchimp request failed: {method} {endpoint} - {e}")
            raise MailchimpNetworkError("Network request failed", e)
        except ValueError as e:
            raise MailchimpNetworkError("Invalid JSON in Mailchimp API response", e)

    def _track_rate_limit(self, headers):
        remaining = headers.get("X-RateLimit-Remaining")
        limit = headers.get("X-RateLimit-Limit")
        reset = headers.get("X-RateLimit-Reset")
        if remaining and limit and reset:
            try:
                self.rate_limit = RateLimitInfo(
                    remaining=int(remaining),
                    limit=int(limit),
                    reset_time=datetime.fromtimestamp(int(reset), tz=timezone.utc),
                )
            except ValueError:
                logger.debug(f"Ignoring malformed rate limit headers: {remaining}/{limit}/{reset}")

    @staticmethod
    async def _raise_for_error(resp: aiohttp.ClientResponse):
        reason = resp.reason or ""
        try:
            body = await resp.json(content_type=None)
        except (ValueError, aiohttp.ClientError):
            raise MailchimpNetworkError(f"HTTP {resp.status}: {reason}")

        try:
            if not isinstance(body, dict):
                raise ValueError("problem document must be an object")
            problem = ProblemDetail.model_validate(body)
            if not (problem.title or problem.detail):
                raise ValueError("problem document has no title or detail")
        except (ValidationError, ValueError):
            raise MailchimpNetworkError(f"Invalid error response from Mailchimp API: {reason}")

        if resp.status == 429:
            raise MailchimpRateLimitError(
                problem,
                retry_after=_int_header(resp.headers, "Retry-After", 60),
                limit=_int_header(resp.headers, "X-RateLimit-Limit", 0),
            )
        if resp.status in (401, 403):
            raise MailchimpAuthError(problem, resp.status)
        raise MailchimpAPIError(problem, resp.status)

    # === Verbs ===

    async def get(self, endpoint: str, params: Dict[str, Any] = None) -> Any:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, body: Any = None) -> Any:
        return await self.request("POST", endpoint, body=body)

    async def patch(self, endpoint: str, body: Any = None) -> Any:
        return await self.request("PATCH", endpoint, body=body)

    async def put(self, endpoint: str, body: Any = None) -> Any:
        return await self.request("PUT", endpoint, body=body)

    async def delete(self, endpoint: str) -> Any:
        return await self.request("DELETE", endpoint)


def _int_header(headers, name: str, default: int) -> int:
    try:
        return int(headers.get(name, default))
    except (TypeError, ValueError):
        return default
