"""
Page-level handling of DAL results

Not-found errors become a real 404, connection problems render the
"connect your account" state, everything else is shown inline.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from fastapi import HTTPException, Request

from admin_panel.core import user_key
from database import connections
from mailchimp import dal
from mailchimp.dal import ApiResult
from mailchimp.errors import CONNECTION_ERROR_CODES
from mailchimp.schemas import QueryParams
from utils.pagination import DEFAULT_PER_PAGE, Pagination, clean_url_redirect, parse_pagination

logger = logging.getLogger(__name__)

NOT_FOUND_MARKERS = ("not found", "404", "does not exist")


def is_not_found(message: Optional[str]) -> bool:
    normalized = (message or "").lower()
    return any(marker in normalized for marker in NOT_FOUND_MARKERS)


def handle_api_error(result: ApiResult, fallback: str = "Failed to load data") -> Optional[str]:
    """None on success, the message to show otherwise; raises 404 for missing resources"""
    if result.success:
        return None
    message = result.error or fallback
    if result.status_code == 404 or is_not_found(message):
        raise HTTPException(status_code=404, detail=message)
    return message


def page_state(result: ApiResult, fallback: str = "Failed to load data") -> Dict[str, Any]:
    """Template variables for a page built around one DAL call"""
    if not result.success and result.error_code in CONNECTION_ERROR_CODES:
        return {"data": None, "error": None, "connection_error": result.error, "error_code": result.error_code}
    return {
        "data": result.data if result.success else None,
        "error": handle_api_error(result, fallback),
        "connection_error": None,
        "error_code": result.error_code,
        "rate_limit": result.rate_limit,
    }


def list_params(request: Request, query_cls: Type[QueryParams], default_per_page: int = DEFAULT_PER_PAGE,
                **filters) -> Tuple[Pagination, QueryParams]:
    """page/perPage from the URL to an API query; explicit defaults redirect to the clean URL"""
    redirect = clean_url_redirect(request.url.path, request.query_params, default_per_page)
    if redirect:
        raise HTTPException(status_code=307, headers={"Location": redirect})
    pagination = parse_pagination(request.url.path, request.query_params, default_per_page)
    query = query_cls.parse_or_default(
        {**filters, **pagination.api_params()},
        count=pagination.per_page, offset=pagination.offset,
    )
    return pagination, query


# === Generic tables ===

@dataclass
class Column:
    label: str
    key: str
    fmt: Optional[str] = None
    link: Optional[Callable[[Any], Optional[str]]] = None


def resolve(obj: Any, path: str) -> Any:
    """Dotted lookup over models and dicts: resolve(report, 'opens.open_rate')"""
    for part in path.split("."):
        if obj is None:
            return None
        obj = obj.get(part) if isinstance(obj, dict) else getattr(obj, part, None)
    return obj


def render_page(cfg, request: Request, template: str, result: ApiResult,
                fallback: str = "Failed to load data", **kwargs):
    """page_state + render; a page-level 404 bubbles up as HTTPException"""
    return cfg.render(request, template, **{**page_state(result, fallback), **kwargs})


async def server_prefix_for(user_id: str) -> Optional[str]:
    """Data center of the user's connection, used for links into the Mailchimp admin"""
    try:
        connection = await connections.find_connection(user_id)
    except RuntimeError as e:
        logger.warning(f"Connection lookup failed for {user_id}: {e}")
        return None
    return connection['server_prefix'] if connection else None


@dataclass
class Section:
    """A sub-page rendered as one table over a DAL collection"""
    title: str
    fetch: str  # dal function name
    items_key: str
    columns: List[Column]
    query_cls: Optional[Type[QueryParams]] = None


async def render_section(cfg, request: Request, user: Dict, section: Section, *resource_ids: str, **kwargs):
    pagination = query = None
    if section.query_cls:
        pagination, query = list_params(request, section.query_cls)
    result = await getattr(dal, section.fetch)(user_key(user), *resource_ids, query)
    return render_page(
        cfg, request, "mailchimp/collection.html", result, f"Failed to load {section.title.lower()}",
        user=user, title=section.title, items_key=section.items_key, columns=section.columns,
        pagination=pagination, **kwargs,
    )
