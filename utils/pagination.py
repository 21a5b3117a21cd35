"""
Pagination helpers for Mailchimp list pages

The UI speaks page/perPage, the API speaks count/offset. URLs never carry
default values: page=1 or perPage=<default> get redirected to the clean URL.
"""
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
from urllib.parse import urlencode

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
PER_PAGE_OPTIONS = (10, 25, 50, 100)

PAGINATION_KEYS = ("page", "perPage")


def _positive_int(value: Optional[str]) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


@dataclass
class Pagination:
    path: str
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE
    default_per_page: int = DEFAULT_PER_PAGE
    extra_params: Dict[str, str] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return self.per_page

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def api_params(self) -> Dict[str, int]:
        return {"count": self.count, "offset": self.offset}

    def total_pages(self, total_items: int) -> int:
        return max(1, (max(total_items, 0) + self.per_page - 1) // self.per_page)

    def _url(self, page: int, per_page: int) -> str:
        params = {}
        if page > DEFAULT_PAGE:
            params["page"] = page
        if per_page != self.default_per_page:
            params["perPage"] = per_page
        params.update({k: v for k, v in self.extra_params.items() if v not in (None, "")})
        return f"{self.path}?{urlencode(params)}" if params else self.path

    def page_url(self, page: int) -> str:
        return self._url(page, self.per_page)

    def per_page_url(self, per_page: int) -> str:
        """Changing page size always goes back to the first page"""
        return self._url(DEFAULT_PAGE, per_page)

    @property
    def per_page_options(self):
        return sorted(set(PER_PAGE_OPTIONS) | {self.default_per_page})


def parse_pagination(path: str, query: Mapping[str, str], default_per_page: int = DEFAULT_PER_PAGE) -> Pagination:
    """Read page/perPage from a query string; invalid values fall back to defaults"""
    page = _positive_int(query.get("page")) or DEFAULT_PAGE
    per_page = _positive_int(query.get("perPage"))
    if per_page not in PER_PAGE_OPTIONS and per_page != default_per_page:
        per_page = default_per_page
    extra = {k: v for k, v in query.items() if k not in PAGINATION_KEYS}
    return Pagination(path=path, page=page, per_page=per_page,
                      default_per_page=default_per_page, extra_params=extra)


def clean_url_redirect(path: str, query: Mapping[str, str], default_per_page: int = DEFAULT_PER_PAGE) -> Optional[str]:
    """URL to redirect to when the query spells out a default value, else None"""
    has_default_page = query.get("page") == str(DEFAULT_PAGE)
    has_default_per_page = query.get("perPage") == str(default_per_page)
    if not (has_default_page or has_default_per_page):
        return None
    params = {}
    if query.get("page") and not has_default_page:
        params["page"] = query["page"]
    if query.get("perPage") and not has_default_per_page:
        params["perPage"] = query["perPage"]
    params.update({k: v for k, v in query.items() if k not in PAGINATION_KEYS and v not in (None, "")})
    return f"{path}?{urlencode(params)}" if params else path
