"""
Common Mailchimp schemas - base model, links, problem documents, query params
"""
import logging
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

SortDirection = Literal["ASC", "DESC"]

Q = TypeVar("Q", bound="QueryParams")


class MailchimpModel(BaseModel):
    """Base for API mirrors: unknown fields are kept, not rejected"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Link(MailchimpModel):
    rel: str
    href: str
    method: str = "GET"
    target_schema: Optional[str] = Field(None, alias="targetSchema")
    schema_url: Optional[str] = Field(None, alias="schema")


class ProblemDetail(MailchimpModel):
    """RFC 7807 problem document returned on API errors"""
    type: Optional[str] = None
    title: Optional[str] = None
    status: Optional[int] = None
    detail: Optional[str] = None
    instance: Optional[str] = None


class PaginatedResponse(MailchimpModel):
    """Collection envelope shared by list endpoints"""
    total_items: int = Field(0, ge=0)
    links: List[Link] = Field(default_factory=list, alias="_links")


# === Query parameters ===

class QueryParams(BaseModel):
    """Outgoing query string; unknown keys from the URL are ignored"""
    model_config = ConfigDict(extra="ignore")

    fields: Optional[List[str]] = None
    exclude_fields: Optional[List[str]] = None

    @field_validator("fields", "exclude_fields", mode="before")
    @classmethod
    def split_field_list(cls, value):
        """?fields=id,status arrives as one string"""
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    def to_params(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, mode="json")

    @classmethod
    def parse(cls: Type[Q], data: Dict[str, Any]) -> Q:
        """Strict validation; raises ValidationError on bad input"""
        return cls.model_validate(_present(data))

    @classmethod
    def parse_or_default(cls: Type[Q], data: Dict[str, Any], **defaults) -> Q:
        """Validate user supplied params; invalid keys fall back to their defaults, the rest are kept"""
        values = {**defaults, **_present(data)}
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
            logger.info(f"Invalid query parameters for {cls.__name__}: {sorted(map(str, invalid))}, ignoring them")
            kept = {k: v for k, v in values.items() if k not in invalid}
            kept.update({k: v for k, v in defaults.items() if k in invalid})
            try:
                return cls.model_validate(kept)
            except ValidationError:
                return cls.model_validate(defaults)


def _present(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v not in (None, "")}


def describe_errors(error: ValidationError) -> List[str]:
    """Readable 'field: message' lines for an API error body"""
    return [f"{'.'.join(map(str, err['loc'])) or 'query'}: {err['msg']}" for err in error.errors()]


class PaginationQuery(QueryParams):
    count: int = Field(10, ge=1, le=1000)
    offset: int = Field(0, ge=0)


class MemberStatusInclusion(QueryParams):
    include_cleaned: Optional[bool] = None
    include_transactional: Optional[bool] = None
    include_unsubscribed: Optional[bool] = None
