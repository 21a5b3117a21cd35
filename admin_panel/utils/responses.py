"""
API Response Utilities for Admin Panel

Unified JSON format for the /api endpoints.
"""
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from mailchimp.dal import ApiResult


def success(data: Any = None, status_code: int = 200) -> JSONResponse:
    """Return the payload as-is"""
    return JSONResponse(content=jsonable_encoder(data), status_code=status_code)


def error(message: str, details: Any = None, status_code: int = 400, **extra) -> JSONResponse:
    """Return error response"""
    content = {"success": False, "error": message}
    if details is not None:
        content["details"] = details
    content.update(extra)
    return JSONResponse(content=jsonable_encoder(content), status_code=status_code)


def not_found(message: str = "Not found", details: Any = None) -> JSONResponse:
    """Return 404 response"""
    return error(message, details, status_code=404)


def server_error(message: str = "Internal server error", details: Any = None) -> JSONResponse:
    """Return 500 response"""
    return error(message, details, status_code=500)


def from_result(result: ApiResult, fallback: str = "Mailchimp request failed",
                status_code: Optional[int] = None) -> JSONResponse:
    """DAL result to JSON: the data on success, the error with its status otherwise"""
    if result.success:
        return success(result.data)
    return error(
        result.error or fallback,
        status_code=status_code or result.status_code or 500,
        error_code=result.error_code,
    )
