"""
Mailchimp error model

Errors coming back from the API are RFC 7807 problem documents. They are
wrapped into a small exception hierarchy by the client and turned into
ApiResult values by the DAL wrapper.
"""
from typing import Optional

from mailchimp.schemas.common import ProblemDetail


class ErrorCodes:
    """Stable error codes shown to templates and JSON consumers"""
    NOT_AUTHENTICATED = "user_not_authenticated"
    NOT_CONNECTED = "mailchimp_not_connected"
    CONNECTION_INACTIVE = "mailchimp_connection_inactive"
    TOKEN_INVALID = "mailchimp_token_invalid"
    VALIDATION_FAILED = "validation_failed"
    RATE_LIMIT = "rate_limit"
    API_ERROR = "api_error"
    UNKNOWN_ERROR = "unknown_error"
    SCHEMA_VALIDATION = "VALIDATION_ERROR"


# Codes meaning "the user has to (re)connect Mailchimp"
CONNECTION_ERROR_CODES = {
    ErrorCodes.NOT_AUTHENTICATED,
    ErrorCodes.NOT_CONNECTED,
    ErrorCodes.CONNECTION_INACTIVE,
    ErrorCodes.TOKEN_INVALID,
    ErrorCodes.VALIDATION_FAILED,
}

_CONNECTION_MESSAGES = {
    ErrorCodes.NOT_AUTHENTICATED: "You must be logged in to access Mailchimp data.",
    ErrorCodes.NOT_CONNECTED: "Mailchimp account not connected. Please connect your account to continue.",
    ErrorCodes.CONNECTION_INACTIVE: "Your Mailchimp connection is inactive. Please reconnect your account.",
    ErrorCodes.TOKEN_INVALID: "Your Mailchimp connection has expired. Please reconnect your account.",
    ErrorCodes.VALIDATION_FAILED: "Failed to validate Mailchimp connection. Please try again.",
}


def validation_error_message(error_code: str) -> str:
    """User-facing message for a connection error code"""
    return _CONNECTION_MESSAGES.get(error_code, "An error occurred with your Mailchimp connection.")


class MailchimpError(Exception):
    """Base class for everything raised while talking to Mailchimp"""


class MailchimpAPIError(MailchimpError):
    """Non-2xx response with a valid problem document"""

    def __init__(self, problem: ProblemDetail, status_code: Optional[int] = None):
        self.problem = problem
        self.status_code = status_code or problem.status or 500
        super().__init__(problem.detail or problem.title or f"HTTP {self.status_code}")


class MailchimpAuthError(MailchimpAPIError):
    """401/403 - token revoked or lacking permissions"""


class MailchimpRateLimitError(MailchimpAPIError):
    """429 - too many requests"""

    def __init__(self, problem: ProblemDetail, retry_after: int = 60, limit: int = 0):
        super().__init__(problem, 429)
        self.retry_after = retry_after
        self.limit = limit


class MailchimpNetworkError(MailchimpError):
    """Timeouts, transport failures and unreadable error bodies"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class MailchimpConnectionError(MailchimpError):
    """User has no usable Mailchimp connection"""

    def __init__(self, error_code: str, message: Optional[str] = None):
        self.error_code = error_code
        super().__init__(message or validation_error_message(error_code))


class MailchimpOAuthError(MailchimpError):
    """OAuth token exchange or metadata lookup failed"""
