"""
Admin Panel Core - Shared configuration and utilities
"""
from dataclasses import dataclass
from typing import Callable, Dict, Any

from fastapi import Request
from fastapi.templating import Jinja2Templates


@dataclass
class RouterConfig:
    """Configuration object for router setup - avoids passing many arguments"""
    templates: Jinja2Templates
    get_current_user: Callable
    verify_csrf_token: Callable
    get_template_context: Callable

    def context(self, request: Request, **kwargs) -> Dict[str, Any]:
        """Shorthand for get_template_context"""
        return self.get_template_context(request, **kwargs)

    def render(self, request: Request, template: str, status_code: int = 200, **kwargs):
        return self.templates.TemplateResponse(
            request, template, self.context(request, **kwargs), status_code=status_code
        )


def user_key(user: Dict) -> str:
    """Mailchimp connections are keyed by panel username"""
    return user["username"]
