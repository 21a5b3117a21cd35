"""Admin Panel Routers Package"""
from .auth import router as auth_router
from .integrations import router as integrations_router
from .dashboard import router as dashboard_router
from .campaigns import router as campaigns_router
from .lists import router as lists_router
from .api import router as api_router

__all__ = [
    'auth_router',
    'integrations_router',
    'dashboard_router',
    'campaigns_router',
    'lists_router',
    'api_router',
]
