"""Admin Panel - FastAPI app with modular routers"""
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict
import sys
import time
import logging

# Ensure project root is in path
BASE_DIR = Path(__file__).resolve().parent.parent
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

import config
from admin_panel.core import RouterConfig
from admin_panel.utils.pages import resolve
from database.panel_db import init_panel_db, close_panel_db, ensure_initial_superadmin
from mailchimp.client import init_http_session, close_http_session
from utils.formatting import register_filters

# Routers
from admin_panel.routers import auth, integrations, dashboard, campaigns, lists, api

# Setup logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Paths
ADMIN_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = ADMIN_DIR / "templates"
STATIC_DIR = ADMIN_DIR / "static"

NAV_ITEMS = [
    ("/mailchimp", "Dashboard"),
    ("/mailchimp/campaigns", "Campaigns"),
    ("/mailchimp/reports", "Reports"),
    ("/mailchimp/lists", "Audiences"),
    ("/mailchimp/automations", "Automations"),
    ("/mailchimp/landing-pages", "Landing pages"),
    ("/mailchimp/search/members", "Search"),
    ("/mailchimp/account", "Account"),
    ("/settings/integrations", "Integrations"),
]


# === Lifespan ===

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        await init_panel_db(config.DATABASE_URL)

        if config.ADMIN_PANEL_USER and config.ADMIN_PANEL_PASSWORD:
            import bcrypt
            password_hash = bcrypt.hashpw(
                config.ADMIN_PANEL_PASSWORD.encode('utf-8'),
                bcrypt.gensalt()
            ).decode('utf-8')
            await ensure_initial_superadmin(config.ADMIN_PANEL_USER, password_hash)

        logger.info("Panel database initialized")
    except Exception as e:
        logger.critical(f"Failed to initialize panel database: {e}")

    await init_http_session()

    yield

    # Shutdown
    await close_http_session()
    await close_panel_db()


# === App Setup ===

app = FastAPI(title="Mailchimp Dashboard", lifespan=lifespan)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
register_filters(templates.env)
templates.env.globals["resolve"] = resolve


# === Middleware ===

@app.middleware("http")
async def context_middleware(request: Request, call_next):
    """Log every request with its duration"""
    start_time = time.time()
    logger.info(f"➡️  {request.method} {request.url.path}")

    try:
        response = await call_next(request)
    except Exception as e:
        duration = time.time() - start_time
        logger.error(f"❌ Request failed: {request.method} {request.url.path} - {duration:.2f}s - {e}")
        raise

    duration = time.time() - start_time
    if duration > config.SLOW_REQUEST_THRESHOLD:
        logger.warning(f"🐢 Slow request: {request.method} {request.url.path} - {duration:.2f}s")

    return response


# Add Session Middleware LAST so it wraps everything (including consumers of session)
app.add_middleware(SessionMiddleware, secret_key=config.ADMIN_SECRET_KEY)


# === Template Context Helper ===

def get_template_context(request: Request, **kwargs) -> Dict:
    """Helper to add common context variables"""
    user = kwargs.get('user') or {}
    context = {
        "request": request,
        "csrf_token": auth.get_csrf_token(request),
        "current_user": user,
        "is_superadmin": user.get('role') == 'superadmin',
        "nav_items": NAV_ITEMS,
        "current_path": request.url.path,
    }
    context.update(kwargs)
    return context


# === Error pages ===

@app.exception_handler(StarletteHTTPException)
async def html_error_handler(request: Request, exc: StarletteHTTPException):
    """404 on panel pages renders a page, everything else keeps the default handling"""
    if exc.status_code == 404 and not request.url.path.startswith("/api/"):
        return templates.TemplateResponse(
            request, "errors/404.html",
            get_template_context(request, title="Not found", message=exc.detail),
            status_code=404,
        )
    return await http_exception_handler(request, exc)


# === Setup Routers ===

router_config = RouterConfig(
    templates=templates,
    get_current_user=auth.get_current_user,
    verify_csrf_token=auth.verify_csrf_token,
    get_template_context=get_template_context,
)

# Auth router (has special setup for templates)
auth.setup_routes(templates)
app.include_router(auth.router)

app.include_router(integrations.setup_routes(router_config))
app.include_router(dashboard.setup_routes(router_config))
app.include_router(campaigns.setup_routes(router_config))
app.include_router(lists.setup_routes(router_config))
app.include_router(api.setup_routes(router_config))


@app.get("/")
async def index():
    return RedirectResponse(url="/mailchimp", status_code=303)
