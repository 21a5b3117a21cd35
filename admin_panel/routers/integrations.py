"""Integrations router: connect, reconnect and disconnect a Mailchimp account"""
from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse
from typing import Dict
from urllib.parse import quote
import logging

import config
from admin_panel.core import RouterConfig, user_key
from database import connections
from mailchimp import oauth
from mailchimp.errors import MailchimpError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["integrations"])

STATE_COOKIE = "mailchimp_oauth_state"
STATE_MAX_AGE = 600
DASHBOARD_URL = "/mailchimp"


def _dashboard_redirect(query: str) -> RedirectResponse:
    response = RedirectResponse(f"{DASHBOARD_URL}?{query}", status_code=303)
    response.delete_cookie(STATE_COOKIE)
    return response


def setup_routes(cfg: RouterConfig):
    """Setup routes with dependencies"""

    @router.get("/settings/integrations", response_class=HTMLResponse)
    async def integrations_page(request: Request, user: Dict = Depends(cfg.get_current_user)):
        connection = error = None
        try:
            connection = await connections.find_connection(user_key(user))
        except RuntimeError as e:
            logger.error(f"Connection lookup failed for {user_key(user)}: {e}")
            error = "Connection status is unavailable right now"
        return cfg.render(
            request, "settings/integrations.html", user=user, title="Integrations",
            connection=connection, error=error,
            oauth_configured=bool(config.MAILCHIMP_CLIENT_ID and config.MAILCHIMP_REDIRECT_URI),
        )

    @router.get("/api/auth/mailchimp/authorize")
    async def authorize(request: Request, user: Dict = Depends(cfg.get_current_user)):
        url, state = oauth.generate_authorization_url()
        response = RedirectResponse(url, status_code=303)
        response.set_cookie(
            STATE_COOKIE, state, max_age=STATE_MAX_AGE, httponly=True, samesite="lax",
            secure=config.APP_URL.startswith("https://"),
        )
        logger.info(f"➡️  Redirecting {user['username']} to Mailchimp consent screen")
        return response

    @router.get("/api/auth/mailchimp/callback")
    async def callback(request: Request, code: str = None, state: str = None,
                       error: str = None, error_description: str = None):
        if error:
            logger.warning(f"Mailchimp OAuth error: {error} {error_description or ''}")
            return _dashboard_redirect(f"error={quote(error)}")

        if not code or not state:
            return _dashboard_redirect("error=missing_parameters")

        stored_state = request.cookies.get(STATE_COOKIE)
        if not stored_state or stored_state != state:
            logger.warning("Mailchimp OAuth state mismatch")
            return _dashboard_redirect("error=invalid_state")

        # Callback is reached from Mailchimp, so the login cookie is checked by hand
        try:
            user = await cfg.get_current_user(request)
        except HTTPException:
            return _dashboard_redirect("error=unauthorized")

        try:
            result = await oauth.complete_oauth_flow(code)
            meta = result.metadata
            login = meta.login
            await connections.save_connection(
                user_key(user),
                access_token=result.access_token,
                server_prefix=result.server_prefix,
                account_id=str(meta.user_id or ""),
                email=(login.login_email or login.email) if login else None,
                username=login.login_name if login else None,
                metadata={
                    "dc": meta.dc,
                    "role": meta.role,
                    "accountName": meta.accountname,
                    "login": login.model_dump() if login else None,
                },
            )
        except Exception as e:
            level = logging.WARNING if isinstance(e, MailchimpError) else logging.ERROR
            logger.log(level, f"❌ Mailchimp OAuth callback failed for {user['username']}: {e}")
            return _dashboard_redirect("error=connection_failed")

        return _dashboard_redirect("connected=true")

    @router.post("/api/auth/mailchimp/disconnect", dependencies=[Depends(cfg.verify_csrf_token)])
    async def disconnect(request: Request, user: Dict = Depends(cfg.get_current_user)):
        await connections.delete_connection(user_key(user))
        logger.info(f"🔌 Mailchimp disconnected for {user['username']}")
        return RedirectResponse("/settings/integrations?disconnected=true", status_code=303)

    return router
