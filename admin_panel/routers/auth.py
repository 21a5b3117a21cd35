"""Authentication router: login, logout, token management"""
from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
import logging
import secrets

import bcrypt

import config

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])

ALGORITHM = "HS256"
TOKEN_EXPIRE_HOURS = 24
HOME_URL = "/mailchimp"


def create_token(username: str, role: str = 'admin') -> str:
    """Create JWT token for user"""
    expire = datetime.now(timezone.utc) + timedelta(hours=TOKEN_EXPIRE_HOURS)
    return jwt.encode({"sub": username, "role": role, "exp": expire}, config.ADMIN_SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[Dict]:
    """Verify JWT token and return user data"""
    try:
        payload = jwt.decode(token, config.ADMIN_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return {"username": payload["sub"], "role": payload.get("role", "admin")}


async def get_current_user(request: Request) -> Dict:
    """Dependency: Returns dict with 'username' and 'role' keys"""
    token = request.cookies.get("access_token")
    if not token:
        raise HTTPException(status_code=status.HTTP_303_SEE_OTHER, headers={"Location": "/login"})
    user_data = verify_token(token)
    if not user_data:
        raise HTTPException(status_code=status.HTTP_303_SEE_OTHER, headers={"Location": "/login"})
    return user_data


def get_csrf_token(request: Request) -> str:
    """Get or create CSRF token"""
    token = request.session.get("csrf_token")
    if not token:
        token = secrets.token_hex(32)
        request.session["csrf_token"] = token
    return token


async def verify_csrf_token(request: Request):
    """Verify CSRF token from form or header"""
    token = request.session.get("csrf_token")
    if not token:
        raise HTTPException(status_code=403, detail="CSRF token missing in session")

    header_token = request.headers.get("X-CSRF-Token")
    if header_token and secrets.compare_digest(header_token, token):
        return

    form = await request.form()
    submitted_token = form.get("csrf_token") or header_token
    if not submitted_token or not secrets.compare_digest(str(submitted_token), token):
        raise HTTPException(status_code=403, detail="CSRF token invalid")


def _login_response(username: str, role: str) -> RedirectResponse:
    response = RedirectResponse(url=HOME_URL, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie("access_token", create_token(username, role), httponly=True, samesite="lax",
                        max_age=TOKEN_EXPIRE_HOURS * 3600)
    return response


def setup_routes(app_templates: Jinja2Templates):
    """Setup routes with templates reference"""
    templates = app_templates

    def login_form(request: Request, error: str = None, status_code: int = 200):
        return templates.TemplateResponse(
            request, "login.html",
            {"error": error, "csrf_token": get_csrf_token(request), "title": "Sign in"},
            status_code=status_code,
        )

    @router.get("/login", response_class=HTMLResponse)
    async def login_page(request: Request):
        return login_form(request)

    @router.post("/login")
    async def login(request: Request):
        from database import get_panel_user, update_panel_user_login

        form = await request.form()
        username = (form.get("username") or "").strip()
        password = form.get("password") or ""
        if not username or not password:
            return login_form(request, "Enter username and password", status.HTTP_400_BAD_REQUEST)

        try:
            panel_user = await get_panel_user(username)
        except RuntimeError as e:
            # Pool not initialized: only the .env account can sign in
            logger.warning(f"Panel user lookup unavailable: {e}")
            panel_user = None

        if panel_user and bcrypt.checkpw(password.encode('utf-8'), panel_user['password_hash'].encode('utf-8')):
            await update_panel_user_login(panel_user['id'])
            logger.info(f"🔑 Panel login: {username}")
            return _login_response(username, panel_user['role'])

        # Fallback to .env credentials
        if (config.ADMIN_PANEL_PASSWORD and username == config.ADMIN_PANEL_USER
                and secrets.compare_digest(password.encode('utf-8'), config.ADMIN_PANEL_PASSWORD.encode('utf-8'))):
            logger.info(f"🔑 Panel login (env account): {username}")
            return _login_response(username, 'superadmin')

        logger.warning(f"Failed panel login for '{username}'")
        return login_form(request, "Invalid username or password", status.HTTP_401_UNAUTHORIZED)

    @router.get("/logout")
    async def logout():
        response = RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
        response.delete_cookie("access_token")
        return response

    return router
