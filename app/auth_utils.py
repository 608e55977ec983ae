"""
Helpers for session cookies, current-user lookup, and the upstream identity headers.

Sign-in itself happens in front of this app (an identity-aware proxy doing the
GitHub OAuth handshake). The proxy forwards the authenticated GitHub username
and, when it has one, the email address in request headers.
"""
from __future__ import annotations

import os

from fastapi import Request
from fastapi.responses import Response

from core.database import delete_session, get_session, get_user_by_id, touch_session

SESSION_COOKIE_NAME = "session_id"
SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 7  # one week
SECURE_COOKIES = (
    os.getenv("COOKIE_SECURE", "").lower() in ("1", "true", "yes")
    or os.getenv("PUBLIC_BASE_URL", "").lower().startswith("https://")
)
AUTH_USER_HEADER = os.getenv("AUTH_USER_HEADER", "X-Forwarded-User")
AUTH_EMAIL_HEADER = os.getenv("AUTH_EMAIL_HEADER", "X-Forwarded-Email")
# Comma-separated proxy addresses allowed to assert identity. Empty means any
# peer is trusted, so the app must then only be reachable through the proxy.
AUTH_TRUSTED_PROXIES = os.getenv("AUTH_TRUSTED_PROXIES", "")


def _trusted_proxies() -> set[str]:
    return {p.strip() for p in AUTH_TRUSTED_PROXIES.split(",") if p.strip()}


def read_upstream_identity(request: Request):
    """
    Return (github_username, email) from the identity headers, or (None, None).

    The headers are taken at face value. When AUTH_TRUSTED_PROXIES is set they
    are ignored unless the direct peer is one of the listed proxies.
    """
    trusted = _trusted_proxies()
    if trusted:
        peer = request.client.host if request.client else ""
        if peer not in trusted:
            return None, None

    username = (request.headers.get(AUTH_USER_HEADER) or "").strip()
    if not username:
        return None, None
    email = (request.headers.get(AUTH_EMAIL_HEADER) or "").strip() or None
    return username, email


def get_current_user(request: Request):
    """
    Read session cookie and return (user_dict, session_token) or (None, None).
    Refreshes inactivity timeout when the session is valid.
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None, None

    session = get_session(token)
    if not session:
        return None, token

    user = get_user_by_id(session["user_id"])
    if not user:
        delete_session(token)
        return None, token

    touch_session(token)
    return user, token


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        max_age=SESSION_COOKIE_MAX_AGE,
        samesite="lax",
        secure=SECURE_COOKIES,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME)
