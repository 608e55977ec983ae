"""
CSRF, rate limit, and cron-secret helpers.
"""
from __future__ import annotations

import hmac
import os
import secrets
import time
from typing import Dict

CSRF_COOKIE_NAME = "csrf_token"
SECURE_COOKIES = (
    os.getenv("COOKIE_SECURE", "").lower() in ("1", "true", "yes")
    or os.getenv("PUBLIC_BASE_URL", "").lower().startswith("https://")
)


def issue_csrf_token(existing: str | None = None) -> str:
    """Return a CSRF token (re-use existing if provided, else create a new one)."""
    return existing or secrets.token_urlsafe(16)


def attach_csrf_cookie(response, token: str) -> None:
    """Attach the CSRF token as a non-HTTPOnly cookie (double-submit pattern)."""
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        httponly=False,
        samesite="lax",
        secure=SECURE_COOKIES,
    )


def validate_csrf(request, form_token: str | None) -> bool:
    """Compare the submitted token with the cookie value using constant-time compare."""
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME) or ""
    form_token = form_token or ""
    if not cookie_token or not form_token:
        return False
    return hmac.compare_digest(cookie_token, form_token)


# -------- Rate limiting (in-memory) --------
_rate_state: Dict[str, list[float]] = {}


def allow_request(key: str, limit: int = 30, window_seconds: int = 60) -> bool:
    """
    Simple sliding-window rate limit stored in memory.
    Returns True if under limit, False otherwise.
    """
    now = time.time()
    window_start = now - window_seconds
    history = [t for t in _rate_state.get(key, []) if t > window_start]
    if len(history) >= limit:
        _rate_state[key] = history
        return False
    history.append(now)
    _rate_state[key] = history
    return True


# -------- Cron trigger --------
def verify_cron_secret(request) -> bool:
    """
    Accept the scheduler's secret as `?secret=` or `Authorization: Bearer <secret>`.
    With no CRON_SECRET configured every request is refused.
    """
    expected = os.getenv("CRON_SECRET") or ""
    if not expected:
        return False

    # Query strings turn '+' into spaces; secrets are base64-ish so put them back.
    query_secret = (request.query_params.get("secret") or "").replace(" ", "+")
    auth_header = request.headers.get("authorization") or ""
    bearer = auth_header[len("Bearer "):] if auth_header.startswith("Bearer ") else ""

    return any(
        candidate and hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))
        for candidate in (query_secret, bearer)
    )


__all__ = [
    "CSRF_COOKIE_NAME",
    "issue_csrf_token",
    "attach_csrf_cookie",
    "validate_csrf",
    "allow_request",
    "verify_cron_secret",
]
