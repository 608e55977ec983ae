import logging

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from pydantic import BaseModel

from app.auth_utils import (
    AUTH_EMAIL_HEADER,
    AUTH_USER_HEADER,
    clear_session_cookie,
    get_current_user,
    read_upstream_identity,
    set_session_cookie,
)
from app.layout import escape, render_page
from app.security import (
    allow_request,
    attach_csrf_cookie,
    issue_csrf_token,
    validate_csrf,
)
from core.database import (
    create_session,
    delete_session,
    update_user_email,
    upsert_user,
)

router = APIRouter()
log = logging.getLogger("auth")


class EmailPayload(BaseModel):
    email: str = ""


def normalize_email(email: str) -> str | None:
    """Return the normalized address, or None when it is not a valid email."""
    email = (email or "").strip()
    if not email or len(email) > 254:
        return None
    try:
        result = validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return None
    return result.normalized.lower()


def _after_signin_url(user: dict) -> str:
    return "/dashboard" if user.get("email") else "/collect-email"


@router.get("/signin")
def signin(request: Request):
    user, _ = get_current_user(request)
    if user:
        return RedirectResponse(url=_after_signin_url(user), status_code=303)

    # Identity headers are trusted as sent; set AUTH_TRUSTED_PROXIES in any
    # deployment where clients can reach the app without the proxy.
    username, email = read_upstream_identity(request)
    if not username:
        body = """
        <div class="card">
          <p>Sign-in is handled by the GitHub login in front of this site.</p>
          <p class="muted">If you reached this page directly, open the site through its public
          address so GitHub can confirm who you are.</p>
        </div>
        """
        return render_page("Sign in", body, user=None, status_code=401)

    ip = request.client.host if request and request.client else "unknown"
    if not allow_request(f"signin:{ip}", limit=20, window_seconds=300):
        return HTMLResponse("Too many sign-in attempts. Please try again later.", status_code=429)

    user = upsert_user(username, normalize_email(email) if email else None)
    token = create_session(user["id"])
    log.info("Signed in", extra={"github_username": user["github_username"]})

    response = RedirectResponse(url=_after_signin_url(user), status_code=303)
    set_session_cookie(response, token)
    return response


@router.get("/logout")
def logout(request: Request):
    _, token = get_current_user(request)
    if token:
        delete_session(token)
    response = RedirectResponse(url="/", status_code=303)
    clear_session_cookie(response)
    return response


def _collect_email_form(csrf_token: str, error: str = "", value: str = "") -> str:
    error_html = f'<p class="error">{escape(error)}</p>' if error else ""
    return f"""
    <div class="card">
      <p>Where should we send your weekly project roast?</p>
      {error_html}
      <form method="post" action="/collect-email">
        <label>Email</label>
        <input type="email" name="email" required maxlength="254" value="{escape(value)}" />
        <input type="hidden" name="csrf_token" value="{csrf_token}" />
        <button type="submit">Continue</button>
      </form>
    </div>
    """


@router.get("/collect-email", response_class=HTMLResponse)
def collect_email_form(request: Request):
    user, _ = get_current_user(request)
    if not user:
        return RedirectResponse(url="/signin", status_code=303)
    if user.get("email"):
        return RedirectResponse(url="/dashboard", status_code=303)

    csrf_token = issue_csrf_token(request.cookies.get("csrf_token"))
    resp = render_page("One more thing", _collect_email_form(csrf_token), user=user)
    attach_csrf_cookie(resp, csrf_token)
    return resp


@router.post("/collect-email", response_class=HTMLResponse)
def collect_email(
    request: Request,
    email: str = Form(..., max_length=254),
    csrf_token: str = Form(""),
):
    user, _ = get_current_user(request)
    if not user:
        return RedirectResponse(url="/signin", status_code=303)

    if not validate_csrf(request, csrf_token):
        return HTMLResponse("Invalid or missing CSRF token.", status_code=403)

    normalized = normalize_email(email)
    if not normalized:
        body = _collect_email_form(
            request.cookies.get("csrf_token", ""),
            error="Please enter a valid email address.",
            value=email,
        )
        return render_page("One more thing", body, user=user, status_code=400)

    update_user_email(user["id"], normalized)
    return RedirectResponse(url="/dashboard", status_code=303)


@router.post("/api/user/email")
def update_email_api(request: Request, payload: EmailPayload):
    user, _ = get_current_user(request)
    if not user:
        return PlainTextResponse("Unauthorized", status_code=401)

    if not payload.email.strip():
        return PlainTextResponse("Email is required", status_code=400)
    normalized = normalize_email(payload.email)
    if not normalized:
        return PlainTextResponse("Email is invalid", status_code=400)

    update_user_email(user["id"], normalized)
    return PlainTextResponse("Email updated successfully", status_code=200)
