from urllib.parse import parse_qsl, urlencode

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.auth_utils import get_current_user
from app.layout import escape, render_page
from app.security import allow_request, attach_csrf_cookie, issue_csrf_token, validate_csrf
from core.annotations import set_reminder, update_progress
from core.errors import ProjectNotFound, StoreError, StoreReadFailure, StoreWriteFailure
from core.listing import SORT_OPTIONS, ListingPage, build_listing_page, parse_listing_query
from core.reconcile import reconcile
from core.roasts import days_since, motivational_roast, status_level

router = APIRouter()


def _dashboard_url(listing_query, **overrides) -> str:
    params = urlencode(listing_query.to_params(**overrides))
    return f"/dashboard?{params}" if params else "/dashboard"


def _return_url(return_query: str) -> str:
    # Re-parse so only known listing parameters survive the round trip.
    return _dashboard_url(parse_listing_query(dict(parse_qsl(return_query or ""))))


def _message_page(title: str, message: str, user: dict, status_code: int) -> HTMLResponse:
    body = f"""
    <div class="card">
      <p class="error">{escape(message)}</p>
      <p><a href="/dashboard">Back to dashboard</a></p>
    </div>
    """
    return render_page(title, body, user=user, status_code=status_code)


def _toolbar_html(page: ListingPage) -> str:
    query = page.query
    language_options = "".join(
        f'<option value="{escape(lang)}"{" selected" if lang == query.language else ""}>{escape(lang)}</option>'
        for lang in page.languages
    )
    sort_options = "".join(
        f'<option value="{opt}"{" selected" if opt == query.sort else ""}>{opt.title()}</option>'
        for opt in SORT_OPTIONS
    )
    return f"""
    <form class="toolbar" method="get" action="/dashboard">
      <div>
        <label>Search</label>
        <input type="search" name="q" value="{escape(query.search)}" placeholder="Repository name" />
      </div>
      <div>
        <label>Language</label>
        <select name="language">
          <option value="all">All languages</option>
          {language_options}
        </select>
      </div>
      <div>
        <label>Sort by</label>
        <select name="sort">{sort_options}</select>
      </div>
      <div>
        <label>Forks</label>
        <select name="forks">
          <option value="exclude"{" selected" if query.exclude_forks else ""}>Only repositories I created</option>
          <option value="include"{"" if query.exclude_forks else " selected"}>Include forks</option>
        </select>
      </div>
      <button type="submit">Apply</button>
    </form>
    """


def _card_html(repo, csrf_token: str, return_query: str) -> str:
    days = days_since(repo.updated_at)
    progress = repo.progress or 0
    level = status_level(days)
    finished = '<p>🎉 Job finished!</p>' if progress == 100 else ""
    reminder_label = "Stop reminding me" if repo.reminder_enabled else "Remind me"
    return f"""
    <div class="card repo status-{level}">
      <h3><a href="{escape(repo.url)}" target="_blank" rel="noopener noreferrer">{escape(repo.name)}</a></h3>
      <div class="muted">{escape(repo.description or "No description")}</div>
      <div class="meta">
        <span>{escape(repo.language or "Unknown")}</span>
        <span>★ {repo.star_count}</span>
        <span>⑂ {repo.fork_count}</span>
        <span>{days} day(s) ago</span>
      </div>
      <div class="bar"><span style="width:{progress}%"></span></div>
      <div class="muted">{progress}% complete</div>
      {finished}
      <p class="roast">{escape(motivational_roast(days, progress))}</p>
      <form class="inline-form" method="post" action="/projects/{repo.id}/progress">
        <input type="number" name="progress" min="0" max="100" value="{progress}" />
        <input type="hidden" name="csrf_token" value="{csrf_token}" />
        <input type="hidden" name="return_query" value="{escape(return_query)}" />
        <button type="submit">Save</button>
      </form>
      <form class="inline-form" method="post" action="/projects/{repo.id}/reminder">
        <input type="hidden" name="enabled" value="{"0" if repo.reminder_enabled else "1"}" />
        <input type="hidden" name="csrf_token" value="{csrf_token}" />
        <input type="hidden" name="return_query" value="{escape(return_query)}" />
        <button type="submit">{reminder_label}</button>
      </form>
    </div>
    """


def _pagination_html(page: ListingPage) -> str:
    if page.total_pages <= 1:
        return ""
    links = []
    for number in range(1, page.total_pages + 1):
        if number == page.query.page:
            links.append(f"<strong>{number}</strong>")
        else:
            href = escape(_dashboard_url(page.query, page=number))
            links.append(f'<a href="{href}">{number}</a>')
    return f'<div class="pagination">{"".join(links)}</div>'


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request):
    user, _ = get_current_user(request)
    if not user:
        return RedirectResponse(url="/signin", status_code=303)
    if not user.get("email"):
        return RedirectResponse(url="/collect-email", status_code=303)

    try:
        result = reconcile(user["github_username"])
    except StoreReadFailure:
        return _message_page(
            "Dashboard",
            "Could not load your saved progress. Please try again shortly.",
            user,
            503,
        )
    except StoreWriteFailure:
        return _message_page(
            "Dashboard",
            "Could not save your new repositories. Progress values may be out of date.",
            user,
            503,
        )

    listing_query = parse_listing_query(request.query_params)
    page = build_listing_page(result.items, listing_query)
    csrf_token = issue_csrf_token(request.cookies.get("csrf_token"))
    return_query = urlencode(page.query.to_params())

    if result.remote_unavailable:
        content = """
        <div class="card">
          <p class="error">GitHub connection problem.</p>
          <p class="muted">We could not load your repositories from GitHub. Check that the
          GitHub token is configured correctly, then refresh.</p>
        </div>
        """
    elif result.no_repositories:
        content = """
        <div class="card">
          <p>No repositories found.</p>
          <p class="muted">Create a repository on GitHub and it will show up here.</p>
        </div>
        """
    elif not page.items:
        content = """
        <div class="card">
          <p class="muted">No repositories match your current filters. Try adjusting your search
          criteria or filters.</p>
        </div>
        """
    else:
        cards = "".join(_card_html(repo, csrf_token, return_query) for repo in page.items)
        content = f'<div class="grid">{cards}</div>{_pagination_html(page)}'

    reminders_on = sum(1 for repo in result.items if repo.reminder_enabled)
    body = f"""
    <div class="stats">
      <div class="stat">
        <div class="label">Public repositories</div>
        <div class="value">{result.total_count}</div>
      </div>
      <div class="stat">
        <div class="label">Matching filters</div>
        <div class="value">{page.total_matching}</div>
      </div>
      <div class="stat">
        <div class="label">Reminders on</div>
        <div class="value">{reminders_on}</div>
      </div>
    </div>
    {_toolbar_html(page) if result.items else ""}
    {content}
    """

    resp = render_page("Your unfinished projects", body, user=user)
    attach_csrf_cookie(resp, csrf_token)
    return resp


def _annotation_guard(request: Request, csrf_token: str):
    """Return (user, None) when the request may edit a project, else (None, response)."""
    user, _ = get_current_user(request)
    if not user:
        return None, RedirectResponse(url="/signin", status_code=303)
    if not validate_csrf(request, csrf_token):
        return None, HTMLResponse("Invalid or missing CSRF token.", status_code=403)
    if not allow_request(f"annotate:{user['id']}", limit=30, window_seconds=60):
        return None, HTMLResponse("Too many updates. Please slow down.", status_code=429)
    return user, None


@router.post("/projects/{repo_id}/progress")
def save_progress(
    request: Request,
    repo_id: str,
    progress: str = Form(..., max_length=10),
    csrf_token: str = Form(""),
    return_query: str = Form("", max_length=500),
):
    user, denied = _annotation_guard(request, csrf_token)
    if denied:
        return denied

    try:
        update_progress(user["github_username"], repo_id, progress)
    except ValueError:
        return _message_page("Update progress", "Progress must be a number between 0 and 100.", user, 400)
    except ProjectNotFound:
        return _message_page("Update progress", "That project is not on your dashboard.", user, 404)
    except StoreError:
        return _message_page("Update progress", "Could not save your progress. Please try again.", user, 503)

    return RedirectResponse(url=_return_url(return_query), status_code=303)


@router.post("/projects/{repo_id}/reminder")
def save_reminder(
    request: Request,
    repo_id: str,
    enabled: str = Form(...),
    csrf_token: str = Form(""),
    return_query: str = Form("", max_length=500),
):
    user, denied = _annotation_guard(request, csrf_token)
    if denied:
        return denied

    try:
        set_reminder(user["github_username"], repo_id, enabled.strip().lower() in ("1", "true", "on", "yes"))
    except ProjectNotFound:
        return _message_page("Reminder", "That project is not on your dashboard.", user, 404)
    except StoreError:
        return _message_page("Reminder", "Could not save your reminder setting. Please try again.", user, 503)

    return RedirectResponse(url=_return_url(return_query), status_code=303)
