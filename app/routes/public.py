from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.auth_utils import get_current_user
from app.layout import render_page

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    user, _ = get_current_user(request)
    if user:
        call_to_action = '<p><a href="/dashboard">Go to your dashboard</a></p>'
    else:
        call_to_action = '<p><a href="/signin">Sign in with GitHub</a> to import your repositories.</p>'

    body = f"""
    <div class="card">
      <h2>Your side projects called. They want to be finished.</h2>
      <p class="muted">
        Import your GitHub repositories, track how close each one is to done, and switch on
        weekly reminders. Every week we email a brutally honest roast of the projects you
        flagged and haven't touched.
      </p>
      {call_to_action}
    </div>
    """
    return render_page("Job Not Finished", body, user=user)
