import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.security import verify_cron_secret
from core.errors import StoreError
from worker.reminders import run_once

router = APIRouter()
log = logging.getLogger("reminders")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Surrogate-Control": "no-store",
}


@router.api_route("/api/reminder/send-email", methods=["GET", "POST"])
def send_reminders(request: Request):
    """Scheduler hook: run one reminder pass when the cron secret matches."""
    if not verify_cron_secret(request):
        log.error("Unauthorized reminder trigger attempt")
        return JSONResponse({"error": "Unauthorized access"}, status_code=401, headers=NO_CACHE_HEADERS)

    try:
        summary = run_once()
    except StoreError as exc:
        log.error("Error processing reminders: %s", exc)
        return JSONResponse({"error": "Could not load reminder projects"}, status_code=500, headers=NO_CACHE_HEADERS)

    if not summary["total_emails"]:
        summary["message"] = "No users with reminder-enabled projects found"
    return JSONResponse({"success": True, "data": summary}, headers=NO_CACHE_HEADERS)
