"""
Weekly reminder job: roast every reminder-enabled project and email each owner.
"""
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

from app.email_utils import email_configured, send_text_email
from core.database import find_all_projects_with_reminder_enabled
from core.errors import RemoteUnavailable
from core.github_client import GitHubClient
from core.models import ProjectRecord
from core.roasts import days_since, fallback_roast, weekly_roast

log = logging.getLogger("reminders")

EMAIL_SUBJECT = "Your Weekly Project Roast - It's Time To Ship! 🚢"


@dataclass
class ProjectRoast:
    name: str
    roast: str
    url: Optional[str] = None
    days_since_last_commit: Optional[int] = None
    stars: Optional[int] = None
    open_issues: Optional[int] = None
    error: bool = False


def resolve_repository(project_name: str, owner_username: str) -> Tuple[str, str]:
    """
    Work out (owner, repo) for a stored project name.

    Accepts a full https://github.com/owner/repo URL, an owner/repo pair, or a
    bare repository name that belongs to the project's owner.
    """
    name = (project_name or "").strip()
    if "github.com" in name:
        parts = [p for p in urlparse(name).path.split("/") if p]
        if len(parts) >= 2:
            return parts[0], parts[1]
    elif "/" in name:
        owner, _, repo = name.partition("/")
        if owner and repo:
            return owner, repo
    return owner_username, name


def build_project_roast(client, project: ProjectRecord, now: datetime) -> ProjectRoast:
    owner, repo = resolve_repository(project.name, project.owner_username)
    try:
        activity = client.get_repository(owner, repo)
    except RemoteUnavailable as exc:
        log.warning("Could not analyze %s/%s: %s", owner, repo, exc)
        return ProjectRoast(name=repo, roast=fallback_roast(repo), error=True)

    days = days_since(activity.pushed_at, now)
    return ProjectRoast(
        name=repo,
        url=activity.url or None,
        roast=weekly_roast(repo, days, size_kb=activity.size_kb, open_issues=activity.open_issues),
        days_since_last_commit=days,
        stars=activity.stars,
        open_issues=activity.open_issues,
    )


def compose_email(owner_username: str, roasts: List[ProjectRoast], now: datetime) -> str:
    lines: List[str] = []
    lines.append(f"Weekly Project Roast - {now.strftime('%A, %B %d, %Y')}")
    lines.append("")
    lines.append(f"Hello {owner_username or 'there'},")
    lines.append("It's time for your weekly dose of tough love for those unfinished projects of yours:")
    lines.append("")

    for idx, item in enumerate(roasts, start=1):
        lines.append(f"Project {idx}: {item.name}")
        lines.append(f"The Hard Truth: {item.roast}")
        if item.url:
            lines.append(f"View on GitHub: {item.url}")
        if item.days_since_last_commit:
            lines.append(f"Days since last activity: {item.days_since_last_commit}")
        if item.stars is not None:
            lines.append(f"Stars: {item.stars}")
        lines.append("")

    lines.append("Remember, we're roasting your projects because we care. Now get back to coding!")
    base_url = (os.getenv("PUBLIC_BASE_URL") or "").rstrip("/")
    if base_url:
        lines.append(f"Update your progress at {base_url}/dashboard")
    lines.append("")
    lines.append(
        "You're receiving this because you enabled project reminders. "
        "Turn them off from your dashboard."
    )
    return "\n".join(lines)


def send_email(to_email: str, body: str) -> None:
    send_text_email(to_email=to_email, subject=EMAIL_SUBJECT, body=body)
    log.info("Email sent", extra={"to": to_email})


def run_once(client=None, now: Optional[datetime] = None) -> Dict:
    """
    One reminder pass. Email failures are logged and counted, never raised.
    Returns {"total_emails", "success_count", "failure_count", "details"}.
    """
    now = now or datetime.now(timezone.utc)
    log.info("Weekly reminder triggered at %s", now.isoformat())

    owners = find_all_projects_with_reminder_enabled()
    summary: Dict = {"total_emails": 0, "success_count": 0, "failure_count": 0, "details": []}
    if not owners:
        log.info("No users have reminder-enabled projects. Nothing to send.")
        return summary
    if not email_configured():
        log.warning("Email credentials not configured; every send will fail")

    own_client = client is None
    client = client or GitHubClient()
    try:
        for entry in owners:
            email = (entry.get("email") or "").strip()
            owner = entry["owner_username"]
            if not email or "@" not in email:
                log.info("User %s has no email, skipping", owner)
                continue

            projects = entry.get("projects") or []
            log.info("Processing user %s with %d reminder-enabled projects", owner, len(projects))
            roasts = [build_project_roast(client, project, now) for project in projects]
            body = compose_email(owner, roasts, now)

            summary["total_emails"] += 1
            try:
                send_email(email, body)
                summary["success_count"] += 1
                summary["details"].append({"owner": owner, "email": email, "success": True})
            except Exception as e:
                log.error("Failed to send email", extra={"to": email, "error": str(e)})
                summary["failure_count"] += 1
                summary["details"].append(
                    {"owner": owner, "email": email, "success": False, "error": str(e)}
                )
    finally:
        if own_client:
            client.close()

    log.info(
        "Email batch completed. Success: %d, Failed: %d",
        summary["success_count"],
        summary["failure_count"],
    )
    return summary
