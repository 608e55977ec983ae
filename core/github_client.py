"""
GitHub REST client: the remote repository fetcher.

Returns complete repository lists (following pagination) and raises
RemoteUnavailable for anything that is not a usable 2xx JSON response.
"""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from core.errors import RemoteUnavailable
from core.models import FetchResult, RemoteRepositorySummary, RepositoryActivity

log = logging.getLogger("github")

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
ACCEPT_JSON = "application/vnd.github+json"
PER_PAGE = 100
MAX_PAGES = 50


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse GitHub's ISO-8601 timestamps; missing values mean 'now'."""
    if not value:
        return datetime.now(timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def summary_from_payload(repo: Dict[str, Any]) -> RemoteRepositorySummary:
    return RemoteRepositorySummary(
        id=int(repo["id"]),
        name=repo["name"],
        description=repo.get("description"),
        language=repo.get("language"),
        star_count=int(repo.get("stargazers_count") or 0),
        fork_count=int(repo.get("forks_count") or 0),
        updated_at=parse_timestamp(repo.get("updated_at")),
        url=repo.get("html_url") or "",
        is_fork=bool(repo.get("fork")),
    )


class GitHubClient:
    """Small synchronous GitHub API client."""

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._token = token if token is not None else os.getenv("GITHUB_TOKEN")
        self._base_url = (base_url or os.getenv("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        self._timeout_seconds = timeout_seconds or float(os.getenv("GITHUB_TIMEOUT_SECONDS", "15"))
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "GitHubClient":
        self._ensure_client()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": ACCEPT_JSON,
            "X-GitHub-Api-Version": API_VERSION,
        }
        # Unauthenticated requests still work, with a lower rate limit.
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                headers=self._headers(),
                timeout=self._timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        client = self._ensure_client()
        try:
            response = client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise RemoteUnavailable(f"GitHub request failed: {exc}") from exc

        if response.status_code >= 400:
            raise RemoteUnavailable(
                f"GitHub returned {response.status_code} for {response.request.url.path}",
                status_code=response.status_code,
            )
        return response

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteUnavailable("GitHub returned a non-JSON body") from exc

    def fetch_repositories(self, username: str) -> FetchResult:
        """Return the user's public repository count and every repository they own."""
        profile = self._json(self._get(f"/users/{username}"))
        if not isinstance(profile, dict):
            raise RemoteUnavailable("Unexpected profile payload from GitHub")

        items: List[RemoteRepositorySummary] = []
        url: Optional[str] = f"/users/{username}/repos"
        params: Optional[Dict[str, Any]] = {"per_page": PER_PAGE, "type": "owner"}
        pages = 0
        while url and pages < MAX_PAGES:
            response = self._get(url, params=params)
            payload = self._json(response)
            if not isinstance(payload, list):
                raise RemoteUnavailable("Unexpected repository list payload from GitHub")
            try:
                items.extend(summary_from_payload(repo) for repo in payload)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise RemoteUnavailable(f"Malformed repository in GitHub payload: {exc}") from exc

            pages += 1
            # The next link already carries the query string.
            url = response.links.get("next", {}).get("url")
            params = None

        if url:
            log.warning(
                "Repository list truncated",
                extra={"username": username, "pages": pages, "items": len(items)},
            )

        try:
            total_count = int(profile["public_repos"])
        except (KeyError, TypeError, ValueError):
            total_count = len(items)
        return FetchResult(total_count=total_count, items=items)

    def get_repository(self, owner: str, name: str) -> RepositoryActivity:
        repo = self._json(self._get(f"/repos/{owner}/{name}"))
        if not isinstance(repo, dict):
            raise RemoteUnavailable("Unexpected repository payload from GitHub")
        try:
            return RepositoryActivity(
                name=repo.get("name") or name,
                url=repo.get("html_url") or "",
                pushed_at=parse_timestamp(repo.get("pushed_at") or repo.get("updated_at")),
                size_kb=int(repo.get("size") or 0),
                open_issues=int(repo.get("open_issues_count") or 0),
                stars=int(repo.get("stargazers_count") or 0),
            )
        except (AttributeError, TypeError, ValueError) as exc:
            raise RemoteUnavailable(f"Malformed repository {owner}/{name} in GitHub payload: {exc}") from exc


def fetch_repositories(username: str) -> FetchResult:
    """Fetch with a client configured from the environment."""
    with GitHubClient() as client:
        return client.fetch_repositories(username)


__all__ = [
    "GitHubClient",
    "fetch_repositories",
    "parse_timestamp",
    "summary_from_payload",
]
