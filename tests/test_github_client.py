from datetime import datetime, timezone

import httpx
import pytest

from core.errors import RemoteUnavailable
from core.github_client import GitHubClient


def _repo(repo_id, name, **extra):
    payload = {
        "id": repo_id,
        "name": name,
        "description": None,
        "language": None,
        "stargazers_count": 2,
        "forks_count": 1,
        "updated_at": "2025-03-01T12:00:00Z",
        "html_url": f"https://github.com/octo/{name}",
        "fork": False,
    }
    payload.update(extra)
    return payload


def _client(handler, token="t0ken"):
    return GitHubClient(
        token=token,
        base_url="https://api.test",
        transport=httpx.MockTransport(handler),
    )


def test_fetch_repositories_follows_pagination():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/users/octo":
            return httpx.Response(200, json={"login": "octo", "public_repos": 3})
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=[_repo(3, "gamma")])
        return httpx.Response(
            200,
            json=[_repo(1, "alpha"), _repo(2, "beta", fork=True, language="Go")],
            headers={"Link": '<https://api.test/users/octo/repos?per_page=100&page=2>; rel="next"'},
        )

    with _client(handler) as client:
        result = client.fetch_repositories("octo")

    assert result.total_count == 3
    assert [r.name for r in result.items] == ["alpha", "beta", "gamma"]
    beta = result.items[1]
    assert beta.is_fork is True
    assert beta.language == "Go"
    assert result.items[0].description is None
    assert result.items[0].updated_at == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert seen[1].url.params["per_page"] == "100"
    assert seen[0].headers["Authorization"] == "Bearer t0ken"
    assert seen[0].headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_no_token_means_no_authorization_header():
    seen = []

    def handler(request):
        seen.append(request)
        if request.url.path == "/users/octo":
            return httpx.Response(200, json={"public_repos": 0})
        return httpx.Response(200, json=[])

    with _client(handler, token="") as client:
        client.fetch_repositories("octo")

    assert "Authorization" not in seen[0].headers


def test_total_count_falls_back_to_item_count():
    def handler(request):
        if request.url.path == "/users/octo":
            return httpx.Response(200, json={"login": "octo"})
        return httpx.Response(200, json=[_repo(1, "alpha")])

    with _client(handler) as client:
        result = client.fetch_repositories("octo")

    assert result.total_count == 1


@pytest.mark.parametrize("status", [401, 403, 404, 500])
def test_error_status_raises_remote_unavailable(status):
    def handler(request):
        return httpx.Response(status, json={"message": "nope"})

    with _client(handler) as client:
        with pytest.raises(RemoteUnavailable) as excinfo:
            client.fetch_repositories("octo")

    assert excinfo.value.status_code == status


def test_network_error_raises_remote_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        with pytest.raises(RemoteUnavailable):
            client.fetch_repositories("octo")


def test_malformed_payload_raises_remote_unavailable():
    def handler(request):
        if request.url.path == "/users/octo":
            return httpx.Response(200, json={"public_repos": 1})
        return httpx.Response(200, json={"not": "a list"})

    with _client(handler) as client:
        with pytest.raises(RemoteUnavailable):
            client.fetch_repositories("octo")


def test_get_repository_reads_activity_fields():
    def handler(request):
        assert request.url.path == "/repos/octo/alpha"
        return httpx.Response(
            200,
            json={
                "name": "alpha",
                "html_url": "https://github.com/octo/alpha",
                "pushed_at": "2025-02-01T00:00:00Z",
                "size": 512,
                "open_issues_count": 8,
                "stargazers_count": 12,
            },
        )

    with _client(handler) as client:
        activity = client.get_repository("octo", "alpha")

    assert activity.size_kb == 512
    assert activity.open_issues == 8
    assert activity.stars == 12
    assert activity.pushed_at == datetime(2025, 2, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "alpha", "pushed_at": "not-a-date"},
        {"name": "alpha", "pushed_at": "2025-02-01T00:00:00Z", "size": "big"},
        {"name": "alpha", "pushed_at": 12345},
    ],
)
def test_get_repository_malformed_activity_raises_remote_unavailable(payload):
    def handler(request):
        return httpx.Response(200, json=payload)

    with _client(handler) as client:
        with pytest.raises(RemoteUnavailable):
            client.get_repository("octo", "alpha")
