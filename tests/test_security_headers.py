import asyncio

from fastapi.testclient import TestClient
from starlette.requests import Request
from starlette.responses import Response

import app.api as api_module


def _call_middleware(call_next):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/dashboard",
        "headers": [],
        "query_string": b"",
    }
    return asyncio.run(api_module.add_security_headers(Request(scope), call_next))


def test_security_headers_applied():
    async def call_next(_request: Request) -> Response:
        return Response()

    resp = _call_middleware(call_next)

    assert resp.status_code == 200
    assert resp.headers.get("X-Content-Type-Options") == "nosniff"
    assert resp.headers.get("X-Frame-Options") == "SAMEORIGIN"
    assert resp.headers.get("Referrer-Policy") == "strict-origin-when-cross-origin"
    csp = resp.headers.get("Content-Security-Policy")
    assert "default-src 'self'" in csp
    assert "form-action 'self'" in csp


def test_security_headers_preserve_existing_csp():
    async def call_next(_request: Request) -> Response:
        resp = Response()
        resp.headers["Content-Security-Policy"] = "default-src 'none'"
        return resp

    resp = _call_middleware(call_next)

    # A route-specific CSP wins; the other headers are still added.
    assert resp.headers["Content-Security-Policy"] == "default-src 'none'"
    assert resp.headers.get("X-Content-Type-Options") == "nosniff"


def test_security_headers_on_html_and_json_routes(monkeypatch):
    monkeypatch.delenv("CRON_SECRET", raising=False)
    client = TestClient(api_module.app)

    for path in ("/", "/api/reminder/send-email"):
        resp = client.get(path)
        assert resp.headers.get("X-Content-Type-Options") == "nosniff"
        assert "default-src 'self'" in (resp.headers.get("Content-Security-Policy") or "")
