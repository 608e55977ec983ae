# Quick reference commands (run from repo root). These are comments only; copy/paste as needed.

# Install the app plus test tools (httpx is also needed for TestClient)
# python -m pip install -e ".[test]"

# Run the unit test suite (tests/db is skipped unless DATABASE_URL is set)
# python -m pytest

# Run the Postgres-backed store tests against a scratch database
# DATABASE_URL=postgresql://localhost/jnf_test python -m pytest tests/db

# Run focused test files
# python -m pytest tests/test_reconcile.py
# python -m pytest tests/test_github_client.py
# python -m pytest tests/test_listing.py tests/test_roasts.py
# python -m pytest tests/test_routes.py tests/test_security.py tests/test_security_headers.py
# python -m pytest tests/test_reminders_worker.py

# Start the web app locally (with env vars loaded)
# python -m dotenv run -- python -m uvicorn app.api:app --reload

# WARNING: the identity headers are trusted as sent. In production either keep the app
# unreachable except through the proxy, or pin the proxy with AUTH_TRUSTED_PROXIES=10.0.0.5
# Local sign-in without the identity proxy: send the username header yourself
# curl -i -H "X-Forwarded-User: octocat" -H "X-Forwarded-Email: octo@example.com" http://127.0.0.1:8000/signin

# Run the weekly reminder worker (loops; TEST_MODE=true runs a single pass)
# python -m dotenv run -- python main.py
# TEST_MODE=true python -m dotenv run -- python -m worker.main

# Trigger one reminder pass over HTTP, the way the scheduler does
# curl -H "Authorization: Bearer $CRON_SECRET" http://127.0.0.1:8000/api/reminder/send-email
