"""
Name: Application Shell Tests

Responsibilities:
  - /healthz reports store and session backends
  - Security headers and X-Request-Id on every response
  - Static assets are served
  - Lifespan seeds the bootstrap admin on an empty store
"""

from types import SimpleNamespace
from uuid import UUID

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backoffice.crosscutting import config
from backoffice.crosscutting.security import SecurityHeadersMiddleware

pytestmark = pytest.mark.unit


def test_healthz_ok(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["store"] == "connected"
    assert body["sessions"] == "connected"
    assert body["request_id"]


def test_healthz_reports_disconnected_store(app, client, user_repo, monkeypatch):
    monkeypatch.setattr(user_repo, "ping", lambda: False)

    body = client.get("/healthz").json()

    assert body["ok"] is False
    assert body["store"] == "disconnected"


def test_request_id_is_propagated(client):
    response = client.get("/login", headers={"X-Request-Id": "req-123"})

    assert response.headers["x-request-id"] == "req-123"


def test_request_id_generated_when_missing(client):
    assert client.get("/login").headers["x-request-id"]


@pytest.mark.parametrize(
    "incoming", ["bad id with spaces", "id\"><script>", "x" * 129]
)
def test_unsafe_request_id_is_replaced(client, incoming):
    response = client.get("/login", headers={"X-Request-Id": incoming})

    returned = response.headers["x-request-id"]
    assert returned != incoming
    assert str(UUID(returned)) == returned


def test_security_headers_present(client):
    response = client.get("/login")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["cache-control"] == "no-store"
    csp = response.headers["content-security-policy"]
    assert "frame-ancestors 'none'" in csp
    assert "unsafe-inline" in csp


def test_csp_strict_in_production(monkeypatch):
    monkeypatch.setattr(
        config,
        "get_settings",
        lambda: SimpleNamespace(is_production=lambda: True),
    )

    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware)

    @app.get("/ping")
    def _ping() -> dict[str, bool]:
        return {"ok": True}

    with TestClient(app) as client:
        res = client.get("/ping", headers={"x-forwarded-proto": "https"})

    assert "unsafe-inline" not in res.headers["content-security-policy"]
    assert "max-age=31536000" in res.headers["strict-transport-security"]


def test_static_assets_served(client):
    response = client.get("/static/console.js")

    assert response.status_code == 200
    assert "postJson" in response.text


def test_lifespan_seeds_bootstrap_admin(monkeypatch):
    monkeypatch.setenv("BOOTSTRAP_ADMIN_ENABLED", "true")
    monkeypatch.setenv("BOOTSTRAP_ADMIN_EMAIL", "root@x.io")
    monkeypatch.setenv("BOOTSTRAP_ADMIN_PASSWORD", "Root@123")
    config.get_settings.cache_clear()

    from backoffice.api.main import create_app
    from backoffice.container import get_credential_store

    with TestClient(create_app(), follow_redirects=False) as client:
        login = client.post(
            "/login", json={"email": "root@x.io", "password": "Root@123"}
        )
        assert login.status_code == 200
        assert client.get("/users").status_code == 200

    assert get_credential_store().count() == 1
