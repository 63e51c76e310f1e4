"""
Application factory: CORS and health endpoints
"""

import pytest

from academy import create_app
from config import TestingConfig


class CorsTestingConfig(TestingConfig):
    CORS_ALLOWED_ORIGINS = "https://app.academy.org, https://admin.academy.org"


@pytest.fixture
def cors_client():
    return create_app(CorsTestingConfig).test_client()


def test_allowed_origin_gets_credentialed_cors_headers(cors_client):
    resp = cors_client.get("/api/ping", headers={"Origin": "https://admin.academy.org"})

    assert resp.headers["Access-Control-Allow-Origin"] == "https://admin.academy.org"
    assert resp.headers["Access-Control-Allow-Credentials"] == "true"


def test_unknown_origin_gets_no_cors_headers(cors_client):
    resp = cors_client.get("/api/ping", headers={"Origin": "https://evil.example"})
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_preflight_for_json_api(cors_client):
    resp = cors_client.options("/api/videos", headers={
        "Origin": "https://app.academy.org",
        "Access-Control-Request-Method": "PUT",
        "Access-Control-Request-Headers": "Content-Type",
    })
    assert resp.headers["Access-Control-Allow-Origin"] == "https://app.academy.org"
    assert "PUT" in resp.headers["Access-Control-Allow-Methods"]


def test_no_cors_without_configured_origins(client):
    resp = client.get("/api/ping", headers={"Origin": "https://app.academy.org"})
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_index_reports_anonymous_visitor(client):
    assert client.get("/?health=1").get_json() == {"authenticated": False, "user": None}
