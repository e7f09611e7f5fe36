"""
tests/integration/test_health.py — Liveness probe, unknown routes and CORS.
"""

from __future__ import annotations

from datetime import datetime


class TestHealth:

    def test_health_is_public_and_reports_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["status"] == "ok"
        datetime.fromisoformat(body["timestamp"])


class TestUnknownRoutes:

    def test_unknown_route_returns_404_json(self, client):
        resp = client.get("/no/such/route")
        assert resp.status_code == 404
        body = resp.get_json()
        assert body["code"] == "ROUTE_NOT_FOUND"
        assert isinstance(body["error"], str)

    def test_wrong_method_returns_405_json(self, client):
        resp = client.patch("/health")
        assert resp.status_code == 405
        assert resp.get_json()["code"] == "METHOD_NOT_ALLOWED"


class TestCors:

    def test_allowed_origin_is_reflected_with_credentials(self, app, client):
        origin = app.config["CORS_ORIGINS"][0]
        resp = client.get("/health", headers={"Origin": origin})
        assert resp.headers["Access-Control-Allow-Origin"] == origin
        assert resp.headers["Access-Control-Allow-Credentials"] == "true"
        assert "X-CSRF-Token" in resp.headers["Access-Control-Allow-Headers"]

    def test_unknown_origin_gets_no_cors_headers(self, client):
        resp = client.get("/health", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers


class TestViewDocstrings:

    def test_every_route_handler_is_documented(self, app):
        undocumented = [
            endpoint
            for endpoint, view in app.view_functions.items()
            if endpoint != "static" and not (view.__doc__ or "").strip()
        ]
        assert undocumented == []
