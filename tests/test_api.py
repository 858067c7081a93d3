"""Tests for the HTTP surface (dashboard/app/main.py)."""

import pytest
from fastapi.testclient import TestClient

from dashboard.app import engine
from dashboard.app.main import app
from tests.conftest import FakeSource

FIELDS = {
    "id",
    "name",
    "cpu_percent",
    "memory_usage",
    "memory_limit",
    "memory_percent",
    "network_rx",
    "network_tx",
    "block_read",
    "block_write",
}


@pytest.fixture
def client_for():
    def _make(source):
        engine.close_engine()
        engine.init_engine(source)
        return TestClient(app)

    yield _make
    engine.close_engine()


class TestStatsEndpoint:
    def test_returns_metrics_array(self, client_for, fake_source):
        response = client_for(fake_source).get("/api/stats")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert [s["name"] for s in body] == ["web", "db", "cache"]
        assert set(body[0]) == FIELDS
        assert body[0]["cpu_percent"] == pytest.approx(200.0)
        assert body[0]["memory_limit"] == 2147483648

    def test_no_running_containers(self, client_for):
        response = client_for(FakeSource()).get("/api/stats")
        assert response.status_code == 200
        assert response.json() == []

    def test_partial_failure_is_still_200(self, client_for, partly_failing_source):
        response = client_for(partly_failing_source).get("/api/stats")
        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_engine_unreachable_is_500_plain_text(self, client_for, unreachable_source):
        response = client_for(unreachable_source).get("/api/stats")
        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert "connection refused" in response.text


class TestDashboard:
    def test_serves_html(self, client_for, fake_source):
        response = client_for(fake_source).get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "/api/stats" in response.text


class TestLifecycle:
    def test_shutdown_closes_engine(self, fake_source):
        engine.close_engine()
        engine.init_engine(fake_source)
        with TestClient(app) as client:
            assert client.get("/api/stats").status_code == 200
            assert fake_source.closed == 0
        assert fake_source.closed == 1
        engine.close_engine()
        assert fake_source.closed == 1
