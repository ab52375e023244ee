"""Tests for the HTTP query surface."""

import time

import pytest
from fastapi.testclient import TestClient

from pitlink_dashboard.api.metrics import parse_limit
from pitlink_dashboard.config import Settings
from pitlink_dashboard.main import create_app
from pitlink_dashboard.store.metrics_collector import MetricsCollector

from tests.test_snapshot import _snapshot


@pytest.fixture
def collector() -> MetricsCollector:
    return MetricsCollector(capacity=5)


@pytest.fixture
def client(collector: MetricsCollector):
    app = create_app(config=Settings(simulate=False), collector=collector)
    with TestClient(app) as c:
        yield c


def _fill(collector: MetricsCollector, n: int) -> None:
    for i in range(n):
        collector.record(_snapshot(i))


class TestCurrentEndpoint:
    def test_no_data_shape_before_first_update(self, client: TestClient) -> None:
        resp = client.get("/api/metrics/current")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "no_data"
        assert body["metrics"] is None

    def test_returns_latest_snapshot(self, client: TestClient, collector: MetricsCollector) -> None:
        _fill(collector, 3)
        body = client.get("/api/metrics/current").json()
        assert body["quic_fec"]["packets_sent"] == 2
        assert body["network"]["path"] == "WiFi"
        assert "status" not in body


class TestHistoryEndpoint:
    def test_empty_history(self, client: TestClient) -> None:
        resp = client.get("/api/metrics/history")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_full_history_oldest_first(self, client: TestClient, collector: MetricsCollector) -> None:
        _fill(collector, 7)
        body = client.get("/api/metrics/history").json()
        assert [s["quic_fec"]["packets_sent"] for s in body] == [2, 3, 4, 5, 6]

    def test_limit(self, client: TestClient, collector: MetricsCollector) -> None:
        _fill(collector, 4)
        body = client.get("/api/metrics/history", params={"limit": 2}).json()
        assert [s["quic_fec"]["packets_sent"] for s in body] == [2, 3]

    @pytest.mark.parametrize("limit", ["0", "-4", "abc", "", "1000"])
    def test_out_of_range_limit_returns_everything(
        self, client: TestClient, collector: MetricsCollector, limit: str
    ) -> None:
        _fill(collector, 4)
        resp = client.get("/api/metrics/history", params={"limit": limit})
        assert resp.status_code == 200
        assert len(resp.json()) == 4


class TestHealthEndpoint:
    def test_health_before_data(self, client: TestClient) -> None:
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert body["service"] == "pitlinkpqc-dashboard"
        assert body["has_data"] is False
        assert body["capacity"] == 5

    def test_health_after_updates(self, client: TestClient, collector: MetricsCollector) -> None:
        _fill(collector, 8)
        body = client.get("/api/health").json()
        assert body["has_data"] is True
        assert body["retained"] == 5
        assert body["total_updates"] == 8


class TestApp:
    def test_index_page_served(self, client: TestClient) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "/api/metrics/current" in resp.text

    def test_collector_exposed_on_app_state(self, collector: MetricsCollector) -> None:
        app = create_app(config=Settings(simulate=False), collector=collector)
        assert app.state.collector is collector

    def test_apps_get_independent_collectors(self) -> None:
        cfg = Settings(simulate=False, history_capacity=7)
        a, b = create_app(config=cfg), create_app(config=cfg)
        assert a.state.collector is not b.state.collector
        assert a.state.collector.capacity == 7

    def test_simulator_feeds_collector_when_enabled(self) -> None:
        cfg = Settings(simulate=True, simulate_interval_seconds=0.01)
        collector = MetricsCollector(capacity=50)
        with TestClient(create_app(config=cfg, collector=collector)) as c:
            # The first cycle runs as soon as the task is scheduled
            for _ in range(200):
                if collector.has_data:
                    break
                time.sleep(0.01)
            assert collector.has_data
            assert c.get("/api/metrics/current").json()["quic_fec"]["connected"] is True


class TestParseLimit:
    @pytest.mark.parametrize(
        "raw, expected",
        [(None, None), ("10", 10), (" 3 ", 3), ("0", None), ("-1", None), ("x", None)],
    )
    def test_parse_limit(self, raw, expected) -> None:
        assert parse_limit(raw) == expected
