"""
API tests for the timing session endpoints.

Each test gets a fresh app with its own engine on a ManualClock, so
requests see exact elapsed times and no state leaks between tests.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from rowcoach.api.dependencies import (
    get_benchmark_provider,
    get_performance_analyst,
    get_timing_engine,
)
from rowcoach.config.settings import Settings, get_settings
from rowcoach.core.analysis.coach import PerformanceAnalyst
from rowcoach.core.timing.clock import ManualClock
from rowcoach.core.timing.engine import TimingEngine
from rowcoach.infrastructure.benchmarks.provider import StaticBenchmarkProvider
from rowcoach.main import create_app


class StubTextClient:
    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        return "Strong finish."


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def engine(clock) -> TimingEngine:
    return TimingEngine(clock=clock, wall_clock=lambda: datetime(2026, 5, 3, 7, 30, 15))


@pytest.fixture
def app(engine):
    app = create_app()
    provider = StaticBenchmarkProvider(default_seconds=360)
    app.dependency_overrides[get_timing_engine] = lambda: engine
    app.dependency_overrides[get_benchmark_provider] = lambda: provider
    app.dependency_overrides[get_settings] = lambda: Settings(anthropic_api_key="")
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


# ---------------------------------------------------------------------------
# Session flow
# ---------------------------------------------------------------------------

class TestSessionEndpoints:
    """Tests for configure/start/split/stop over HTTP."""

    def test_initial_state(self, client):
        response = client.get("/api/v1/session")

        assert response.status_code == 200
        body = response.json()
        assert body["state"] == "idle"
        assert body["started_at"] is None
        assert body["elapsed"] == "00:00.00"
        assert body["config"] == {
            "number_of_boats": 1,
            "session_distance": 2000,
            "split_distance": 500,
            "max_splits": 4,
        }
        assert body["boats"][0]["can_split"] is False

    def test_configure_creates_boats(self, client):
        response = client.put(
            "/api/v1/session/config",
            json={"number_of_boats": 3, "session_distance": 1000, "split_distance": 250},
        )

        assert response.status_code == 200
        assert response.json()["max_splits"] == 4
        assert len(client.get("/api/v1/session").json()["boats"]) == 3

    def test_configure_rejects_split_longer_than_session(self, client):
        response = client.put(
            "/api/v1/session/config",
            json={"number_of_boats": 1, "session_distance": 500, "split_distance": 1000},
        )

        assert response.status_code == 422

    def test_configure_rejects_below_minimum(self, client):
        response = client.put(
            "/api/v1/session/config",
            json={"number_of_boats": 0, "session_distance": 2000, "split_distance": 500},
        )

        assert response.status_code == 422

    def test_configure_rejected_while_running(self, client):
        client.post("/api/v1/session/start")

        response = client.put(
            "/api/v1/session/config",
            json={"number_of_boats": 2, "session_distance": 2000, "split_distance": 500},
        )

        assert response.status_code == 409

    def test_split_uses_session_clock(self, client, clock):
        client.post("/api/v1/session/start")
        clock.advance(105.3)

        response = client.post("/api/v1/session/boats/1/splits")

        assert response.status_code == 201
        split = response.json()
        assert split["index"] == 1
        assert split["distance"] == 500
        assert split["cumulative_time"] == "01:45.30"
        assert split["pace"] == "1:45.30"
        assert split["interval_diff"] == "0.00s"

    def test_split_with_explicit_elapsed(self, client):
        client.post("/api/v1/session/start")

        response = client.post("/api/v1/session/boats/1/splits", json={"elapsed_seconds": 90})

        assert response.status_code == 201
        assert response.json()["pace"] == "1:30.00"

    def test_split_not_after_previous_is_unprocessable(self, client):
        client.post("/api/v1/session/start")
        client.post("/api/v1/session/boats/1/splits", json={"elapsed_seconds": 90})

        response = client.post("/api/v1/session/boats/1/splits", json={"elapsed_seconds": 80})

        assert response.status_code == 422
        assert "not after the previous split" in response.json()["detail"]

    def test_split_while_idle_is_rejected(self, client):
        response = client.post("/api/v1/session/boats/1/splits", json={"elapsed_seconds": 60})

        assert response.status_code == 409

    def test_split_limit_reached(self, client):
        client.post("/api/v1/session/start")
        for elapsed in (60, 125, 190, 250):
            client.post("/api/v1/session/boats/1/splits", json={"elapsed_seconds": elapsed})

        response = client.post("/api/v1/session/boats/1/splits", json={"elapsed_seconds": 300})

        assert response.status_code == 409
        boat = client.get("/api/v1/session").json()["boats"][0]
        assert len(boat["splits"]) == 4
        assert boat["can_split"] is False

    def test_unknown_boat(self, client):
        client.post("/api/v1/session/start")

        response = client.post("/api/v1/session/boats/9/splits")

        assert response.status_code == 404

    def test_stop_freezes_elapsed(self, client, clock):
        client.post("/api/v1/session/start")
        clock.advance(30)

        body = client.post("/api/v1/session/stop").json()
        clock.advance(30)

        assert body["state"] == "idle"
        assert client.get("/api/v1/session").json()["elapsed_seconds"] == 30


class TestBoatEndpoints:
    def test_update_class_and_name(self, client):
        response = client.patch(
            "/api/v1/session/boats/1",
            json={"boat_class": "W2X", "boat_name": "Blue"},
        )

        assert response.status_code == 200
        assert response.json()["boat_class"] == "W2X"
        assert response.json()["boat_name"] == "Blue"

    def test_class_locked_while_running(self, client):
        client.post("/api/v1/session/start")

        response = client.patch("/api/v1/session/boats/1", json={"boat_class": "W2X"})

        assert response.status_code == 409

    def test_name_editable_while_running(self, client):
        client.post("/api/v1/session/start")

        response = client.patch("/api/v1/session/boats/1", json={"boat_name": "Blue"})

        assert response.status_code == 200


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

class TestExportEndpoint:
    def test_export_before_start(self, client):
        response = client.get("/api/v1/session/export.csv")

        assert response.status_code == 409
        assert "start the session" in response.json()["detail"]

    def test_export_csv(self, client):
        client.patch("/api/v1/session/boats/1", json={"boat_name": "Blue"})
        client.post("/api/v1/session/start")
        for elapsed in (60, 125, 190, 250):
            client.post("/api/v1/session/boats/1/splits", json={"elapsed_seconds": elapsed})
        client.post("/api/v1/session/stop")

        response = client.get("/api/v1/session/export.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="rowing_data.csv"' in response.headers["content-disposition"]
        lines = response.text.split("\r\n")
        assert lines[0].endswith("WBT (%),Split Time 1,Split Time 2,Split Time 3,Split Time 4")
        assert lines[1] == (
            "2026-05-03,07:30:15,2000,Blue,M1X,04:10.00,1:02.50,130.56,"
            "60.00,65.00,65.00,60.00"
        )


# ---------------------------------------------------------------------------
# Benchmarks and analysis
# ---------------------------------------------------------------------------

class TestBenchmarkEndpoints:
    def test_list_classes(self, client):
        response = client.get("/api/v1/benchmarks/classes")

        assert response.status_code == 200
        assert {"name": "W8+", "category": "Female"} in response.json()

    def test_get_benchmark(self, client):
        response = client.get("/api/v1/benchmarks/M1X")

        assert response.json() == {"boat_class": "M1X", "time_in_seconds": 360.0, "available": True}


class TestAnalysisEndpoint:
    def test_unavailable_without_api_key(self, client):
        client.post("/api/v1/session/start")
        client.post("/api/v1/session/boats/1/splits", json={"elapsed_seconds": 60})

        response = client.post("/api/v1/analysis/boats/1")

        assert response.status_code == 503

    def test_summary(self, app, client):
        app.dependency_overrides[get_performance_analyst] = lambda: PerformanceAnalyst(
            StubTextClient(), StaticBenchmarkProvider(default_seconds=360)
        )
        client.post("/api/v1/session/start")
        client.post("/api/v1/session/boats/1/splits", json={"elapsed_seconds": 396})

        response = client.post("/api/v1/analysis/boats/1")

        assert response.status_code == 200
        body = response.json()
        assert body["percent_vs_benchmark"] == 90.0
        assert body["total_time"] == "06:36.00"
        assert body["world_best_time"] == "06:00.00"
        assert body["summary"] == "Strong finish."

    def test_requires_a_split(self, app, client):
        app.dependency_overrides[get_performance_analyst] = lambda: PerformanceAnalyst(
            StubTextClient(), StaticBenchmarkProvider()
        )

        response = client.post("/api/v1/analysis/boats/1")

        assert response.status_code == 409


class TestHealth:
    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["details"]["session"] == "idle"

    def test_readiness_without_anthropic_key(self, client):
        """The AI summary is optional, so a missing key doesn't block traffic."""
        response = client.get("/health/ready")

        assert response.status_code == 200
        checks = {c["name"]: c["status"] for c in response.json()["checks"]}
        assert checks == {"configuration": "ok", "benchmarks": "ok", "anthropic": "disabled"}
