"""Tests for hoststream.api routes and the /ws stream."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from starlette.websockets import WebSocketDisconnect

from hoststream.api.routes import ConnectionManager
from hoststream.errors import FatalStreamError, ProviderError
from hoststream.main import app
from hoststream.models.metrics import DiskReading
from hoststream.provider.metrics_provider import MetricsProvider
from tests.fakes import scenario_source


# ── fixtures ───────────────────────────────────────────


@pytest.fixture
def fatal_calls() -> list[FatalStreamError]:
    return []


def _install(provider: MetricsProvider, fatal_calls: list) -> None:
    app.state.provider = provider
    app.state.connection_manager = ConnectionManager(
        provider, interval=0.05, on_fatal=fatal_calls.append
    )


@pytest.fixture
def _setup_app_state(fatal_calls):
    """Inject app.state so routes work without the psutil-backed lifespan."""
    _install(MetricsProvider(scenario_source()), fatal_calls)
    yield
    del app.state.provider
    del app.state.connection_manager


@pytest.fixture
async def client(_setup_app_state):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def ws_client(_setup_app_state):
    return TestClient(app)


# ── REST tests ─────────────────────────────────────────


class TestStatus:
    @pytest.mark.asyncio
    async def test_status_ok(self, client: AsyncClient):
        resp = await client.get("/api/status")
        assert resp.status_code == 200
        assert resp.json() == {
            "status": "running",
            "source": "fake",
            "provider_poisoned": False,
            "disk_index": 1,
            "tick_interval": 0.05,
        }

    @pytest.mark.asyncio
    async def test_status_reports_poisoned_provider(self, client: AsyncClient, fatal_calls):
        _install(MetricsProvider(scenario_source(fail_on="refresh_disks")), fatal_calls)
        failed = await client.get("/api/snapshot")
        assert failed.status_code == 503

        resp = await client.get("/api/status")
        data = resp.json()
        assert data["status"] == "degraded"
        assert data["provider_poisoned"] is True


class TestSnapshot:
    @pytest.mark.asyncio
    async def test_snapshot_payload(self, client: AsyncClient):
        resp = await client.get("/api/snapshot")
        assert resp.status_code == 200
        assert resp.json() == {
            "cpu": {"0": 10.0, "1": 20.0, "2": 30.0, "3": 40.0},
            "ram": {"total": 1000.0, "used": 400.0, "free": 600.0},
            "swap": {"total": 0.0, "used": 0.0, "free": 0.0},
            "disk": None,
        }

    @pytest.mark.asyncio
    async def test_snapshot_with_second_disk(self, client: AsyncClient, fatal_calls):
        _install(
            MetricsProvider(scenario_source(disks=[
                DiskReading(total=1, available=1),
                DiskReading(total=500, available=200),
            ])),
            fatal_calls,
        )
        resp = await client.get("/api/snapshot")
        assert resp.json()["disk"] == {"total": 500.0, "available": 200.0, "used": 300.0}

    @pytest.mark.asyncio
    async def test_snapshot_provider_failure(self, client: AsyncClient, fatal_calls):
        _install(MetricsProvider(scenario_source(fail_on="refresh_cpu")), fatal_calls)
        resp = await client.get("/api/snapshot")
        assert resp.status_code == 503
        assert len(fatal_calls) == 1
        assert isinstance(fatal_calls[0], ProviderError)


class TestCors:
    @pytest.mark.asyncio
    async def test_preflight_any_origin(self, client: AsyncClient):
        resp = await client.options(
            "/api/status",
            headers={
                "Origin": "http://dashboard.example",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "x-anything",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_preflight_rejects_other_methods(self, client: AsyncClient):
        resp = await client.options(
            "/api/status",
            headers={
                "Origin": "http://dashboard.example",
                "Access-Control-Request-Method": "DELETE",
            },
        )
        assert resp.status_code == 400


# ── WebSocket tests ────────────────────────────────────


class TestStream:
    def test_frames_have_fixed_schema(self, ws_client: TestClient):
        with ws_client.websocket_connect("/ws") as ws:
            first = ws.receive_json()
            second = ws.receive_json()

        for frame in (first, second):
            assert set(frame) == {"cpu", "ram", "swap", "disk"}
            assert frame["cpu"] == {"0": 10.0, "1": 20.0, "2": 30.0, "3": 40.0}
            assert set(frame["ram"]) == {"total", "used", "free"}
            assert frame["disk"] is None

    def test_observers_are_independent(self, ws_client: TestClient):
        with ws_client.websocket_connect("/ws") as a:
            a.receive_json()
            with ws_client.websocket_connect("/ws") as b:
                b.receive_json()
            # b is gone, a keeps streaming
            assert set(a.receive_json()) == {"cpu", "ram", "swap", "disk"}
            assert set(a.receive_json()) == {"cpu", "ram", "swap", "disk"}

    def test_fatal_provider_error_closes_with_1011(self, ws_client: TestClient, fatal_calls):
        _install(MetricsProvider(scenario_source(fail_on="refresh_memory")), fatal_calls)
        with ws_client.websocket_connect("/ws") as ws:
            with pytest.raises(WebSocketDisconnect) as exc_info:
                ws.receive_text()
        assert exc_info.value.code == 1011
        assert len(fatal_calls) == 1


# ── lifespan ───────────────────────────────────────────


def test_lifespan_wires_psutil_provider():
    with TestClient(app) as c:
        resp = c.get("/api/status")
        assert resp.status_code == 200
        assert resp.json()["source"] == "psutil"
        assert resp.json()["disk_index"] == 1
        assert resp.json()["tick_interval"] == 1.0
