"""Monitor API endpoint tests."""

from unittest.mock import AsyncMock

import pytest
from aiohttp.test_utils import unused_port

from sentinel.api.deps import get_access_policy, get_config
from sentinel.config import APIConfig, Config, DatabaseConfig
from sentinel.core.auth import APIKeyPolicy
from sentinel.core.exceptions import HistoryReadError, PersistenceError


@pytest.mark.functional
class TestCheckEndpoint:

    async def test_healthy_check(self, client, memory_store, seeded_monitor, target_url):
        response = await client.post(
            "/api/monitor/check",
            json={"monitorId": "api-prod", "endpoint": target_url("/ok")}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["status"] == 200
        assert isinstance(data["latency"], int)

        observation = memory_store.history["api-prod"][0]
        assert observation.status == 200
        assert observation.latency_ms == data["latency"]
        assert memory_store.monitors["api-prod"].latency_ms == data["latency"]

    async def test_dead_endpoint_is_still_200(self, client, memory_store, seeded_monitor):
        response = await client.post(
            "/api/monitor/check",
            json={"monitorId": "api-prod", "endpoint": f"http://127.0.0.1:{unused_port()}/"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["status"] == 504
        assert len(memory_store.history["api-prod"]) == 1

    async def test_timeout_is_reported_as_504(self, client, seeded_monitor, target_url):
        response = await client.post(
            "/api/monitor/check",
            json={"monitorId": "api-prod", "endpoint": target_url("/hang")}
        )

        assert response.status_code == 200
        assert response.json()["status"] == 504
        assert response.json()["success"] is False

    async def test_unknown_monitor_is_404(self, client, target_url):
        response = await client.post(
            "/api/monitor/check",
            json={"monitorId": "ghost", "endpoint": target_url("/ok")}
        )

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert "ghost" in response.json()["message"]

    async def test_storage_failure_is_500(self, client, memory_store, seeded_monitor, target_url, monkeypatch):
        monkeypatch.setattr(
            memory_store,
            "insert_observation",
            AsyncMock(side_effect=PersistenceError("api-prod", "insert_observation"))
        )

        response = await client.post(
            "/api/monitor/check",
            json={"monitorId": "api-prod", "endpoint": target_url("/ok")}
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Database update failed."}

    @pytest.mark.parametrize("body", [
        {"monitorId": "api-prod"},
        {"endpoint": "https://api.example.com"},
        {"monitorId": "api-prod", "endpoint": "ftp://api.example.com"},
        {"monitorId": "api-prod", "endpoint": "not a url"},
        {"monitorId": "", "endpoint": "https://api.example.com"},
    ])
    async def test_invalid_body_is_422(self, client, body):
        response = await client.post("/api/monitor/check", json=body)

        assert response.status_code == 422

    async def test_response_has_request_id(self, client, seeded_monitor, target_url):
        response = await client.post(
            "/api/monitor/check",
            json={"monitorId": "api-prod", "endpoint": target_url("/ok")}
        )

        assert "X-Request-ID" in response.headers


@pytest.mark.functional
class TestHistoryEndpoint:

    async def test_empty_history(self, client):
        response = await client.get("/api/monitor/history/nobody")

        assert response.status_code == 200
        assert response.json() == []

    async def test_window_of_sixty_oldest_first(self, client, memory_store):
        for i in range(70):
            await memory_store.insert_observation("api-prod", status=200, latency_ms=i)

        response = await client.get("/api/monitor/history/api-prod")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 60
        assert [entry["latency_ms"] for entry in data] == list(range(10, 70))
        assert set(data[0]) == {"status", "latency_ms", "checked_at"}
        timestamps = [entry["checked_at"] for entry in data]
        assert timestamps == sorted(timestamps)

    async def test_read_failure_is_500(self, client, memory_store, monkeypatch):
        monkeypatch.setattr(
            memory_store,
            "recent_observations",
            AsyncMock(side_effect=HistoryReadError("api-prod"))
        )

        response = await client.get("/api/monitor/history/api-prod")

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to retrieve monitor history."}

    async def test_history_after_checks(self, client, seeded_monitor, target_url):
        for path in ("/ok", "/error", "/ok"):
            await client.post(
                "/api/monitor/check",
                json={"monitorId": "api-prod", "endpoint": target_url(path)}
            )

        response = await client.get("/api/monitor/history/api-prod")

        assert [entry["status"] for entry in response.json()] == [200, 500, 200]


@pytest.mark.functional
class TestDemoFailureEndpoint:

    async def test_forced_500(self, client, memory_store, seeded_monitor):
        response = await client.post(
            "/api/monitor/demo-failure",
            json={"monitorId": "api-prod", "forceStatus": 500}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Status forced to 500"}
        observation = memory_store.history["api-prod"][0]
        assert (observation.status, observation.latency_ms) == (500, 999)
        assert memory_store.monitors["api-prod"].status == 500

    async def test_forced_200_is_fast(self, client, memory_store, seeded_monitor):
        response = await client.post(
            "/api/monitor/demo-failure",
            json={"monitorId": "api-prod", "forceStatus": 200}
        )

        assert response.status_code == 200
        assert memory_store.history["api-prod"][0].latency_ms == 50

    async def test_storage_failure(self, client, memory_store, seeded_monitor, monkeypatch):
        monkeypatch.setattr(
            memory_store,
            "update_monitor_state",
            AsyncMock(side_effect=PersistenceError("api-prod", "update_monitor"))
        )

        response = await client.post(
            "/api/monitor/demo-failure",
            json={"monitorId": "api-prod", "forceStatus": 500}
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to force status"}

    async def test_unknown_monitor(self, client):
        response = await client.post(
            "/api/monitor/demo-failure",
            json={"monitorId": "ghost", "forceStatus": 500}
        )

        assert response.status_code == 404
        assert response.json()["success"] is False

    async def test_disabled_by_config(self, client, test_app, seeded_monitor):
        config = Config(
            database=DatabaseConfig(type="memory", url=""),
            api=APIConfig(demo_routes=False)
        )
        test_app.dependency_overrides[get_config] = lambda: config

        response = await client.post(
            "/api/monitor/demo-failure",
            json={"monitorId": "api-prod", "forceStatus": 500}
        )

        assert response.status_code == 404

    async def test_status_out_of_range(self, client, seeded_monitor):
        response = await client.post(
            "/api/monitor/demo-failure",
            json={"monitorId": "api-prod", "forceStatus": 700}
        )

        assert response.status_code == 422


@pytest.mark.functional
class TestMonitorEndpoint:

    async def test_never_checked_monitor(self, client, seeded_monitor):
        response = await client.get("/api/monitor/monitors/api-prod")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "api-prod"
        assert data["name"] == "Production API"
        assert data["status"] is None
        assert data["last_checked_at"] is None

    async def test_state_after_forced_status(self, client, seeded_monitor):
        await client.post(
            "/api/monitor/demo-failure",
            json={"monitorId": "api-prod", "forceStatus": 503}
        )

        data = (await client.get("/api/monitor/monitors/api-prod")).json()

        assert data["status"] == 503
        assert data["latency_ms"] == 50
        assert data["last_checked_at"] is not None

    async def test_unknown_monitor(self, client):
        response = await client.get("/api/monitor/monitors/ghost")

        assert response.status_code == 404


@pytest.mark.functional
class TestAccessPolicy:

    @pytest.fixture
    def keyed_app(self, test_app):
        test_app.dependency_overrides[get_access_policy] = lambda: APIKeyPolicy("s3cret")
        return test_app

    async def test_missing_key_rejected(self, client, keyed_app):
        response = await client.get("/api/monitor/history/api-prod")

        assert response.status_code == 401
        assert response.json()["detail"] == "API key missing"

    async def test_wrong_key_rejected(self, client, keyed_app):
        response = await client.get(
            "/api/monitor/history/api-prod",
            headers={"X-API-Key": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key"

    async def test_valid_key_accepted(self, client, keyed_app):
        response = await client.get(
            "/api/monitor/history/api-prod",
            headers={"X-API-Key": "s3cret"}
        )

        assert response.status_code == 200

    async def test_health_is_not_guarded(self, client, keyed_app):
        response = await client.get("/health")

        assert response.status_code == 200
