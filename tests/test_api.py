"""
Plant REST API Tests
"""

from datetime import datetime
from unittest.mock import patch

import pytest

from furnace_monitor.models import Alert, AlertSeverity
from furnace_monitor.services.store import StoreUnavailableError


def _raise_unavailable(*args, **kwargs):
    raise StoreUnavailableError("Redis read failed")


class TestReadEndpoints:
    """Test the dashboard collection endpoints."""

    @pytest.mark.parametrize("path,count", [
        ("/api/furnaces", 6),
        ("/api/sensors", 18),
        ("/api/kpis", 4),
        ("/api/hotspots", 3),
        ("/api/predictions", 3),
        ("/api/cameras", 6),
        ("/api/alerts", 0),
        ("/api/production-metrics", 0),
    ])
    def test_collections(self, client, path, count):
        response = client.get(path)

        assert response.status_code == 200
        assert len(response.get_json()) == count

    def test_get_furnace(self, client):
        data = client.get("/api/furnaces/F4").get_json()

        assert data["status"] == "idle"
        assert data["targetTemperature"] == 1600

    def test_get_sensor(self, client):
        data = client.get("/api/sensors/V002").get_json()

        assert data["status"] == "critical"
        assert data["unit"] == "mm/s"

    def test_unknown_furnace_404(self, client):
        response = client.get("/api/furnaces/F42")

        assert response.status_code == 404
        assert response.get_json()["error"] == "Furnace not found"

    def test_unknown_sensor_404(self, client):
        assert client.get("/api/sensors/Z001").status_code == 404

    def test_production_metrics_after_tick(self, app, client):
        simulator = app.extensions["furnace_monitor"].simulator
        simulator.tick()
        simulator.tick()

        data = client.get("/api/production-metrics").get_json()

        assert len(data) == 2
        assert data[0]["timestamp"] <= data[1]["timestamp"]
        assert {"throughput", "defectRate", "energyConsumption", "oee", "quality"} <= set(data[0])


class TestAlertAcknowledge:

    def test_acknowledge_twice(self, store, client):
        alert = store.create_alert(Alert(
            severity=AlertSeverity.CRITICAL,
            title="Machine 2 Temperature Exceeded",
            message="Temperature reached 1735°C (Target: 1700°C)",
            source="Furnace Monitoring",
            furnace_id="F2",
        ))

        first = client.post(f"/api/alerts/{alert.id}/acknowledge")
        second = client.post(f"/api/alerts/{alert.id}/acknowledge")

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.get_json()["acknowledged"] is True
        assert len(client.get("/api/alerts").get_json()) == 1

    def test_acknowledge_unknown(self, client):
        assert client.post("/api/alerts/nope/acknowledge").status_code == 404


class TestHealthAndErrors:

    def test_health(self, client):
        data = client.get("/api/health").get_json()

        assert data["status"] == "healthy"
        assert data["store_backend"] == "MemoryEntityStore"
        assert data["viewers"] == 0
        assert data["simulation"]["running"] is False
        assert data["simulation"]["ticks"] == 0
        assert datetime.fromisoformat(data["timestamp"]).tzinfo is not None

    def test_store_unavailable_503(self, store, client):
        with patch.object(store, "list_furnaces", side_effect=_raise_unavailable):
            response = client.get("/api/furnaces")

        assert response.status_code == 503
        assert response.get_json()["error"] == "Entity store unavailable"
