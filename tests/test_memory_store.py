"""
In-Memory Entity Store Tests
"""

import pytest

from furnace_monitor.models import (
    Alert,
    AlertSeverity,
    Composition,
    Detection,
    ProductionMetric,
    SeedData,
)
from furnace_monitor.services.store import (
    EntityNotFoundError,
    MemoryEntityStore,
    MetricRetention,
)

from .conftest import make_furnace


def _alert(**overrides):
    fields = dict(
        severity=AlertSeverity.CRITICAL,
        title="Machine 1 Temperature Exceeded",
        message="Temperature reached 1740°C (Target: 1700°C)",
        source="Furnace Monitoring",
        furnace_id="F1",
    )
    fields.update(overrides)
    return Alert(**fields)


def _metric(n):
    return ProductionMetric(
        throughput=float(n), defect_rate=3.0, energy_consumption=5.0, oee=90.0, quality=95.0
    )


class TestFurnacesAndSensors:
    """Test replace-partial-fields semantics."""

    def test_update_furnace_merges_fields_and_stamps(self, store):
        """Only the given fields change and lastUpdated is refreshed."""
        store.update_furnace("F1", last_updated="2000-01-01T00:00:00+00:00")
        updated = store.update_furnace("F1", temperature=1660.0, pressure=2.9)

        assert updated.temperature == 1660.0
        assert updated.pressure == 2.9
        assert updated.production_rate == 485
        assert updated.name == "Machine 1"
        assert updated.last_updated != "2000-01-01T00:00:00+00:00"
        assert store.get_furnace("F1").temperature == 1660.0

    def test_update_sensor_writes_value_only(self, store):
        before = store.get_sensor("T002")
        after = store.update_sensor("T002", value=1725.0)

        assert after.value == 1725.0
        assert after.status == before.status
        assert after.trend == before.trend

    def test_unknown_ids_raise_not_found(self, store):
        with pytest.raises(EntityNotFoundError):
            store.get_furnace("F99")
        with pytest.raises(EntityNotFoundError):
            store.update_furnace("F99", temperature=1.0)
        with pytest.raises(EntityNotFoundError):
            store.get_sensor("X999")
        with pytest.raises(EntityNotFoundError):
            store.update_sensor("X999", value=1.0)
        with pytest.raises(EntityNotFoundError) as exc:
            store.update_kpi("No Such KPI", 1.0, 0.0)
        assert exc.value.kind == "KPI"

    def test_reads_return_copies(self, store):
        """Mutating a returned entity never reaches stored state."""
        furnace = store.list_furnaces()[0]
        furnace.temperature = -1
        furnace.composition.carbon = 99

        stored = store.get_furnace(furnace.id)
        assert stored.temperature == 1650
        assert stored.composition.carbon == 4.2

    def test_composition_kept_as_given(self, empty_seed):
        """Composition is not normalized to 100%."""
        furnace = make_furnace("FZ")
        furnace.composition = Composition(5.0, 1.0, 1.0, 90.0)
        store = MemoryEntityStore(SeedData(furnaces=[furnace]))

        comp = store.get_furnace("FZ").composition
        assert comp.carbon + comp.silicon + comp.manganese + comp.iron == 97.0


class TestAlerts:
    """Test append-only alerts and acknowledgement."""

    def test_create_alert_assigns_ids(self, store):
        first = store.create_alert(_alert())
        second = store.create_alert(_alert())

        assert first.id and second.id
        assert first.id != second.id
        assert [a.id for a in store.list_alerts()] == [first.id, second.id]
        assert first.acknowledged is False

    def test_acknowledge_is_idempotent(self, store):
        """Acknowledging twice leaves acknowledged=True and one alert."""
        alert = store.create_alert(_alert())

        once = store.acknowledge_alert(alert.id)
        twice = store.acknowledge_alert(alert.id)

        assert once.acknowledged is True
        assert twice.acknowledged is True
        assert len(store.list_alerts()) == 1

    def test_acknowledge_unknown_alert(self, store):
        with pytest.raises(EntityNotFoundError):
            store.acknowledge_alert("missing")


class TestProductionMetrics:
    """Test bounded metric retention."""

    def test_history_trimmed_after_cap(self, empty_seed):
        """1001 samples with cap 1000 / trim 500 leave the 500 most recent."""
        store = MemoryEntityStore(empty_seed, MetricRetention(1000, 500, 24))
        for n in range(1001):
            store.add_production_metric(_metric(n))

        assert store.metric_history_size() == 500

        recent = store.list_production_metrics()
        assert len(recent) == 24
        assert recent[-1].throughput == 1000
        assert recent[0].throughput == 977

    def test_history_not_trimmed_at_cap(self, empty_seed):
        store = MemoryEntityStore(empty_seed, MetricRetention(1000, 500, 24))
        for n in range(1000):
            store.add_production_metric(_metric(n))

        assert store.metric_history_size() == 1000

    def test_recent_returns_all_when_short(self, empty_seed):
        store = MemoryEntityStore(empty_seed)
        for n in range(3):
            store.add_production_metric(_metric(n))

        assert [m.throughput for m in store.list_production_metrics()] == [0, 1, 2]

    def test_invalid_retention(self):
        with pytest.raises(ValueError):
            MetricRetention(history_cap=10, trim_to=20)

    def test_zero_bounds_rejected(self):
        """A zero trim target would never shrink the history."""
        with pytest.raises(ValueError):
            MetricRetention(history_cap=10, trim_to=0)
        with pytest.raises(ValueError):
            MetricRetention(history_cap=0, trim_to=0)

    def test_smallest_bounds_still_trim(self, empty_seed):
        store = MemoryEntityStore(empty_seed, MetricRetention(history_cap=1, trim_to=1, recent_window=5))
        for n in range(5):
            store.add_production_metric(_metric(n))

        assert store.metric_history_size() == 1
        assert store.list_production_metrics()[0].throughput == 4


class TestKPIsAndCameras:

    def test_update_kpi_in_place(self, store):
        store.update_kpi("Quality Score", 95.0, 0.42)

        kpis = {k.label: k for k in store.list_kpis()}
        assert kpis["Quality Score"].value == 95.0
        assert kpis["Quality Score"].change == 0.42
        assert len(kpis) == 4

    def test_update_camera_detections_recounts(self, store):
        detections = [
            Detection("D9", "Crack", 0.91, {"x": 1, "y": 2, "width": 3, "height": 4}),
        ]
        camera = store.update_camera_detections("CAM002", detections)

        assert camera.defect_count == 1
        assert camera.detections[0].id == "D9"

    def test_hotspots_are_seeded(self, store):
        assert [h.id for h in store.list_hotspots()] == ["HS1", "HS2", "HS3"]

    def test_create_prediction_assigns_id(self, store):
        seeded = store.list_predictions()[0]
        created = store.create_prediction(seeded)

        assert created.id != seeded.id
        assert len(store.list_predictions()) == 4
