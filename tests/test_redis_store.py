"""
Redis Entity Store Tests

Runs the Redis backing against fakeredis; connection failures are
simulated with mocks.
"""

from unittest.mock import MagicMock, patch

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from furnace_monitor.models import Alert, AlertSeverity, ProductionMetric, default_seed
from furnace_monitor.services.store import (
    EntityNotFoundError,
    MetricRetention,
    RedisEntityStore,
    StoreUnavailableError,
)


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer())


@pytest.fixture
def redis_store(redis_client):
    store = RedisEntityStore(redis_client, namespace="test")
    store.seed(default_seed())
    return store


class TestSeeding:

    def test_seed_populates_hashes(self, redis_store, redis_client):
        assert [f.id for f in redis_store.list_furnaces()] == ["F1", "F2", "F3", "F4", "F5", "F6"]
        assert len(redis_store.list_sensors()) == 18
        assert len(redis_store.list_kpis()) == 4
        assert redis_client.hlen("test:furnaces") == 6

    def test_reseed_does_not_duplicate_predictions(self, redis_store):
        """Predictions carry fresh ids per seed call; only an empty hash is seeded."""
        first = {p.id for p in redis_store.list_predictions()}
        redis_store.seed(default_seed())

        assert {p.id for p in redis_store.list_predictions()} == first
        assert len(first) == 3

    def test_namespaces_are_isolated(self, redis_client, redis_store):
        other = RedisEntityStore(redis_client, namespace="other")
        assert other.list_furnaces() == []


class TestUpdates:

    def test_update_furnace_round_trips_through_json(self, redis_store):
        updated = redis_store.update_furnace("F1", temperature=1661.5)

        stored = redis_store.get_furnace("F1")
        assert stored.temperature == 1661.5
        assert stored.production_rate == 485
        assert stored.last_updated == updated.last_updated

    def test_update_unknown_furnace(self, redis_store):
        with pytest.raises(EntityNotFoundError):
            redis_store.update_furnace("F99", temperature=1.0)

    def test_update_kpi_and_unknown_label(self, redis_store):
        redis_store.update_kpi("Energy Efficiency", 88.0, 0.8)
        kpis = {k.label: k.value for k in redis_store.list_kpis()}
        assert kpis["Energy Efficiency"] == 88.0

        with pytest.raises(EntityNotFoundError):
            redis_store.update_kpi("Uptime", 1.0, 0.0)

    def test_acknowledge_twice(self, redis_store):
        alert = redis_store.create_alert(Alert(
            severity=AlertSeverity.CRITICAL,
            title="High Vibration Detected",
            message="Motor 1 Vib vibration at 4.7 mm/s",
            source="Sensor Network",
            sensor_id="V001",
        ))

        redis_store.acknowledge_alert(alert.id)
        again = redis_store.acknowledge_alert(alert.id)

        assert again.acknowledged is True
        assert again.sensor_id == "V001"
        assert len(redis_store.list_alerts()) == 1


class TestMetricRetention:

    def test_list_is_trimmed_after_cap(self, redis_client):
        store = RedisEntityStore(redis_client, namespace="m", retention=MetricRetention(10, 5, 3))
        for n in range(11):
            store.add_production_metric(ProductionMetric(
                throughput=float(n), defect_rate=3.0, energy_consumption=5.0, oee=90.0, quality=95.0,
            ))

        assert store.metric_history_size() == 5
        assert [m.throughput for m in store.list_production_metrics()] == [8.0, 9.0, 10.0]

    def test_single_sample_bounds(self, redis_client):
        store = RedisEntityStore(redis_client, namespace="m1", retention=MetricRetention(1, 1, 5))
        for n in range(4):
            store.add_production_metric(ProductionMetric(
                throughput=float(n), defect_rate=3.0, energy_consumption=5.0, oee=90.0, quality=95.0,
            ))

        assert store.metric_history_size() == 1
        assert store.list_production_metrics()[0].throughput == 3.0


class TestUnavailable:

    def test_redis_errors_become_store_unavailable(self):
        client = MagicMock()
        client.hvals.side_effect = RedisConnectionError("connection refused")
        store = RedisEntityStore(client)

        with pytest.raises(StoreUnavailableError):
            store.list_furnaces()

    def test_from_url_pings(self):
        with patch("redis.from_url") as from_url:
            from_url.return_value.ping.side_effect = RedisConnectionError("connection refused")

            with pytest.raises(StoreUnavailableError):
                RedisEntityStore.from_url("redis://localhost:6390/0")
