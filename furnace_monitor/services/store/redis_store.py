"""
Redis Entity Store

Persistent backing that keeps each entity as a JSON document inside one
Redis hash per entity kind:

    <namespace>:furnaces      id     -> furnace document
    <namespace>:sensors       id     -> sensor document
    <namespace>:alerts        id     -> alert document
    <namespace>:kpis          label  -> KPI document
    <namespace>:hotspots      id     -> hotspot document
    <namespace>:predictions   id     -> prediction document
    <namespace>:cameras       id     -> camera feed document
    <namespace>:metrics       list of production metric documents, oldest first

Read-modify-write updates run inside a WATCH/MULTI transaction so a
concurrent writer on the same hash forces a retry instead of a lost update.
Every ``redis.exceptions.RedisError`` surfaces as ``StoreUnavailableError``.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

import redis
from redis.exceptions import RedisError

from ...models import (
    KPI,
    Alert,
    CameraFeed,
    Detection,
    Furnace,
    Hotspot,
    Prediction,
    ProductionMetric,
    SeedData,
    Sensor,
    new_entity_id,
    utc_now_iso,
)
from .base import EntityNotFoundError, EntityStore, MetricRetention, StoreUnavailableError

logger = logging.getLogger(__name__)


class RedisEntityStore(EntityStore):
    """Entity store backed by Redis hashes of JSON documents."""

    def __init__(
        self,
        client: "redis.Redis",
        namespace: str = "furnace_monitor",
        retention: Optional[MetricRetention] = None,
    ):
        self._client = client
        self._namespace = namespace
        self._retention = retention or MetricRetention()

    @classmethod
    def from_url(
        cls,
        redis_url: str,
        namespace: str = "furnace_monitor",
        retention: Optional[MetricRetention] = None,
    ) -> RedisEntityStore:
        """Connect and ping. Raises ``StoreUnavailableError`` if Redis is down."""
        try:
            client = redis.from_url(redis_url)
            client.ping()
        except RedisError as e:
            raise StoreUnavailableError(f"Redis connection failed: {e}") from e
        logger.info(f"Connected to Redis: {redis_url}")
        return cls(client, namespace=namespace, retention=retention)

    @property
    def retention(self) -> MetricRetention:
        return self._retention

    def _key(self, collection: str) -> str:
        return f"{self._namespace}:{collection}"

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except RedisError as e:
            raise StoreUnavailableError(f"Redis {operation} failed: {e}") from e

    # ----------------------------------------
    # Document helpers
    # ----------------------------------------

    def _all(self, collection: str) -> List[Dict[str, Any]]:
        with self._guard(f"read {collection}"):
            raw = self._client.hvals(self._key(collection))
        return [json.loads(doc) for doc in raw]

    def _one(self, collection: str, kind: str, key: str) -> Dict[str, Any]:
        with self._guard(f"read {collection}"):
            raw = self._client.hget(self._key(collection), key)
        if raw is None:
            raise EntityNotFoundError(kind, key)
        return json.loads(raw)

    def _put(self, collection: str, key: str, document: Dict[str, Any]) -> None:
        with self._guard(f"write {collection}"):
            self._client.hset(self._key(collection), key, json.dumps(document))

    def _update(
        self,
        collection: str,
        kind: str,
        key: str,
        mutate: Callable[[Dict[str, Any]], Dict[str, Any]],
    ) -> Dict[str, Any]:
        hash_key = self._key(collection)

        def txn(pipe):
            raw = pipe.hget(hash_key, key)
            if raw is None:
                raise EntityNotFoundError(kind, key)
            document = mutate(json.loads(raw))
            pipe.multi()
            pipe.hset(hash_key, key, json.dumps(document))
            return document

        with self._guard(f"update {collection}"):
            return self._client.transaction(txn, hash_key, value_from_callable=True)

    # ----------------------------------------
    # Furnaces
    # ----------------------------------------

    def list_furnaces(self) -> List[Furnace]:
        furnaces = [Furnace.from_dict(d) for d in self._all("furnaces")]
        return sorted(furnaces, key=lambda f: f.id)

    def get_furnace(self, furnace_id: str) -> Furnace:
        return Furnace.from_dict(self._one("furnaces", "Furnace", furnace_id))

    def update_furnace(self, furnace_id: str, **fields) -> Furnace:
        def mutate(doc):
            furnace = replace(Furnace.from_dict(doc), **{**fields, "last_updated": utc_now_iso()})
            return furnace.to_dict()

        return Furnace.from_dict(self._update("furnaces", "Furnace", furnace_id, mutate))

    # ----------------------------------------
    # Sensors
    # ----------------------------------------

    def list_sensors(self) -> List[Sensor]:
        sensors = [Sensor.from_dict(d) for d in self._all("sensors")]
        return sorted(sensors, key=lambda s: s.id)

    def get_sensor(self, sensor_id: str) -> Sensor:
        return Sensor.from_dict(self._one("sensors", "Sensor", sensor_id))

    def update_sensor(self, sensor_id: str, **fields) -> Sensor:
        def mutate(doc):
            sensor = replace(Sensor.from_dict(doc), **{**fields, "last_updated": utc_now_iso()})
            return sensor.to_dict()

        return Sensor.from_dict(self._update("sensors", "Sensor", sensor_id, mutate))

    # ----------------------------------------
    # Alerts
    # ----------------------------------------

    def list_alerts(self) -> List[Alert]:
        alerts = [Alert.from_dict(d) for d in self._all("alerts")]
        return sorted(alerts, key=lambda a: a.timestamp)

    def create_alert(self, alert: Alert) -> Alert:
        stored = replace(alert, id=new_entity_id())
        self._put("alerts", stored.id, stored.to_dict())
        return stored

    def acknowledge_alert(self, alert_id: str) -> Alert:
        def mutate(doc):
            doc["acknowledged"] = True
            return doc

        return Alert.from_dict(self._update("alerts", "Alert", alert_id, mutate))

    # ----------------------------------------
    # Production metrics
    # ----------------------------------------

    def list_production_metrics(self) -> List[ProductionMetric]:
        window = self._retention.recent_window
        if window == 0:
            return []
        with self._guard("read metrics"):
            raw = self._client.lrange(self._key("metrics"), -window, -1)
        return [ProductionMetric.from_dict(json.loads(doc)) for doc in raw]

    def add_production_metric(self, metric: ProductionMetric) -> None:
        key = self._key("metrics")
        with self._guard("append metric"):
            length = self._client.rpush(key, json.dumps(metric.to_dict()))
            if length > self._retention.history_cap:
                self._client.ltrim(key, -self._retention.trim_to, -1)

    def metric_history_size(self) -> int:
        with self._guard("read metrics"):
            return self._client.llen(self._key("metrics"))

    # ----------------------------------------
    # KPIs
    # ----------------------------------------

    def list_kpis(self) -> List[KPI]:
        return [KPI.from_dict(d) for d in self._all("kpis")]

    def update_kpi(self, label: str, value: float, change: float) -> KPI:
        def mutate(doc):
            doc["value"] = value
            doc["change"] = change
            return doc

        return KPI.from_dict(self._update("kpis", "KPI", label, mutate))

    # ----------------------------------------
    # Hotspots, predictions, cameras
    # ----------------------------------------

    def list_hotspots(self) -> List[Hotspot]:
        hotspots = [Hotspot.from_dict(d) for d in self._all("hotspots")]
        return sorted(hotspots, key=lambda h: h.id)

    def list_predictions(self) -> List[Prediction]:
        predictions = [Prediction.from_dict(d) for d in self._all("predictions")]
        return sorted(predictions, key=lambda p: p.timestamp)

    def create_prediction(self, prediction: Prediction) -> Prediction:
        stored = replace(prediction, id=new_entity_id())
        self._put("predictions", stored.id, stored.to_dict())
        return stored

    def list_camera_feeds(self) -> List[CameraFeed]:
        cameras = [CameraFeed.from_dict(d) for d in self._all("cameras")]
        return sorted(cameras, key=lambda c: c.id)

    def update_camera_detections(self, camera_id: str, detections: List[Detection]) -> CameraFeed:
        def mutate(doc):
            doc["detections"] = [d.to_dict() for d in detections]
            doc["defectCount"] = len(detections)
            doc["lastUpdate"] = utc_now_iso()
            return doc

        return CameraFeed.from_dict(self._update("cameras", "Camera", camera_id, mutate))

    # ----------------------------------------
    # Seeding
    # ----------------------------------------

    def seed(self, data: SeedData) -> None:
        """Upsert seed entities. Predictions are only seeded into an empty hash."""
        with self._guard("seed"):
            seed_predictions = not self._client.exists(self._key("predictions"))
            pipe = self._client.pipeline()
            for furnace in data.furnaces:
                pipe.hset(self._key("furnaces"), furnace.id, json.dumps(furnace.to_dict()))
            for sensor in data.sensors:
                pipe.hset(self._key("sensors"), sensor.id, json.dumps(sensor.to_dict()))
            for kpi in data.kpis:
                pipe.hset(self._key("kpis"), kpi.label, json.dumps(kpi.to_dict()))
            for hotspot in data.hotspots:
                pipe.hset(self._key("hotspots"), hotspot.id, json.dumps(hotspot.to_dict()))
            for camera in data.camera_feeds:
                pipe.hset(self._key("cameras"), camera.id, json.dumps(camera.to_dict()))
            if seed_predictions:
                for prediction in data.predictions:
                    pipe.hset(self._key("predictions"), prediction.id, json.dumps(prediction.to_dict()))
            pipe.execute()
        logger.info(
            f"Seeded Redis store '{self._namespace}': {len(data.furnaces)} furnaces, "
            f"{len(data.sensors)} sensors, {len(data.kpis)} KPIs"
        )
