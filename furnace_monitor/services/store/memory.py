"""
In-Memory Entity Store

Process-local backing with no external dependency. Collections are plain
dicts guarded by one re-entrant lock; every read hands back deep copies.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import replace
from typing import Dict, List, Optional

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
    default_seed,
    new_entity_id,
    utc_now_iso,
)
from .base import EntityNotFoundError, EntityStore, MetricRetention

logger = logging.getLogger(__name__)


class MemoryEntityStore(EntityStore):
    """Thread-safe in-memory entity store, seeded at construction."""

    def __init__(
        self,
        seed_data: Optional[SeedData] = None,
        retention: Optional[MetricRetention] = None,
    ):
        self._lock = threading.RLock()
        self._retention = retention or MetricRetention()

        self._furnaces: Dict[str, Furnace] = {}
        self._sensors: Dict[str, Sensor] = {}
        self._alerts: Dict[str, Alert] = {}
        self._metrics: List[ProductionMetric] = []
        self._kpis: Dict[str, KPI] = {}
        self._hotspots: Dict[str, Hotspot] = {}
        self._predictions: Dict[str, Prediction] = {}
        self._cameras: Dict[str, CameraFeed] = {}

        self.seed(seed_data if seed_data is not None else default_seed())

    @property
    def retention(self) -> MetricRetention:
        return self._retention

    # ----------------------------------------
    # Furnaces
    # ----------------------------------------

    def list_furnaces(self) -> List[Furnace]:
        with self._lock:
            return copy.deepcopy(list(self._furnaces.values()))

    def get_furnace(self, furnace_id: str) -> Furnace:
        with self._lock:
            return copy.deepcopy(self._require(self._furnaces, "Furnace", furnace_id))

    def update_furnace(self, furnace_id: str, **fields) -> Furnace:
        with self._lock:
            furnace = self._require(self._furnaces, "Furnace", furnace_id)
            updated = replace(furnace, **{**fields, "last_updated": utc_now_iso()})
            self._furnaces[furnace_id] = updated
            return copy.deepcopy(updated)

    # ----------------------------------------
    # Sensors
    # ----------------------------------------

    def list_sensors(self) -> List[Sensor]:
        with self._lock:
            return copy.deepcopy(list(self._sensors.values()))

    def get_sensor(self, sensor_id: str) -> Sensor:
        with self._lock:
            return copy.deepcopy(self._require(self._sensors, "Sensor", sensor_id))

    def update_sensor(self, sensor_id: str, **fields) -> Sensor:
        with self._lock:
            sensor = self._require(self._sensors, "Sensor", sensor_id)
            updated = replace(sensor, **{**fields, "last_updated": utc_now_iso()})
            self._sensors[sensor_id] = updated
            return copy.deepcopy(updated)

    # ----------------------------------------
    # Alerts
    # ----------------------------------------

    def list_alerts(self) -> List[Alert]:
        with self._lock:
            return copy.deepcopy(list(self._alerts.values()))

    def create_alert(self, alert: Alert) -> Alert:
        stored = replace(alert, id=new_entity_id())
        with self._lock:
            self._alerts[stored.id] = stored
        return copy.deepcopy(stored)

    def acknowledge_alert(self, alert_id: str) -> Alert:
        with self._lock:
            alert = self._require(self._alerts, "Alert", alert_id)
            if not alert.acknowledged:
                alert = replace(alert, acknowledged=True)
                self._alerts[alert_id] = alert
            return copy.deepcopy(alert)

    # ----------------------------------------
    # Production metrics
    # ----------------------------------------

    def list_production_metrics(self) -> List[ProductionMetric]:
        window = self._retention.recent_window
        with self._lock:
            if window == 0:
                return []
            return copy.deepcopy(self._metrics[-window:])

    def add_production_metric(self, metric: ProductionMetric) -> None:
        with self._lock:
            self._metrics.append(copy.deepcopy(metric))
            if len(self._metrics) > self._retention.history_cap:
                self._metrics = self._metrics[-self._retention.trim_to:]
                logger.debug(f"Production metric history trimmed to {len(self._metrics)} samples")

    def metric_history_size(self) -> int:
        with self._lock:
            return len(self._metrics)

    # ----------------------------------------
    # KPIs
    # ----------------------------------------

    def list_kpis(self) -> List[KPI]:
        with self._lock:
            return copy.deepcopy(list(self._kpis.values()))

    def update_kpi(self, label: str, value: float, change: float) -> KPI:
        with self._lock:
            kpi = self._require(self._kpis, "KPI", label)
            kpi = replace(kpi, value=value, change=change)
            self._kpis[label] = kpi
            return copy.deepcopy(kpi)

    # ----------------------------------------
    # Hotspots, predictions, cameras
    # ----------------------------------------

    def list_hotspots(self) -> List[Hotspot]:
        with self._lock:
            return copy.deepcopy(list(self._hotspots.values()))

    def list_predictions(self) -> List[Prediction]:
        with self._lock:
            return copy.deepcopy(list(self._predictions.values()))

    def create_prediction(self, prediction: Prediction) -> Prediction:
        stored = replace(prediction, id=new_entity_id())
        with self._lock:
            self._predictions[stored.id] = stored
        return copy.deepcopy(stored)

    def list_camera_feeds(self) -> List[CameraFeed]:
        with self._lock:
            return copy.deepcopy(list(self._cameras.values()))

    def update_camera_detections(self, camera_id: str, detections: List[Detection]) -> CameraFeed:
        with self._lock:
            camera = self._require(self._cameras, "Camera", camera_id)
            camera = replace(
                camera,
                detections=copy.deepcopy(list(detections)),
                defect_count=len(detections),
                last_update=utc_now_iso(),
            )
            self._cameras[camera_id] = camera
            return copy.deepcopy(camera)

    # ----------------------------------------
    # Seeding
    # ----------------------------------------

    def seed(self, data: SeedData) -> None:
        data = copy.deepcopy(data)
        with self._lock:
            for furnace in data.furnaces:
                self._furnaces[furnace.id] = furnace
            for sensor in data.sensors:
                self._sensors[sensor.id] = sensor
            for kpi in data.kpis:
                self._kpis[kpi.label] = kpi
            for hotspot in data.hotspots:
                self._hotspots[hotspot.id] = hotspot
            for prediction in data.predictions:
                self._predictions[prediction.id] = prediction
            for camera in data.camera_feeds:
                self._cameras[camera.id] = camera

    @staticmethod
    def _require(collection: dict, kind: str, key: str):
        try:
            return collection[key]
        except KeyError:
            raise EntityNotFoundError(kind, key) from None
