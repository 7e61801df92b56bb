"""
Gated Entity Store

Starts serving from an already-seeded in-memory store and swaps to a
persistent backing once that backing has connected and been seeded on a
background thread. The swap happens under a lock and is announced through
an explicit ``ready`` event, so callers never see an uninitialized store
during startup.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

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
)
from .base import EntityStore, StoreError

logger = logging.getLogger(__name__)


class GatedEntityStore(EntityStore):
    """Delegating store whose backing may be switched exactly once."""

    def __init__(self, initial: EntityStore):
        self._active = initial
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._settled = threading.Event()
        self._switch_thread: Optional[threading.Thread] = None

    @property
    def active(self) -> EntityStore:
        with self._lock:
            return self._active

    @property
    def backend_name(self) -> str:
        return self.active.backend_name

    @property
    def ready(self) -> threading.Event:
        """Set once the persistent backing has taken over."""
        return self._ready

    @property
    def settled(self) -> threading.Event:
        """Set once a switch-over attempt finished, successfully or not."""
        return self._settled

    def switch_over_async(
        self,
        factory: Callable[[], EntityStore],
        seed_data: Optional[SeedData] = None,
    ) -> threading.Thread:
        """Connect and seed the persistent backing in the background, then swap."""
        if self._switch_thread is not None:
            raise RuntimeError("switch-over already started")

        def run():
            try:
                store = factory()
                store.seed(seed_data if seed_data is not None else default_seed())
            except StoreError as e:
                logger.error(f"Persistent store unavailable, continuing with in-memory store: {e}")
                self._settled.set()
                return
            except Exception as e:
                logger.exception(f"Persistent store initialization failed: {e}")
                self._settled.set()
                return
            with self._lock:
                self._active = store
            self._ready.set()
            self._settled.set()
            logger.info(f"Switched entity store to {store.backend_name}")

        self._switch_thread = threading.Thread(target=run, name="store-switchover", daemon=True)
        self._switch_thread.start()
        return self._switch_thread

    # ----------------------------------------
    # Delegation
    # ----------------------------------------

    def list_furnaces(self) -> List[Furnace]:
        return self.active.list_furnaces()

    def get_furnace(self, furnace_id: str) -> Furnace:
        return self.active.get_furnace(furnace_id)

    def update_furnace(self, furnace_id: str, **fields) -> Furnace:
        return self.active.update_furnace(furnace_id, **fields)

    def list_sensors(self) -> List[Sensor]:
        return self.active.list_sensors()

    def get_sensor(self, sensor_id: str) -> Sensor:
        return self.active.get_sensor(sensor_id)

    def update_sensor(self, sensor_id: str, **fields) -> Sensor:
        return self.active.update_sensor(sensor_id, **fields)

    def list_alerts(self) -> List[Alert]:
        return self.active.list_alerts()

    def create_alert(self, alert: Alert) -> Alert:
        return self.active.create_alert(alert)

    def acknowledge_alert(self, alert_id: str) -> Alert:
        return self.active.acknowledge_alert(alert_id)

    def list_production_metrics(self) -> List[ProductionMetric]:
        return self.active.list_production_metrics()

    def add_production_metric(self, metric: ProductionMetric) -> None:
        self.active.add_production_metric(metric)

    def list_kpis(self) -> List[KPI]:
        return self.active.list_kpis()

    def update_kpi(self, label: str, value: float, change: float) -> KPI:
        return self.active.update_kpi(label, value, change)

    def list_hotspots(self) -> List[Hotspot]:
        return self.active.list_hotspots()

    def list_predictions(self) -> List[Prediction]:
        return self.active.list_predictions()

    def create_prediction(self, prediction: Prediction) -> Prediction:
        return self.active.create_prediction(prediction)

    def list_camera_feeds(self) -> List[CameraFeed]:
        return self.active.list_camera_feeds()

    def update_camera_detections(self, camera_id: str, detections: List[Detection]) -> CameraFeed:
        return self.active.update_camera_detections(camera_id, detections)

    def seed(self, data: SeedData) -> None:
        self.active.seed(data)
