"""
Entity Store Interface

One contract for every store backing. The simulator, the snapshot
broadcaster and the REST API only ever talk to an ``EntityStore``.

All operations are synchronous and thread-safe. Reads return copies, so
callers never hold a reference to stored mutable state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

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
)


# ============================================
# Errors
# ============================================

class StoreError(Exception):
    """Base class for entity store failures."""


class EntityNotFoundError(StoreError):
    """Raised when an entity id (or KPI label) is unknown."""

    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} {key} not found")
        self.kind = kind
        self.key = key


class StoreUnavailableError(StoreError):
    """Raised when the backing store cannot be reached."""


# ============================================
# Retention
# ============================================

@dataclass
class MetricRetention:
    """Production-metric history bounds."""
    history_cap: int = 1000
    trim_to: int = 500
    recent_window: int = 24

    def __post_init__(self):
        if self.history_cap < 1 or self.trim_to < 1:
            raise ValueError("history_cap and trim_to must be >= 1")
        if self.trim_to > self.history_cap:
            raise ValueError("trim_to must not exceed history_cap")
        if self.recent_window < 0:
            raise ValueError("recent_window must be >= 0")


# ============================================
# Abstract store
# ============================================

class EntityStore(ABC):
    """Abstract entity store."""

    # Furnaces

    @abstractmethod
    def list_furnaces(self) -> List[Furnace]:
        pass

    @abstractmethod
    def get_furnace(self, furnace_id: str) -> Furnace:
        pass

    @abstractmethod
    def update_furnace(self, furnace_id: str, **fields) -> Furnace:
        """Merge ``fields`` into the furnace and stamp ``last_updated``."""
        pass

    # Sensors

    @abstractmethod
    def list_sensors(self) -> List[Sensor]:
        pass

    @abstractmethod
    def get_sensor(self, sensor_id: str) -> Sensor:
        pass

    @abstractmethod
    def update_sensor(self, sensor_id: str, **fields) -> Sensor:
        """Merge ``fields`` into the sensor and stamp ``last_updated``."""
        pass

    # Alerts

    @abstractmethod
    def list_alerts(self) -> List[Alert]:
        pass

    @abstractmethod
    def create_alert(self, alert: Alert) -> Alert:
        """Append an alert under a fresh id and return the stored copy."""
        pass

    @abstractmethod
    def acknowledge_alert(self, alert_id: str) -> Alert:
        """Mark an alert acknowledged. Acknowledging twice is a no-op."""
        pass

    # Production metrics

    @abstractmethod
    def list_production_metrics(self) -> List[ProductionMetric]:
        """Most recent samples, oldest first, at most ``recent_window``."""
        pass

    @abstractmethod
    def add_production_metric(self, metric: ProductionMetric) -> None:
        pass

    # KPIs

    @abstractmethod
    def list_kpis(self) -> List[KPI]:
        pass

    @abstractmethod
    def update_kpi(self, label: str, value: float, change: float) -> KPI:
        pass

    # Read-mostly collections

    @abstractmethod
    def list_hotspots(self) -> List[Hotspot]:
        pass

    @abstractmethod
    def list_predictions(self) -> List[Prediction]:
        pass

    @abstractmethod
    def create_prediction(self, prediction: Prediction) -> Prediction:
        pass

    @abstractmethod
    def list_camera_feeds(self) -> List[CameraFeed]:
        pass

    @abstractmethod
    def update_camera_detections(self, camera_id: str, detections: List[Detection]) -> CameraFeed:
        """Replace detections, recount defects and stamp ``last_update``."""
        pass

    # Lifecycle

    @abstractmethod
    def seed(self, data: SeedData) -> None:
        """Upsert every seed entity. Safe to call more than once."""
        pass

    @property
    def backend_name(self) -> str:
        return type(self).__name__
