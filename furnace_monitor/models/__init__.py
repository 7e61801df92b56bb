"""
Plant Models

Dataclass entities for the furnace monitoring backend and the seed data set.
"""

from .entities import (
    KPI,
    Alert,
    AlertSeverity,
    CameraFeed,
    CameraStatus,
    Composition,
    Detection,
    Furnace,
    FurnaceStatus,
    Hotspot,
    HotspotReading,
    HotspotStatus,
    KPIStatus,
    Prediction,
    PredictionImpact,
    PredictionType,
    ProductionMetric,
    Sensor,
    SensorStatus,
    SensorType,
    Trend,
    new_entity_id,
    utc_now_iso,
)
from .seed import SeedData, default_seed

__all__ = [
    "KPI",
    "Alert",
    "AlertSeverity",
    "CameraFeed",
    "CameraStatus",
    "Composition",
    "Detection",
    "Furnace",
    "FurnaceStatus",
    "Hotspot",
    "HotspotReading",
    "HotspotStatus",
    "KPIStatus",
    "Prediction",
    "PredictionImpact",
    "PredictionType",
    "ProductionMetric",
    "Sensor",
    "SensorStatus",
    "SensorType",
    "Trend",
    "SeedData",
    "default_seed",
    "new_entity_id",
    "utc_now_iso",
]
