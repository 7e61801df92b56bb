"""
Plant Entities

Domain model for the furnace monitoring backend: furnaces, sensors,
alerts, production metrics, KPIs, hotspots, AI predictions and camera feeds.

Field names are snake_case in Python; ``to_dict()`` produces the camelCase
shape the browser client consumes and ``from_dict()`` accepts it back, which
is also how the Redis backing serializes documents.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def new_entity_id() -> str:
    return str(uuid.uuid4())


# =============================================================================
# Enums
# =============================================================================

class FurnaceStatus(Enum):
    """Furnace operating status. Only ACTIVE furnaces are simulated."""
    ACTIVE = "active"
    IDLE = "idle"
    MAINTENANCE = "maintenance"
    OFFLINE = "offline"


class SensorType(Enum):
    """Stored sensor types (closed set)."""
    TEMPERATURE = "temperature"
    PRESSURE = "pressure"
    VIBRATION = "vibration"
    CHEMICAL = "chemical"
    FLOW = "flow"
    LEVEL = "level"


class SensorStatus(Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    OFFLINE = "offline"


class Trend(Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class AlertSeverity(Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class KPIStatus(Enum):
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class HotspotStatus(Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class PredictionType(Enum):
    MAINTENANCE = "maintenance"
    ENERGY = "energy"
    QUALITY = "quality"
    PRODUCTION = "production"


class PredictionImpact(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CameraStatus(Enum):
    ONLINE = "online"
    OFFLINE = "offline"


# =============================================================================
# Furnaces
# =============================================================================

@dataclass
class Composition:
    """Melt composition in percent. Not normalized to sum to 100."""
    carbon: float
    silicon: float
    manganese: float
    iron: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "carbon": self.carbon,
            "silicon": self.silicon,
            "manganese": self.manganese,
            "iron": self.iron,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Composition:
        return cls(
            carbon=float(data["carbon"]),
            silicon=float(data["silicon"]),
            manganese=float(data["manganese"]),
            iron=float(data["iron"]),
        )


@dataclass
class Furnace:
    """Furnace state as tracked by the entity store."""
    id: str
    name: str
    status: FurnaceStatus
    temperature: float
    target_temperature: float
    pressure: float
    target_pressure: float
    production_rate: float
    energy_consumption: float
    composition: Composition
    last_updated: str = field(default_factory=utc_now_iso)

    @property
    def is_active(self) -> bool:
        return self.status == FurnaceStatus.ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "temperature": self.temperature,
            "targetTemperature": self.target_temperature,
            "pressure": self.pressure,
            "targetPressure": self.target_pressure,
            "productionRate": self.production_rate,
            "energyConsumption": self.energy_consumption,
            "composition": self.composition.to_dict(),
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Furnace:
        return cls(
            id=data["id"],
            name=data["name"],
            status=FurnaceStatus(data["status"]),
            temperature=float(data["temperature"]),
            target_temperature=float(data["targetTemperature"]),
            pressure=float(data["pressure"]),
            target_pressure=float(data["targetPressure"]),
            production_rate=float(data["productionRate"]),
            energy_consumption=float(data["energyConsumption"]),
            composition=Composition.from_dict(data["composition"]),
            last_updated=data.get("lastUpdated") or utc_now_iso(),
        )


# =============================================================================
# Sensors
# =============================================================================

@dataclass
class Sensor:
    """A stored plant sensor. ``trend`` is informational and never recomputed."""
    id: str
    name: str
    type: SensorType
    value: float
    unit: str
    status: SensorStatus
    zone: str
    trend: Trend = Trend.STABLE
    last_updated: str = field(default_factory=utc_now_iso)

    @property
    def is_offline(self) -> bool:
        return self.status == SensorStatus.OFFLINE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "value": self.value,
            "unit": self.unit,
            "status": self.status.value,
            "zone": self.zone,
            "trend": self.trend.value,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Sensor:
        return cls(
            id=data["id"],
            name=data["name"],
            type=SensorType(data["type"]),
            value=float(data["value"]),
            unit=data["unit"],
            status=SensorStatus(data["status"]),
            zone=data["zone"],
            trend=Trend(data.get("trend", Trend.STABLE.value)),
            last_updated=data.get("lastUpdated") or utc_now_iso(),
        )


# =============================================================================
# Alerts
# =============================================================================

@dataclass
class Alert:
    """
    Operator alert.

    Alerts are append-only. The only mutation is acknowledgement, and the
    furnace/sensor ids are plain back-references, not ownership.
    """
    severity: AlertSeverity
    title: str
    message: str
    source: str
    timestamp: str = field(default_factory=utc_now_iso)
    acknowledged: bool = False
    furnace_id: Optional[str] = None
    sensor_id: Optional[str] = None
    id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "severity": self.severity.value,
            "title": self.title,
            "message": self.message,
            "source": self.source,
            "timestamp": self.timestamp,
            "acknowledged": self.acknowledged,
        }
        if self.furnace_id is not None:
            data["furnaceId"] = self.furnace_id
        if self.sensor_id is not None:
            data["sensorId"] = self.sensor_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Alert:
        return cls(
            id=data.get("id", ""),
            severity=AlertSeverity(data["severity"]),
            title=data["title"],
            message=data["message"],
            source=data["source"],
            timestamp=data["timestamp"],
            acknowledged=bool(data.get("acknowledged", False)),
            furnace_id=data.get("furnaceId"),
            sensor_id=data.get("sensorId"),
        )


# =============================================================================
# Production metrics and KPIs
# =============================================================================

@dataclass
class ProductionMetric:
    """One plant-wide production sample, appended once per simulation tick."""
    throughput: float
    defect_rate: float
    energy_consumption: float
    oee: float
    quality: float
    timestamp: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "throughput": self.throughput,
            "defectRate": self.defect_rate,
            "energyConsumption": self.energy_consumption,
            "oee": self.oee,
            "quality": self.quality,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ProductionMetric:
        return cls(
            timestamp=data["timestamp"],
            throughput=float(data["throughput"]),
            defect_rate=float(data["defectRate"]),
            energy_consumption=float(data["energyConsumption"]),
            oee=float(data["oee"]),
            quality=float(data["quality"]),
        )


@dataclass
class KPI:
    """Key performance indicator, keyed by ``label``."""
    label: str
    value: float
    unit: str
    change: float
    trend: Trend
    status: KPIStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "value": self.value,
            "unit": self.unit,
            "change": self.change,
            "trend": self.trend.value,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> KPI:
        return cls(
            label=data["label"],
            value=float(data["value"]),
            unit=data["unit"],
            change=float(data["change"]),
            trend=Trend(data["trend"]),
            status=KPIStatus(data["status"]),
        )


# =============================================================================
# Digital twin hotspots
# =============================================================================

@dataclass
class HotspotReading:
    name: str
    value: float
    unit: str
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "unit": self.unit, "status": self.status}


@dataclass
class Hotspot:
    """A clickable point in the 3D plant view with its embedded readings."""
    id: str
    name: str
    position: Dict[str, float]
    sensors: List[HotspotReading]
    status: HotspotStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "position": dict(self.position),
            "sensors": [s.to_dict() for s in self.sensors],
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Hotspot:
        return cls(
            id=data["id"],
            name=data["name"],
            position={axis: float(data["position"][axis]) for axis in ("x", "y", "z")},
            sensors=[
                HotspotReading(
                    name=s["name"], value=float(s["value"]), unit=s["unit"], status=s["status"]
                )
                for s in data.get("sensors", [])
            ],
            status=HotspotStatus(data["status"]),
        )


# =============================================================================
# AI predictions and camera feeds
# =============================================================================

@dataclass
class Prediction:
    type: PredictionType
    title: str
    description: str
    confidence: float
    impact: PredictionImpact
    recommendation: str
    timestamp: str = field(default_factory=utc_now_iso)
    id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
            "impact": self.impact.value,
            "recommendation": self.recommendation,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Prediction:
        return cls(
            id=data.get("id", ""),
            type=PredictionType(data["type"]),
            title=data["title"],
            description=data["description"],
            confidence=float(data["confidence"]),
            impact=PredictionImpact(data["impact"]),
            recommendation=data["recommendation"],
            timestamp=data["timestamp"],
        )


@dataclass
class Detection:
    """A defect detected by a vision camera, with its pixel bounding box."""
    id: str
    type: str
    confidence: float
    bounding_box: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "confidence": self.confidence,
            "boundingBox": dict(self.bounding_box),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Detection:
        box = data["boundingBox"]
        return cls(
            id=data["id"],
            type=data["type"],
            confidence=float(data["confidence"]),
            bounding_box={k: float(box[k]) for k in ("x", "y", "width", "height")},
        )


@dataclass
class CameraFeed:
    id: str
    name: str
    location: str
    status: CameraStatus
    detections: List[Detection] = field(default_factory=list)
    defect_count: int = 0
    last_update: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "status": self.status.value,
            "detections": [d.to_dict() for d in self.detections],
            "defectCount": self.defect_count,
            "lastUpdate": self.last_update,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CameraFeed:
        return cls(
            id=data["id"],
            name=data["name"],
            location=data["location"],
            status=CameraStatus(data["status"]),
            detections=[Detection.from_dict(d) for d in data.get("detections", [])],
            defect_count=int(data.get("defectCount", 0)),
            last_update=data.get("lastUpdate") or utc_now_iso(),
        )
