"""
Seed Data

The plant as it looks at process start. Every store backing is seeded from
``default_seed()``; each call builds fresh objects so backings never share
mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .entities import (
    KPI,
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
    Sensor,
    SensorStatus,
    SensorType,
    Trend,
    new_entity_id,
)


@dataclass
class SeedData:
    """Initial entity collections."""
    furnaces: List[Furnace] = field(default_factory=list)
    sensors: List[Sensor] = field(default_factory=list)
    kpis: List[KPI] = field(default_factory=list)
    hotspots: List[Hotspot] = field(default_factory=list)
    predictions: List[Prediction] = field(default_factory=list)
    camera_feeds: List[CameraFeed] = field(default_factory=list)


def _furnace(fid, name, status, temp, target, pressure, target_pressure, rate, energy, comp):
    return Furnace(
        id=fid,
        name=name,
        status=status,
        temperature=temp,
        target_temperature=target,
        pressure=pressure,
        target_pressure=target_pressure,
        production_rate=rate,
        energy_consumption=energy,
        composition=Composition(*comp),
    )


def _sensor(sid, name, stype, value, unit, status, zone, trend):
    return Sensor(
        id=sid, name=name, type=stype, value=value, unit=unit,
        status=status, zone=zone, trend=trend,
    )


def default_seed() -> SeedData:
    """Build the default plant: six furnaces, eighteen sensors, four KPIs."""
    active, idle, maintenance = FurnaceStatus.ACTIVE, FurnaceStatus.IDLE, FurnaceStatus.MAINTENANCE
    furnaces = [
        _furnace("F1", "Machine 1", active, 1650, 1700, 2.8, 3.0, 485, 1240, (4.2, 0.8, 0.5, 94.5)),
        _furnace("F2", "Machine 2", active, 1720, 1700, 3.1, 3.0, 502, 1280, (4.0, 0.7, 0.6, 94.7)),
        _furnace("F3", "Machine 3", active, 1680, 1700, 2.9, 3.0, 495, 1260, (4.1, 0.9, 0.4, 94.6)),
        _furnace("F4", "Machine 4", idle, 850, 1600, 1.0, 1.0, 0, 120, (0.2, 0.1, 0.1, 99.6)),
        _furnace("F5", "Machine 5", maintenance, 320, 0, 0.8, 1.0, 0, 15, (0.0, 0.0, 0.0, 100.0)),
        _furnace("F6", "Machine 6", active, 1580, 1600, 1.2, 1.0, 180, 420, (0.3, 0.2, 0.8, 98.7)),
    ]

    T, P, V, C, F, L = (
        SensorType.TEMPERATURE, SensorType.PRESSURE, SensorType.VIBRATION,
        SensorType.CHEMICAL, SensorType.FLOW, SensorType.LEVEL,
    )
    ok, warn, crit, off = (
        SensorStatus.HEALTHY, SensorStatus.WARNING, SensorStatus.CRITICAL, SensorStatus.OFFLINE,
    )
    up, down, stable = Trend.UP, Trend.DOWN, Trend.STABLE
    sensors = [
        _sensor("T001", "M1 Top Temp", T, 1650, "°C", ok, "Zone A", stable),
        _sensor("T002", "M2 Top Temp", T, 1720, "°C", warn, "Zone A", up),
        _sensor("T003", "Cooling Water", T, 45, "°C", ok, "Zone B", down),
        _sensor("P001", "M1 Pressure", P, 2.8, "bar", ok, "Zone A", stable),
        _sensor("P002", "M2 Pressure", P, 3.1, "bar", warn, "Zone A", up),
        _sensor("P003", "Gas Line 1", P, 1.5, "bar", ok, "Zone C", stable),
        _sensor("V001", "Motor 1 Vib", V, 2.3, "mm/s", ok, "Zone D", stable),
        _sensor("V002", "Motor 2 Vib", V, 4.8, "mm/s", crit, "Zone D", up),
        _sensor("V003", "Pump A Vib", V, 1.9, "mm/s", ok, "Zone B", down),
        _sensor("C001", "Carbon %", C, 4.2, "%", ok, "Zone A", stable),
        _sensor("C002", "Silicon %", C, 0.8, "%", ok, "Zone A", stable),
        _sensor("C003", "pH Sensor", C, 7.2, "pH", ok, "Zone B", stable),
        _sensor("F001", "Water Flow", F, 485, "m³/h", ok, "Zone B", stable),
        _sensor("F002", "Gas Flow", F, 12500, "Nm³/h", ok, "Zone C", up),
        _sensor("L001", "Tank Level 1", L, 78, "%", ok, "Zone B", down),
        _sensor("L002", "Tank Level 2", L, 92, "%", warn, "Zone B", up),
        _sensor("T004", "EAF Temp", T, 850, "°C", off, "Zone E", stable),
        _sensor("P004", "EAF Pressure", P, 0, "bar", off, "Zone E", stable),
    ]

    kpis = [
        KPI("Production Rate", 2847, "tons/day", 5.2, up, KPIStatus.GOOD),
        KPI("Energy Efficiency", 87.3, "%", 2.1, up, KPIStatus.GOOD),
        KPI("Quality Score", 94.6, "%", -0.8, down, KPIStatus.WARNING),
        KPI("Equipment Health", 91.2, "%", 0.0, stable, KPIStatus.GOOD),
    ]

    hotspots = [
        Hotspot(
            id="HS1",
            name="Machine 1",
            position={"x": -2, "y": 0, "z": 0},
            sensors=[
                HotspotReading("Temperature", 1650, "°C", "normal"),
                HotspotReading("Pressure", 2.8, "bar", "normal"),
                HotspotReading("Flow Rate", 485, "m³/h", "normal"),
            ],
            status=HotspotStatus.NORMAL,
        ),
        Hotspot(
            id="HS2",
            name="Cooling Tower",
            position={"x": 2, "y": 0, "z": 0},
            sensors=[
                HotspotReading("Temperature", 45, "°C", "warning"),
                HotspotReading("Water Level", 78, "%", "normal"),
                HotspotReading("Pump Status", 1, "active", "normal"),
            ],
            status=HotspotStatus.WARNING,
        ),
        Hotspot(
            id="HS3",
            name="Sensor Array A",
            position={"x": 0, "y": 1.5, "z": -2},
            sensors=[
                HotspotReading("Vibration", 2.3, "mm/s", "normal"),
                HotspotReading("Humidity", 45, "%", "normal"),
            ],
            status=HotspotStatus.NORMAL,
        ),
    ]

    predictions = [
        Prediction(
            id=new_entity_id(),
            type=PredictionType.MAINTENANCE,
            title="Motor 2 Bearing Failure Predicted",
            description="Vibration analysis indicates bearing degradation. "
                        "Recommend maintenance within 48 hours.",
            confidence=0.89,
            impact=PredictionImpact.HIGH,
            recommendation="Schedule bearing replacement for Motor 2 during next maintenance window",
        ),
        Prediction(
            id=new_entity_id(),
            type=PredictionType.ENERGY,
            title="Energy Optimization Opportunity",
            description="Current furnace temperatures can be reduced by 2% "
                        "without affecting output quality.",
            confidence=0.76,
            impact=PredictionImpact.MEDIUM,
            recommendation="Adjust M2 target temperature to 1666°C to save approximately 120 kWh",
        ),
        Prediction(
            id=new_entity_id(),
            type=PredictionType.QUALITY,
            title="Quality Score Decline Detected",
            description="Carbon content variance increasing over past 6 hours. "
                        "May affect product consistency.",
            confidence=0.82,
            impact=PredictionImpact.MEDIUM,
            recommendation="Review and stabilize carbon feed rate in M1 and M3",
        ),
    ]

    camera_feeds = [
        CameraFeed(
            id="CAM001",
            name="Production Line A",
            location="Zone A - North",
            status=CameraStatus.ONLINE,
            detections=[
                Detection("D1", "Surface Defect", 0.92, {"x": 120, "y": 80, "width": 60, "height": 40}),
                Detection("D2", "Crack", 0.87, {"x": 240, "y": 150, "width": 45, "height": 35}),
            ],
            defect_count=2,
        ),
        CameraFeed("CAM002", "Production Line B", "Zone A - South", CameraStatus.ONLINE),
        CameraFeed(
            id="CAM003",
            name="Quality Check Station",
            location="Zone B - Center",
            status=CameraStatus.ONLINE,
            detections=[
                Detection("D3", "Dimensional Issue", 0.78, {"x": 160, "y": 100, "width": 70, "height": 50}),
            ],
            defect_count=1,
        ),
        CameraFeed("CAM004", "Cooling Area", "Zone B - East", CameraStatus.ONLINE),
        CameraFeed("CAM005", "Storage Zone", "Zone C - West", CameraStatus.OFFLINE),
        CameraFeed("CAM006", "Loading Bay", "Zone D - North", CameraStatus.ONLINE),
    ]

    return SeedData(
        furnaces=furnaces,
        sensors=sensors,
        kpis=kpis,
        hotspots=hotspots,
        predictions=predictions,
        camera_feeds=camera_feeds,
    )
