"""
Synthetic Gauge Sensors

Gauge-only readings fabricated for every snapshot. They are resampled
around fixed baselines on each call and never written to the entity store.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ...models import utc_now_iso

UniformFn = Callable[[float, float], float]


@dataclass(frozen=True)
class GaugeSpec:
    """Baseline and jitter for one synthetic gauge."""
    id: str
    name: str
    baseline: float
    low: float
    high: float
    unit: str
    zone: str
    ceiling: Optional[float] = None

    def sample(self, uniform: UniformFn) -> float:
        value = max(0.0, self.baseline + uniform(self.low, self.high))
        if self.ceiling is not None:
            value = min(self.ceiling, value)
        return value


# ``type`` equals ``id`` for every gauge; the client looks them up by type.
GAUGES: List[GaugeSpec] = [
    GaugeSpec("vibration", "System Vibration", 5.2, -0.5, 0.5, "Hz", "System"),
    GaugeSpec("emissions", "CO2 Emissions", 45.0, -5.0, 5.0, "ppm", "Environment"),
    GaugeSpec("purity", "Scrap Purity", 94.0, -1.0, 1.0, "%", "Quality", ceiling=100.0),
    GaugeSpec("energy", "Energy Consumption", 1250.0, -50.0, 50.0, "kW", "System"),
    GaugeSpec("battery", "System Battery", 87.9, -2.5, 2.5, "%", "System", ceiling=100.0),
    GaugeSpec("airQuality", "Air Quality Index", 48.7, -5.0, 5.0, "AQI", "Environment"),
    GaugeSpec("scrapLevel", "Scrap Level", 75.0, 0.0, 20.0, "%", "Input", ceiling=100.0),
]

GAUGE_IDS = frozenset(g.id for g in GAUGES)


class SyntheticGaugeGenerator:
    """Builds the gauge sensor dicts appended to each snapshot."""

    def __init__(self, gauges: Optional[List[GaugeSpec]] = None, uniform: Optional[UniformFn] = None):
        self.gauges = gauges if gauges is not None else GAUGES
        self.uniform = uniform or random.uniform

    def generate(self, timestamp: Optional[str] = None) -> List[Dict[str, Any]]:
        timestamp = timestamp or utc_now_iso()
        return [
            {
                "id": gauge.id,
                "name": gauge.name,
                "type": gauge.id,
                "value": gauge.sample(self.uniform),
                "unit": gauge.unit,
                "status": "healthy",
                "zone": gauge.zone,
                "trend": "stable",
                "lastUpdated": timestamp,
            }
            for gauge in self.gauges
        ]
