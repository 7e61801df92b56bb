"""
Telemetry Engine

Simulation of furnace/sensor/KPI state, alert derivation, snapshot
assembly and per-viewer fan-out.
"""

from .alerts import AlertDeriver
from .broadcaster import SnapshotBroadcaster
from .gauges import GAUGE_IDS, GAUGES, GaugeSpec, SyntheticGaugeGenerator
from .registry import ConnectionRegistry, TransportError, ViewerSession
from .simulator import SimulationService, TickReport, TickSimulator, furnace_energy

__all__ = [
    "AlertDeriver",
    "ConnectionRegistry",
    "GAUGE_IDS",
    "GAUGES",
    "GaugeSpec",
    "SimulationService",
    "SnapshotBroadcaster",
    "SyntheticGaugeGenerator",
    "TickReport",
    "TickSimulator",
    "TransportError",
    "ViewerSession",
    "furnace_energy",
]
