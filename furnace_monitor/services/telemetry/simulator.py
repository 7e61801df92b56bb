"""
Telemetry Simulation

Advances the plant state once per tick with bounded random walks:

1. Active furnaces drift toward their target temperature; pressure and
   production rate wander; energy draw is recomputed from the new values.
2. Every non-offline sensor gets a type-specific perturbation.
3. Every KPI moves by up to +/-1% of its value.
4. One plant-wide production metric sample is appended.

Alerts are derived along the way by ``AlertDeriver``. A failure on one
entity is logged and skipped; it never aborts the tick, and the background
loop in ``SimulationService`` keeps rescheduling regardless of outcome.
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ...models import (
    Alert,
    Furnace,
    ProductionMetric,
    Sensor,
    SensorType,
    utc_now_iso,
)
from ..store import EntityStore, StoreError
from .alerts import AlertDeriver

logger = logging.getLogger(__name__)

UniformFn = Callable[[float, float], float]

# Half-width of the uniform perturbation per sensor type, and whether it
# scales with the current value.
SENSOR_PERTURBATION: Dict[SensorType, Tuple[float, bool]] = {
    SensorType.TEMPERATURE: (0.01, True),
    SensorType.PRESSURE: (0.15, False),
    SensorType.VIBRATION: (0.25, False),
    SensorType.CHEMICAL: (0.05, False),
    SensorType.FLOW: (0.025, True),
    SensorType.LEVEL: (1.0, False),
}

TEMPERATURE_JITTER = 10.0
TEMPERATURE_PULL = 0.1
PRESSURE_JITTER = 0.1
RATE_JITTER = 5.0
KPI_JITTER = 0.01

ENERGY_TEMPERATURE_WEIGHT = 1300.0
ENERGY_RATE_WEIGHT = 200.0
ENERGY_RATE_REFERENCE = 500.0


@dataclass
class TickReport:
    """Outcome of one simulation tick."""
    furnaces_updated: int = 0
    sensors_updated: int = 0
    kpis_updated: int = 0
    alerts: List[Alert] = field(default_factory=list)
    metric: Optional[ProductionMetric] = None
    errors: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "furnaces_updated": self.furnaces_updated,
            "sensors_updated": self.sensors_updated,
            "kpis_updated": self.kpis_updated,
            "alerts_created": len(self.alerts),
            "metric_appended": self.metric is not None,
            "errors": self.errors,
        }


def furnace_energy(temperature: float, target_temperature: float, production_rate: float) -> float:
    """Energy draw in kW. The temperature term is 0 when the target is 0."""
    temperature_term = 0.0
    if target_temperature:
        temperature_term = (temperature / target_temperature) * ENERGY_TEMPERATURE_WEIGHT
    return temperature_term + (production_rate / ENERGY_RATE_REFERENCE) * ENERGY_RATE_WEIGHT


class TickSimulator:
    """
    Mutates the entity store one tick at a time.

    ``uniform`` defaults to ``random.uniform`` and can be replaced to make a
    tick deterministic.
    """

    def __init__(
        self,
        store: EntityStore,
        uniform: Optional[UniformFn] = None,
        deriver: Optional[AlertDeriver] = None,
    ):
        self.store = store
        self.uniform = uniform or random.uniform
        self.deriver = deriver or AlertDeriver()

    def tick(self) -> TickReport:
        report = TickReport()
        outstanding = self._outstanding_alerts(report)

        furnaces = self._advance_furnaces(report, outstanding)
        self._advance_sensors(report, outstanding)
        self._advance_kpis(report)
        if furnaces is not None:
            self._append_metric(report, furnaces)

        logger.debug(f"Tick complete: {report.to_dict()}")
        return report

    # ----------------------------------------
    # Furnaces
    # ----------------------------------------

    def _advance_furnaces(self, report: TickReport, outstanding: List[Alert]) -> Optional[List[Furnace]]:
        try:
            furnaces = self.store.list_furnaces()
        except StoreError as e:
            report.errors += 1
            logger.warning(f"Skipping furnace updates, store read failed: {e}")
            return None

        current: List[Furnace] = []
        for furnace in furnaces:
            if not furnace.is_active:
                current.append(furnace)
                continue

            temperature_change = (
                self.uniform(-TEMPERATURE_JITTER, TEMPERATURE_JITTER)
                + TEMPERATURE_PULL * (furnace.target_temperature - furnace.temperature)
            )
            new_temperature = max(0.0, furnace.temperature + temperature_change)
            new_pressure = max(0.0, furnace.pressure + self.uniform(-PRESSURE_JITTER, PRESSURE_JITTER))
            new_rate = max(0.0, furnace.production_rate + self.uniform(-RATE_JITTER, RATE_JITTER))
            new_energy = furnace_energy(new_temperature, furnace.target_temperature, new_rate)

            try:
                updated = self.store.update_furnace(
                    furnace.id,
                    temperature=new_temperature,
                    pressure=new_pressure,
                    production_rate=new_rate,
                    energy_consumption=new_energy,
                )
            except StoreError as e:
                report.errors += 1
                logger.warning(f"Furnace {furnace.id} update failed: {e}")
                current.append(furnace)
                continue

            report.furnaces_updated += 1
            current.append(updated)

            alert = self.deriver.furnace_temperature(
                furnace, new_temperature, timestamp=utc_now_iso(), outstanding=outstanding
            )
            if alert is not None:
                self._record_alert(report, outstanding, alert)

        return current

    # ----------------------------------------
    # Sensors
    # ----------------------------------------

    def sensor_change(self, sensor: Sensor) -> float:
        half_width, relative = SENSOR_PERTURBATION.get(sensor.type, (0.0, False))
        change = self.uniform(-half_width, half_width)
        return change * sensor.value if relative else change

    def _advance_sensors(self, report: TickReport, outstanding: List[Alert]) -> None:
        try:
            sensors = self.store.list_sensors()
        except StoreError as e:
            report.errors += 1
            logger.warning(f"Skipping sensor updates, store read failed: {e}")
            return

        for sensor in sensors:
            if sensor.is_offline:
                continue

            new_value = max(0.0, sensor.value + self.sensor_change(sensor))
            try:
                self.store.update_sensor(sensor.id, value=new_value)
            except StoreError as e:
                report.errors += 1
                logger.warning(f"Sensor {sensor.id} update failed: {e}")
                continue
            report.sensors_updated += 1

            alert = self.deriver.sensor_vibration(
                sensor, new_value, timestamp=utc_now_iso(), outstanding=outstanding
            )
            if alert is not None:
                self._record_alert(report, outstanding, alert)

    # ----------------------------------------
    # KPIs and production metrics
    # ----------------------------------------

    def _advance_kpis(self, report: TickReport) -> None:
        try:
            kpis = self.store.list_kpis()
        except StoreError as e:
            report.errors += 1
            logger.warning(f"Skipping KPI updates, store read failed: {e}")
            return

        for kpi in kpis:
            delta = self.uniform(-KPI_JITTER, KPI_JITTER) * kpi.value
            change = (delta / kpi.value) * 100 if kpi.value else 0.0
            try:
                self.store.update_kpi(kpi.label, kpi.value + delta, change)
            except StoreError as e:
                report.errors += 1
                logger.warning(f"KPI '{kpi.label}' update failed: {e}")
                continue
            report.kpis_updated += 1

    def _append_metric(self, report: TickReport, furnaces: List[Furnace]) -> None:
        metric = ProductionMetric(
            timestamp=utc_now_iso(),
            throughput=sum(f.production_rate for f in furnaces if f.is_active),
            defect_rate=2 + self.uniform(0, 3),
            energy_consumption=sum(f.energy_consumption for f in furnaces) / 1000,
            oee=85 + self.uniform(0, 10),
            quality=90 + self.uniform(0, 8),
        )
        try:
            self.store.add_production_metric(metric)
        except StoreError as e:
            report.errors += 1
            logger.warning(f"Production metric append failed: {e}")
            return
        report.metric = metric

    # ----------------------------------------
    # Alerts
    # ----------------------------------------

    def _outstanding_alerts(self, report: TickReport) -> List[Alert]:
        if not self.deriver.deduplicate:
            return []
        try:
            return [a for a in self.store.list_alerts() if not a.acknowledged]
        except StoreError as e:
            report.errors += 1
            logger.warning(f"Could not read outstanding alerts: {e}")
            return []

    def _record_alert(self, report: TickReport, outstanding: List[Alert], alert: Alert) -> None:
        try:
            stored = self.store.create_alert(alert)
        except StoreError as e:
            report.errors += 1
            logger.warning(f"Alert '{alert.title}' could not be stored: {e}")
            return
        report.alerts.append(stored)
        outstanding.append(stored)
        logger.warning(f"ALERT [{stored.severity.value}]: {stored.title} - {stored.message}")


class SimulationService:
    """
    Background loop that runs ``TickSimulator.tick`` on a fixed period.

    The loop waits on a ``threading.Event`` so ``stop()`` takes effect
    immediately instead of after the current sleep.
    """

    def __init__(self, simulator: TickSimulator, interval: float = 2.0):
        self.simulator = simulator
        self.interval = interval

        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

        self.stats = {
            "ticks": 0,
            "alerts_generated": 0,
            "errors": 0,
            "start_time": None,
            "last_tick": None,
        }

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._stop.clear()
            self.stats["start_time"] = utc_now_iso()
            self._thread = threading.Thread(target=self._loop, name="tick-simulator", daemon=True)
            self._thread.start()
        logger.info(f"Simulation started. Interval: {self.interval}s")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.info("Simulation stopped")

    def run_once(self) -> Optional[TickReport]:
        """Run one tick, recording stats. Never raises."""
        try:
            report = self.simulator.tick()
        except Exception as e:
            self.stats["errors"] += 1
            logger.exception(f"Error in background simulation: {e}")
            return None

        self.stats["ticks"] += 1
        self.stats["alerts_generated"] += len(report.alerts)
        self.stats["errors"] += report.errors
        self.stats["last_tick"] = utc_now_iso()
        return report

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            self.run_once()
