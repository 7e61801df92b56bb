"""
Alert Derivation

Pure decision logic that maps one simulated state transition to zero or one
new alert. Nothing here touches the store.

The vibration rule is gated on the sensor's stored status *before* the tick,
not on the status the new value would imply. The simulator never writes
sensor status, so a sensor sitting above the threshold raises a fresh alert
on every tick until something else marks it critical. ``deduplicate=True``
suppresses a new alert while an unacknowledged alert with the same title and
back-reference is still outstanding.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from ...models import Alert, AlertSeverity, Furnace, Sensor, SensorStatus, SensorType, utc_now_iso

FURNACE_ALERT_SOURCE = "Furnace Monitoring"
SENSOR_ALERT_SOURCE = "Sensor Network"


def format_reading(value: float) -> str:
    """Full-precision number, without a trailing ``.0`` on whole values."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def alert_key(alert: Alert) -> Tuple[str, Optional[str], Optional[str]]:
    return (alert.title, alert.furnace_id, alert.sensor_id)


class AlertDeriver:
    """Threshold rules for furnace temperature and sensor vibration."""

    TEMPERATURE_MARGIN = 30.0
    VIBRATION_CRITICAL = 4.5

    def __init__(self, deduplicate: bool = False):
        self.deduplicate = deduplicate

    def furnace_temperature(
        self,
        furnace: Furnace,
        new_temperature: float,
        timestamp: Optional[str] = None,
        outstanding: Iterable[Alert] = (),
    ) -> Optional[Alert]:
        """Critical alert when the new temperature exceeds target + margin."""
        if new_temperature <= furnace.target_temperature + self.TEMPERATURE_MARGIN:
            return None

        alert = Alert(
            severity=AlertSeverity.CRITICAL,
            title=f"{furnace.name} Temperature Exceeded",
            message=(
                f"Temperature reached {round(new_temperature)}°C "
                f"(Target: {format_reading(furnace.target_temperature)}°C)"
            ),
            source=FURNACE_ALERT_SOURCE,
            timestamp=timestamp or utc_now_iso(),
            acknowledged=False,
            furnace_id=furnace.id,
        )
        return self._unless_outstanding(alert, outstanding)

    def sensor_vibration(
        self,
        sensor: Sensor,
        new_value: float,
        timestamp: Optional[str] = None,
        outstanding: Iterable[Alert] = (),
    ) -> Optional[Alert]:
        """
        Critical alert for a vibration sensor above the threshold.

        ``sensor`` is the pre-tick stored state; its status gates the rule.
        """
        if sensor.type != SensorType.VIBRATION:
            return None
        if new_value <= self.VIBRATION_CRITICAL:
            return None
        if sensor.status == SensorStatus.CRITICAL:
            return None

        alert = Alert(
            severity=AlertSeverity.CRITICAL,
            title="High Vibration Detected",
            message=f"{sensor.name} vibration at {new_value:.1f} {sensor.unit}",
            source=SENSOR_ALERT_SOURCE,
            timestamp=timestamp or utc_now_iso(),
            acknowledged=False,
            sensor_id=sensor.id,
        )
        return self._unless_outstanding(alert, outstanding)

    def _unless_outstanding(self, alert: Alert, outstanding: Iterable[Alert]) -> Optional[Alert]:
        if not self.deduplicate:
            return alert
        key = alert_key(alert)
        for existing in outstanding:
            if not existing.acknowledged and alert_key(existing) == key:
                return None
        return alert
