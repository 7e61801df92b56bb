"""
Snapshot Broadcaster

Assembles the message pushed to each connected viewer:

    {"type": "update",
     "data": {"furnaces": [...], "sensors": [...], "kpis": [...], "timestamp": "..."}}

Furnaces, sensors and KPIs are three independent store reads with no shared
transaction, so a snapshot taken mid-tick may mix pre- and post-tick values.
Synthetic gauge sensors are appended after the stored sensors.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ...models import utc_now_iso
from ..store import EntityStore
from .gauges import SyntheticGaugeGenerator

logger = logging.getLogger(__name__)

UPDATE_MESSAGE_TYPE = "update"


class SnapshotBroadcaster:
    """Builds snapshot messages from the entity store."""

    def __init__(self, store: EntityStore, gauges: Optional[SyntheticGaugeGenerator] = None):
        self.store = store
        self.gauges = gauges or SyntheticGaugeGenerator()

    def build_snapshot(self, timestamp: Optional[str] = None) -> Dict[str, Any]:
        """Read current state. Store errors propagate to the caller."""
        timestamp = timestamp or utc_now_iso()

        furnaces = self.store.list_furnaces()
        sensors = self.store.list_sensors()
        kpis = self.store.list_kpis()

        sensor_dicts = [s.to_dict() for s in sensors]
        sensor_dicts.extend(self.gauges.generate(timestamp))

        logger.debug(
            f"Snapshot built: {len(furnaces)} furnaces, {len(sensor_dicts)} sensors, {len(kpis)} KPIs"
        )

        return {
            "type": UPDATE_MESSAGE_TYPE,
            "data": {
                "furnaces": [f.to_dict() for f in furnaces],
                "sensors": sensor_dicts,
                "kpis": [k.to_dict() for k in kpis],
                "timestamp": timestamp,
            },
        }
