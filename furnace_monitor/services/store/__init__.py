"""
Entity Store Services

Supports multiple backings behind one interface:
- In-memory (default)
- Redis, switched in at boot behind a ready gate
"""

import logging

from .base import (
    EntityNotFoundError,
    EntityStore,
    MetricRetention,
    StoreError,
    StoreUnavailableError,
)
from .gated import GatedEntityStore
from .memory import MemoryEntityStore
from .redis_store import RedisEntityStore

logger = logging.getLogger(__name__)


def retention_from_config(config) -> MetricRetention:
    return MetricRetention(
        history_cap=int(config["METRICS_HISTORY_CAP"]),
        trim_to=int(config["METRICS_TRIM_TO"]),
        recent_window=int(config["METRICS_RECENT_WINDOW"]),
    )


def create_store(config) -> EntityStore:
    """
    Build the entity store selected by ``STORE_BACKEND``.

    ``config`` is any mapping with the keys of ``furnace_monitor.config.Config``
    (a Flask ``app.config`` works). The Redis backing is wrapped in a
    ``GatedEntityStore`` that serves a seeded in-memory store until Redis is
    connected and seeded.
    """
    retention = retention_from_config(config)
    backend = str(config.get("STORE_BACKEND", "memory")).lower()

    if backend == "memory":
        logger.info("Entity store initialized with backend: memory")
        return MemoryEntityStore(retention=retention)

    if backend == "redis":
        redis_url = config["REDIS_URL"]
        namespace = config.get("REDIS_NAMESPACE", "furnace_monitor")
        store = GatedEntityStore(MemoryEntityStore(retention=retention))
        store.switch_over_async(
            lambda: RedisEntityStore.from_url(redis_url, namespace=namespace, retention=retention)
        )
        logger.info("Entity store initialized with backend: redis (switch-over pending)")
        return store

    raise ValueError(f"Unknown STORE_BACKEND: {backend}")


__all__ = [
    "EntityNotFoundError",
    "EntityStore",
    "GatedEntityStore",
    "MemoryEntityStore",
    "MetricRetention",
    "RedisEntityStore",
    "StoreError",
    "StoreUnavailableError",
    "create_store",
    "retention_from_config",
]
