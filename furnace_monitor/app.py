"""
Furnace Monitor - Flask Application

Serves the plant REST API and streams telemetry snapshots to dashboard
viewers over Socket.IO while a background loop simulates the plant.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from flask import Flask
from flask_socketio import SocketIO

from .config import config
from .routes import api_bp
from .services.store import EntityStore, create_store
from .services.telemetry import (
    AlertDeriver,
    ConnectionRegistry,
    SimulationService,
    SnapshotBroadcaster,
    TickSimulator,
)
from .websocket import make_sender, register_events

logger = logging.getLogger(__name__)


@dataclass
class TelemetryEngine:
    """Everything wired together for one application instance."""
    store: EntityStore
    simulator: TickSimulator
    simulation: SimulationService
    broadcaster: SnapshotBroadcaster
    registry: ConnectionRegistry

    def shutdown(self):
        self.simulation.stop(timeout=5)
        self.registry.shutdown()


def create_app(config_name=None, store: Optional[EntityStore] = None):
    """Application factory."""

    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app.config.from_object(config.get(config_name, config["default"]))

    socketio = SocketIO(
        app,
        cors_allowed_origins="*",
        async_mode="threading",
        ping_interval=app.config["WEBSOCKET_PING_INTERVAL"],
        ping_timeout=app.config["WEBSOCKET_PING_TIMEOUT"],
    )

    # Engine
    if store is None:
        store = create_store(app.config)

    simulator = TickSimulator(
        store, deriver=AlertDeriver(deduplicate=app.config["DEDUPLICATE_ALERTS"])
    )
    broadcaster = SnapshotBroadcaster(store)
    engine = TelemetryEngine(
        store=store,
        simulator=simulator,
        simulation=SimulationService(simulator, interval=app.config["TICK_INTERVAL"]),
        broadcaster=broadcaster,
        registry=ConnectionRegistry(
            broadcaster, make_sender(socketio), interval=app.config["BROADCAST_INTERVAL"]
        ),
    )
    app.extensions["furnace_monitor"] = engine

    # Register blueprints and events
    app.register_blueprint(api_bp, url_prefix="/api")
    register_events(socketio, engine.registry)

    if app.config["SIMULATION_ENABLED"]:
        engine.simulation.start()

    logger.info(
        f"Furnace Monitor initialized ({config_name}): store={store.backend_name}, "
        f"tick={app.config['TICK_INTERVAL']}s, broadcast={app.config['BROADCAST_INTERVAL']}s"
    )
    return app
