"""
WebSocket Events

Real-time snapshot streaming over Socket.IO. Each connecting viewer is
registered with the ``ConnectionRegistry``, which pushes an ``update`` event
immediately and then on every broadcast period until the viewer leaves.
Inbound viewer messages other than connect/disconnect are not interpreted.
"""

import logging
import time

from flask import request

from ..services.telemetry import ConnectionRegistry, TransportError

logger = logging.getLogger(__name__)

UPDATE_EVENT = "update"


def make_sender(socketio):
    """Send function for ``ConnectionRegistry`` that emits to one client."""

    def send(session_id, message):
        try:
            socketio.emit(UPDATE_EVENT, message, to=session_id)
        except Exception as e:
            raise TransportError(str(e)) from e

    return send


def register_events(socketio, registry: ConnectionRegistry):
    """Register WebSocket event handlers."""

    @socketio.on("connect")
    def handle_connect():
        """Handle client connection."""
        client_id = request.sid

        socketio.emit(
            "connected",
            {
                "client_id": client_id,
                "message": "Connected to Furnace Monitor",
                "timestamp": time.time(),
            },
            to=client_id,
        )

        registry.connect(client_id)

    @socketio.on("disconnect")
    def handle_disconnect(reason=None):
        """Handle client disconnection."""
        registry.disconnect(request.sid)

    @socketio.on_error_default
    def handle_error(e):
        logger.error(f"WebSocket error for {request.sid}: {e}")
        registry.disconnect(request.sid)
