"""
Plant REST API

Read endpoints for the dashboard views plus alert acknowledgement.
Unknown ids return 404; an unreachable store returns 503.
"""

import logging

from flask import Blueprint, current_app, jsonify

from ..models import utc_now_iso
from ..services.store import EntityNotFoundError, StoreUnavailableError

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _engine():
    return current_app.extensions["furnace_monitor"]


def _store():
    return _engine().store


@api_bp.errorhandler(EntityNotFoundError)
def handle_not_found(e):
    return jsonify({"error": f"{e.kind} not found", "key": e.key}), 404


@api_bp.errorhandler(StoreUnavailableError)
def handle_store_unavailable(e):
    logger.error(f"Store unavailable: {e}")
    return jsonify({"error": "Entity store unavailable"}), 503


# =============================================================================
# Furnaces and sensors
# =============================================================================

@api_bp.route("/furnaces", methods=["GET"])
def list_furnaces():
    return jsonify([f.to_dict() for f in _store().list_furnaces()])


@api_bp.route("/furnaces/<furnace_id>", methods=["GET"])
def get_furnace(furnace_id: str):
    return jsonify(_store().get_furnace(furnace_id).to_dict())


@api_bp.route("/sensors", methods=["GET"])
def list_sensors():
    return jsonify([s.to_dict() for s in _store().list_sensors()])


@api_bp.route("/sensors/<sensor_id>", methods=["GET"])
def get_sensor(sensor_id: str):
    return jsonify(_store().get_sensor(sensor_id).to_dict())


# =============================================================================
# Alerts
# =============================================================================

@api_bp.route("/alerts", methods=["GET"])
def list_alerts():
    return jsonify([a.to_dict() for a in _store().list_alerts()])


@api_bp.route("/alerts/<alert_id>/acknowledge", methods=["POST"])
def acknowledge_alert(alert_id: str):
    """Acknowledge an alert. Repeating the call returns the same alert."""
    return jsonify(_store().acknowledge_alert(alert_id).to_dict())


# =============================================================================
# Metrics, KPIs and the rest of the plant views
# =============================================================================

@api_bp.route("/production-metrics", methods=["GET"])
def list_production_metrics():
    """Most recent production samples, oldest first."""
    return jsonify([m.to_dict() for m in _store().list_production_metrics()])


@api_bp.route("/kpis", methods=["GET"])
def list_kpis():
    return jsonify([k.to_dict() for k in _store().list_kpis()])


@api_bp.route("/hotspots", methods=["GET"])
def list_hotspots():
    return jsonify([h.to_dict() for h in _store().list_hotspots()])


@api_bp.route("/predictions", methods=["GET"])
def list_predictions():
    return jsonify([p.to_dict() for p in _store().list_predictions()])


@api_bp.route("/cameras", methods=["GET"])
def list_camera_feeds():
    return jsonify([c.to_dict() for c in _store().list_camera_feeds()])


@api_bp.route("/health", methods=["GET"])
def health():
    engine = _engine()
    return jsonify({
        "status": "healthy",
        "store_backend": engine.store.backend_name,
        "viewers": len(engine.registry.active_sessions()),
        "simulation": {
            "running": engine.simulation.running,
            **engine.simulation.stats,
        },
        "timestamp": utc_now_iso(),
    })
