"""
Pytest configuration and fixtures for the Furnace Monitor test suite.
"""

import os
import sys
import threading
import time

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from furnace_monitor.models import (  # noqa: E402
    Composition,
    Furnace,
    FurnaceStatus,
    SeedData,
    Sensor,
    SensorStatus,
    SensorType,
    Trend,
)
from furnace_monitor.services.store import MemoryEntityStore  # noqa: E402


def midpoint(low, high):
    """Deterministic stand-in for random.uniform: the middle of the range."""
    return (low + high) / 2


def upper_bound(low, high):
    return high


def lower_bound(low, high):
    return low


def wait_for(predicate, timeout=2.0, interval=0.005):
    """Poll ``predicate`` until it is truthy or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def make_furnace(fid="FX", status=FurnaceStatus.ACTIVE, temperature=1650.0,
                 target_temperature=1700.0, pressure=2.8, production_rate=485.0,
                 energy_consumption=1240.0):
    return Furnace(
        id=fid,
        name=f"Furnace {fid}",
        status=status,
        temperature=temperature,
        target_temperature=target_temperature,
        pressure=pressure,
        target_pressure=3.0,
        production_rate=production_rate,
        energy_consumption=energy_consumption,
        composition=Composition(4.2, 0.8, 0.5, 94.5),
    )


def make_sensor(sid="SX", stype=SensorType.VIBRATION, value=2.0,
                status=SensorStatus.HEALTHY, unit="mm/s"):
    return Sensor(
        id=sid, name=f"Sensor {sid}", type=stype, value=value, unit=unit,
        status=status, zone="Zone T", trend=Trend.STABLE,
    )


class RecordingTransport:
    """Thread-safe send function that records every delivered message."""

    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.messages = []
        self._lock = threading.Lock()

    def __call__(self, session_id, message):
        from furnace_monitor.services.telemetry import TransportError

        if session_id in self.fail_for:
            raise TransportError(f"channel {session_id} closed")
        with self._lock:
            self.messages.append((session_id, message))

    def for_session(self, session_id):
        with self._lock:
            return [m for sid, m in self.messages if sid == session_id]


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def store():
    """Seeded in-memory store."""
    return MemoryEntityStore()


@pytest.fixture
def empty_seed():
    return SeedData()


@pytest.fixture
def transport():
    return RecordingTransport()


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def app(store):
    """Create test application around the seeded store."""
    from furnace_monitor.app import create_app

    app = create_app("testing", store=store)
    app.config["TESTING"] = True
    yield app
    app.extensions["furnace_monitor"].shutdown()


@pytest.fixture
def client(app):
    """Create test client for each test."""
    with app.test_client() as client:
        yield client
