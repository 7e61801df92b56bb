"""
Furnace Monitor

Backend for the industrial furnace monitoring dashboard: simulates furnace
and sensor telemetry and streams snapshots to connected viewers.
"""

__version__ = "1.0.0"
