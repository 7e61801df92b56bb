"""
Furnace Monitor Services

Entity store backings and the telemetry engine.
"""
