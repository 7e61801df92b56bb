"""
Furnace Monitor Configuration
"""

import os


def _env_bool(name, default):
    return os.environ.get(name, str(default)).lower() in ("1", "true", "yes")


class Config:
    """Base configuration."""

    # Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")

    # Entity store: "memory" or "redis"
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "memory")
    REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
    REDIS_NAMESPACE = os.environ.get("REDIS_NAMESPACE", "furnace_monitor")

    # Timers (seconds). Independent of each other.
    TICK_INTERVAL = float(os.environ.get("TICK_INTERVAL", 2.0))
    BROADCAST_INTERVAL = float(os.environ.get("BROADCAST_INTERVAL", 2.0))

    # Production metric retention
    METRICS_HISTORY_CAP = int(os.environ.get("METRICS_HISTORY_CAP", 1000))
    METRICS_TRIM_TO = int(os.environ.get("METRICS_TRIM_TO", 500))
    METRICS_RECENT_WINDOW = int(os.environ.get("METRICS_RECENT_WINDOW", 24))

    # Alerts: suppress repeats while an unacknowledged duplicate is open
    DEDUPLICATE_ALERTS = _env_bool("DEDUPLICATE_ALERTS", False)

    # Background simulation loop
    SIMULATION_ENABLED = _env_bool("SIMULATION_ENABLED", True)

    # WebSocket
    WEBSOCKET_PING_INTERVAL = 25
    WEBSOCKET_PING_TIMEOUT = 120


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    TESTING = False
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "redis")


class TestingConfig(Config):
    """Testing configuration."""

    DEBUG = True
    TESTING = True
    STORE_BACKEND = "memory"
    SIMULATION_ENABLED = False


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}


def get_config():
    """Get configuration based on environment."""
    env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
