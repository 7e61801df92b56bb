"""
Configuration Tests
"""

from unittest.mock import patch

from furnace_monitor.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    config,
    get_config,
)


class TestConfig:

    def test_defaults(self):
        assert DevelopmentConfig.TICK_INTERVAL == 2.0
        assert DevelopmentConfig.BROADCAST_INTERVAL == 2.0
        assert DevelopmentConfig.METRICS_HISTORY_CAP == 1000
        assert DevelopmentConfig.METRICS_TRIM_TO == 500
        assert DevelopmentConfig.METRICS_RECENT_WINDOW == 24

    def test_testing_disables_simulation(self):
        assert TestingConfig.SIMULATION_ENABLED is False
        assert TestingConfig.STORE_BACKEND == "memory"

    def test_get_config_follows_flask_env(self):
        with patch.dict("os.environ", {"FLASK_ENV": "production"}):
            assert get_config() is ProductionConfig
        with patch.dict("os.environ", {"FLASK_ENV": "staging"}):
            assert get_config() is config["default"]

    def test_app_uses_testing_config(self, app):
        assert app.config["TESTING"] is True
        assert app.config["SIMULATION_ENABLED"] is False
        assert app.extensions["furnace_monitor"].simulation.running is False
