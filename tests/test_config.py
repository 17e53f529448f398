"""Tests for settings and logging configuration."""

import structlog

from py_frontline.config.config import Settings
from py_frontline.setup_logging import configure_logging


class TestSettings:
    """Defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        for key in ("DB_PATH", "GRID_SIZE", "MAX_POLLS", "POLL_PERIOD_TICKS"):
            monkeypatch.delenv(key, raising=False)

        settings = Settings(_env_file=None)

        assert settings.region_blocks == 512
        assert settings.grid_size == 4
        assert settings.poll_period_ticks == 20
        assert settings.max_polls == 60
        assert settings.marker_refresh_seconds == 30
        assert settings.map_layer_y == 250
        assert settings.label_y_offset == 6
        assert settings.default_fill_color == "#96969633"
        assert settings.default_team_max_size == 0

    def test_derived_values(self):
        settings = Settings(
            _env_file=None, db_path="/tmp/x.db", ticks_per_second=20, marker_refresh_seconds=30
        )

        assert settings.database_url == "sqlite:////tmp/x.db"
        assert settings.marker_refresh_ticks == 600
        assert settings.poll_period_seconds == 1.0

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("GRID_SIZE", "6")
        monkeypatch.setenv("RENDER_ENABLED", "false")
        monkeypatch.setenv("DB_PATH", "/var/lib/frontline.db")

        settings = Settings(_env_file=None)

        assert settings.grid_size == 6
        assert settings.render_enabled is False
        assert settings.database_url == "sqlite:////var/lib/frontline.db"


class TestLogging:
    """structlog setup."""

    def test_console_and_json(self):
        configure_logging("DEBUG", "console")
        structlog.get_logger().info("console logging ready", check=True)

        configure_logging("INFO", "json")
        structlog.get_logger().info("json logging ready", check=True)
