from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Load .env for local/dev environments only where values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    db_path: str = Field(default="data/frontline.db", description="SQLite database file")

    @property
    def database_url(self) -> str:
        """Construct full database URL."""
        return f"sqlite:///{self.db_path}"

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Grid Configuration
    world_name: str = Field(default="world", description="Name of the world the grid covers")
    region_blocks: int = Field(default=512, gt=0, description="Edge length of a region in blocks")
    grid_size: int = Field(default=4, gt=0, le=26, description="Rendered grid is grid_size x grid_size")

    # Renderer Configuration
    render_enabled: bool = Field(default=True, description="Enable map marker rendering")
    ticks_per_second: int = Field(default=20, gt=0, description="Host scheduler ticks per second")
    poll_period_ticks: int = Field(default=20, gt=0, description="Ticks between map service polls")
    max_polls: int = Field(default=60, gt=0, description="Polls before giving up on the map service")
    marker_refresh_seconds: int = Field(default=30, gt=0, description="Seconds between marker refreshes")
    map_layer_y: int = Field(default=250, description="Altitude of region area markers")
    label_y_offset: int = Field(default=6, description="Label height above the area markers")

    # Marker colors (#RRGGBBAA)
    default_line_color: str = Field(default="#96969666", description="Neutral region outline")
    default_fill_color: str = Field(default="#96969633", description="Neutral region fill")
    red_line_color: str = Field(default="#FF000066", description="Red region outline")
    red_fill_color: str = Field(default="#FF000033", description="Red region fill")
    blue_line_color: str = Field(default="#0000FF66", description="Blue region outline")
    blue_fill_color: str = Field(default="#0000FF33", description="Blue region fill")

    # Team Configuration
    red_team_color: int = Field(default=0xFF000033, description="ARGB color stored for the red team")
    blue_team_color: int = Field(default=0x0000FF33, description="ARGB color stored for the blue team")
    default_team_max_size: int = Field(default=0, ge=0, description="Team capacity, 0 for unlimited")

    @property
    def poll_period_seconds(self) -> float:
        return self.poll_period_ticks / self.ticks_per_second

    @property
    def marker_refresh_ticks(self) -> int:
        return self.marker_refresh_seconds * self.ticks_per_second


# Instantiate singleton settings object
settings = Settings()
