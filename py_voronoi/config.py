"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VORONOI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Canvas Configuration
    canvas_width: float = Field(default=800, gt=0, description="Canvas width")
    canvas_height: float = Field(default=600, gt=0, description="Canvas height")
    marker_radius: float = Field(default=5.0, gt=0, description="Point marker radius")
    cell_stroke: str = Field(default="#000", description="Cell outline color")

    # Tooltip Configuration
    tooltip_offset_x: float = Field(default=10, description="Tooltip offset from the pointer (x)")
    tooltip_offset_y: float = Field(default=-10, description="Tooltip offset from the pointer (y)")

    # Export Configuration
    export_filename: str = Field(default="voronoi_cells.svg", description="Download filename for SVG export")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")


# Instantiate singleton settings object
settings = Settings()
