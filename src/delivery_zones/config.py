"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DZ_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Zone Resolution API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for static data files.")
    areas_file: Path = Field(
        default=Path("data/delivery_areas.xlsx"),
        description="Workbook with one row per delivery area, used when the database is unavailable.",
    )

    default_area_radius_km: float = Field(
        default=2.0,
        gt=0.0,
        description="Radius applied to areas that have neither bounds nor a positive radius.",
    )
    nearby_threshold_km: float = Field(
        default=10.0,
        ge=0.0,
        description="Maximum centroid distance for an unmatched area to be suggested.",
    )
    max_nearby_results: int = Field(default=5, ge=0)

    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Server-side key for the Places and Geocoding web services.",
    )
    google_maps_base_url: str = Field(default="https://maps.googleapis.com/maps/api")
    geocoding_region: str = Field(default="pk", description="Country code used to bias place searches.")
    geocoding_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoding_max_retries: int = Field(default=2, ge=0)
    geocoding_backoff_seconds: float = Field(default=0.5, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )
    supabase_areas_table: str = Field(default="delivery_areas")

    @field_validator("data_root", "areas_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
