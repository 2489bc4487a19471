"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="QUOTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Mobile Service Quote API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for static data and local records.")
    catalog_file: Path = Field(
        default=Path("data/services.xlsx"),
        description="Service catalog workbook used when the database is not configured.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Workshop location (routing and haversine origin). Never returned to clients.
    origin_latitude: float = Field(default=45.6426, ge=-90.0, le=90.0)
    origin_longitude: float = Field(default=-73.6274, ge=-180.0, le=180.0)

    # Routing-distance tier
    routing_api_key: Optional[str] = Field(
        default=None,
        description="Distance Matrix API key. Leave empty to skip the routing tier.",
    )
    routing_api_url: str = Field(default="https://maps.googleapis.com/maps/api/distancematrix/json")
    routing_timeout_seconds: float = Field(default=8.0, gt=0.0)

    # Geocoding tier
    geocoder_url: str = Field(default="https://nominatim.openstreetmap.org/search")
    geocoder_user_agent: str = Field(
        default="MobileQuoteEngine-Distance-Calculator/1.0",
        description="Identifies this application to the geocoding service (usage policy).",
    )
    geocoder_country_codes: str = Field(default="ca")
    geocoder_timeout_seconds: float = Field(default=8.0, gt=0.0)

    http_max_retries: int = Field(default=2, ge=0)
    http_backoff_seconds: float = Field(default=0.5, ge=0.0)

    # Distance estimation
    road_distortion_factor: float = Field(default=1.2, gt=0.0)
    default_distance_km: float = Field(default=45.0, ge=0.0)
    distance_debounce_seconds: float = Field(default=1.5, ge=0.0)

    # Pricing
    travel_rate_per_km: float = Field(default=0.61, ge=0.0)
    travel_cost_cap: float = Field(default=55.0, ge=0.0)
    combined_tax_rate: float = Field(default=0.14975, ge=0.0, description="GST 5% + QST 9.975%.")
    currency: str = "CAD"

    # Scheduling
    max_service_radius_km: float = Field(default=100.0, ge=0.0)
    minimum_lead_time_hours: int = Field(default=72, ge=0)
    business_hours_start: int = Field(default=8, ge=0, le=24)
    business_hours_end: int = Field(default=18, ge=0, le=24)
    business_days: tuple[int, ...] = Field(
        default=(0, 1, 2, 3, 4, 5, 6),
        description="Operating weekdays, Monday=0 ... Sunday=6.",
    )
    appointment_duration_minutes: int = Field(default=180, ge=1)
    timezone: str = Field(default="America/Montreal")

    # Calendar collaborator
    calendar_api_url: str = Field(default="https://www.googleapis.com/calendar/v3")
    calendar_id: Optional[str] = Field(default=None)
    calendar_access_token: Optional[str] = Field(default=None)
    calendar_timeout_seconds: float = Field(default=10.0, gt=0.0)

    # Notification collaborator
    email_api_url: Optional[str] = Field(
        default=None,
        description="HTTP endpoint accepting JSON messages {from, to, subject, text}.",
    )
    email_api_key: Optional[str] = Field(default=None)
    email_sender: str = Field(default="estimations@example.com")
    email_timeout_seconds: float = Field(default=10.0, gt=0.0)

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("data_root", "catalog_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: Any) -> tuple[str, ...]:
        return tuple(str(item) for item in _env_list(value))

    @field_validator("business_days", mode="before")
    @classmethod
    def _parse_business_days(cls, value: Any) -> tuple[int, ...]:
        days = tuple(int(item) for item in _env_list(value))
        if any(day < 0 or day > 6 for day in days):
            raise ValueError("Business days are weekday numbers, Monday=0 ... Sunday=6.")
        return days


def _env_list(value: Any) -> list[Any]:
    """Accept a JSON array, a comma-separated string or a Python sequence."""
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, int):
        return [value]
    if not isinstance(value, str) or not value.strip():
        return []
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, list):
        return parsed
    return [item.strip() for item in value.split(",") if item.strip()]


settings = Settings()
