from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    project_name: str = "Radius Search API"
    api_v1_prefix: str = "/api/v1"

    # Debug flag
    debug: bool = Field(default=False, alias="DEBUG")

    # Overpass interpreter endpoint used for point-of-interest retrieval
    overpass_url: str = "https://overpass-api.de/api/interpreter"

    # Nominatim search endpoint used for free-text place lookup
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"

    # Nominatim usage policy requires an identifying User-Agent
    http_user_agent: str = "radius-search/1.0"
    request_timeout_seconds: float = 25.0

    # Benchmark defaults (used by POST /benchmark and benchmark.py)
    benchmark_center_lat: float = 48.137
    benchmark_center_lon: float = 11.575
    benchmark_radius_m: float = 1500.0
    # Radius of the POI fetch around the center; wider than the query radius
    benchmark_fetch_radius_m: float = 5000.0
    benchmark_iterations: int = 5
    benchmark_warmup: int = 2
    benchmark_point_count: int = 5000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid"
    )


settings = Settings()
