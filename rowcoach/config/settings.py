"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.timing.models import (
    DEFAULT_BOAT_CLASS,
    DEFAULT_NUMBER_OF_BOATS,
    DEFAULT_SESSION_DISTANCE,
    DEFAULT_SPLIT_DISTANCE,
)
from ..infrastructure.benchmarks.provider import (
    DEFAULT_BENCHMARK_SECONDS,
    parse_benchmark_times,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For tables (like benchmark_times), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "RowCoach API"

    # Session defaults
    default_number_of_boats: int = Field(
        default=DEFAULT_NUMBER_OF_BOATS,
        ge=1,
        description="Boats created when the process starts"
    )
    default_session_distance: int = Field(
        default=DEFAULT_SESSION_DISTANCE,
        ge=100,
        description="Initial session distance in meters"
    )
    default_split_distance: int = Field(
        default=DEFAULT_SPLIT_DISTANCE,
        ge=50,
        description="Initial split distance in meters"
    )
    default_boat_class: str = Field(
        default=DEFAULT_BOAT_CLASS,
        description="Class given to newly created boats"
    )

    # Benchmarks
    benchmark_default_seconds: float = Field(
        default=DEFAULT_BENCHMARK_SECONDS,
        ge=0,
        description="World best time used for classes missing from benchmark_times. 0 disables the fallback."
    )
    benchmark_times: str = Field(
        default="",
        description="Comma-separated CLASS=SECONDS pairs, e.g. 'M1X=390.74,W1X=427.71'"
    )

    # Anthropic Configuration
    anthropic_api_key: str = Field(
        default="",
        description="Claude API key. Only needed for performance summaries."
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model to use for summaries"
    )
    anthropic_max_tokens: int = Field(
        default=1024,
        description="Max tokens for Claude responses"
    )
    anthropic_temperature: float = Field(
        default=0.7,
        description="Temperature for Claude"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("benchmark_times")
    @classmethod
    def check_benchmark_times(cls, value: str) -> str:
        """Reject malformed tables when settings load, not mid-export."""
        parse_benchmark_times(value)
        return value

    @property
    def benchmark_times_map(self) -> dict[str, float]:
        """Parse comma-separated benchmark entries into a lookup table."""
        return parse_benchmark_times(self.benchmark_times)

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def analysis_enabled(self) -> bool:
        return bool(self.anthropic_api_key)

    def validate_required_fields(self) -> list[str]:
        """
        List settings that are missing or unusable.

        Timing works without any of these; the list drives the readiness
        check and the startup log.
        """
        missing = []

        if not self.anthropic_api_key:
            missing.append("ANTHROPIC_API_KEY")

        if self.default_split_distance > self.default_session_distance:
            missing.append("DEFAULT_SPLIT_DISTANCE (exceeds session distance)")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return Settings()
