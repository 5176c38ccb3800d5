"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "RecruitCRM"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Supabase
    supabase_url: str
    supabase_service_role_key: str
    supabase_timeout_seconds: float = 10.0

    # Redis (for ARQ background jobs)
    redis_url: str = "redis://localhost:6379"

    # Deduplication
    # Legacy behaviour merged into the top pool candidate even when no rule fired.
    dedup_merge_on_zero_confidence: bool = False
    # Compare-and-swap on updated_at when merging.
    dedup_optimistic_locking: bool = False

    # Batch ingestion
    ingestion_batch_size: int = 50
    ingestion_concurrency: int = 5
    ingestion_batch_delay_seconds: float = 1.0

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
