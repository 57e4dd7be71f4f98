"""
Configuration module for the Symptom Tracker service.
Uses Pydantic BaseSettings for validation - app fails fast if required config is missing.
"""
import logging
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Required fields will cause the app to fail fast if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote store (Supabase / PostgREST)
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_anon_key: str = Field(..., min_length=1, description="Supabase anon/public API key")
    supabase_table: str = Field(default="symptoms", description="Table holding symptom records")
    supabase_timeout: float = Field(default=15.0, gt=0, description="Timeout for list/save/delete calls in seconds")
    connection_probe_timeout: float = Field(default=10.0, gt=0, description="Timeout for the connectivity probe in seconds")

    # Local cache
    symptom_svc_cache_dir: str = Field(default="data", description="Local cache directory")
    symptom_svc_cache_file: str = Field(default="local_cache.db", description="Local cache filename")
    symptom_svc_cache_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # API Configuration
    symptom_svc_host: str = Field(default="0.0.0.0", description="API host")
    symptom_svc_port: int = Field(default=8000, description="API port")
    symptom_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # API Authentication Configuration
    symptom_svc_api_key: str = Field(
        ...,  # Required - no default means fail fast if missing
        description="API key for authenticating requests to the Symptom Tracker API",
        min_length=32,
    )

    @model_validator(mode="after")
    def validate_remote(self) -> "Settings":
        """Normalize the store URL and warn about insecure transports."""
        self.supabase_url = self.supabase_url.rstrip("/")
        if not self.supabase_url.startswith("https://"):
            logger.warning(
                "SUPABASE_URL is not an https:// URL - records will travel unencrypted"
            )
        return self

    @property
    def cache_path(self) -> str:
        """Get the full local cache database path."""
        return str(Path(self.symptom_svc_cache_dir) / self.symptom_svc_cache_file)


# Create global settings instance - fails fast if required config is missing
settings = Settings()

API_HOST = settings.symptom_svc_host
API_PORT = settings.symptom_svc_port
API_RELOAD = settings.symptom_svc_reload

API_KEY = settings.symptom_svc_api_key
