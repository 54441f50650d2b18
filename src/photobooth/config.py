"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

MIB = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_user: str | None = None
    admin_pass: str | None = None
    storage_backend: Literal["supabase", "local"] = "supabase"
    storage_bucket: str | None = None
    uploads_dir: str = "uploads"
    public_base_url: str = "http://localhost:5050"
    max_file_mb: int = 10
    port: int = 5050
    cors_origin: str = "*"
    list_timeout_seconds: float = 5.0
    rate_limit_enabled: bool = True
    request_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def max_file_bytes(self) -> int:
        """Upload size cap in bytes."""
        return self.max_file_mb * MIB

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_user and self.admin_pass)


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins = [chunk.strip().rstrip("/") for chunk in cleaned.split(",")]
    return [origin for origin in origins if origin] or ["*"]
