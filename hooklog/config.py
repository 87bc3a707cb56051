"""
Application configuration using pydantic-settings.
All config is validated at startup - fail fast if anything is malformed.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache

DEFAULT_SECRET_KEY = "dev-secret-change-me"


class Settings(BaseSettings):
    # Application
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_base_url: str = "http://localhost:8000"
    app_secret_key: str = DEFAULT_SECRET_KEY
    log_level: str = "INFO"
    log_format: str = "json"  # json | text

    # Database
    database_url: str = "sqlite+aiosqlite:///./hooklog.db"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret: str = ""
    jwt_expiry_hours: int = 24
    allowed_origins: str = ""  # Comma-separated CORS origins (localhost always allowed)

    # Sentry
    sentry_dsn: str = ""

    # Webhook ingestion
    webhook_source_header: str = "X-Webhook-Source"
    default_webhook_source: str = "unknown"

    # Reject status updates that leave processed/failed
    strict_status_transitions: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def signing_key(self) -> str:
        return self.jwt_secret or self.app_secret_key

    @property
    def cors_origins(self) -> list[str]:
        origins = ["http://localhost:3000", "http://localhost:8081", self.app_base_url]
        for origin in self.allowed_origins.split(","):
            origin = origin.strip()
            if origin and origin not in origins:
                origins.append(origin)
        return origins


@lru_cache()
def get_settings() -> Settings:
    return Settings()
