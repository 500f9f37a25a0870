from functools import lru_cache

from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "local"
    api_prefix: str = "/api"

    # Security
    secret_key: str = "changeme"  # override in .env
    access_token_expire_minutes: int = 60 * 24

    # Database
    database_url: str
    database_echo: bool = False

    # Redis
    redis_url: str | None = None
    cache_ttl_seconds: int = 60

    # Logging
    log_level: str = "INFO"

    # CORS (JSON list in env, e.g. CORS_ORIGINS=["https://hms.example.org"])
    cors_origins: list[str] = ["http://localhost:5173"]

    # Fallbacks used on printed documents until hospital settings are saved
    hospital_name: str = "Nakshatra Hospital"
    hospital_email: EmailStr | None = None

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings instance so the .env is parsed once.
    """
    return Settings()
