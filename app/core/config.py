"""Application settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration."""

    APP_NAME: str = "Tutor Scheduler"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./tutor_scheduler.db"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    # Backup
    BACKUP_VERSION: int = 1

    # Dashboard
    UPCOMING_LIMIT: int = 5

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
