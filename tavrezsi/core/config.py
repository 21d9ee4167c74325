"""Application configuration settings."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using the mounted volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/tavrezsi.db"
    return "sqlite:///./tavrezsi.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "TávRezsi"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Database - defaults to the volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()

    # JWT Authentication
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Credential setup links point at the frontend
    APP_BASE_URL: str = "http://localhost:8000"
    PASSWORD_RESET_TOKEN_EXPIRE_HOURS: int = 24

    # Outbound email: "console" logs messages, "mailjet" delivers them
    MAIL_BACKEND: str = "console"
    MAILJET_API_KEY: str | None = None
    MAILJET_API_SECRET: str | None = None
    MAIL_FROM_EMAIL: str = "no-reply@tavrezsi.hu"
    MAIL_FROM_NAME: str = "TávRezsi"
    MAIL_TIMEOUT_SECONDS: int = 10

    # When true, a tenant invitation is rolled back if its email cannot be sent
    INVITE_EMAIL_REQUIRED: bool = True


settings = Settings()
