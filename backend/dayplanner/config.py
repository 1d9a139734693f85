"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./dayplanner.db"
    JWT_SECRET: str = "dayplanner-dev-secret-change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12
    CORS_ORIGINS: str = "http://localhost:8080"
    DISPLAY_TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
