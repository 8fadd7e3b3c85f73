"""Configuration for Book Service."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Book service configuration.

    All settings can be overridden via environment variables or a .env file.
    """

    # Service configuration
    SERVICE_NAME: str = Field(default="book-service")
    SERVICE_HOST: str = Field(default="127.0.0.1")
    SERVICE_PORT: int = Field(default=3000, ge=1, le=65535)
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    LOG_JSON: bool = Field(default=True)

    # Storage
    STORAGE_BACKEND: Literal["mongo", "memory"] = Field(default="mongo")
    MONGO_URI: str = Field(default="mongodb://localhost:27017")
    MONGO_DBN: str = Field(default="library")
    BOOKS_COLLECTION: str = Field(default="books", min_length=1)

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:3000")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()
