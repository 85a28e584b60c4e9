"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Persistence (SQLite file by default, any SQLAlchemy URL works)
    database_url: str = "sqlite:///./formbuilder.db"

    # Key under which the saved form collection is stored
    storage_key: str = "savedForms"

    # Form builder defaults
    default_form_title: str = "Untitled Form"
    copy_suffix: str = " (Copy)"

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        env_prefix = "FORMBUILDER_"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
