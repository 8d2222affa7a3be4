"""
Configuration management for the user service
"""
from datetime import timedelta
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """User service configuration loaded from environment variables"""

    APP_NAME: str = "User API"
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./app.db"

    # Access tokens; zero or negative disables expiry
    TOKEN_TTL_MINUTES: int = 60

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def token_default_ttl(self) -> Optional[timedelta]:
        if self.TOKEN_TTL_MINUTES <= 0:
            return None
        return timedelta(minutes=self.TOKEN_TTL_MINUTES)


# Global settings instance
settings = Settings()
