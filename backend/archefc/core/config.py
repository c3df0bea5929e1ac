"""
Configuration settings for the Arche FC club backend.
Supports testing, development, and production environments.
"""

import os
from typing import List, Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """
    Application settings with environment-aware configuration.

    Supports three modes:
    - TEST: Uses TEST_DATABASE_URL for an isolated test database
    - DEVELOPMENT: Uses DATABASE_URL and the local backend URL
    - PRODUCTION: Uses DATABASE_URL and the public backend URL
    """

    # Environment mode: TEST, DEVELOPMENT, or PRODUCTION
    MODE: str = os.getenv("MODE", "DEVELOPMENT").upper()

    # Database URLs
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./archefc.db")
    TEST_DATABASE_URL: Optional[str] = os.getenv("TEST_DATABASE_URL", "sqlite://")

    # Application settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_EXPIRE_HOURS: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "24"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS: List[str] = ["*"]

    # Internal backend URLs (used by the HTTP team config loader)
    BACKEND_URL_DEV: str = os.getenv("BACKEND_URL_DEV", "http://localhost:3001/api")
    BACKEND_URL_PROD: str = os.getenv(
        "BACKEND_URL_PROD", "https://archefc-backend.onrender.com/api"
    )
    TEAM_CONFIG_SOURCE: str = os.getenv("TEAM_CONFIG_SOURCE", "database").lower()

    # FFF API settings
    FFF_API_URL: str = "https://api-dofa.fff.fr/api"
    FFF_CACHE_TTL_SECONDS: int = 5 * 60
    TEAM_CONFIG_CACHE_TTL_SECONDS: int = 5 * 60
    FFF_USE_REQUEST_QUEUE: bool = os.getenv("FFF_USE_REQUEST_QUEUE", "true").lower() == "true"
    FFF_MAX_CONCURRENT_REQUESTS: int = 2
    FFF_REQUEST_DELAY_SECONDS: float = float(os.getenv("FFF_REQUEST_DELAY_SECONDS", "5.0"))
    FFF_MAX_ATTEMPTS: int = 3
    FFF_RETRY_DELAY_SECONDS: float = 2.0
    FFF_DEFAULT_TIMEOUT: float = 10.0
    FFF_MATCHES_TIMEOUT: float = 100.0
    FFF_MAX_MATCH_PAGES: int = 50

    class Config:
        """Pydantic configuration."""
        case_sensitive = True
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def database_url(self) -> str:
        """
        Get the appropriate database URL based on the current mode.

        Returns:
            Database URL string for the current environment.
        """
        if self.is_testing:
            return self.TEST_DATABASE_URL or "sqlite://"
        return self.DATABASE_URL

    @property
    def backend_url(self) -> str:
        """Base URL of the internal REST API for the current environment."""
        if self.is_production:
            return self.BACKEND_URL_PROD
        return self.BACKEND_URL_DEV

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.MODE == "TEST"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.MODE == "PRODUCTION"


# Global settings instance
settings = Settings()
