"""
Application configuration settings.
Loads from environment variables with type checking.
"""

from pydantic import PostgresDsn, validator
from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    # Application Metadata
    PROJECT_TITLE: str = "Maasta API"
    PROJECT_DESCRIPTION: str = "Backend API connecting performing-arts talent with auditions and events"
    PROJECT_VERSION: str = "1.0.0"
    OPENAPI_URL: str = "/openapi.json"
    DOCS_URL: str = "/docs"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"  # or 'testing', 'production'

    # Database Configuration
    DATABASE_URL: PostgresDsn
    TEST_DATABASE_URL: Optional[PostgresDsn] = None
    DATABASE_ECHO: bool = False

    # Authentication (tokens are issued by the identity provider, we only verify them)
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Swipe matching deadlines, in seconds
    MATCH_INSERT_TIMEOUT: float = 5.0
    MATCH_CHECK_TIMEOUT: float = 3.0
    MATCH_UPGRADE_TIMEOUT: float = 3.0
    SWIPE_DECK_SIZE: int = 20
    SWIPE_MAX_DECKS: int = 1000

    # Fetch-with-fallback
    FETCH_TIMEOUT_SECONDS: float = 15.0
    FETCH_MAX_RETRIES: int = 2
    FETCH_RETRY_DELAY: float = 1.0
    FEATURED_FETCH_TIMEOUT: float = 3.0

    # Cache versioning
    CACHE_PREFIX: str = "maasta_app_"
    CACHE_TTL_SECONDS: int = 300
    CACHE_REFRESH_INTERVAL_SECONDS: int = 3600
    CACHE_CLEANUP_INTERVAL_SECONDS: int = 60

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    @validator(
        "MATCH_INSERT_TIMEOUT",
        "MATCH_CHECK_TIMEOUT",
        "MATCH_UPGRADE_TIMEOUT",
        "FETCH_TIMEOUT_SECONDS",
        "FEATURED_FETCH_TIMEOUT",
    )
    def validate_positive_timeout(cls, v):
        if v <= 0:
            raise ValueError("Timeouts must be greater than zero")
        return v

    @validator("FETCH_MAX_RETRIES")
    def validate_max_retries(cls, v):
        if v < 0:
            raise ValueError("FETCH_MAX_RETRIES cannot be negative")
        return v

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        return str(self.DATABASE_URL).replace("postgresql://", "postgresql+asyncpg://", 1)

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


settings = Settings()
