"""
Application configuration using Pydantic Settings
"""
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings"""

    # App
    APP_NAME: str = "Business Monitor Portal"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    PORTAL_BASE_URL: str = "http://localhost:3000"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]

    # Database: either a full URL or the PG_* parts used by the ingestion pipeline
    DATABASE_URL: Optional[str] = Field(default=None, env="DATABASE_URL")
    PG_SERVER: str = "localhost"
    PG_PORT: int = 5432
    PG_USER: str = "postgres"
    PG_PASSWORD: str = ""
    PG_DATABASE: str = "defaultdb"
    PG_SSLMODE: str = "require"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10  # pool max 20 connections

    # Redis
    REDIS_URL: str = Field(default="redis://localhost:6379", env="REDIS_URL")
    BUSINESS_CACHE_TTL: int = 600

    # Security
    SECRET_KEY: str = Field(..., env="SECRET_KEY")
    ALGORITHM: str = "HS256"
    PASSWORD_RESET_EXPIRE_MINUTES: int = 30
    LOGIN_RATE_LIMIT: str = "5/minute"
    RATE_LIMIT_ENABLED: bool = True

    # Sessions
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_COOKIE_MAX_AGE: int = 10 * 365 * 24 * 60 * 60  # 10 years
    SESSION_COOKIE_SECURE: bool = True
    SESSION_POLL_INTERVAL: int = 5  # seconds

    # Metabase embedding
    METABASE_SITE_URL: Optional[str] = Field(default=None, env="METABASE_SITE_URL")
    METABASE_SECRET_KEY: Optional[str] = Field(default=None, env="METABASE_SECRET_KEY")
    METABASE_TOKEN_EXPIRE_MINUTES: int = 10

    PORT: int = Field(default=8000, env="PORT")

    @property
    def database_url(self) -> str:
        """Full SQLAlchemy URL, built from PG_* when DATABASE_URL is unset"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.PG_USER}:{self.PG_PASSWORD}"
            f"@{self.PG_SERVER}:{self.PG_PORT}/{self.PG_DATABASE}"
        )

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
