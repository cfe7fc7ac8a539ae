# ============================================================================
# Orbital - Application Configuration
# ============================================================================
"""
Application configuration module using Pydantic Settings.

This module defines all configuration parameters for the Orbital meetings API,
including:
- API/CORS settings
- Logging
- Database connection and pool sizing
- Startup seeding of metadata and demo meetings
- Admin access for metadata write endpoints
- HTTP client defaults for front-ends talking to the API

Usage:
    from orbital.config import settings
    url = settings.database_url
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # =========================================================================
    # API SETTINGS
    # =========================================================================
    api_title: str = "Orbital API"
    api_version: str = "0.1.0"
    debug: bool = Field(default=False, description="Enable verbose logging & error details")
    log_level: str = Field(default="INFO", description="Root logging level")

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed origins for CORS",
    )

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/orbital.db",
        description="SQLAlchemy async URL (sqlite+aiosqlite or postgresql+asyncpg)",
    )
    db_pool_size: int = Field(default=20, description="PostgreSQL pool size")
    db_max_overflow: int = Field(default=40, description="PostgreSQL pool overflow")
    db_pool_recycle: int = Field(default=3600, description="Seconds before a pooled connection is recycled")

    # =========================================================================
    # SEEDING
    # =========================================================================
    seed_metadata: bool = Field(default=True, description="Load baseline metadata types on startup")
    seed_meetings: bool = Field(default=False, description="Create demo meetings when none exist")

    # =========================================================================
    # ADMIN ACCESS
    # =========================================================================
    # Unset means metadata write endpoints are open (local development).
    admin_api_key: Optional[str] = Field(default=None, description="X-API-Key required for admin endpoints")

    # =========================================================================
    # HTTP CLIENT DEFAULTS
    # =========================================================================
    api_base_url: str = Field(default="http://localhost:8000", description="Base URL used by HTTP clients")
    http_timeout: float = Field(default=30.0, description="Timeout (s) for HTTP client requests")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# Global settings instance (imported elsewhere)
settings = Settings()
