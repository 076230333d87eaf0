"""
Strain tracker configuration: all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Document store
    APP_ID: str = os.environ.get("APP_ID", "default-app-id")
    STORE_BACKEND: str = os.environ.get("STORE_BACKEND", "postgres")  # "postgres" or "memory"
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "")

    # Auth
    INITIAL_AUTH_TOKEN: str = os.environ.get("INITIAL_AUTH_TOKEN", "")
    JWT_SECRET: str = os.environ.get("JWT_SECRET", "")
    JWT_ALGORITHM: str = "HS256"
    CUSTOM_TOKEN_EXPIRY_HOURS: int = int(os.environ.get("CUSTOM_TOKEN_EXPIRY_HOURS", "24"))

    # Mock admin role: identities starting with this prefix see the admin listing
    ADMIN_ID_PREFIX: str = os.environ.get("ADMIN_ID_PREFIX", "admin_")

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")

    @property
    def use_postgres(self) -> bool:
        return self.STORE_BACKEND == "postgres"


# Singleton instance
settings = Settings()
