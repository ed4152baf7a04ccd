from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the registry's database.

    Reads from environment variables (or .env via pydantic-settings). PostgreSQL is
    selected by POSTGRES_URL or the individual POSTGRES_* variables; otherwise
    DATABASE_URL is used as-is (default: a process-local in-memory SQLite database).
    """

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite://",
        description="Async SQLAlchemy URL used when no POSTGRES_* configuration is present.",
    )

    POSTGRES_URL: Optional[str] = Field(
        default=None, description="If provided, full PostgreSQL connection URL."
    )
    POSTGRES_USER: Optional[str] = Field(default=None, description="DB username")
    POSTGRES_PASSWORD: Optional[str] = Field(default=None, description="DB password")
    POSTGRES_DB: Optional[str] = Field(default=None, description="Database name")
    POSTGRES_PORT: Optional[int] = Field(
        default=5432, description="Database port (default 5432)"
    )
    POSTGRES_HOST: Optional[str] = Field(
        default="localhost", description="Database host (default localhost)"
    )

    # SQLAlchemy engine options
    SQL_ECHO: bool = Field(
        default=False, description="Echo SQL statements for debugging (default False)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """
        Compute the base (sync-neutral) database URL. Prefers POSTGRES_URL, then the
        individual POSTGRES_* variables, then DATABASE_URL.
        """
        if self.POSTGRES_URL:
            return self.POSTGRES_URL
        if self.POSTGRES_USER or self.POSTGRES_DB:
            if not all([self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_DB]):
                raise ValueError(
                    "Database configuration incomplete. Ensure POSTGRES_USER, "
                    "POSTGRES_PASSWORD, and POSTGRES_DB are all set."
                )
            host = self.POSTGRES_HOST or "localhost"
            port = self.POSTGRES_PORT or 5432
            return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{host}:{port}/{self.POSTGRES_DB}"
        return self.DATABASE_URL

    @property
    def async_database_url(self) -> str:
        """
        Return an async-driver URL: postgresql+asyncpg for PostgreSQL, sqlite+aiosqlite for SQLite.
        """
        return to_async_url(self.database_url)

    @property
    def sync_database_url(self) -> str:
        """Driver-less URL variant handed to Alembic."""
        return to_sync_url(self.database_url)


# PUBLIC_INTERFACE
def to_async_url(url: str) -> str:
    """Swap the driver of a PostgreSQL or SQLite URL for its async counterpart."""
    if url.startswith("postgresql"):
        return re.sub(r"^postgresql(\+\w+)?://", "postgresql+asyncpg://", url)
    if url.startswith("sqlite"):
        return re.sub(r"^sqlite(\+\w+)?://", "sqlite+aiosqlite://", url)
    return url


# PUBLIC_INTERFACE
def to_sync_url(url: str) -> str:
    """Strip an explicit driver from a PostgreSQL or SQLite URL."""
    return re.sub(r"^(postgresql|sqlite)\+\w+://", r"\1://", url)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return a settings object populated from the environment."""
    return Settings()
