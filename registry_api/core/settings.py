from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the registry service.

    This is separate from registry_api.db.config.Settings, which focuses on the database layer.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="Operational Entity Registry")
    APP_DESCRIPTION: str = Field(
        default=(
            "Permissioned registry of lots, items, services, locations, processes and notes "
            "with lifecycle state machines and attachment relationships."
        )
    )
    APP_VERSION: str = Field(default="0.1.0")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Comma-separated list or JSON array of allowed origins. Default: *",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Startup behavior
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=False,
        description="If true, run Alembic migrations (upgrade head) at startup; otherwise create_all.",
    )
    AUTO_SEED: bool = Field(
        default=False,
        description="If true, create a small demo data set after the registry is initialized.",
    )
    REGISTRY_OWNER: Optional[str] = Field(
        default=None,
        description="Identity that initializes (and owns) the registry at startup, if not yet initialized.",
    )

    # Registry rules
    PERMISSION_POLICY: Literal["strict", "permissive"] = Field(
        default="strict",
        description=(
            "strict: explicit grant OR owner. permissive: explicit grant OR not owner "
            "(compatibility with the legacy ledger)."
        ),
    )
    MAX_STRING_LENGTH: int = Field(default=256, ge=1, description="Max UTF-8 bytes for text fields")
    MAX_COMPONENTS_PER_ITEM: int = Field(default=50, ge=1)
    MAX_ITEMS_PER_PROCESS: int = Field(default=50, ge=1)

    # Tokens
    JWT_SECRET_KEY: str = Field(default="change-me", description="HMAC secret used to verify bearer tokens")
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60)

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Root log level name (DEBUG also logs rejected calls)")

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """
        Accept both JSON array format and comma-separated formats for CORS origins.
        """
        if v is None:
            return ["*"]
        if isinstance(v, str):
            parts = [p.strip() for p in v.split(",") if p.strip()]
            return parts or ["*"]
        if isinstance(v, list):
            return v or ["*"]
        return ["*"]


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Return a new AppSettings instance populated from environment variables.

    Note:
      A new instance is built on each call so tests can change the environment.
    """
    return AppSettings()
