"""Runtime configuration.

Every setting can be given as a ``MAILBLOCKS_``-prefixed environment variable
or in a ``.env`` file, e.g. ``MAILBLOCKS_STORAGE_PROVIDER=s3``. Settings are
validated once and cached by ``get_settings``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ValidationLevel = Literal["soft", "strict", "skip"]


class Settings(BaseSettings):
    """MailBlocks settings for the API server and the CLI."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MAILBLOCKS_",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "MailBlocks"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    # Base URL clients reach the server on; local image URLs are built from it
    external_url: str = "http://localhost:8000"
    api_prefix: str = "/api/v1"

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    workers: int = Field(default=1, ge=1)

    # Design store
    database_url: str = "sqlite+aiosqlite:///./mb_data/mailblocks.db"
    db_echo: bool = False
    # Pool sizing, ignored for SQLite
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600

    # The editor runs on a separate dev server
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:5173"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    log_level: LogLevel = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Uploaded images
    storage_provider: Literal["local", "s3"] = "local"
    storage_path: str = "./mb_data/images"
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_access_key_id: str | None = None
    s3_secret_access_key: str | None = None
    s3_endpoint_url: str | None = None
    s3_object_prefix: str = "email-images"
    s3_public_base_url: str | None = Field(
        default=None,
        description="Public base URL for uploaded images, e.g. a CDN in front of the bucket",
    )

    mjml_validation_level: ValidationLevel = "soft"
    render_html_on_save: bool = Field(
        default=True,
        description="Render HTML through the MJML engine when a design is saved",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Accept ``a.test, b.test`` as well as a JSON list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("external_url", "api_prefix")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def check_storage_and_workers(self) -> "Settings":
        if self.storage_provider == "s3" and not self.s3_bucket:
            raise ValueError(
                "S3 image storage requires MAILBLOCKS_S3_BUCKET to be set. "
                "Either configure a bucket or use storage_provider=local."
            )
        if self.workers > 1 and self.uses_sqlite:
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers; point MAILBLOCKS_DATABASE_URL "
                "at a server database or run a single worker."
            )
        return self

    @property
    def uses_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def public_api_url(self) -> str:
        """Absolute URL of the API root, e.g. ``http://localhost:8000/api/v1``."""
        return f"{self.external_url}{self.api_prefix}"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded on first call."""
    return Settings()
