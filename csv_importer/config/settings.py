"""Unified configuration settings for the importer.

This module provides a centralized Settings class using Pydantic BaseSettings
for loading and validating all environment variables.

All configuration should be accessed through this module:
    from csv_importer.config.settings import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_CONFIG_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = _CONFIG_DIR.parent.parent

DEFAULT_ROW_LIMIT = 10_000
DEFAULT_BATCH_REVIEW_URL_TEMPLATE = "/apex/npsp__BDI_DataImport?batchId={batch_id}&retURL=/{batch_id}"


def _split_csv(value: str) -> List[str]:
    """Split a comma-separated string into a list."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Importer settings loaded from environment variables.

    Variables are read with the ``CSV_IMPORT_`` prefix, from the process
    environment or a ``.env`` file at the project root.
    """

    model_config = SettingsConfigDict(
        env_prefix="CSV_IMPORT_",
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Collaborator Endpoints ====================
    schema_source_url: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the field metadata service",
    )
    import_processor_url: str = Field(
        default="http://localhost:8080/api/imports",
        description="URL the validated CSV content is POSTed to",
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Timeout for collaborator requests; unset waits indefinitely",
        gt=0,
    )

    # ==================== Validation Policy ====================
    row_limit: int = Field(
        default=DEFAULT_ROW_LIMIT,
        description="Maximum number of lines (header included) accepted in a file",
        ge=1,
    )
    csv_extension_case_sensitive: bool = Field(
        default=False,
        description="Require a lowercase '.csv' extension when true",
    )
    allow_reupload_after_failure: bool = Field(
        default=False,
        description="Re-enable file selection after a failed import",
    )

    # ==================== Workflow Navigation ====================
    batch_review_url_template: str = Field(
        default=DEFAULT_BATCH_REVIEW_URL_TEMPLATE,
        description="Redirect target for imports tied to a batch; formatted with batch_id",
    )

    # ==================== Header Display ====================
    header_icon_name: str = Field(default="utility:upload", description="Header icon name")
    header_title_text: str = Field(default="CSV Import", description="Header title text")
    header_logo_link: Optional[str] = Field(default=None, description="Hyperlink for the header logo")

    # ==================== Logging ====================
    log_level: Optional[str] = Field(
        default=None,
        description="Log level; falls back to CSV_IMPORT_LOG_LEVEL, then INFO",
    )
    log_json: bool = Field(default=False, description="Emit serialized JSON log records")

    # ==================== Server Configuration ====================
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )
    uvicorn_host: str = Field(default="0.0.0.0", description="Uvicorn server host")
    uvicorn_port: int = Field(default=8000, description="Uvicorn server port")
    session_ttl_seconds: int = Field(
        default=3600,
        description="Seconds an import session is kept before it expires",
        ge=1,
    )

    @field_validator("batch_review_url_template")
    @classmethod
    def check_batch_placeholder(cls, v: str) -> str:
        """The redirect template must reference the batch identifier."""
        if "{batch_id}" not in v:
            raise ValueError("batch_review_url_template must contain '{batch_id}'")
        return v

    # ==================== Computed Properties ====================

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as a list."""
        return _split_csv(self.allowed_origins)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()
