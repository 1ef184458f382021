# src/uploads_api/config/settings.py
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TEN_MEBIBYTES = 10 * 1024 * 1024


class BackendMode(str, Enum):
    """Which storage backend the process runs against."""
    LOCAL = "local"
    S3 = "s3"


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Values passed to the constructor (tests, CLI)
    2. Environment variables
    3. .env file (if exists)
    4. Default values in this class (lowest priority)

    Usage:
        from uploads_api.config.settings import get_settings
        settings = get_settings()
        mode = settings.backend_mode
    """

    # Application Settings
    app_name: str = Field(
        default="uploads-api",
        description="Application name"
    )

    # AWS / S3 Settings. All four present switches the process to S3.
    aws_access_key_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("aws_access_key_id", "AWS_ACCESS_KEY_ID"),
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("aws_secret_access_key", "AWS_SECRET_ACCESS_KEY"),
    )

    aws_region: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("aws_region", "AWS_REGION", "AWS_DEFAULT_REGION"),
    )

    s3_bucket_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("s3_bucket_name", "S3_BUCKET_NAME"),
        description="S3 bucket for uploaded files"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("aws_endpoint_url", "AWS_ENDPOINT_URL"),
        description="Custom endpoint for S3-compatible stores (MinIO, moto server, ...)"
    )

    # Local Storage Settings
    upload_dir: str = Field(
        default="uploads",
        description="Directory that holds uploaded files in local mode"
    )

    public_path: str = Field(
        default="/uploads",
        description="URL path that serves uploaded files in local mode"
    )

    public_base_url: str = Field(
        default="",
        description="Optional absolute origin prepended to local file URLs"
    )

    # Upload / URL Policy
    max_upload_bytes: int = Field(
        default=TEN_MEBIBYTES,
        description="Per-file size ceiling"
    )

    preview_url_expiry_seconds: int = Field(
        default=3600,
        description="Lifetime of signed preview URLs"
    )

    download_url_expiry_seconds: int = Field(
        default=86400,
        description="Lifetime of signed download URLs"
    )

    cache_control: str = Field(
        default="max-age=31536000",
        description="Cache-Control stored with every S3 object"
    )

    list_max_objects: int = Field(
        default=10000,
        description="Upper bound on objects walked by one S3 listing"
    )

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3005)

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator(
        "max_upload_bytes",
        "preview_url_expiry_seconds",
        "download_url_expiry_seconds",
        "list_max_objects",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("public_path")
    @classmethod
    def normalize_public_path(cls, v: str) -> str:
        """Force a single leading slash and no trailing slash."""
        v = "/" + v.strip("/")
        if v == "/":
            raise ValueError("public_path must not be the site root")
        return v

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        v = v.upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return v

    @property
    def backend_mode(self) -> BackendMode:
        """S3 when credentials, bucket and region are all configured, local disk otherwise."""
        required = (
            self.aws_access_key_id,
            self.aws_secret_access_key,
            self.s3_bucket_name,
            self.aws_region,
        )
        if all(required):
            return BackendMode.S3
        return BackendMode.LOCAL

    def describe(self) -> Dict[str, Any]:
        """Settings safe to print or log (secrets masked)."""
        return {
            "backend_mode": self.backend_mode.value,
            "aws_region": self.aws_region,
            "aws_endpoint_url": self.aws_endpoint_url,
            "aws_access_key_id": "***" if self.aws_access_key_id else None,
            "s3_bucket_name": self.s3_bucket_name,
            "upload_dir": self.upload_dir,
            "public_path": self.public_path,
            "max_upload_bytes": self.max_upload_bytes,
            "preview_url_expiry_seconds": self.preview_url_expiry_seconds,
            "download_url_expiry_seconds": self.download_url_expiry_seconds,
            "log_level": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
