"""
Main Settings Configuration

This module provides the configuration settings for the storage gateway.
Every value is read from the environment (or a ``.env`` file).
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class CoreSettings(BaseConfig):
    """Process-wide settings shared by the HTTP and gRPC boundaries."""

    # System label bound onto every fault log record
    system_name: str = Field(default="storage")
    environment: str = Field(default="development")

    # Logging
    log_level: Optional[str] = Field(default=None)
    log_dir: Optional[str] = Field(default=None)
    log_message: str = Field(default="storage server error")

    # Routes
    storage_prefix: str = Field(default="/storage")


class MediaSettings(BaseConfig):
    """Where uploaded media lives and how it is published."""

    storage_domain: str = Field(default="http://localhost")
    bucket_name: str = Field(default="matrix-megaphone-file")
    prefix_path: str = Field(default="")


class MinioSettings(BaseConfig):
    """MinIO connection settings."""

    minio_endpoint: str = Field(default="localhost:9000")
    minio_access_key: Optional[str] = Field(default=None)
    minio_secret_key: Optional[str] = Field(default=None)
    minio_secure: bool = Field(default=False)
    minio_region: Optional[str] = Field(default=None)


@lru_cache()
def get_core_settings() -> CoreSettings:
    """Get cached core settings."""
    return CoreSettings()


@lru_cache()
def get_media_settings() -> MediaSettings:
    """Get cached media settings."""
    return MediaSettings()


@lru_cache()
def get_minio_settings() -> MinioSettings:
    """Get cached MinIO settings."""
    return MinioSettings()
