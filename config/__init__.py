"""
Configuration Layer

Environment driven settings and the process logging setup.
"""

from .settings import (
    CoreSettings,
    MediaSettings,
    MinioSettings,
    get_core_settings,
    get_media_settings,
    get_minio_settings,
)
from .loguru_config import get_logger, setup_logging

__all__ = [
    "CoreSettings",
    "MediaSettings",
    "MinioSettings",
    "get_core_settings",
    "get_media_settings",
    "get_minio_settings",
    "get_logger",
    "setup_logging",
]
