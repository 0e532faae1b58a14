"""
Storage Implementations

This module contains concrete implementations of the file storage interface.
"""

from .minio_client import (
    MinIOFileStorage,
    new_minio_storage,
    register_minio_storage,
    verify_path,
    public_url,
)

__all__ = [
    'MinIOFileStorage',
    'new_minio_storage',
    'register_minio_storage',
    'verify_path',
    'public_url',
]
