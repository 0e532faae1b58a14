"""
Infrastructure Storage Layer

This module provides the file storage abstraction, the process-wide storage
driver registry and the MinIO implementation.
"""

from .interfaces import (
    FileStorageInterface,
    FileHandler,
    StoredFile,
    Folder,
    FileQuery,
    FileQueryField,
    Projection,
    with_file_delimiter,
    with_file_prefix,
    with_file_versions,
    with_file_start_offset,
    with_file_end_offset,
    with_file_projection,
)
from . import driver

__all__ = [
    # Interfaces
    'FileStorageInterface',
    'FileHandler',
    'StoredFile',
    'Folder',

    # Listing query
    'FileQuery',
    'FileQueryField',
    'Projection',
    'with_file_delimiter',
    'with_file_prefix',
    'with_file_versions',
    'with_file_start_offset',
    'with_file_end_offset',
    'with_file_projection',

    # Driver registry
    'driver',
]
