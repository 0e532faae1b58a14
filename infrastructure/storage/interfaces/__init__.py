"""
Storage Interfaces

This module contains the abstract file storage interface and listing query models.
"""

from .storage_interface import (
    # Storage interface and models
    FileStorageInterface,
    FileHandler,
    StoredFile,
    Folder,

    # Listing query
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

__all__ = [
    # Storage interface
    "FileStorageInterface",
    "FileHandler",
    "StoredFile",
    "Folder",

    # Listing query
    "FileQuery",
    "FileQueryField",
    "Projection",
    "with_file_delimiter",
    "with_file_prefix",
    "with_file_versions",
    "with_file_start_offset",
    "with_file_end_offset",
    "with_file_projection",
]
