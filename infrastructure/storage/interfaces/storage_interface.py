"""
File Storage Interface Abstract Class

This module defines the abstract interface for file storage backends and the
query builder used to filter storage listings. Implementations raise the
sentinel causes from ``infrastructure.errors``; route handlers wrap them into
faults before they reach a recovery boundary.
"""

import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Tuple


class FileQueryField(int, Enum):
    """Listing clauses a query may carry."""
    DELIMITER = 0
    PREFIX = 1
    VERSIONS = 2
    START_OFFSET = 3
    END_OFFSET = 4
    PROJECTION = 5


class Projection(str, Enum):
    """How much object metadata a listing returns."""
    DEFAULT = "default"
    FULL = "full"
    NO_ACL = "noAcl"


@dataclass(frozen=True)
class FileQuery:
    """
    Listing query.

    ``fields`` records which clauses were set, in order; the backend applies
    only those clauses.
    """
    fields: Tuple[FileQueryField, ...] = ()
    delimiter: str = ""
    prefix: str = ""
    versions: bool = False
    start_offset: str = ""
    end_offset: str = ""
    projection: Projection = Projection.DEFAULT


def _with(query: FileQuery, clause: FileQueryField, **values: Any) -> FileQuery:
    return replace(query, fields=query.fields + (clause,), **values)


def with_file_delimiter(query: FileQuery, delimiter: str) -> FileQuery:
    return _with(query, FileQueryField.DELIMITER, delimiter=delimiter)


def with_file_prefix(query: FileQuery, prefix: str) -> FileQuery:
    return _with(query, FileQueryField.PREFIX, prefix=prefix)


def with_file_versions(query: FileQuery, versions: bool) -> FileQuery:
    return _with(query, FileQueryField.VERSIONS, versions=versions)


def with_file_start_offset(query: FileQuery, start_offset: str) -> FileQuery:
    return _with(query, FileQueryField.START_OFFSET, start_offset=start_offset)


def with_file_end_offset(query: FileQuery, end_offset: str) -> FileQuery:
    return _with(query, FileQueryField.END_OFFSET, end_offset=end_offset)


def with_file_projection(query: FileQuery, projection: Projection) -> FileQuery:
    return _with(query, FileQueryField.PROJECTION, projection=projection)


@dataclass
class Folder:
    """A common prefix returned by a delimited listing."""
    name: str
    path: str


@dataclass
class StoredFile:
    """Stored file or folder representation."""
    path: str = ""
    public_url: str = ""
    content_type: Optional[str] = None
    size: int = 0
    etag: Optional[str] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    folder: Optional[Folder] = None

    def folder_info(self) -> Tuple[str, str, bool]:
        """Return ``(name, path, exist)`` for folder entries."""
        if self.folder is None:
            return "", "", False
        return self.folder.name, self.folder.path, True

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view, empty values omitted."""
        data: Dict[str, Any] = {
            "path": self.path,
            "public_url": self.public_url,
            "content_type": self.content_type,
            "size": self.size,
            "etag": self.etag,
            "created": self.created.isoformat() if self.created else None,
            "updated": self.updated.isoformat() if self.updated else None,
            "metadata": self.metadata,
        }
        if self.folder is not None:
            data["folders"] = {"name": self.folder.name, "path": self.folder.path}
        return {key: value for key, value in data.items() if value}


FileHandler = Callable[[StoredFile], None]


class FileStorageInterface(ABC):
    """
    Abstract interface for file storage backends.

    Every method raises a sentinel cause on failure.
    """

    @abstractmethod
    async def upload(self, prefix: str, stream: BinaryIO, content_type: str = "application/octet-stream") -> str:
        """
        Store a new object under ``prefix`` with a generated name.

        Returns:
            str: Path of the stored object

        Raises:
            FileUploadError: If the path is invalid or the write fails
            FailCloseSessionError: If the source stream cannot be closed
        """

    @abstractmethod
    async def get_url(self, path: str) -> str:
        """
        Publish an object and return its public URL.

        Raises:
            FileNotExistError: If no object lives at ``path``
            FileUpdateError: If the path is invalid or publishing fails
        """

    @abstractmethod
    async def remove(self, path: str) -> None:
        """
        Delete an object.

        Raises:
            FileRemoveError: If the path is invalid or the delete fails
        """

    @abstractmethod
    async def list(self, query: FileQuery, handler: FileHandler) -> None:
        """
        Call ``handler`` for every file or folder matching ``query``.

        Raises:
            ValueError: If a clause is missing its required value
            GetFileError: If iteration or the handler fails
        """

    async def collect(self, query: FileQuery) -> List[StoredFile]:
        """List into a new list."""
        files: List[StoredFile] = []
        await self.list(query, files.append)
        return files
