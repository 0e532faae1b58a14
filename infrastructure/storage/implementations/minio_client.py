"""
MinIO File Storage Implementation

This module implements the file storage interface on top of MinIO.
Failures are reported with the sentinel causes from ``infrastructure.errors``.
"""

import posixpath
import re
import uuid
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Dict, Optional, Tuple

import urllib3
from minio import Minio
from minio.commonconfig import Tags
from minio.error import S3Error
from starlette.concurrency import run_in_threadpool

from config.loguru_config import get_logger
from config.settings import (
    CoreSettings,
    MediaSettings,
    MinioSettings,
    get_core_settings,
    get_media_settings,
    get_minio_settings,
)
from infrastructure.errors import (
    FailCloseSessionError,
    FileNotExistError,
    FileRemoveError,
    FileUpdateError,
    FileUploadError,
    GetFileError,
    InitialFileClientError,
)

from .. import driver
from ..interfaces.storage_interface import (
    FileHandler,
    FileQuery,
    FileQueryField,
    FileStorageInterface,
    Folder,
    Projection,
    StoredFile,
)

logger = get_logger(__name__)

MAX_PATH_LENGTH = 1024
PART_SIZE = 10 * 1024 * 1024  # 10MB
PUBLIC_TAG = ("visibility", "public")
_PATH_PATTERN = re.compile(r"[\w\-.()$%& /]*[\w\-.()$%& ]", re.ASCII)
_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchObject", "NoSuchVersion"}


def verify_path(path: str) -> None:
    """
    Check an object path against the storage naming rules.

    Raises:
        ValueError: If the path is not a valid object path
    """
    if (
        not path
        or len(path) > MAX_PATH_LENGTH
        or path.startswith(".well-known/acme-challenge/")
        or path in (".", "..")
    ):
        raise ValueError("invalid path")
    if not _PATH_PATTERN.fullmatch(path):
        raise ValueError("invalid path")


def join_path(*parts: str) -> str:
    """Join path segments, collapsing repeated slashes."""
    joined = re.sub(r"/+", "/", "/".join(part for part in parts if part))
    return posixpath.normpath(joined) if joined else ""


def object_key(path: str) -> str:
    """MinIO object names never start with a slash."""
    return path.lstrip("/")


def public_url(storage_domain: str, bucket_name: str, path: str) -> str:
    """Public URL of an object: ``<domain>/<bucket>/<path>``."""
    return f"{storage_domain.rstrip('/')}{join_path('/', bucket_name, path)}"


def _is_not_found(error: S3Error) -> bool:
    return error.code in _NOT_FOUND_CODES


@dataclass
class ListOptions:
    """Arguments passed to ``Minio.list_objects``."""
    prefix: Optional[str] = None
    recursive: bool = True
    include_version: bool = False
    start_after: Optional[str] = None
    start_offset: Optional[str] = None
    end_offset: Optional[str] = None
    include_user_meta: bool = False

    def to_kwargs(self) -> Dict[str, Any]:
        return {
            "prefix": self.prefix,
            "recursive": self.recursive,
            "include_version": self.include_version,
            "start_after": self.start_after,
            "include_user_meta": self.include_user_meta,
        }


def _require(value: str, name: str) -> None:
    if not value:
        raise ValueError(f"{name} is required")


def _with_delimiter(source: FileQuery, options: ListOptions) -> None:
    _require(source.delimiter, "delimiter")
    if source.delimiter != "/":
        raise ValueError("only '/' is supported as delimiter")
    options.recursive = False
    prefix = object_key(source.prefix)
    if prefix and not prefix.endswith("/"):
        prefix += "/"
    options.prefix = prefix or None


def _with_prefix(source: FileQuery, options: ListOptions) -> None:
    _require(source.prefix, "prefix")
    if not source.delimiter.startswith("/"):
        options.prefix = object_key(source.prefix)


def _with_versions(source: FileQuery, options: ListOptions) -> None:
    options.include_version = source.versions


def _with_start_offset(source: FileQuery, options: ListOptions) -> None:
    """
    The start offset is inclusive while MinIO's ``start_after`` is exclusive:
    list after the offset with its last character dropped, then skip what
    sorts before the offset.
    """
    _require(source.start_offset, "start offset")
    key = object_key(source.start_offset)
    options.start_offset = key
    options.start_after = key[:-1] or None


def _with_end_offset(source: FileQuery, options: ListOptions) -> None:
    _require(source.end_offset, "end offset")
    options.end_offset = object_key(source.end_offset)


def _with_projection(source: FileQuery, options: ListOptions) -> None:
    options.include_user_meta = source.projection == Projection.FULL


FILE_CLAUSES: Dict[FileQueryField, Callable[[FileQuery, ListOptions], None]] = {
    FileQueryField.DELIMITER: _with_delimiter,
    FileQueryField.PREFIX: _with_prefix,
    FileQueryField.VERSIONS: _with_versions,
    FileQueryField.START_OFFSET: _with_start_offset,
    FileQueryField.END_OFFSET: _with_end_offset,
    FileQueryField.PROJECTION: _with_projection,
}


def to_list_options(query: FileQuery) -> ListOptions:
    """
    Apply the query's clauses in the order they were set.

    Raises:
        ValueError: If a clause is missing its required value
    """
    options = ListOptions()
    for clause in query.fields:
        FILE_CLAUSES[clause](query, options)
    return options


class MinIOFileStorage(FileStorageInterface):
    """
    MinIO client implementation of the file storage interface.

    Blocking MinIO calls run in the threadpool.
    """

    def __init__(self, media: MediaSettings, client: Minio):
        self.media = media
        self.client = client

    @property
    def bucket_name(self) -> str:
        return self.media.bucket_name

    async def upload(self, prefix: str, stream: BinaryIO, content_type: str = "application/octet-stream") -> str:
        """
        Upload a stream under a generated object name.

        Args:
            prefix: Sub path appended to the configured prefix path
            stream: Source stream, closed once the upload finished
            content_type: Content type stored with the object

        Returns:
            str: Object path
        """
        path = join_path(self.media.prefix_path, prefix, str(uuid.uuid1()))
        try:
            verify_path(path)
        except ValueError as e:
            raise FileUploadError(str(e)) from e

        try:
            await run_in_threadpool(
                self.client.put_object,
                bucket_name=self.bucket_name,
                object_name=object_key(path),
                data=stream,
                length=-1,
                part_size=PART_SIZE,
                content_type=content_type,
            )
        except Exception as e:
            raise FileUploadError(str(e)) from e

        try:
            stream.close()
        except Exception as e:
            raise FailCloseSessionError(str(e)) from e

        logger.debug(f"Uploaded object {path} to bucket {self.bucket_name}")
        return path

    async def get_url(self, path: str) -> str:
        """
        Mark an object public and return its public URL.

        Args:
            path: Object path

        Returns:
            str: Public URL
        """
        try:
            verify_path(path)
        except ValueError as e:
            raise FileUpdateError(str(e)) from e

        key = object_key(path)
        tags = Tags.new_object_tags()
        tags[PUBLIC_TAG[0]] = PUBLIC_TAG[1]
        try:
            await run_in_threadpool(self.client.stat_object, bucket_name=self.bucket_name, object_name=key)
            await run_in_threadpool(
                self.client.set_object_tags,
                bucket_name=self.bucket_name,
                object_name=key,
                tags=tags,
            )
        except S3Error as e:
            if _is_not_found(e):
                raise FileNotExistError(path) from e
            raise FileUpdateError(str(e)) from e
        except Exception as e:
            raise FileUpdateError(str(e)) from e

        return public_url(self.media.storage_domain, self.bucket_name, path)

    async def remove(self, path: str) -> None:
        """
        Delete an object.

        Args:
            path: Object path
        """
        try:
            verify_path(path)
        except ValueError as e:
            raise FileRemoveError(str(e)) from e

        key = object_key(path)
        try:
            # remove_object succeeds on missing objects, stat first
            await run_in_threadpool(self.client.stat_object, bucket_name=self.bucket_name, object_name=key)
            await run_in_threadpool(self.client.remove_object, bucket_name=self.bucket_name, object_name=key)
        except Exception as e:
            raise FileRemoveError(str(e)) from e

    async def list(self, query: FileQuery, handler: FileHandler) -> None:
        """
        List files and folders matching the query.

        Args:
            query: Listing query
            handler: Called once per entry
        """
        options = to_list_options(query)

        def fetch():
            return list(self.client.list_objects(bucket_name=self.bucket_name, **options.to_kwargs()))

        try:
            objects = await run_in_threadpool(fetch)
        except Exception as e:
            raise GetFileError(str(e)) from e

        for obj in objects:
            if options.start_offset and obj.object_name < options.start_offset:
                continue
            if options.end_offset and obj.object_name >= options.end_offset:
                break
            try:
                handler(self._to_stored_file(obj, options.prefix or ""))
            except Exception as e:
                raise GetFileError(str(e)) from e

    def _to_stored_file(self, obj: Any, query_prefix: str) -> StoredFile:
        if obj.is_dir:
            name = obj.object_name[len(query_prefix):] if obj.object_name.startswith(query_prefix) else obj.object_name
            return StoredFile(folder=Folder(name=name.rstrip("/"), path=obj.object_name))

        return StoredFile(
            path=obj.object_name,
            public_url=public_url(self.media.storage_domain, self.bucket_name, obj.object_name),
            content_type=obj.content_type,
            size=obj.size or 0,
            etag=obj.etag,
            updated=obj.last_modified,
            metadata=dict(obj.metadata or {}),
        )


def new_minio_storage(
    media: MediaSettings,
    minio_settings: MinioSettings,
) -> Tuple[MinIOFileStorage, Callable[[], None]]:
    """
    Build a MinIO backed storage and the function that releases its connections.

    Raises:
        InitialFileClientError: If the client cannot be created
    """
    http_client = urllib3.PoolManager(retries=urllib3.Retry(total=3, backoff_factor=0.2))
    try:
        client = Minio(
            endpoint=minio_settings.minio_endpoint,
            access_key=minio_settings.minio_access_key,
            secret_key=minio_settings.minio_secret_key,
            secure=minio_settings.minio_secure,
            region=minio_settings.minio_region,
            http_client=http_client,
        )
    except Exception as e:
        http_client.clear()
        raise InitialFileClientError(str(e)) from e

    def close() -> None:
        http_client.clear()
        logger.info(f"Closed MinIO connections to {minio_settings.minio_endpoint}")

    return MinIOFileStorage(media, client), close


def register_minio_storage(
    core: Optional[CoreSettings] = None,
    media: Optional[MediaSettings] = None,
    minio_settings: Optional[MinioSettings] = None,
) -> None:
    """
    Register a MinIO backend as the process storage driver.

    Raises:
        InitialFileClientError: If settings or the client cannot be loaded
    """
    try:
        core = core or get_core_settings()
        media = media or get_media_settings()
        minio_settings = minio_settings or get_minio_settings()
    except Exception as e:
        raise InitialFileClientError(str(e)) from e

    storage, close = new_minio_storage(media, minio_settings)
    driver.register(storage, close)
    logger.info(f"[{core.system_name}] MinIO storage registered for bucket {media.bucket_name}")
