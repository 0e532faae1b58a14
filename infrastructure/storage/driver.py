"""
Storage Driver Registry

Holds the process-wide file storage backend and its close function. A
backend registers itself once at startup; route handlers load it per request.
"""

import threading
from typing import Callable, Optional, Tuple

from infrastructure.errors import DriveNotExistError

from .interfaces import FileStorageInterface

CloseFn = Callable[[], None]

_lock = threading.Lock()
_storage: Optional[FileStorageInterface] = None
_close_fn: Optional[CloseFn] = None


def register(storage: FileStorageInterface, close_fn: CloseFn) -> None:
    """Register the storage backend and the function that releases it."""
    global _storage, _close_fn
    with _lock:
        _storage = storage
        _close_fn = close_fn


def load() -> Tuple[FileStorageInterface, CloseFn]:
    """
    Return the registered backend.

    Raises:
        DriveNotExistError: If no backend is registered
    """
    with _lock:
        if _storage is None or _close_fn is None:
            raise DriveNotExistError()
        return _storage, _close_fn


def is_registered() -> bool:
    with _lock:
        return _storage is not None and _close_fn is not None


def unload() -> None:
    """Forget the registered backend."""
    global _storage, _close_fn
    with _lock:
        _storage = None
        _close_fn = None
