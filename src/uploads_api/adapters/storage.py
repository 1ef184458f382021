"""
Storage backend abstraction shared by the local-disk and S3 implementations.

The backend is chosen once at startup by `StorageFactory.create_backend` and
handed to the services; nothing reads the choice from module state.
"""

import logging
import re
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import BinaryIO, List, Optional
from urllib.parse import quote

from uploads_api.config.settings import BackendMode, Settings

logger = logging.getLogger(__name__)

UNNAMED_FILE = "unnamed"
# NAME_MAX of common filesystems, in bytes
MAX_KEY_BYTES = 255
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


class UrlIntent(str, Enum):
    """What the caller is going to do with a file URL."""
    PREVIEW = "preview"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class FileDescriptor:
    """Metadata record of one stored file."""
    key: str
    original_name: str
    size_bytes: int
    last_modified: datetime
    content_type: str


class KeyGenerator:
    """
    Hands out `<timestamp>_<name>` keys with strictly increasing millisecond stamps.

    Two calls in the same millisecond get consecutive stamps, so keys stay
    unique within the process even for identical names.
    """

    def __init__(self, clock=None):
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._last = 0
        self._lock = threading.Lock()

    def next_timestamp(self) -> int:
        with self._lock:
            self._last = max(self._clock(), self._last + 1)
            return self._last

    def new_key(self, original_name: str) -> str:
        prefix = f"{self.next_timestamp()}_"
        return prefix + sanitize_filename(original_name, MAX_KEY_BYTES - len(prefix))


def sanitize_filename(name: str, max_bytes: int = MAX_KEY_BYTES) -> str:
    """
    Reduce a user-supplied filename to a single safe path component.

    Directory parts and ``.``/``..`` segments are dropped (backslashes count
    as separators), control characters removed and leading dots stripped.
    Names longer than `max_bytes` in UTF-8 lose the end of their stem; the
    extension is kept so the file type is still recognised.
    """
    segments = [s for s in name.replace("\\", "/").split("/") if s not in ("", ".", "..")]
    base = segments[-1] if segments else ""
    base = _CONTROL_CHARS.sub("", base).strip().lstrip(".")
    return _truncate_utf8(base or UNNAMED_FILE, max_bytes)


def _truncate_utf8(name: str, max_bytes: int) -> str:
    if len(name.encode("utf-8")) <= max_bytes:
        return name
    stem, dot, extension = name.rpartition(".")
    suffix = dot + extension if stem else ""
    if len(suffix.encode("utf-8")) >= max_bytes:
        # the extension alone does not fit
        stem, suffix = name, ""
    elif not stem:
        stem = name
    budget = max_bytes - len(suffix.encode("utf-8"))
    # ignore drops a multi-byte character cut in half
    stem = stem.encode("utf-8")[:budget].decode("utf-8", "ignore").rstrip()
    return stem + suffix


def timestamp_from_key(key: str) -> int:
    """The millisecond stamp a key was created with, or 0 for keys this service did not name."""
    prefix, sep, _ = key.partition("_")
    return int(prefix) if sep and prefix.isdigit() else 0


def display_name_from_key(key: str) -> str:
    """Strip the `<timestamp>_` prefix added at persist time; keys without `_` are returned as is."""
    _, sep, rest = key.partition("_")
    return rest if sep else key


def content_disposition(disposition: str, filename: str) -> str:
    """Build a Content-Disposition value with an ASCII fallback and an RFC 5987 UTF-8 name."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "").replace("\\", "")
    ascii_name = ascii_name or UNNAMED_FILE
    return f"{disposition}; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename, safe='')}"


class StorageBackend(ABC):
    """Capability every storage backend provides."""

    mode: BackendMode

    def __init__(self, key_generator: Optional[KeyGenerator] = None):
        self.key_generator = key_generator or KeyGenerator()

    @abstractmethod
    async def persist(self, original_name: str, stream: BinaryIO) -> FileDescriptor:
        """Store the content of `stream` under a new key.

        Raises:
            StorageWriteError: on I/O or network failure.
        """

    @abstractmethod
    async def list(self) -> List[FileDescriptor]:
        """Return a snapshot of every stored file.

        Raises:
            StorageListError: when the backend is unavailable.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a stored file.

        Raises:
            NotFoundError: when no file is stored under `key`.
            StorageDeleteError: when the backend fails to delete it.
        """

    @abstractmethod
    def url_for(self, key: str, intent: UrlIntent) -> str:
        """URL that previews (inline) or downloads (attachment) the file. Treat as opaque."""


class StorageFactory:
    """Factory to build the storage backend matching the configured mode."""

    @staticmethod
    def create_backend(settings: Settings) -> StorageBackend:
        # imported here so local mode never needs a boto3 client
        from uploads_api.adapters.local_storage import LocalDiskBackend
        from uploads_api.adapters.s3_storage import S3Backend

        backend_mode = settings.backend_mode
        if backend_mode is BackendMode.S3:
            logger.info(
                "Storage backend: S3 (bucket=%s, region=%s)",
                settings.s3_bucket_name,
                settings.aws_region,
            )
            return S3Backend.from_settings(settings)

        logger.info("Storage backend: local disk (%s)", settings.upload_dir)
        return LocalDiskBackend.from_settings(settings)
