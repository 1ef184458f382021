"""Storage backend over a directory on the local filesystem."""

import asyncio
import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, List, Optional
from urllib.parse import quote

from uploads_api.adapters.storage import (
    FileDescriptor,
    KeyGenerator,
    StorageBackend,
    UrlIntent,
    display_name_from_key,
    sanitize_filename,
)
from uploads_api.config.settings import BackendMode, Settings
from uploads_api.errors import (
    NotFoundError,
    StorageDeleteError,
    StorageListError,
    StorageWriteError,
)
from uploads_api.file_types import content_type_for

logger = logging.getLogger(__name__)

# fresh keys drawn when a file with the generated name already exists
MAX_KEY_ATTEMPTS = 5


class LocalDiskBackend(StorageBackend):
    """Stores each upload as `<upload_dir>/<key>` and serves it under `public_path`."""

    mode = BackendMode.LOCAL

    def __init__(
        self,
        upload_dir: Path,
        public_path: str = "/uploads",
        public_base_url: str = "",
        key_generator: Optional[KeyGenerator] = None,
    ):
        super().__init__(key_generator)
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.public_path = public_path
        self.public_base_url = public_base_url
        logger.info("LocalDiskBackend initialized at: %s", self.upload_dir.resolve())

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalDiskBackend":
        return cls(
            upload_dir=Path(settings.upload_dir),
            public_path=settings.public_path,
            public_base_url=settings.public_base_url,
        )

    def path_for(self, key: str) -> Path:
        """Resolve a stored key to its file, refusing anything outside the upload directory."""
        if not key or sanitize_filename(key) != key:
            raise NotFoundError(f"File '{key}' not found")
        path = self.upload_dir / key
        if not path.is_file():
            raise NotFoundError(f"File '{key}' not found")
        return path

    def _describe(self, path: Path) -> FileDescriptor:
        stat = path.stat()
        return FileDescriptor(
            key=path.name,
            original_name=display_name_from_key(path.name),
            size_bytes=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            content_type=content_type_for(path.name),
        )

    def _write(self, original_name: str, stream: BinaryIO) -> FileDescriptor:
        for _ in range(MAX_KEY_ATTEMPTS):
            key = self.key_generator.new_key(original_name)
            path = self.upload_dir / key
            try:
                target = open(path, "xb")
            except FileExistsError:
                logger.warning("Key %s already taken on disk, drawing another", key)
                continue
            except OSError as e:
                logger.error("Error creating %s: %s", path, e)
                raise StorageWriteError(f"Failed to store '{original_name}': {e}") from e
            try:
                with target:
                    shutil.copyfileobj(stream, target)
            except OSError as e:
                path.unlink(missing_ok=True)
                logger.error("Error writing %s: %s", path, e)
                raise StorageWriteError(f"Failed to store '{original_name}': {e}") from e
            stat = path.stat()
            logger.info("Stored %s (%d bytes)", key, stat.st_size)
            return FileDescriptor(
                key=key,
                original_name=original_name,
                size_bytes=stat.st_size,
                last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                content_type=content_type_for(key),
            )
        raise StorageWriteError(f"Failed to store '{original_name}': no free key")

    def _scan(self) -> List[FileDescriptor]:
        descriptors = []
        try:
            for path in self.upload_dir.iterdir():
                # names this backend could not have written are not keys
                if not path.is_file() or sanitize_filename(path.name) != path.name:
                    continue
                try:
                    descriptors.append(self._describe(path))
                except FileNotFoundError:
                    # deleted between iterdir() and stat()
                    continue
        except OSError as e:
            logger.error("Error listing %s: %s", self.upload_dir, e)
            raise StorageListError(f"Failed to list files: {e}") from e
        return descriptors

    def _remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f"File '{key}' not found") from e
        except OSError as e:
            logger.error("Error deleting %s: %s", path, e)
            raise StorageDeleteError(f"Failed to delete '{key}': {e}") from e
        logger.info("Deleted %s", key)

    async def persist(self, original_name: str, stream: BinaryIO) -> FileDescriptor:
        return await asyncio.to_thread(self._write, original_name, stream)

    async def list(self) -> List[FileDescriptor]:
        return await asyncio.to_thread(self._scan)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    def url_for(self, key: str, intent: UrlIntent) -> str:
        url = f"{self.public_base_url}{self.public_path}/{quote(key)}"
        if intent is UrlIntent.DOWNLOAD:
            url += "?download=1"
        return url
