import logging
from typing import List

from uploads_api.adapters.storage import (
    FileDescriptor,
    StorageBackend,
    UrlIntent,
    display_name_from_key,
    timestamp_from_key,
)
from uploads_api.errors import ValidationError
from uploads_api.file_types import FileCategory, category_for, icon_for
from uploads_api.schemas import ListingEntry
from uploads_api.utils.decorators import async_log_execution_time
from uploads_api.utils.formatting import format_size

logger = logging.getLogger(__name__)


class ListingService:
    """Builds the listing view-models and forwards deletes to the active backend."""

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    @async_log_execution_time
    async def list_files(self) -> List[ListingEntry]:
        """Every stored file, newest first by the timestamp in its key."""
        descriptors = await self.storage.list()
        entries = [self._to_entry(descriptor) for descriptor in descriptors]
        entries.sort(
            key=lambda entry: (timestamp_from_key(entry.key), entry.last_modified, entry.key),
            reverse=True,
        )
        return entries

    async def delete_file(self, key: str) -> None:
        """
        Delete one stored file. Missing keys are reported, never ignored.

        Raises:
            ValidationError: If no key is given
            NotFoundError: If nothing is stored under the key
            StorageDeleteError: If the backend fails
        """
        if not key or not key.strip():
            raise ValidationError("No file key provided")
        await self.storage.delete(key)
        logger.info("File %s deleted", key)

    def _to_entry(self, descriptor: FileDescriptor) -> ListingEntry:
        category = category_for(descriptor.key)
        return ListingEntry(
            key=descriptor.key,
            display_name=display_name_from_key(descriptor.key),
            category=category,
            icon=icon_for(descriptor.key),
            is_image=category is FileCategory.IMAGE,
            content_type=descriptor.content_type,
            size_bytes=descriptor.size_bytes,
            size_label=format_size(descriptor.size_bytes),
            last_modified=descriptor.last_modified,
            preview_url=self.storage.url_for(descriptor.key, UrlIntent.PREVIEW),
            download_url=self.storage.url_for(descriptor.key, UrlIntent.DOWNLOAD),
        )
