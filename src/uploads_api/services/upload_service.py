import asyncio
import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, List, Sequence

from uploads_api.adapters.storage import StorageBackend, UrlIntent
from uploads_api.config.settings import TEN_MEBIBYTES
from uploads_api.errors import PayloadTooLargeError, StorageWriteError, ValidationError
from uploads_api.file_types import is_image
from uploads_api.schemas import UploadFailure, UploadOutcome, UploadResult
from uploads_api.utils.decorators import async_log_execution_time
from uploads_api.utils.formatting import format_size

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    """A file received from the client, not yet stored."""
    original_name: str
    stream: BinaryIO


class UploadService:
    """
    Stores a batch of uploaded files on the active storage backend.

    Files of a batch are stored concurrently. Each file gets its own outcome:
    a file over the size ceiling or one the backend failed to write is
    reported as an `UploadFailure` while the rest of the batch is kept.
    """

    def __init__(self, storage: StorageBackend, max_upload_bytes: int = TEN_MEBIBYTES):
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes

    @async_log_execution_time
    async def handle_upload(self, files: Sequence[IncomingFile]) -> List[UploadOutcome]:
        """
        Store every file of the batch.

        Args:
            files: The received files, in the order the client sent them

        Returns:
            One outcome per input file, in the same order

        Raises:
            ValidationError: If the batch is empty
        """
        if not files:
            raise ValidationError("No file uploaded")

        outcomes = await asyncio.gather(*(self._store_one(incoming) for incoming in files))
        stored = sum(1 for outcome in outcomes if outcome.success)
        logger.info("Upload batch finished: %d stored, %d rejected", stored, len(outcomes) - stored)
        return list(outcomes)

    async def _store_one(self, incoming: IncomingFile) -> UploadOutcome:
        try:
            stream = self._limit_size(incoming)
            descriptor = await self.storage.persist(incoming.original_name, stream)
        except (PayloadTooLargeError, StorageWriteError) as e:
            logger.warning("Rejected %r: %s", incoming.original_name, e.message)
            return UploadFailure(
                original_name=incoming.original_name,
                error=e.message,
                status_code=e.status_code,
            )

        return UploadResult(
            original_name=incoming.original_name,
            key=descriptor.key,
            url=self.storage.url_for(descriptor.key, UrlIntent.PREVIEW),
            is_image=is_image(descriptor.key),
            content_type=descriptor.content_type,
        )

    def _limit_size(self, incoming: IncomingFile) -> BinaryIO:
        """Return a stream positioned at the start of the content, or raise if it is too large."""
        stream = incoming.stream
        if stream.seekable():
            start = stream.tell()
            size = stream.seek(0, io.SEEK_END) - start
            stream.seek(start)
        else:
            # read one byte past the ceiling so an oversized stream is detectable
            data = stream.read(self.max_upload_bytes + 1)
            size = len(data)
            stream = io.BytesIO(data)

        if size > self.max_upload_bytes:
            raise PayloadTooLargeError(
                f"'{incoming.original_name}' exceeds the {format_size(self.max_upload_bytes)} upload limit"
            )
        return stream
