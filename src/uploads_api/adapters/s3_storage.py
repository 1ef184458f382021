"""Storage backend over an S3 (or S3-compatible) bucket with presigned URLs."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import BinaryIO, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

from uploads_api.adapters.storage import (
    FileDescriptor,
    KeyGenerator,
    StorageBackend,
    UrlIntent,
    content_disposition,
    display_name_from_key,
)
from uploads_api.config.settings import BackendMode, Settings
from uploads_api.errors import (
    NotFoundError,
    StorageDeleteError,
    StorageListError,
    StorageWriteError,
)
from uploads_api.file_types import content_type_for
from uploads_api.s3.delete_objects import delete_s3_object
from uploads_api.s3.read_objects import (
    fetch_s3_objects_metadata,
    generate_presigned_get_url,
    object_exists_in_s3,
)
from uploads_api.s3.write_objects import upload_s3_object

logger = logging.getLogger(__name__)

AWS_ERRORS = (ClientError, BotoCoreError)


class S3Backend(StorageBackend):
    """
    Stores each upload as an object keyed `<timestamp>_<name>` in one bucket.

    URLs are presigned GETs: previews are short-lived and inline, downloads
    last longer and force an attachment carrying the original filename.
    """

    mode = BackendMode.S3

    def __init__(
        self,
        s3_client: "S3Client",
        bucket_name: str,
        cache_control: Optional[str] = "max-age=31536000",
        preview_url_expiry_seconds: int = 3600,
        download_url_expiry_seconds: int = 86400,
        list_max_objects: Optional[int] = None,
        key_generator: Optional[KeyGenerator] = None,
    ):
        super().__init__(key_generator)
        self.s3_client = s3_client
        self.bucket_name = bucket_name
        self.cache_control = cache_control
        self.preview_url_expiry_seconds = preview_url_expiry_seconds
        self.download_url_expiry_seconds = download_url_expiry_seconds
        self.list_max_objects = list_max_objects

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3Backend":
        s3_client = boto3.client(
            "s3",
            region_name=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
        logger.info("S3Backend initialized")
        logger.info(f"  Bucket: {settings.s3_bucket_name}")
        logger.info(f"  Region: {settings.aws_region}")
        logger.info(f"  Endpoint: {settings.aws_endpoint_url or 'default'}")
        return cls(
            s3_client=s3_client,
            bucket_name=settings.s3_bucket_name,
            cache_control=settings.cache_control,
            preview_url_expiry_seconds=settings.preview_url_expiry_seconds,
            download_url_expiry_seconds=settings.download_url_expiry_seconds,
            list_max_objects=settings.list_max_objects,
        )

    def _put(self, original_name: str, stream: BinaryIO) -> FileDescriptor:
        key = self.key_generator.new_key(original_name)
        content_type = content_type_for(key)
        try:
            body = stream.read()
            upload_s3_object(
                self.s3_client,
                bucket_name=self.bucket_name,
                object_key=key,
                file_content=body,
                content_type=content_type,
                cache_control=self.cache_control,
            )
        except AWS_ERRORS + (OSError,) as e:
            logger.error(f"Error uploading {key} to S3: {str(e)}")
            raise StorageWriteError(f"Failed to store '{original_name}': {e}") from e
        logger.info(f"Uploaded {original_name} to S3 as {key}")
        return FileDescriptor(
            key=key,
            original_name=original_name,
            size_bytes=len(body),
            last_modified=datetime.now(timezone.utc),
            content_type=content_type,
        )

    def _fetch_listing(self) -> List[FileDescriptor]:
        try:
            objects, _truncated = fetch_s3_objects_metadata(
                self.s3_client,
                bucket_name=self.bucket_name,
                max_objects=self.list_max_objects,
            )
        except AWS_ERRORS as e:
            logger.error(f"Error listing bucket {self.bucket_name}: {str(e)}")
            raise StorageListError(f"Failed to list files: {e}") from e
        return [
            FileDescriptor(
                key=obj["Key"],
                original_name=display_name_from_key(obj["Key"]),
                size_bytes=obj.get("Size", 0),
                last_modified=obj["LastModified"],
                content_type=content_type_for(obj["Key"]),
            )
            for obj in objects
        ]

    def _remove(self, key: str) -> None:
        try:
            if not object_exists_in_s3(self.s3_client, self.bucket_name, key):
                raise NotFoundError(f"File '{key}' not found")
            delete_s3_object(self.s3_client, self.bucket_name, key)
        except AWS_ERRORS as e:
            logger.error(f"Error deleting {key} from S3: {str(e)}")
            raise StorageDeleteError(f"Failed to delete '{key}': {e}") from e
        logger.info(f"Deleted {key} from bucket {self.bucket_name}")

    async def persist(self, original_name: str, stream: BinaryIO) -> FileDescriptor:
        return await asyncio.to_thread(self._put, original_name, stream)

    async def list(self) -> List[FileDescriptor]:
        return await asyncio.to_thread(self._fetch_listing)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    def url_for(self, key: str, intent: UrlIntent) -> str:
        filename = display_name_from_key(key)
        if intent is UrlIntent.DOWNLOAD:
            return generate_presigned_get_url(
                self.s3_client,
                bucket_name=self.bucket_name,
                object_key=key,
                expires_in=self.download_url_expiry_seconds,
                response_content_disposition=content_disposition("attachment", filename),
            )
        return generate_presigned_get_url(
            self.s3_client,
            bucket_name=self.bucket_name,
            object_key=key,
            expires_in=self.preview_url_expiry_seconds,
            response_content_type=content_type_for(key),
            response_content_disposition=content_disposition("inline", filename),
        )
