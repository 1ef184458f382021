from fastapi import Request

from uploads_api.adapters.storage import StorageBackend
from uploads_api.services import ListingService, UploadService


def get_storage(request: Request) -> StorageBackend:
    """Storage backend chosen at startup."""
    return request.app.state.storage


def get_upload_service(request: Request) -> UploadService:
    return UploadService(
        storage=get_storage(request),
        max_upload_bytes=request.app.state.settings.max_upload_bytes,
    )


def get_listing_service(request: Request) -> ListingService:
    return ListingService(storage=get_storage(request))
