"""
Services that orchestrate uploads and listings over the active storage backend.
"""

from uploads_api.services.listing_service import ListingService
from uploads_api.services.upload_service import IncomingFile, UploadService

__all__ = ["IncomingFile", "ListingService", "UploadService"]
