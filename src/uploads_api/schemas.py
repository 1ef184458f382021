####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from uploads_api.file_types import FileCategory


class UploadResult(BaseModel):
    """One successfully stored file of an upload batch."""
    original_name: str = Field(description="The filename as sent by the client.")
    key: str = Field(
        description="The storage key assigned to the file.",
        json_schema_extra={"example": "1700000000000_report.pdf"},
    )
    url: str = Field(description="Preview URL of the stored file.")
    is_image: bool = Field(description="Whether the file is displayed as an image.")
    content_type: str = Field(description="MIME type derived from the extension.")
    success: bool = True


class UploadFailure(BaseModel):
    """One file of an upload batch that was not stored."""
    original_name: str = Field(description="The filename as sent by the client.")
    error: str = Field(description="Why the file was rejected.")
    status_code: int = Field(description="HTTP status matching the failure.")
    success: bool = False


UploadOutcome = Union[UploadResult, UploadFailure]


class UploadBatchResponse(BaseModel):
    """Response model for `POST /upload` with `Accept: application/json`."""
    results: List[UploadOutcome]
    uploaded_count: int
    failed_count: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "results": [
                    {
                        "original_name": "report.pdf",
                        "key": "1700000000000_report.pdf",
                        "url": "/uploads/1700000000000_report.pdf",
                        "is_image": False,
                        "content_type": "application/pdf",
                        "success": True,
                    },
                    {
                        "original_name": "huge.mov",
                        "error": "'huge.mov' exceeds the 10.0 MB upload limit",
                        "status_code": 413,
                        "success": False,
                    },
                ],
                "uploaded_count": 1,
                "failed_count": 1,
            }
        }
    )


class ListingEntry(BaseModel):
    """One card of the file listing page."""
    key: str
    display_name: str = Field(description="The key without its timestamp prefix.")
    category: FileCategory
    icon: str
    is_image: bool
    content_type: str
    size_bytes: int
    size_label: str = Field(description="Human readable size, e.g. '1.5 MB'.")
    last_modified: datetime
    preview_url: str
    download_url: str


class GetFilesResponse(BaseModel):
    """Response model for `GET /files` with `Accept: application/json`."""
    files: List[ListingEntry]
    total_count: int = Field(description="Total number of stored files")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "files": [
                    {
                        "key": "1700000000000_photo.png",
                        "display_name": "photo.png",
                        "category": "image",
                        "icon": "🖼️",
                        "is_image": True,
                        "content_type": "image/png",
                        "size_bytes": 2048,
                        "size_label": "2.0 KB",
                        "last_modified": "2024-01-01T00:00:00Z",
                        "preview_url": "/uploads/1700000000000_photo.png",
                        "download_url": "/uploads/1700000000000_photo.png?download=1",
                    }
                ],
                "total_count": 1,
            }
        }
    )


class DeleteFileRequest(BaseModel):
    """Request body for `POST /delete-file`."""
    key: Optional[str] = Field(None, description="Storage key of the file to delete.")


class DeleteFileResponse(BaseModel):
    """Response model for `POST /delete-file`."""
    success: bool
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
