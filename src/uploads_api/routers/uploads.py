from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import FileResponse

from uploads_api.adapters.local_storage import LocalDiskBackend
from uploads_api.adapters.storage import display_name_from_key
from uploads_api.dependencies import get_storage
from uploads_api.file_types import content_type_for

# Mounted under `Settings.public_path` in local mode only.
router = APIRouter()


@router.get("/{key}", response_class=FileResponse)
async def serve_upload(
    key: str = Path(..., description="The key of the stored file"),
    download: bool = Query(False, description="Send as an attachment instead of inline"),
    storage: LocalDiskBackend = Depends(get_storage),
) -> FileResponse:
    """
    Serve a file stored on local disk.

    Inline by default so browsers can preview it; `?download=1` forces a
    download under the original filename.
    """
    path = storage.path_for(key)
    return FileResponse(
        path,
        media_type=content_type_for(key),
        filename=display_name_from_key(key),
        content_disposition_type="attachment" if download else "inline",
    )
