from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from uploads_api.dependencies import get_listing_service, get_upload_service
from uploads_api.errors import (
    PayloadTooLargeError,
    StorageListError,
    StorageWriteError,
    UploadsAPIError,
)
from uploads_api.schemas import (
    DeleteFileRequest,
    DeleteFileResponse,
    ErrorResponse,
    GetFilesResponse,
    UploadBatchResponse,
)
from uploads_api.services import IncomingFile, ListingService, UploadService
from uploads_api.utils.formatting import format_size

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter()


def wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "")


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def upload_form(request: Request):
    """Upload form."""
    settings = request.app.state.settings
    return templates.TemplateResponse(
        request,
        "index.html",
        {"max_upload_label": format_size(settings.max_upload_bytes)},
    )


@router.post(
    "/upload",
    response_class=HTMLResponse,
    responses={
        status.HTTP_200_OK: {"model": UploadBatchResponse},
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def upload_files(
    request: Request,
    file: Optional[List[UploadFile]] = File(None, description="One or more files to store"),
    upload_service: UploadService = Depends(get_upload_service),
):
    """
    Store one or more files.

    Every file gets its own outcome. The request only fails as a whole when
    nothing was sent or when no file could be stored.
    """
    # browsers send an unnamed empty part when no file was picked
    uploads = [upload for upload in (file or []) if upload.filename]
    try:
        outcomes = await upload_service.handle_upload(
            [IncomingFile(original_name=upload.filename, stream=upload.file) for upload in uploads]
        )
    finally:
        for upload in uploads:
            await upload.close()

    uploaded = [outcome for outcome in outcomes if outcome.success]
    failed = [outcome for outcome in outcomes if not outcome.success]
    if not uploaded:
        message = "; ".join(failure.error for failure in failed)
        if all(failure.status_code == PayloadTooLargeError.status_code for failure in failed):
            raise PayloadTooLargeError(message)
        raise StorageWriteError(message)

    if wants_json(request):
        batch = UploadBatchResponse(
            results=outcomes,
            uploaded_count=len(uploaded),
            failed_count=len(failed),
        )
        return JSONResponse(content=batch.model_dump(mode="json"))

    return templates.TemplateResponse(
        request,
        "upload_result.html",
        {"results": outcomes, "uploaded_count": len(uploaded), "failed_count": len(failed)},
    )


@router.get(
    "/files",
    response_class=HTMLResponse,
    responses={status.HTTP_200_OK: {"model": GetFilesResponse}},
)
async def list_files(
    request: Request,
    listing_service: ListingService = Depends(get_listing_service),
):
    """List every stored file with its preview and download URLs."""
    try:
        entries = await listing_service.list_files()
    except StorageListError as e:
        if wants_json(request):
            raise
        return templates.TemplateResponse(
            request,
            "error.html",
            {"message": e.message},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if wants_json(request):
        response = GetFilesResponse(files=entries, total_count=len(entries))
        return JSONResponse(content=response.model_dump(mode="json"))

    return templates.TemplateResponse(request, "files.html", {"files": entries})


@router.post(
    "/delete-file",
    response_model=DeleteFileResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": DeleteFileResponse},
        status.HTTP_404_NOT_FOUND: {"model": DeleteFileResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": DeleteFileResponse},
    },
)
async def delete_file(
    payload: DeleteFileRequest,
    listing_service: ListingService = Depends(get_listing_service),
):
    """Delete one stored file by key."""
    try:
        await listing_service.delete_file(payload.key or "")
    except UploadsAPIError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": e.message},
        )
    return DeleteFileResponse(success=True)
