from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint for monitoring API status.

    Reports the storage backend the process was started with.
    """
    settings = request.app.state.settings
    storage = request.app.state.storage
    return {
        "status": "ok",
        "app_name": settings.app_name,
        "backend_mode": storage.mode.value,
    }
