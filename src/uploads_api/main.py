from textwrap import dedent
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

from uploads_api.adapters.storage import StorageBackend, StorageFactory
from uploads_api.config.settings import BackendMode, Settings
from uploads_api.errors import (
    UploadsAPIError,
    handle_broad_exceptions,
    handle_request_validation_errors,
    handle_uploads_api_errors,
)
from uploads_api.routers.files import router as files_router
from uploads_api.routers.health import router as health_router
from uploads_api.routers.uploads import router as uploads_router

# Set up logging
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, storage: Optional[StorageBackend] = None) -> FastAPI:
    """
    Create a FastAPI application.

    The storage backend is decided here, once, from the settings unless one
    is passed in explicitly.
    """
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Uploads API",
        summary="Upload, list, preview and delete files",
        version="v1",
        description=dedent(
            """\
        Stores uploaded files on local disk, or in an S3 bucket when AWS
        credentials, a bucket name and a region are configured.

        | Endpoint | Notes |
        | --- | --- |
        | `POST /upload` | multipart, repeatable `file` field |
        | `GET /files` | HTML listing, JSON with `Accept: application/json` |
        | `POST /delete-file` | JSON body `{"key": ...}` |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    storage = storage or StorageFactory.create_backend(settings)
    logger.info("Backend mode: %s", storage.mode.value)
    app.state.settings = settings
    app.state.storage = storage

    app.include_router(files_router, tags=["files"])
    app.include_router(health_router, tags=["health"])
    if storage.mode is BackendMode.LOCAL:
        app.include_router(uploads_router, prefix=settings.public_path, tags=["uploads"])

    app.add_exception_handler(
        exc_class_or_status_code=UploadsAPIError,
        handler=handle_uploads_api_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)
