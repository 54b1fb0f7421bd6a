# resolve360/__init__.py
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import settings
from .routes import routers
from .utils.errors import (
    ImageValidationError,
    InvalidTransitionError,
    LifecyclePermissionError,
    StoreError,
    StoreErrorKind
)
from .utils.logging_config import setup_logging

STORE_ERROR_STATUS = {
    StoreErrorKind.VALIDATION: 422,
    StoreErrorKind.TRANSIENT: 503,
    StoreErrorKind.NOT_FOUND: 404,
    StoreErrorKind.FATAL: 500,
}

async def store_error_handler(request: Request, exc: StoreError):
    operation = exc.operation or "complete request"
    headers = {"Retry-After": "5"} if exc.is_transient else None
    return JSONResponse(
        status_code=STORE_ERROR_STATUS[exc.kind],
        content={"detail": f"Failed to {operation}: {exc.message}", "kind": exc.kind.value},
        headers=headers,
    )

async def permission_error_handler(request: Request, exc: LifecyclePermissionError):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})

async def transition_error_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

async def image_error_handler(request: Request, exc: ImageValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

def create_app() -> FastAPI:
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(
        title="Resolve360 API",
        description="Maintenance issue reporting and routing for residential communities",
        version="1.0.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in routers:
        app.include_router(router)

    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(LifecyclePermissionError, permission_error_handler)
    app.add_exception_handler(InvalidTransitionError, transition_error_handler)
    app.add_exception_handler(ImageValidationError, image_error_handler)

    # Photos kept locally when the image host upload fails
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    @app.get("/")
    def health_check():
        return {"status": "healthy", "version": app.version}

    return app
