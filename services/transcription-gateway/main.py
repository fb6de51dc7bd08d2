"""FastAPI application entry point."""

import os
import sys
from contextlib import asynccontextmanager

import uvicorn
from ddtrace import patch_all
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from voicescribe_common import UploadValidationError, setup_logging

from config import AppConfig, load_config
from dependencies import build_services
from exceptions import ConfigurationError, ProviderError, StorageError
from infrastructure.interfaces import HistoryStore, TranscriptionProvider
from response_models import ErrorResponse
from routes import transcribe_router

patch_all()

logger = setup_logging()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump()
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        app.state.services.history.prepare()
    except Exception:
        logger.exception("History store unavailable at startup, archiving may fail")
    logger.info("Transcription gateway started")
    yield


def register_exception_handlers(app: FastAPI, config: AppConfig) -> None:
    """Maps every failure to a ``{success: false, error}`` body."""

    @app.exception_handler(UploadValidationError)
    async def upload_validation_handler(request: Request, exc: UploadValidationError):
        logger.info(
            "Upload rejected",
            extra={"reason": exc.message, "status_code": exc.status_code},
        )
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("Malformed request", extra={"errors": str(exc.errors())})
        return _error(400, "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(ProviderError)
    async def provider_error_handler(request: Request, exc: ProviderError):
        logger.error(
            "Transcription provider failed",
            extra={
                "provider": exc.provider,
                "error_type": type(exc).__name__,
                "cause": str(exc.cause) if exc.cause else None,
            },
        )
        return _error(500, exc.message)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("History store failed", extra={"error": str(exc)})
        return _error(500, str(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Server error", extra={"path": request.url.path})
        message = str(exc) if config.is_development and str(exc) else "Server error"
        return _error(500, message)


def create_app(
    config: AppConfig | None = None,
    provider: TranscriptionProvider | None = None,
    history: HistoryStore | None = None,
) -> FastAPI:
    """
    Builds the gateway application.

    Raises:
        ConfigurationError: If no transcription provider is configured.
    """
    config = config or load_config()

    app = FastAPI(title="Transcription Gateway", lifespan=lifespan)
    app.state.services = build_services(config, provider=provider, history=history)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app, config)
    app.include_router(transcribe_router)
    return app


def main():
    """Starts the gateway, refusing to run without provider credentials."""
    try:
        app = create_app()
    except ConfigurationError as e:
        logger.error("Refusing to start", extra={"reason": str(e)})
        sys.exit(1)

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))


if __name__ == "__main__":
    main()
