"""Transcription endpoints."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse
from voicescribe_common.logging import setup_logging

from dependencies import Services, get_history_store, get_services, get_upload_handler
from handlers import UploadHandler
from infrastructure.interfaces import HistoryStore
from response_models import (
    ErrorResponse,
    HealthResponse,
    HistoryItem,
    HistoryResponse,
    StoredRecordResponse,
    UploadData,
    UploadResponse,
)

logger = setup_logging()

router = APIRouter(prefix="/api/transcribe", tags=["transcribe"])

UploadHandlerDep = Annotated[UploadHandler, Depends(get_upload_handler)]
HistoryDep = Annotated[HistoryStore, Depends(get_history_store)]
ServicesDep = Annotated[Services, Depends(get_services)]

DEFAULT_HISTORY_LIMIT = 10
MAX_HISTORY_LIMIT = 100


def parse_limit(raw: str | None) -> int:
    """Reads the history limit, falling back to the default when unusable."""
    try:
        limit = int(raw) if raw is not None else DEFAULT_HISTORY_LIMIT
    except ValueError:
        return DEFAULT_HISTORY_LIMIT
    if limit <= 0:
        return DEFAULT_HISTORY_LIMIT
    return min(limit, MAX_HISTORY_LIMIT)


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def upload_audio(
    handler: UploadHandlerDep,
    audio: UploadFile | None = File(None),
    user_id: str = Form("anonymous", alias="userId"),
):
    """
    Transcribes an uploaded audio clip.

    Archives the clip and transcript when history storage is configured;
    an archive failure still returns the transcript with ``stored: null``.
    """
    if audio is None or not audio.filename:
        logger.info("Upload rejected, no file received")
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="No audio file provided").model_dump(),
        )

    logger.info(
        "Received upload request",
        extra={
            "file_name": audio.filename,
            "content_type": audio.content_type,
            "size": audio.size,
            "user_id": user_id,
        },
    )

    outcome = handler.process(
        data=audio.file,
        original_filename=audio.filename,
        content_type=audio.content_type,
        user_id=user_id or "anonymous",
        declared_size=audio.size,
    )

    stored = StoredRecordResponse.from_record(outcome.stored) if outcome.stored else None
    return UploadResponse(
        data=UploadData(
            transcription=outcome.transcription,
            duration=outcome.duration,
            filename=outcome.filename,
            stored=stored,
        )
    )


@router.get(
    "/history",
    response_model=HistoryResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
def get_history(
    history: HistoryDep,
    user_id: str = Query("anonymous", alias="userId"),
    limit: str | None = Query(None),
):
    """Returns a user's transcriptions, newest first."""
    if not history.is_configured:
        return HistoryResponse(
            data=[], message="History feature requires storage configuration"
        )

    records = history.list(user_id or "anonymous", parse_limit(limit))
    return HistoryResponse(data=[HistoryItem.from_record(r) for r in records])


@router.get("/health", response_model=HealthResponse)
def health(services: ServicesDep):
    """Liveness probe reporting which provider and storage are wired in."""
    provider = services.gateway.provider_name
    return HealthResponse(
        message="Transcription service is healthy",
        timestamp=datetime.now(timezone.utc),
        provider=provider,
        deepgram_configured=provider == "deepgram",
        openai_configured=provider == "openai",
        storage_configured=services.history.is_configured,
    )
