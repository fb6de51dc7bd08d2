"""Domain models for the transcription gateway."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel


class UploadedAudio(BaseModel, frozen=True):
    """One client-submitted clip, written to the upload directory."""

    filename: str
    original_filename: str
    content_type: str
    size: int
    path: Path


class TranscriptionResult(BaseModel, frozen=True):
    """Output of a single provider call."""

    transcript: str
    confidence: float | None = None
    duration: float | None = None


class StoredRecord(BaseModel, frozen=True):
    """A persisted transcription record."""

    id: int
    filename: str
    transcription: str
    user_id: str
    audio_url: str
    created_at: datetime


class UploadOutcome(BaseModel, frozen=True):
    """Result of the upload pipeline returned to the route."""

    transcription: str
    duration: float | None
    filename: str
    stored: StoredRecord | None = None
