"""Response models for the transcription gateway API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain import StoredRecord


class CamelModel(BaseModel):
    """Serializes field names in camelCase for the browser client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredRecordResponse(CamelModel):
    """Archived record as returned right after upload."""

    id: int
    transcription: str
    audio_url: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: StoredRecord) -> "StoredRecordResponse":
        return cls(
            id=record.id,
            transcription=record.transcription,
            audio_url=record.audio_url,
            created_at=record.created_at,
        )


class HistoryItem(StoredRecordResponse):
    """One entry of a user's transcription history."""

    filename: str

    @classmethod
    def from_record(cls, record: StoredRecord) -> "HistoryItem":
        return cls(
            id=record.id,
            transcription=record.transcription,
            audio_url=record.audio_url,
            created_at=record.created_at,
            filename=record.filename,
        )


class UploadData(BaseModel):
    transcription: str
    duration: float | None = None
    filename: str
    stored: StoredRecordResponse | None = None


class UploadResponse(BaseModel):
    """Response returned after a successful transcription."""

    success: bool = True
    data: UploadData


class HistoryResponse(BaseModel):
    """Response for the history listing."""

    success: bool = True
    data: list[HistoryItem] = Field(default_factory=list)
    message: str | None = None


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: datetime
    provider: str
    deepgram_configured: bool
    openai_configured: bool
    storage_configured: bool


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    success: bool = False
    error: str
