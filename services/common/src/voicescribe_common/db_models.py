from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TranscriptionRecord(SQLModel, table=True):
    __tablename__ = "transcriptions"

    id: Optional[int] = Field(default=None, primary_key=True)
    filename: str = Field(max_length=255)
    transcription: str
    user_id: str = Field(default="anonymous", max_length=255, index=True)
    audio_url: str
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
