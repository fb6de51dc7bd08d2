import os

os.environ.setdefault("DD_TRACE_ENABLED", "false")
os.environ.setdefault("DD_INSTRUMENTATION_TELEMETRY_ENABLED", "false")

import io
from typing import BinaryIO

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from voicescribe_common.db_models import TranscriptionRecord  # noqa: F401
from voicescribe_common.infrastructure import StorageClient


class FakeProvider:
    """Provider double that records calls and returns a canned result."""

    name = "deepgram"

    def __init__(self, transcript="Hello world.", confidence=0.98, duration=10.0, error=None):
        self.transcript = transcript
        self.confidence = confidence
        self.duration = duration
        self.error = error
        self.calls = []

    def transcribe(self, audio_data: bytes, mime_type: str):
        from domain import TranscriptionResult

        self.calls.append((audio_data, mime_type))
        if self.error is not None:
            raise self.error
        return TranscriptionResult(
            transcript=self.transcript,
            confidence=self.confidence,
            duration=self.duration,
        )


class InMemoryStorage(StorageClient):
    """Object storage double keeping uploads in a dict."""

    def __init__(self, fail_upload: bool = False):
        self.objects: dict[tuple[str, str], bytes] = {}
        self.content_types: dict[tuple[str, str], str] = {}
        self.buckets: set[str] = set()
        self.fail_upload = fail_upload

    def upload(self, bucket_name: str, object_name: str, data: BinaryIO, size: int, content_type: str) -> None:
        from voicescribe_common import StorageUploadError

        if self.fail_upload:
            raise StorageUploadError(object_name, Exception("storage offline"))
        self.objects[(bucket_name, object_name)] = data.read()
        self.content_types[(bucket_name, object_name)] = content_type

    def delete(self, bucket_name: str, object_name: str) -> None:
        self.objects.pop((bucket_name, object_name), None)

    def public_url(self, bucket_name: str, object_name: str) -> str:
        return f"https://storage.test/{bucket_name}/{object_name}"

    def ensure_bucket_exists(self, bucket_name: str) -> None:
        self.buckets.add(bucket_name)


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across sessions of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(db_engine):
    from repositories import TranscriptionRepository

    return TranscriptionRepository(lambda: Session(db_engine), engine=db_engine)


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def uploads(upload_dir):
    from infrastructure import LocalUploadStore

    return LocalUploadStore(upload_dir)


@pytest.fixture
def archiver(storage, repository, uploads):
    from handlers import HistoryArchiver

    return HistoryArchiver(storage, repository, uploads, bucket_name="audio-files")


@pytest.fixture
def app_config(upload_dir):
    from config import AppConfig, ProviderConfig

    return AppConfig(
        provider=ProviderConfig(name="deepgram", api_key="test-key", model="nova-2"),
        upload_dir=upload_dir,
    )


@pytest.fixture
def wav_bytes():
    """A short 16-bit mono WAV clip."""
    import struct
    import wave

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(16000)
        wav.writeframes(struct.pack("<4h", 0, 16384, -16384, 0))
    return buffer.getvalue()
