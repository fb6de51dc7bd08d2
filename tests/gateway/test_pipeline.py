import io
from datetime import datetime, timedelta, timezone

import pytest
from voicescribe_common.exceptions import UploadValidationError

from domain import build_upload_filename, resolve_mime_type
from exceptions import (
    ArchiveUploadError,
    AudioFileNotFoundError,
    EmptyTranscriptionError,
    QuotaError,
    RecordPersistenceError,
)
from handlers import DisabledHistoryStore, TranscriptionGateway, UploadHandler


# --- Naming and MIME resolution ---


def test_upload_filename_keeps_extension():
    assert build_upload_filename("Clip.MP3", now_ms=1700000000000, suffix=42) == (
        "audio-1700000000000-42.mp3"
    )
    assert build_upload_filename("", now_ms=1, suffix=2) == "audio-1-2"


def test_upload_filenames_are_unique():
    names = {build_upload_filename("a.wav") for _ in range(50)}
    assert len(names) == 50


@pytest.mark.parametrize(
    "declared, filename, expected",
    [
        ("audio/webm", "audio-1-1.webm", "audio/webm"),
        ("audio/mp3", "audio-1-1.mp3", "audio/mpeg"),
        ("application/octet-stream", "audio-1-1.ogg", "audio/ogg"),
        (None, "audio-1-1.m4a", "audio/mp4"),
        ("audio/*", "audio-1-1", "audio/wav"),
    ],
)
def test_resolve_mime_type(declared, filename, expected):
    assert resolve_mime_type(declared, filename) == expected


# --- Gateway ---


def test_gateway_returns_transcript_untouched(fake_provider):
    fake_provider.transcript = "  Hello, world!  "
    gateway = TranscriptionGateway(fake_provider)

    result = gateway.transcribe(b"abc", "audio/mp3", "audio-1-1.mp3")

    assert result.transcript == "  Hello, world!  "
    assert fake_provider.calls == [(b"abc", "audio/mpeg")]


@pytest.mark.parametrize("blank", ["", "   ", "\n\t"])
def test_gateway_rejects_blank_transcript(fake_provider, blank):
    fake_provider.transcript = blank
    gateway = TranscriptionGateway(fake_provider)

    with pytest.raises(EmptyTranscriptionError, match="silent or unclear"):
        gateway.transcribe(b"abc", "audio/wav", "a.wav")


# --- History archiver ---


def _write_upload(upload_dir, name="audio-1-1.wav", data=b"RIFFdata"):
    path = upload_dir / name
    path.write_bytes(data)
    return name


def test_archive_uploads_inserts_and_cleans_up(archiver, storage, upload_dir):
    name = _write_upload(upload_dir)

    record = archiver.archive(name, "Hello world.", "alice")

    assert record.id is not None
    assert record.user_id == "alice"
    assert record.transcription == "Hello world."
    assert record.audio_url == f"https://storage.test/audio-files/user-alice/{name}"
    assert storage.objects[("audio-files", f"user-alice/{name}")] == b"RIFFdata"
    assert storage.content_types[("audio-files", f"user-alice/{name}")] == "audio/wav"
    assert not (upload_dir / name).exists()


def test_archive_requires_temp_file(archiver):
    with pytest.raises(AudioFileNotFoundError):
        archiver.archive("audio-missing.wav", "text", "alice")


def test_archive_upload_failure_keeps_temp_file(archiver, storage, repository, upload_dir):
    storage.fail_upload = True
    name = _write_upload(upload_dir)

    with pytest.raises(ArchiveUploadError):
        archiver.archive(name, "text", "alice")

    assert (upload_dir / name).exists()
    assert repository.list_for_user("alice") == []


def test_archive_insert_failure_removes_uploaded_object(archiver, storage, repository, upload_dir, monkeypatch):
    name = _write_upload(upload_dir)

    def broken_insert(**kwargs):
        raise RecordPersistenceError(kwargs["filename"], cause=Exception("db down"))

    monkeypatch.setattr(repository, "insert", broken_insert)

    with pytest.raises(RecordPersistenceError):
        archiver.archive(name, "text", "alice")

    assert storage.objects == {}
    assert (upload_dir / name).exists()


def test_prepare_creates_bucket_and_table(archiver, storage):
    archiver.prepare()
    assert "audio-files" in storage.buckets


def test_history_lists_newest_first_for_one_user(repository, archiver):
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    for i in range(5):
        repository.insert(f"a-{i}.wav", f"text {i}", "alice", f"url-{i}", created_at=base + timedelta(minutes=i))
    repository.insert("b.wav", "bob text", "bob", "url-b", created_at=base + timedelta(hours=1))

    records = archiver.list("alice", limit=3)

    assert [r.filename for r in records] == ["a-4.wav", "a-3.wav", "a-2.wav"]
    assert all(r.user_id == "alice" for r in records)
    timestamps = [r.created_at for r in records]
    assert timestamps == sorted(timestamps, reverse=True)


def test_history_of_unknown_user_is_empty(archiver):
    assert archiver.list("nobody") == []


def test_disabled_history_store_is_a_no_op():
    store = DisabledHistoryStore()

    assert store.is_configured is False
    assert store.archive("a.wav", "text", "alice") is None
    assert store.list("alice") == []


# --- Upload handler ---


def test_handler_without_history_keeps_temp_file(uploads, upload_dir, fake_provider):
    handler = UploadHandler(uploads, TranscriptionGateway(fake_provider), DisabledHistoryStore())

    outcome = handler.process(io.BytesIO(b"RIFFdata"), "clip.wav", "audio/wav", "alice")

    assert outcome.transcription == "Hello world."
    assert outcome.duration == 10.0
    assert outcome.stored is None
    assert (upload_dir / outcome.filename).exists()


def test_handler_archives_when_configured(uploads, upload_dir, fake_provider, archiver):
    handler = UploadHandler(uploads, TranscriptionGateway(fake_provider), archiver)

    outcome = handler.process(io.BytesIO(b"RIFFdata"), "clip.wav", "audio/wav", "alice")

    assert outcome.stored is not None
    assert outcome.stored.filename == outcome.filename
    assert not (upload_dir / outcome.filename).exists()


def test_handler_rejects_before_calling_provider(uploads, upload_dir, fake_provider):
    handler = UploadHandler(uploads, TranscriptionGateway(fake_provider), DisabledHistoryStore())

    with pytest.raises(UploadValidationError):
        handler.process(io.BytesIO(b"%PDF"), "doc.pdf", "application/pdf")

    assert fake_provider.calls == []
    assert list(upload_dir.iterdir()) == []


def test_handler_discards_temp_file_on_provider_error(uploads, upload_dir, fake_provider):
    fake_provider.error = QuotaError("deepgram")
    handler = UploadHandler(uploads, TranscriptionGateway(fake_provider), DisabledHistoryStore())

    with pytest.raises(QuotaError):
        handler.process(io.BytesIO(b"RIFFdata"), "clip.wav", "audio/wav")

    assert list(upload_dir.iterdir()) == []
