"""Domain layer exports."""

from .audio_files import archive_object_name, build_upload_filename, resolve_mime_type
from .models import StoredRecord, TranscriptionResult, UploadedAudio, UploadOutcome

__all__ = [
    "StoredRecord",
    "TranscriptionResult",
    "UploadedAudio",
    "UploadOutcome",
    "archive_object_name",
    "build_upload_filename",
    "resolve_mime_type",
]
