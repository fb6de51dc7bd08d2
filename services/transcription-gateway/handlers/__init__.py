"""Handler layer exports."""

from .history_archiver import DisabledHistoryStore, HistoryArchiver
from .transcription_gateway import TranscriptionGateway
from .upload_handler import UploadHandler

__all__ = [
    "DisabledHistoryStore",
    "HistoryArchiver",
    "TranscriptionGateway",
    "UploadHandler",
]
