"""Infrastructure interface exports."""

from .history_store import HistoryStore
from .transcription_provider import TranscriptionProvider

__all__ = ["HistoryStore", "TranscriptionProvider"]
