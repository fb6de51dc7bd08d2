"""Abstract interface for transcription providers."""

from abc import ABC, abstractmethod

from domain.models import TranscriptionResult


class TranscriptionProvider(ABC):
    """Abstract base class for speech-to-text vendors."""

    name: str = "unknown"

    @abstractmethod
    def transcribe(self, audio_data: bytes, mime_type: str) -> TranscriptionResult:
        """
        Transcribes a whole audio clip in one request.

        Args:
            audio_data: Raw audio file bytes.
            mime_type: MIME type of the audio payload.

        Returns:
            The transcript with optional confidence and duration.

        Raises:
            ProviderError: One of AuthError, QuotaError, FormatError,
                RateLimitError or UnknownProviderError.
        """
        pass
