"""Single entry point to the configured transcription provider."""

from voicescribe_common.logging import setup_logging

from domain import TranscriptionResult, resolve_mime_type
from exceptions import EmptyTranscriptionError
from infrastructure.interfaces import TranscriptionProvider

logger = setup_logging()


class TranscriptionGateway:
    """Calls one provider per request and enforces a non-blank transcript."""

    def __init__(self, provider: TranscriptionProvider):
        self._provider = provider

    @property
    def provider_name(self) -> str:
        return self._provider.name

    def transcribe(
        self,
        audio_data: bytes,
        declared_mime_type: str | None,
        filename: str = "",
    ) -> TranscriptionResult:
        """
        Transcribes one audio clip.

        Args:
            audio_data: Raw audio bytes that already passed the upload policy.
            declared_mime_type: MIME type declared by the client.
            filename: Stored file name, used when the declared type is ambiguous.

        Returns:
            The provider's result, transcript untouched.

        Raises:
            ProviderError: If the provider fails or returns a blank transcript.
        """
        mime_type = resolve_mime_type(declared_mime_type, filename)
        logger.info(
            "Starting transcription",
            extra={
                "provider": self._provider.name,
                "file_name": filename,
                "mime_type": mime_type,
                "size": len(audio_data),
            },
        )

        result = self._provider.transcribe(audio_data, mime_type)

        if not result.transcript.strip():
            logger.warning(
                "Provider returned a blank transcript",
                extra={"provider": self._provider.name, "file_name": filename},
            )
            raise EmptyTranscriptionError(self._provider.name)

        logger.info(
            "Transcription completed",
            extra={
                "provider": self._provider.name,
                "file_name": filename,
                "confidence": result.confidence,
                "duration": result.duration,
            },
        )
        return result
