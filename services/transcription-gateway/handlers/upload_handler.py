"""Handler for the upload, transcribe and archive pipeline."""

from typing import BinaryIO

from voicescribe_common.exceptions import UploadValidationError
from voicescribe_common.logging import setup_logging
from voicescribe_common.upload_policy import validate_audio

from domain import UploadOutcome
from exceptions import ProviderError
from infrastructure import LocalUploadStore
from infrastructure.interfaces import HistoryStore

from .transcription_gateway import TranscriptionGateway

logger = setup_logging()


class UploadHandler:
    """Orchestrates one upload request end to end."""

    def __init__(
        self,
        uploads: LocalUploadStore,
        gateway: TranscriptionGateway,
        history: HistoryStore,
    ):
        self._uploads = uploads
        self._gateway = gateway
        self._history = history

    def process(
        self,
        data: BinaryIO,
        original_filename: str,
        content_type: str | None,
        user_id: str = "anonymous",
        declared_size: int | None = None,
    ) -> UploadOutcome:
        """
        Validates, transcribes and optionally archives one upload.

        Args:
            data: The uploaded file stream.
            original_filename: File name sent by the client.
            content_type: Declared MIME type.
            user_id: Owner of the resulting record.
            declared_size: Size reported by the multipart parser, if known.

        Returns:
            The transcript, duration, stored file name and archived record.

        Raises:
            UploadValidationError: If the upload violates the upload policy.
            ProviderError: If transcription fails or yields a blank transcript.
        """
        if declared_size is not None:
            validate_audio(content_type, declared_size)

        uploaded = self._uploads.save(data, original_filename, content_type or "")

        try:
            validate_audio(uploaded.content_type, uploaded.size)
            audio_data = uploaded.path.read_bytes()
            result = self._gateway.transcribe(
                audio_data, uploaded.content_type, uploaded.filename
            )
        except (UploadValidationError, ProviderError):
            self._uploads.discard(uploaded.filename)
            raise

        stored = None
        if self._history.is_configured:
            try:
                stored = self._history.archive(
                    uploaded.filename, result.transcript, user_id or "anonymous"
                )
            except Exception:
                logger.exception(
                    "Failed to archive transcription, continuing without history",
                    extra={"file_name": uploaded.filename, "user_id": user_id},
                )

        return UploadOutcome(
            transcription=result.transcript,
            duration=result.duration,
            filename=uploaded.filename,
            stored=stored,
        )
