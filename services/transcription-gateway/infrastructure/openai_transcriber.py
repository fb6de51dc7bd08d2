"""OpenAI Whisper implementation of the TranscriptionProvider interface."""

import openai
from voicescribe_common.logging import setup_logging

from domain.models import TranscriptionResult
from exceptions import (
    AuthError,
    FormatError,
    QuotaError,
    RateLimitError,
    UnknownProviderError,
)

from .interfaces import TranscriptionProvider

logger = setup_logging()

# Whisper detects the container from the upload's file name.
MIME_EXTENSIONS = {
    "audio/wav": "wav",
    "audio/mpeg": "mp3",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mp4": "m4a",
}


class OpenAITranscriber(TranscriptionProvider):
    """Handles audio transcription using the OpenAI Whisper API."""

    name = "openai"

    def __init__(
        self,
        client: openai.OpenAI,
        model: str = "whisper-1",
        language: str = "en",
        temperature: float = 0.2,
    ):
        self._client = client
        self._model = model
        self._language = language
        self._temperature = temperature

    def transcribe(self, audio_data: bytes, mime_type: str) -> TranscriptionResult:
        extension = MIME_EXTENSIONS.get(mime_type, "wav")
        logger.info(
            "Sending audio to OpenAI",
            extra={"size": len(audio_data), "mime_type": mime_type, "model": self._model},
        )

        try:
            transcription = self._client.audio.transcriptions.create(
                file=(f"audio.{extension}", audio_data, mime_type),
                model=self._model,
                language=self._language,
                response_format="verbose_json",
                temperature=self._temperature,
            )
        except openai.AuthenticationError as e:
            raise AuthError(self.name, cause=e) from e
        except openai.PermissionDeniedError as e:
            raise AuthError(self.name, cause=e) from e
        except openai.RateLimitError as e:
            if e.code == "insufficient_quota":
                raise QuotaError(self.name, cause=e) from e
            raise RateLimitError(self.name, cause=e) from e
        except openai.BadRequestError as e:
            raise FormatError(self.name, cause=e) from e
        except openai.NotFoundError as e:
            raise UnknownProviderError(
                self.name, "Whisper model not available. Please try again later.", cause=e
            ) from e
        except openai.OpenAIError as e:
            logger.exception("OpenAI transcription failed")
            raise UnknownProviderError(
                self.name, "Transcription failed. Please try again later.", cause=e
            ) from e

        duration = getattr(transcription, "duration", None)
        logger.info("OpenAI transcription completed", extra={"duration": duration})

        return TranscriptionResult(
            transcript=transcription.text or "",
            duration=duration,
        )
