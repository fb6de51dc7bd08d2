"""Deepgram implementation of the TranscriptionProvider interface."""

from typing import Callable

import requests
from voicescribe_common.logging import setup_logging

from domain.models import TranscriptionResult
from exceptions import (
    AuthError,
    FormatError,
    ProviderError,
    QuotaError,
    RateLimitError,
    UnknownProviderError,
)

from .interfaces import TranscriptionProvider

logger = setup_logging()

DEEPGRAM_LISTEN_URL = "https://api.deepgram.com/v1/listen"


class DeepgramTranscriber(TranscriptionProvider):
    """Transcribes prerecorded audio through Deepgram's listen endpoint."""

    name = "deepgram"

    def __init__(
        self,
        session_factory: Callable[[], requests.Session],
        api_key: str,
        model: str = "nova-2",
        language: str = "en",
        timeout: float = 120.0,
        url: str = DEEPGRAM_LISTEN_URL,
    ):
        self._session_factory = session_factory
        self._api_key = api_key
        self._model = model
        self._language = language
        self._timeout = timeout
        self._url = url

    def transcribe(self, audio_data: bytes, mime_type: str) -> TranscriptionResult:
        logger.info(
            "Sending audio to Deepgram",
            extra={"size": len(audio_data), "mime_type": mime_type, "model": self._model},
        )

        session = self._session_factory()
        try:
            response = session.post(
                self._url,
                params={
                    "model": self._model,
                    "language": self._language,
                    "smart_format": "true",
                    "punctuate": "true",
                },
                headers={
                    "Authorization": f"Token {self._api_key}",
                    "Content-Type": mime_type,
                },
                data=audio_data,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.exception("Deepgram request failed")
            raise UnknownProviderError(
                self.name, "Transcription failed: could not reach Deepgram", cause=e
            ) from e
        finally:
            session.close()

        if not response.ok:
            raise self._map_error(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise UnknownProviderError(
                self.name, "No result received from Deepgram API", cause=e
            ) from e

        return self._parse(payload)

    def _parse(self, payload: dict) -> TranscriptionResult:
        """Reads the first alternative of the first channel."""
        try:
            alternative = payload["results"]["channels"][0]["alternatives"][0]
        except (KeyError, IndexError, TypeError) as e:
            logger.error("Invalid Deepgram response structure")
            raise UnknownProviderError(
                self.name, "Invalid response structure from Deepgram", cause=e
            ) from e

        duration = (payload.get("metadata") or {}).get("duration")
        confidence = alternative.get("confidence")

        logger.info(
            "Deepgram transcription completed",
            extra={"confidence": confidence, "duration": duration},
        )

        return TranscriptionResult(
            transcript=alternative.get("transcript") or "",
            confidence=confidence,
            duration=duration,
        )

    def _map_error(self, response: requests.Response) -> ProviderError:
        """Maps an HTTP error from Deepgram onto the provider error taxonomy."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {"err_msg": response.text}
        detail = str(body.get("err_msg") or body.get("message") or "")
        cause = Exception(f"Deepgram {response.status_code}: {body}")

        logger.error(
            "Deepgram API error",
            extra={"status_code": response.status_code, "detail": detail},
        )

        if response.status_code in (401, 403):
            return AuthError(self.name, cause=cause)
        if response.status_code == 402:
            return QuotaError(self.name, cause=cause)
        if response.status_code == 400:
            if "corrupt or unsupported data" in detail:
                return FormatError(self.name, cause=cause)
            return FormatError(
                self.name,
                "Bad request to Deepgram API. Please check your audio file format.",
                cause=cause,
            )
        if response.status_code == 429:
            return RateLimitError(self.name, cause=cause)
        return UnknownProviderError(
            self.name,
            f"Transcription failed: Deepgram returned status {response.status_code}",
            cause=cause,
        )
