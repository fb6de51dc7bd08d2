"""HTTP client for the transcription gateway."""

from datetime import datetime

import requests
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from voicescribe_common.logging import setup_logging

from audio_capture import CapturedAudio

logger = setup_logging()

NETWORK_ERROR_MESSAGE = "Network error. Please check if the backend server is running."
TIMEOUT_MESSAGE = "The request timed out. Please try again."
STATUS_MESSAGES = {
    413: "File too large. Please select a smaller audio file.",
    415: "Unsupported file format. Please use WAV, MP3, WebM, or OGG.",
}
SERVER_ERROR_MESSAGE = "Server error. Please try again later."


class ApiError(Exception):
    """Raised when a gateway call fails; ``message`` is safe to display."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class HistoryEntry(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    transcription: str
    audio_url: str
    created_at: datetime
    filename: str | None = None


class UploadResult(BaseModel):
    transcription: str
    duration: float | None = None
    filename: str
    stored: HistoryEntry | None = None


class TranscriptionApiClient:
    """Calls the gateway's upload, history and health endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        session: requests.Session | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def upload_audio(self, audio: CapturedAudio, user_id: str = "anonymous") -> UploadResult:
        """
        Validates and uploads a clip, returning the transcript.

        Raises:
            UploadValidationError: If the clip fails the local upload policy.
            ApiError: If the gateway call fails.
        """
        audio.validate()
        logger.info(
            "Uploading audio",
            extra={"file_name": audio.filename, "size": audio.size, "user_id": user_id},
        )

        body = self._request(
            "POST",
            "/transcribe/upload",
            files={"audio": (audio.filename, audio.data, audio.content_type)},
            data={"userId": user_id},
        )
        if not body.get("success") or not body.get("data"):
            raise ApiError(body.get("error") or "Failed to upload and transcribe audio")

        try:
            return UploadResult.model_validate(body["data"])
        except ValidationError as e:
            raise ApiError("Unexpected response from the server") from e

    def get_history(self, user_id: str = "anonymous", limit: int = 10) -> list[HistoryEntry]:
        """Fetches history; any failure degrades to an empty list."""
        try:
            body = self._request(
                "GET", "/transcribe/history", params={"userId": user_id, "limit": limit}
            )
            return [HistoryEntry.model_validate(item) for item in body.get("data") or []]
        except (ApiError, ValidationError):
            logger.warning("History fetch failed", extra={"user_id": user_id})
            return []

    def check_health(self) -> bool:
        """Returns True when the gateway answers its health probe."""
        try:
            return bool(self._request("GET", "/transcribe/health").get("success"))
        except ApiError:
            return False

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.Timeout as e:
            logger.warning("Gateway request timed out", extra={"url": url})
            raise ApiError(TIMEOUT_MESSAGE) from e
        except requests.RequestException as e:
            logger.warning("Gateway unreachable", extra={"url": url})
            raise ApiError(NETWORK_ERROR_MESSAGE) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.ok:
            return body

        logger.warning(
            "Gateway returned an error",
            extra={"url": url, "status_code": response.status_code},
        )
        raise ApiError(self._error_message(response.status_code, body), response.status_code)

    @staticmethod
    def _error_message(status_code: int, body: dict) -> str:
        if status_code in STATUS_MESSAGES:
            return STATUS_MESSAGES[status_code]
        server_message = body.get("error")
        if server_message and server_message != "Server error":
            return server_message
        if status_code >= 500:
            return SERVER_ERROR_MESSAGE
        return f"Request failed with status {status_code}"
