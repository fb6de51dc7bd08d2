"""Custom exceptions for the transcription-gateway service."""


class ConfigurationError(Exception):
    """Raised when required configuration is missing at startup."""


class ProviderError(Exception):
    """Base class for failures reported by a transcription provider.

    The message is always a fixed, human-readable sentence; the raw provider
    payload is kept on ``cause`` for logging only.
    """

    default_message = "Transcription failed"

    def __init__(
        self,
        provider: str,
        message: str | None = None,
        cause: Exception | None = None,
    ):
        self.provider = provider
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class AuthError(ProviderError):
    """Raised when provider credentials are missing or rejected."""

    default_message = "Invalid transcription API key. Please check your configuration."


class QuotaError(ProviderError):
    """Raised when the provider account quota or billing is exhausted."""

    default_message = "Transcription API quota exceeded. Please check your billing."


class FormatError(ProviderError):
    """Raised when the provider rejects the audio payload."""

    default_message = (
        "Audio file format not supported or corrupted. Please try a different file."
    )


class RateLimitError(ProviderError):
    """Raised when the provider throttles the request."""

    default_message = "Rate limit exceeded. Please try again in a moment."


class UnknownProviderError(ProviderError):
    """Raised for any provider failure outside the known categories."""


class EmptyTranscriptionError(ProviderError):
    """Raised when the provider returns a blank transcript."""

    default_message = "Empty transcription result - audio may be silent or unclear"


class StorageError(Exception):
    """Base class for failures of the optional history archive."""


class AudioFileNotFoundError(StorageError):
    """Raised when the temporary upload is gone before archiving."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__(f"File not found at: {file_path}")


class ArchiveUploadError(StorageError):
    """Raised when the audio object cannot be uploaded to storage."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to archive audio '{object_name}'")


class RecordPersistenceError(StorageError):
    """Raised when saving a transcription record fails."""

    def __init__(self, filename: str, cause: Exception | None = None):
        self.filename = filename
        self.cause = cause
        super().__init__(f"Failed to persist transcription record for '{filename}'")


class HistoryFetchError(StorageError):
    """Raised when reading transcription history fails."""

    def __init__(self, user_id: str, cause: Exception | None = None):
        self.user_id = user_id
        self.cause = cause
        super().__init__(f"Failed to fetch transcription history for '{user_id}'")
