"""Upload policy for audio clips.

The same rules run twice: in the web client before anything is sent, and in
the gateway before a provider is called. Only the gateway check is
authoritative.
"""

import os

from voicescribe_common.exceptions import UploadValidationError

MAX_UPLOAD_BYTES = 25 * 1024 * 1024

ALLOWED_MIME_TYPES = frozenset(
    {"audio/wav", "audio/mp3", "audio/mpeg", "audio/webm", "audio/ogg"}
)

EXTENSION_MIME_TYPES = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "webm": "audio/webm",
    "ogg": "audio/ogg",
    "m4a": "audio/mp4",
}

DEFAULT_MIME_TYPE = "audio/wav"

PICKER_EXTENSIONS = tuple(
    ext for ext, mime in EXTENSION_MIME_TYPES.items() if mime in ALLOWED_MIME_TYPES
)


def normalize_mime_type(content_type: str | None) -> str:
    """Strips parameters (``audio/webm;codecs=opus``) and lowercases."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def validate_audio(content_type: str | None, size: int) -> None:
    """
    Checks an audio payload against the upload policy.

    Args:
        content_type: Declared MIME type of the payload.
        size: Payload size in bytes.

    Raises:
        UploadValidationError: If the payload is empty, too large or of a
            type outside the whitelist.
    """
    if size <= 0:
        raise UploadValidationError("No audio file provided", status_code=400)

    if normalize_mime_type(content_type) not in ALLOWED_MIME_TYPES:
        raise UploadValidationError(
            "Invalid file type. Please use WAV, MP3, WebM, or OGG format.",
            status_code=415,
        )

    if size > MAX_UPLOAD_BYTES:
        raise UploadValidationError(
            "File too large. Maximum size is 25MB.", status_code=413
        )


def mime_type_from_filename(filename: str) -> str:
    """Maps a file extension to the MIME type sent to providers."""
    extension = os.path.splitext(filename)[1].lstrip(".").lower()
    return EXTENSION_MIME_TYPES.get(extension, DEFAULT_MIME_TYPE)
