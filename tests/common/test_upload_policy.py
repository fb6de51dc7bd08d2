import pytest

from voicescribe_common.exceptions import UploadValidationError
from voicescribe_common.upload_policy import (
    MAX_UPLOAD_BYTES,
    PICKER_EXTENSIONS,
    mime_type_from_filename,
    normalize_mime_type,
    validate_audio,
)


@pytest.mark.parametrize(
    "content_type",
    ["audio/wav", "audio/mp3", "audio/mpeg", "audio/webm", "audio/ogg", "audio/webm;codecs=opus"],
)
def test_accepts_whitelisted_types(content_type):
    validate_audio(content_type, 1024)


@pytest.mark.parametrize(
    "content_type",
    ["video/mp4", "text/plain", "application/octet-stream", "audio/flac", "", None],
)
def test_rejects_other_types(content_type):
    with pytest.raises(UploadValidationError) as exc:
        validate_audio(content_type, 1024)

    assert exc.value.status_code == 415
    assert "WAV, MP3, WebM, or OGG" in exc.value.message


def test_size_ceiling_is_inclusive():
    validate_audio("audio/wav", MAX_UPLOAD_BYTES)

    with pytest.raises(UploadValidationError) as exc:
        validate_audio("audio/wav", MAX_UPLOAD_BYTES + 1)

    assert exc.value.status_code == 413
    assert "25MB" in exc.value.message


def test_empty_payload_is_treated_as_missing():
    with pytest.raises(UploadValidationError) as exc:
        validate_audio("audio/wav", 0)

    assert exc.value.status_code == 400
    assert exc.value.message == "No audio file provided"


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("a.mp3", "audio/mpeg"),
        ("a.WAV", "audio/wav"),
        ("a.webm", "audio/webm"),
        ("a.ogg", "audio/ogg"),
        ("a.m4a", "audio/mp4"),
        ("a.flac", "audio/wav"),
        ("noext", "audio/wav"),
    ],
)
def test_extension_table(filename, expected):
    assert mime_type_from_filename(filename) == expected


def test_normalize_mime_type():
    assert normalize_mime_type(" Audio/WebM; codecs=opus") == "audio/webm"
    assert normalize_mime_type(None) == ""


def test_picker_extensions_pass_validation():
    assert set(PICKER_EXTENSIONS) == {"wav", "mp3", "webm", "ogg"}
    for extension in PICKER_EXTENSIONS:
        validate_audio(mime_type_from_filename(f"clip.{extension}"), 1024)
