"""Naming and MIME rules for uploaded audio files."""

import os
import random
import time

from voicescribe_common.upload_policy import (
    EXTENSION_MIME_TYPES,
    mime_type_from_filename,
    normalize_mime_type,
)

SPECIFIC_MIME_TYPES = frozenset(EXTENSION_MIME_TYPES.values())


def build_upload_filename(
    original_filename: str,
    now_ms: int | None = None,
    suffix: int | None = None,
) -> str:
    """
    Derives a collision-free temp file name, keeping the original extension.

    Example: ``clip.mp3`` becomes ``audio-1718000000000-482913355.mp3``.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    if suffix is None:
        suffix = random.randint(0, 10**9)
    extension = os.path.splitext(original_filename or "")[1].lower()
    return f"audio-{now_ms}-{suffix}{extension}"


def resolve_mime_type(declared: str | None, filename: str) -> str:
    """
    Picks the MIME type sent to the provider.

    A specific declared type is trusted. Anything ambiguous (missing,
    ``audio/mp3``, ``application/octet-stream``, wildcards) is re-derived
    from the file extension.
    """
    normalized = normalize_mime_type(declared)
    if normalized in SPECIFIC_MIME_TYPES:
        return normalized
    return mime_type_from_filename(filename)


def archive_object_name(user_id: str, filename: str) -> str:
    """Storage path of an archived clip, namespaced by owner."""
    return f"user-{user_id}/{filename}"
