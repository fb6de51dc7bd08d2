"""Captured audio and the microphone recorder state machine."""

import array
import hashlib
import io
import math
import sys
import time
import wave
from enum import Enum

from pydantic import BaseModel, computed_field
from voicescribe_common.upload_policy import normalize_mime_type, validate_audio


class CapturedAudio(BaseModel, frozen=True):
    """A recorded clip or a selected file, held in memory."""

    data: bytes
    filename: str
    content_type: str

    @computed_field
    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def digest(self) -> str:
        return hashlib.sha1(self.data).hexdigest()

    def validate(self) -> None:
        """Runs the upload policy before anything is sent.

        Raises:
            UploadValidationError: If the clip would be rejected by the gateway.
        """
        validate_audio(self.content_type, self.size)

    @classmethod
    def from_upload(cls, uploaded) -> "CapturedAudio":
        """Builds a clip from a Streamlit ``UploadedFile``."""
        return cls(
            data=uploaded.getvalue(),
            filename=uploaded.name or "upload",
            content_type=normalize_mime_type(uploaded.type),
        )

    @classmethod
    def from_recording(cls, data: bytes, content_type: str = "audio/wav") -> "CapturedAudio":
        extension = "webm" if normalize_mime_type(content_type) == "audio/webm" else "wav"
        return cls(
            data=data,
            filename=f"recording.{extension}",
            content_type=normalize_mime_type(content_type),
        )


class RecorderState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"


class RecorderStateError(Exception):
    """Raised on a transition the recorder does not allow."""

    def __init__(self, state: RecorderState, action: str):
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while {state.value}")


class Recorder:
    """
    Tracks one microphone capture.

    Idle -> Recording on ``start``; Recording -> Stopped on ``stop`` with the
    captured clip; any state -> Idle on ``reset``. Starting again from
    Stopped discards the previous clip.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self.state = RecorderState.IDLE
        self.clip: CapturedAudio | None = None
        self._started_at: float | None = None
        self._stopped_at: float | None = None

    def start(self) -> None:
        if self.state == RecorderState.RECORDING:
            raise RecorderStateError(self.state, "start")
        self.clip = None
        self._started_at = self._clock()
        self._stopped_at = None
        self.state = RecorderState.RECORDING

    def stop(self, clip: CapturedAudio) -> CapturedAudio:
        if self.state != RecorderState.RECORDING:
            raise RecorderStateError(self.state, "stop")
        self.clip = clip
        self._stopped_at = self._clock()
        self.state = RecorderState.STOPPED
        return clip

    def reset(self) -> None:
        self.state = RecorderState.IDLE
        self.clip = None
        self._started_at = None
        self._stopped_at = None

    @property
    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        end = self._stopped_at if self._stopped_at is not None else self._clock()
        return max(0.0, end - self._started_at)


def peak_level_db(wav_bytes: bytes) -> float | None:
    """
    Peak level of a 16-bit PCM WAV clip in dBFS.

    Returns None for anything that is not 16-bit PCM WAV, and ``-inf`` for
    pure silence.
    """
    try:
        with wave.open(io.BytesIO(wav_bytes), "rb") as wav:
            if wav.getsampwidth() != 2:
                return None
            frames = wav.readframes(wav.getnframes())
    except (wave.Error, EOFError):
        return None

    samples = array.array("h")
    samples.frombytes(frames[: len(frames) - len(frames) % 2])
    if sys.byteorder == "big":
        samples.byteswap()
    if not samples:
        return None

    peak = max(abs(s) for s in samples)
    if peak == 0:
        return float("-inf")
    return 20 * math.log10(peak / 32768)
