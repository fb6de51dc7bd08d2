"""View state for the transcription result panel."""

from enum import Enum

from pydantic import BaseModel

INTERRUPTED_MESSAGE = "Transcription was interrupted. Please try again."


class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


class ResultView(BaseModel, frozen=True):
    """What the result panel shows; exactly one state at a time."""

    state: ViewState = ViewState.IDLE
    transcript: str = ""
    duration: float | None = None
    error: str = ""

    @property
    def is_busy(self) -> bool:
        return self.state == ViewState.LOADING

    def loading(self) -> "ResultView":
        return ResultView(state=ViewState.LOADING)

    def succeeded(self, transcript: str, duration: float | None = None) -> "ResultView":
        return ResultView(state=ViewState.SUCCESS, transcript=transcript, duration=duration)

    def failed(self, message: str) -> "ResultView":
        return ResultView(state=ViewState.ERROR, error=message or "Transcription failed")

    def settled(self) -> "ResultView":
        """Ends a loading view that no request is running behind."""
        if self.state == ViewState.LOADING:
            return self.failed(INTERRUPTED_MESSAGE)
        return self


def download_filename(index: int | None = None) -> str:
    """``transcription.txt`` for the current result, numbered for history."""
    if index is None:
        return "transcription.txt"
    return f"transcription-{index + 1}.txt"


def share_text(transcript: str) -> str:
    return f"Audio transcription:\n\n{transcript}"


def format_duration(seconds: float | None) -> str:
    if seconds is None:
        return ""
    minutes, secs = divmod(int(round(seconds)), 60)
    return f"{minutes}:{secs:02d}"
