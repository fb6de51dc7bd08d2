import io
import math
import struct
import wave

import pytest
from voicescribe_common.exceptions import UploadValidationError

from audio_capture import (
    CapturedAudio,
    Recorder,
    RecorderState,
    RecorderStateError,
    peak_level_db,
)
from presentation import (
    INTERRUPTED_MESSAGE,
    ResultView,
    ViewState,
    download_filename,
    format_duration,
    share_text,
)


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class FakeUploadedFile(io.BytesIO):
    def __init__(self, data, name, type_):
        super().__init__(data)
        self.name = name
        self.type = type_


# --- Captured audio ---


def test_from_upload_normalizes_type(wav_bytes):
    clip = CapturedAudio.from_upload(FakeUploadedFile(wav_bytes, "note.wav", "audio/WAV"))

    assert clip.filename == "note.wav"
    assert clip.content_type == "audio/wav"
    assert clip.size == len(wav_bytes)
    clip.validate()


def test_from_recording_names_clip():
    assert CapturedAudio.from_recording(b"x", "audio/webm;codecs=opus").filename == "recording.webm"
    assert CapturedAudio.from_recording(b"x").filename == "recording.wav"


def test_oversize_clip_fails_locally():
    clip = CapturedAudio(data=b"\0" * (25 * 1024 * 1024 + 1), filename="big.wav", content_type="audio/wav")

    with pytest.raises(UploadValidationError, match="25MB"):
        clip.validate()


# --- Recorder ---


def test_recorder_transitions(wav_bytes):
    clock = FakeClock()
    recorder = Recorder(clock=clock)
    assert recorder.state == RecorderState.IDLE

    recorder.start()
    clock.now += 4.5
    assert recorder.state == RecorderState.RECORDING
    assert recorder.elapsed_seconds == pytest.approx(4.5)

    clip = CapturedAudio.from_recording(wav_bytes)
    recorder.stop(clip)
    clock.now += 10
    assert recorder.state == RecorderState.STOPPED
    assert recorder.clip == clip
    assert recorder.elapsed_seconds == pytest.approx(4.5)

    recorder.start()
    assert recorder.clip is None

    recorder.reset()
    assert recorder.state == RecorderState.IDLE
    assert recorder.elapsed_seconds == 0.0


def test_recorder_rejects_invalid_transitions(wav_bytes):
    recorder = Recorder()

    with pytest.raises(RecorderStateError):
        recorder.stop(CapturedAudio.from_recording(wav_bytes))

    recorder.start()
    with pytest.raises(RecorderStateError, match="Cannot start while recording"):
        recorder.start()


def test_peak_level(wav_bytes):
    assert peak_level_db(wav_bytes) == pytest.approx(20 * math.log10(16384 / 32768))


def test_peak_level_of_silence_and_garbage():
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(8000)
        wav.writeframes(struct.pack("<3h", 0, 0, 0))

    assert peak_level_db(buffer.getvalue()) == float("-inf")
    assert peak_level_db(b"not a wav") is None


# --- Result view ---


def test_result_view_states_are_exclusive():
    view = ResultView()
    assert view.state == ViewState.IDLE

    loading = view.loading()
    assert loading.is_busy

    done = loading.succeeded("Hello world.", 2.0)
    assert done.state == ViewState.SUCCESS
    assert done.transcript == "Hello world."
    assert done.error == ""

    failed = done.loading().failed("Network error")
    assert failed.state == ViewState.ERROR
    assert failed.transcript == ""
    assert failed.error == "Network error"


def test_failed_view_always_has_a_message():
    assert ResultView().failed("").error == "Transcription failed"


def test_interrupted_request_does_not_leave_view_loading():
    stuck = ResultView().loading()

    recovered = stuck.settled()

    assert not recovered.is_busy
    assert recovered.state == ViewState.ERROR
    assert recovered.error == INTERRUPTED_MESSAGE


@pytest.mark.parametrize(
    "view",
    [ResultView(), ResultView().succeeded("Hello world."), ResultView().failed("Network error")],
)
def test_settled_keeps_finished_views(view):
    assert view.settled() == view


def test_result_helpers():
    assert download_filename() == "transcription.txt"
    assert download_filename(0) == "transcription-1.txt"
    assert share_text("hi").endswith("hi")
    assert format_duration(75.4) == "1:15"
    assert format_duration(None) == ""
