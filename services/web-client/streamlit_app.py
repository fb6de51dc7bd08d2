"""Streamlit front end: record or pick a clip, transcribe it, browse history.

Run with: streamlit run streamlit_app.py
"""

from urllib.parse import quote

import streamlit as st
from voicescribe_common.exceptions import UploadValidationError
from voicescribe_common.logging import setup_logging
from voicescribe_common.upload_policy import PICKER_EXTENSIONS

from api_client import ApiError, TranscriptionApiClient
from audio_capture import CapturedAudio, Recorder, RecorderState, peak_level_db
from client_config import load_client_config
from presentation import (
    ResultView,
    ViewState,
    download_filename,
    format_duration,
    share_text,
)

logger = setup_logging()

config = load_client_config()

st.set_page_config(page_title="Audio Transcription", page_icon="🎙️")


@st.cache_resource
def get_client() -> TranscriptionApiClient:
    return TranscriptionApiClient(config.gateway_url, timeout=config.request_timeout_seconds)


def init_session() -> None:
    if "view" not in st.session_state:
        st.session_state.view = ResultView()
    # Nothing is in flight when a run starts.
    st.session_state.view = st.session_state.view.settled()
    if "recorder" not in st.session_state:
        st.session_state.recorder = Recorder()
    if "history" not in st.session_state:
        st.session_state.history = []


def refresh_history(client: TranscriptionApiClient, user_id: str) -> None:
    st.session_state.history = client.get_history(user_id, config.history_limit)


def transcribe(client: TranscriptionApiClient, audio: CapturedAudio, user_id: str) -> None:
    """Runs one pipeline invocation and stores the resulting view."""
    st.session_state.view = st.session_state.view.loading()
    try:
        with st.spinner("Transcribing..."):
            result = client.upload_audio(audio, user_id)
        st.session_state.view = st.session_state.view.succeeded(
            result.transcription, result.duration
        )
    except (UploadValidationError, ApiError) as e:
        st.session_state.view = st.session_state.view.failed(e.message)
        return
    finally:
        st.session_state.view = st.session_state.view.settled()

    refresh_history(client, user_id)


def select_audio() -> CapturedAudio | None:
    """Renders the recorder and file picker, returning the chosen clip."""
    recorder: Recorder = st.session_state.recorder
    record_tab, upload_tab = st.tabs(["Record", "Upload"])

    with record_tab:
        recording = st.audio_input("Record a voice message")
        if recording is None:
            if recorder.state != RecorderState.IDLE:
                recorder.reset()
        else:
            clip = CapturedAudio.from_recording(recording.getvalue(), recording.type or "audio/wav")
            if recorder.clip is None or recorder.clip.digest != clip.digest:
                recorder.start()
                recorder.stop(clip)
            level = peak_level_db(clip.data)
            if level is not None and level != float("-inf"):
                st.caption(f"Peak level: {level:.1f} dBFS")

    with upload_tab:
        uploaded = st.file_uploader(
            "Choose an audio file",
            type=list(PICKER_EXTENSIONS),
        )
        if uploaded is not None:
            clip = CapturedAudio.from_upload(uploaded)
            st.audio(clip.data, format=clip.content_type)
            return clip

    return recorder.clip if recorder.state == RecorderState.STOPPED else None


def render_result(view: ResultView) -> None:
    if view.state == ViewState.LOADING:
        st.info("Transcribing...")
    elif view.state == ViewState.ERROR:
        st.error(view.error)
    elif view.state == ViewState.SUCCESS:
        st.subheader("Transcription")
        if view.duration is not None:
            st.caption(f"Duration: {format_duration(view.duration)}")
        st.code(view.transcript, language=None, wrap_lines=True)
        col_download, col_share = st.columns(2)
        with col_download:
            st.download_button(
                "Download",
                data=view.transcript,
                file_name=download_filename(),
                mime="text/plain",
            )
        with col_share:
            st.link_button(
                "Share",
                f"mailto:?subject=Audio%20transcription&body={quote(share_text(view.transcript))}",
            )


def render_history(history) -> None:
    st.subheader("History")
    if not history:
        st.caption("No transcriptions yet.")
        return
    for index, entry in enumerate(history):
        with st.expander(f"{entry.created_at:%Y-%m-%d %H:%M} · {entry.filename or 'recording'}"):
            st.write(entry.transcription)
            st.audio(entry.audio_url)
            st.download_button(
                "Download",
                data=entry.transcription,
                file_name=download_filename(index),
                mime="text/plain",
                key=f"history-download-{entry.id}",
            )


def main() -> None:
    init_session()
    client = get_client()

    st.title("🎙️ Audio Transcription")

    with st.sidebar:
        user_id = st.text_input("User ID", value=config.default_user_id) or config.default_user_id
        if client.check_health():
            st.success("Connected to transcription service")
        else:
            st.error("Backend service unavailable")
        if st.button("Refresh history"):
            refresh_history(client, user_id)
        if "history_user" not in st.session_state or st.session_state.history_user != user_id:
            st.session_state.history_user = user_id
            refresh_history(client, user_id)

    audio = select_audio()
    view: ResultView = st.session_state.view

    if st.button("Transcribe", type="primary", disabled=audio is None or view.is_busy):
        transcribe(client, audio, user_id)

    render_result(st.session_state.view)
    render_history(st.session_state.history)


main()
