"""
Test Voice Capture

Tests the chunk recorder, the incremental audio buffer, the whisper-backed
live recognizer (with a fake transcriber) and capability selection.

Dependencies:
- pytest / pytest-asyncio: For testing framework
- interview_assistant.services.voice_capture: The modules being tested
"""

import threading
from types import SimpleNamespace
from typing import List

import pytest

from interview_assistant.constants.interview_constants import (
    VOICE_PERMISSION_DENIED_NOTICE,
    VOICE_UNAVAILABLE_NOTICE,
)
from interview_assistant.errors.exceptions import PermissionDenied
from interview_assistant.services.collaborators.audio_analyzer import WhisperAudioAnalyzer
from interview_assistant.services.transcription.audio_buffer import IncrementalAudioBuffer
from interview_assistant.services.transcription import transcriber as transcriber_module
from interview_assistant.services.transcription.transcriber import TranscriberService, TranscriptionResult
from interview_assistant.services.voice_capture import (
    ChunkAudioRecorder,
    LiveVoiceCapability,
    UnavailableVoiceCapability,
    WhisperSpeechRecognizer,
    select_voice_capability,
)
from interview_assistant.test.session_fakes import fake_openai_client, wait_until


class FakeTranscriber:
    def __init__(self, texts: List[str] = None, error: Exception = None):
        self.texts = list(texts or [])
        self.error = error
        self.calls: List[bytes] = []

    def transcribe_bytes(self, audio_bytes: bytes, word_timestamps: bool = False, initial_prompt: str = None):
        self.calls.append(audio_bytes)
        if self.error is not None:
            raise self.error
        text = self.texts.pop(0) if self.texts else ""
        return TranscriptionResult(text=text, segments=[text])


class TestChunkAudioRecorder:
    """Test recording and permission handling."""

    def test_records_fed_chunks(self):
        recorder = ChunkAudioRecorder()
        recorder.start(True)
        recorder.feed(b"ab")
        recorder.feed(b"")
        recorder.feed(b"cd")

        assert recorder.stop() == b"abcd"
        assert not recorder.recording

    def test_denied_permission_raises(self):
        recorder = ChunkAudioRecorder()
        with pytest.raises(PermissionDenied) as exc_info:
            recorder.start(False)
        assert exc_info.value.detail == VOICE_PERMISSION_DENIED_NOTICE

    def test_discard_drops_audio(self):
        recorder = ChunkAudioRecorder()
        recorder.start(True)
        recorder.feed(b"abc")
        recorder.discard()
        recorder.feed(b"def")

        assert recorder.stop() == b""


class TestIncrementalAudioBuffer:
    """Test interim transcription pacing."""

    def test_threshold_counts_new_chunks(self):
        buffer = IncrementalAudioBuffer(incremental_size_threshold=3)
        for _ in range(2):
            buffer.add_chunk(b"x")
        assert not buffer.should_do_incremental_transcription()

        buffer.add_chunk(b"x")
        assert buffer.should_do_incremental_transcription()
        buffer.mark_incremental_transcription_done()
        assert not buffer.should_do_incremental_transcription()

    def test_header_is_prepended_for_restarted_stream(self):
        buffer = IncrementalAudioBuffer(header=b"HDR")
        buffer.add_chunk(b"data")
        assert buffer.get_audio_data() == b"HDRdata"

    def test_empty_buffer_has_no_audio(self):
        buffer = IncrementalAudioBuffer()
        assert buffer.get_audio_data() is None
        assert not buffer.has_chunks()


class TestWhisperSpeechRecognizer:
    """Test interim results, the final pass and unexpected ends."""

    async def test_interim_result_after_threshold(self):
        transcriber = FakeTranscriber(texts=["hello there"])
        recognizer = WhisperSpeechRecognizer(transcriber, incremental_size_threshold=2)
        results = []
        recognizer.start(lambda text, is_final: results.append((text, is_final)), lambda: None)

        recognizer.feed(b"HDR")
        recognizer.feed(b"a")
        await wait_until(lambda: results)

        assert results == [("hello there", False)]
        assert transcriber.calls == [b"HDRa"]

    async def test_stop_transcribes_whole_stream(self):
        transcriber = FakeTranscriber(texts=["final answer"])
        recognizer = WhisperSpeechRecognizer(transcriber, incremental_size_threshold=10)
        recognizer.start(lambda text, is_final: None, lambda: None)
        recognizer.feed(b"HDR")
        recognizer.feed(b"a")

        assert await recognizer.stop() == "final answer"
        assert transcriber.calls == [b"HDRa"]

    async def test_stop_without_audio_returns_empty_text(self):
        recognizer = WhisperSpeechRecognizer(FakeTranscriber(), incremental_size_threshold=10)
        recognizer.start(lambda text, is_final: None, lambda: None)
        assert await recognizer.stop() == ""

    async def test_failed_interim_pass_ends_stream(self):
        ended = []
        recognizer = WhisperSpeechRecognizer(FakeTranscriber(error=RuntimeError("decode error")), incremental_size_threshold=1)
        recognizer.start(lambda text, is_final: None, lambda: ended.append(True))
        recognizer.feed(b"HDR")
        await wait_until(lambda: ended)

        # The stream can be restarted and keeps the recording header
        recognizer.transcriber = FakeTranscriber(texts=["after restart"])
        recognizer.incremental_size_threshold = 10
        recognizer.start(lambda text, is_final: None, lambda: None)
        recognizer.feed(b"more")
        assert await recognizer.stop() == "after restart"
        assert recognizer.transcriber.calls[-1] == b"HDRmore"

    async def test_cancel_drops_stream(self):
        transcriber = FakeTranscriber(texts=["ignored"])
        recognizer = WhisperSpeechRecognizer(transcriber, incremental_size_threshold=10)
        recognizer.start(lambda text, is_final: None, lambda: None)
        recognizer.feed(b"HDR")
        recognizer.cancel()

        assert await recognizer.stop() == ""
        assert transcriber.calls == []


class TestVoiceCapability:
    """Test capability selection and opening."""

    def test_unsupported_client_gets_unavailable_capability(self):
        capability = select_voice_capability(False)
        assert not capability.available
        with pytest.raises(PermissionDenied) as exc_info:
            capability.open(True)
        assert exc_info.value.detail == VOICE_UNAVAILABLE_NOTICE

    def test_supported_client_gets_live_capability(self):
        assert isinstance(select_voice_capability(True), LiveVoiceCapability)

    def test_open_starts_recorder(self):
        capability = LiveVoiceCapability(lambda: WhisperSpeechRecognizer(FakeTranscriber()), ChunkAudioRecorder)
        producers = capability.open(True)
        assert producers.recorder.recording

    def test_open_without_permission_raises(self):
        capability = LiveVoiceCapability(lambda: WhisperSpeechRecognizer(FakeTranscriber()), ChunkAudioRecorder)
        with pytest.raises(PermissionDenied):
            capability.open(False)
        assert not UnavailableVoiceCapability().available


@pytest.fixture
def whisper_loads(monkeypatch):
    """Replace the whisper model with a silent one and record the threads that load it."""
    loads: List[int] = []

    def load_model(*args, **kwargs):
        loads.append(threading.get_ident())
        return SimpleNamespace(transcribe=lambda path, **options: ([], None))

    monkeypatch.setattr(transcriber_module, "_model", None)
    monkeypatch.setattr(transcriber_module, "_transcriber", None)
    monkeypatch.setattr(transcriber_module, "WhisperModel", load_model)
    return loads


class TestWhisperModelLoading:
    """Test that the whisper model never loads on the event loop."""

    def test_building_voice_components_does_not_load_model(self, whisper_loads):
        capability = select_voice_capability(True)
        capability.open(True)
        WhisperAudioAnalyzer(client=fake_openai_client()).transcriber

        assert whisper_loads == []

    async def test_first_transcription_loads_model_in_worker_thread(self, whisper_loads):
        recognizer = WhisperSpeechRecognizer(TranscriberService(), incremental_size_threshold=10)
        recognizer.start(lambda text, is_final: None, lambda: None)
        recognizer.feed(b"HDR")

        assert await recognizer.stop() == ""
        assert len(whisper_loads) == 1
        assert whisper_loads[0] != threading.get_ident()
