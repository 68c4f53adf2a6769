"""
Whisper Speech Recognizer Module

Live transcription over faster-whisper. Every few chunks the whole stream so
far is transcribed again and reported as an interim result; stop() runs the
final pass. A failed interim pass ends the stream.

Dependencies:
- asyncio: For running whisper off the event loop.
- loguru: For logging.
"""

import asyncio
from typing import Optional

from loguru import logger

from interview_assistant.services.transcription.audio_buffer import IncrementalAudioBuffer
from interview_assistant.services.transcription.transcriber import TranscriberService
from .voice_capability import EndCallback, ResultCallback, SpeechRecognizer


class WhisperSpeechRecognizer(SpeechRecognizer):
    def __init__(self, transcriber: TranscriberService, incremental_size_threshold: int = 5):
        self.transcriber = transcriber
        self.incremental_size_threshold = incremental_size_threshold
        self._buffer: Optional[IncrementalAudioBuffer] = None
        self._header: Optional[bytes] = None
        self._pending: Optional[asyncio.Task] = None
        self._on_result: Optional[ResultCallback] = None
        self._on_end: Optional[EndCallback] = None
        self._active = False

    def start(self, on_result: ResultCallback, on_end: EndCallback) -> None:
        if self._active:
            raise RuntimeError("Recognition already started")
        self._buffer = IncrementalAudioBuffer(self.incremental_size_threshold, header=self._header)
        self._on_result = on_result
        self._on_end = on_end
        self._active = True

    def feed(self, chunk: bytes) -> None:
        if not self._active or not chunk:
            return
        # The first chunk of a recording carries the container header
        if self._header is None:
            self._header = chunk
        self._buffer.add_chunk(chunk)
        if self._pending is None and self._buffer.should_do_incremental_transcription():
            self._buffer.mark_incremental_transcription_done()
            audio = self._buffer.get_audio_data()
            self._pending = asyncio.create_task(self._transcribe_interim(audio))

    async def _transcribe_interim(self, audio: bytes) -> None:
        try:
            result = await asyncio.to_thread(self.transcriber.transcribe_bytes, audio)
        except Exception as e:
            self._pending = None
            logger.warning(f"Live transcription stream ended: {e}")
            self._end_stream()
            return
        self._pending = None
        if self._active and result.text:
            self._on_result(result.text, False)

    def _end_stream(self) -> None:
        if not self._active:
            return
        self._active = False
        self._buffer.clear()
        if self._on_end is not None:
            self._on_end()

    async def stop(self) -> str:
        if not self._active:
            return ""
        self._active = False
        self._cancel_pending()
        audio = self._buffer.get_audio_data()
        self._buffer.clear()
        if audio is None:
            return ""
        result = await asyncio.to_thread(self.transcriber.transcribe_bytes, audio)
        return result.text

    def cancel(self) -> None:
        self._active = False
        self._cancel_pending()
        if self._buffer is not None:
            self._buffer.clear()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
