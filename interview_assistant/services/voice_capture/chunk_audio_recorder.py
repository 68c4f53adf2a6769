"""
Chunk Audio Recorder Module

Accumulates the raw audio chunks streamed by the client while the candidate
is speaking.

Dependencies:
- loguru: For logging.
"""

from typing import List

from loguru import logger

from interview_assistant.constants.interview_constants import VOICE_PERMISSION_DENIED_NOTICE
from interview_assistant.errors.exceptions import PermissionDenied
from .voice_capability import AudioRecorder


class ChunkAudioRecorder(AudioRecorder):
    def __init__(self):
        self._chunks: List[bytes] = []
        self._recording = False

    @property
    def recording(self) -> bool:
        return self._recording

    def start(self, permission_granted: bool) -> None:
        if not permission_granted:
            raise PermissionDenied(VOICE_PERMISSION_DENIED_NOTICE)
        if self._recording:
            raise RuntimeError("Recorder already started")
        self._chunks = []
        self._recording = True

    def feed(self, chunk: bytes) -> None:
        if self._recording and chunk:
            self._chunks.append(chunk)

    def stop(self) -> bytes:
        self._recording = False
        audio = b"".join(self._chunks)
        self._chunks = []
        logger.debug(f"Recorder stopped with {len(audio)} bytes")
        return audio

    def discard(self) -> None:
        self._recording = False
        self._chunks = []
