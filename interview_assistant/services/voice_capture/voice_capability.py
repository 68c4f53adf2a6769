"""
Voice Capability Module

Voice input is modelled as a capability chosen once per session: the live
variant pairs a speech recognizer with an audio recorder, the unavailable
variant refuses every attempt. Callers never check for voice support
themselves; they open producers and handle PermissionDenied.

Dependencies:
- abc: For the recognizer, recorder and capability interfaces.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from interview_assistant.constants.interview_constants import VOICE_UNAVAILABLE_NOTICE
from interview_assistant.errors.exceptions import PermissionDenied

# (text, is_final)
ResultCallback = Callable[[str, bool], None]
EndCallback = Callable[[], None]


class SpeechRecognizer(ABC):
    """Live transcription stream. Interim results are provisional."""

    @abstractmethod
    def start(self, on_result: ResultCallback, on_end: EndCallback) -> None:
        """Open a new stream. on_end fires only when the stream ends on its own."""

    @abstractmethod
    def feed(self, chunk: bytes) -> None:
        pass

    @abstractmethod
    async def stop(self) -> str:
        """Close the stream and return its final text."""

    @abstractmethod
    def cancel(self) -> None:
        pass


class AudioRecorder(ABC):
    @abstractmethod
    def start(self, permission_granted: bool) -> None:
        """Raises PermissionDenied when the recording device is not available."""

    @abstractmethod
    def feed(self, chunk: bytes) -> None:
        pass

    @abstractmethod
    def stop(self) -> bytes:
        """Stop recording and return everything recorded."""

    @abstractmethod
    def discard(self) -> None:
        pass


@dataclass
class VoiceProducers:
    recognizer: SpeechRecognizer
    recorder: AudioRecorder


class VoiceCapability(ABC):
    @property
    @abstractmethod
    def available(self) -> bool:
        pass

    @abstractmethod
    def open(self, permission_granted: bool) -> VoiceProducers:
        """
        Acquire a recognizer and a started recorder.

        Raises:
            PermissionDenied: If voice input cannot be used.
        """


class LiveVoiceCapability(VoiceCapability):
    def __init__(
        self,
        recognizer_factory: Callable[[], SpeechRecognizer],
        recorder_factory: Callable[[], AudioRecorder],
    ):
        self.recognizer_factory = recognizer_factory
        self.recorder_factory = recorder_factory

    @property
    def available(self) -> bool:
        return True

    def open(self, permission_granted: bool) -> VoiceProducers:
        recorder = self.recorder_factory()
        recorder.start(permission_granted)
        return VoiceProducers(recognizer=self.recognizer_factory(), recorder=recorder)


class UnavailableVoiceCapability(VoiceCapability):
    @property
    def available(self) -> bool:
        return False

    def open(self, permission_granted: bool) -> VoiceProducers:
        raise PermissionDenied(VOICE_UNAVAILABLE_NOTICE)
