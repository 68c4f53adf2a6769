"""
Answer Capture Module

Reconciles the two answer channels of a round, typed text and voice, into a
single AnswerCommitted event. Voice runs through three phases:

    idle -> listening -> committing -> idle

While listening, a live recognizer and an audio recorder are fed the same
chunks. Stopping hands the recording to the audio analyzer when it is large
enough to contain speech. Each voice attempt carries a token so that a late
commit from an aborted attempt cannot touch the next one.

Dependencies:
- loguru: For logging.
- app voice capture interfaces, collaborators and schemas.
"""

from enum import Enum
from typing import Callable, List, Optional

from loguru import logger

from interview_assistant.constants.interview_constants import (
    AUDIO_ANALYSIS_FAILURE_MESSAGE,
    MIN_SPEECH_BYTES,
    VOICE_STOPPED_NOTICE,
)
from interview_assistant.errors.exceptions import PermissionDenied
from interview_assistant.schemas.session_schemas import AnswerCommitted, BotNotice, SessionEvent, SessionState
from interview_assistant.services.collaborators.collaborator_protocols import AudioAnalyzer
from interview_assistant.services.voice_capture.voice_capability import (
    UnavailableVoiceCapability,
    VoiceCapability,
    VoiceProducers,
)


class VoicePhase(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    COMMITTING = "committing"


class AnswerCapture:
    def __init__(
        self,
        capability: VoiceCapability,
        analyzer: AudioAnalyzer,
        on_draft: Callable[[str], None],
        on_notice: Callable[[str], None],
    ):
        """
        Args:
            capability: Voice capability selected for the session.
            analyzer: Audio analysis collaborator.
            on_draft: Receives the pending answer text whenever it changes.
            on_notice: Receives transient warnings for the candidate.
        """
        self.capability = capability
        self.analyzer = analyzer
        self._on_draft = on_draft
        self._on_notice = on_notice
        self.phase = VoicePhase.IDLE
        self.question_index: Optional[int] = None
        self._producers: Optional[VoiceProducers] = None
        self._recorded_audio = b""
        self._final_segments: List[str] = []
        self._interim = ""
        self._attempt = 0

    @property
    def voice_available(self) -> bool:
        return self.capability.available

    @property
    def draft(self) -> str:
        return " ".join(part for part in [*self._final_segments, self._interim] if part).strip()

    def submit_text(self, state: SessionState, text: str) -> Optional[AnswerCommitted]:
        """Typed submission for the current round. Aborts a voice attempt in progress."""
        text = text.strip()
        if not text or not state.is_awaiting_answer():
            return None
        if self.phase == VoicePhase.COMMITTING:
            logger.info("Ignoring typed answer while the recorded answer is being analyzed")
            return None
        if self.phase == VoicePhase.LISTENING:
            self.abort()
        return AnswerCommitted(question_index=state.currentQuestionIndex, text=text)

    def start_voice(self, state: SessionState, permission_granted: bool) -> bool:
        if self.phase != VoicePhase.IDLE:
            logger.warning(f"Voice capture already {self.phase.value}; ignoring start")
            return False
        if not state.is_awaiting_answer():
            return False
        try:
            producers = self.capability.open(permission_granted)
        except PermissionDenied as e:
            logger.warning(f"Voice capture unavailable: {e.detail}")
            self.capability = UnavailableVoiceCapability()
            self._on_notice(e.detail)
            return False
        try:
            producers.recognizer.start(self._handle_result, self._handle_recognizer_end)
        except Exception as e:
            logger.error(f"Failed to start speech recognition: {e}")
            producers.recorder.discard()
            self._on_notice(VOICE_STOPPED_NOTICE)
            return False

        self._attempt += 1
        self._producers = producers
        self.question_index = state.currentQuestionIndex
        self._final_segments = []
        self._interim = ""
        self.phase = VoicePhase.LISTENING
        logger.info(f"Listening for an answer to question index {self.question_index}")
        return True

    def feed(self, chunk: bytes) -> None:
        if self.phase != VoicePhase.LISTENING:
            return
        self._producers.recorder.feed(chunk)
        self._producers.recognizer.feed(chunk)

    def stop_listening(self) -> bool:
        """Stop both producers. The recorded audio is kept for commit_recording()."""
        if self.phase != VoicePhase.LISTENING:
            return False
        self._recorded_audio = self._producers.recorder.stop()
        self.phase = VoicePhase.COMMITTING
        return True

    async def commit_recording(self) -> List[SessionEvent]:
        """
        Finish the stopped voice attempt.

        Returns:
            List[SessionEvent]: The AnswerCommitted event, followed by a notice
            when the audio could not be analyzed. Empty if no attempt was stopped.
        """
        if self.phase != VoicePhase.COMMITTING:
            return []
        attempt = self._attempt
        question_index = self.question_index
        audio = self._recorded_audio
        try:
            try:
                final_text = await self._producers.recognizer.stop()
            except Exception as e:
                logger.warning(f"Final transcription failed, keeping the live draft: {e}")
                final_text = self._interim
            self._interim = ""
            if final_text:
                self._final_segments.append(final_text)
            text = self.draft
            self._on_draft(text)

            events: List[SessionEvent] = []
            analysis = None
            if len(audio) > MIN_SPEECH_BYTES:
                try:
                    analysis = await self.analyzer.analyze(audio)
                except Exception as e:
                    logger.warning(f"Audio analysis failed for question index {question_index}: {e}")
                    events.append(BotNotice(text=AUDIO_ANALYSIS_FAILURE_MESSAGE))
            else:
                logger.info(f"Recorded {len(audio)} bytes, below the speech threshold; no vocal analysis")
            events.insert(0, AnswerCommitted(question_index=question_index, text=text, analysis=analysis))
            return events
        finally:
            if self._attempt == attempt:
                self._reset()

    def abort(self) -> None:
        """Drop the current voice attempt without committing."""
        if self.phase == VoicePhase.IDLE:
            return
        logger.info(f"Voice attempt for question index {self.question_index} aborted")
        if self._producers is not None:
            self._producers.recognizer.cancel()
            self._producers.recorder.discard()
        self._attempt += 1
        self._reset()

    def _reset(self) -> None:
        self.phase = VoicePhase.IDLE
        self.question_index = None
        self._producers = None
        self._recorded_audio = b""
        self._final_segments = []
        self._interim = ""

    def _handle_result(self, text: str, is_final: bool) -> None:
        if self.phase != VoicePhase.LISTENING:
            return
        if is_final:
            self._final_segments.append(text.strip())
            self._interim = ""
        else:
            self._interim = text.strip()
        self._on_draft(self.draft)

    def _handle_recognizer_end(self) -> None:
        """Restart a stream that ended while the candidate is still speaking."""
        if self.phase != VoicePhase.LISTENING:
            return
        if self._interim:
            self._final_segments.append(self._interim)
            self._interim = ""
        try:
            self._producers.recognizer.start(self._handle_result, self._handle_recognizer_end)
            logger.info("Speech recognition restarted after an unexpected end")
        except Exception as e:
            logger.warning(f"Speech recognition could not be restarted: {e}")
            draft = self.draft
            self._producers.recorder.discard()
            self._attempt += 1
            self._reset()
            self._on_draft(draft)
            self._on_notice(VOICE_STOPPED_NOTICE)
