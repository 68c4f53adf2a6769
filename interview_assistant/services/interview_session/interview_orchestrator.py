"""
Interview Orchestrator Module

Drives one candidate's interview session. Every input (candidate action, timer
tick, collaborator result) becomes a SessionEvent applied by reduce_session().
After each applied event the new state is persisted, published, and the side
effects it calls for are reconciled: fetching the next question, running the
countdown, starting evaluation, tearing down voice capture, arming the reset of
a completed session.

All of this runs on one asyncio event loop. dispatch() never awaits, so an
event is applied and reconciled before anything else can run. Collaborator
calls run as tasks keyed by the operation they serve; their results are
dropped if the session was reset after they were issued.

Dependencies:
- asyncio: For collaborator tasks, the completion reset and store writes in a worker thread.
- loguru: For logging.
- sqlalchemy: Persistence errors are logged, never raised into the session.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional, Union

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from interview_assistant.constants.interview_constants import (
    COMPLETION_RESET_SECONDS,
    TICK_SECONDS,
)
from interview_assistant.schemas.session_schemas import (
    CandidateDetails,
    DetailProvided,
    EvaluationStarted,
    EvaluationSucceeded,
    InterviewStarted,
    ResumeParsed,
    SessionEvent,
    SessionReset,
    SessionState,
    SessionStatus,
    TimerTicked,
)
from interview_assistant.schemas.websocket.websocket_message import WebSocketMessage
from interview_assistant.services.collaborators.interview_collaborators import InterviewCollaborators
from interview_assistant.services.persistence.candidate_repository import CandidateRepository, record_from_state
from interview_assistant.services.voice_capture.voice_capability import VoiceCapability
from .tools.answer_capture import AnswerCapture, VoicePhase
from .tools.evaluation_coordinator import EvaluationCoordinator
from .tools.question_scheduler import QuestionScheduler, needs_question
from .tools.session_persistence import RehydrationOutcome, SessionPersistence
from .tools.session_reducer import reduce_session
from .tools.timer_controller import TimerController

UPLOAD_OPERATION = "upload"
EVALUATION_OPERATION = "evaluation"

TaskResult = Union[SessionEvent, List[SessionEvent], None]


class InterviewOrchestrator:
    """
    Owns the state of one interview session and every task acting on it.

    Outgoing frames (state snapshots, notices, drafts, the resume prompt) are
    queued on `outbox`; the transport drains it.

    Attributes:
        state (SessionState): Current session state. Replaced, never mutated.
        outbox (asyncio.Queue): Frames for the client, in order.
        awaiting_resume_choice (bool): True while the resume prompt is open.
    """

    def __init__(
        self,
        collaborators: InterviewCollaborators,
        persistence: SessionPersistence,
        voice_capability: VoiceCapability,
        candidate_repository: Optional[CandidateRepository] = None,
        tick_seconds: float = TICK_SECONDS,
        completion_reset_seconds: float = COMPLETION_RESET_SECONDS,
    ):
        self.collaborators = collaborators
        self.persistence = persistence
        self.candidate_repository = candidate_repository
        self.completion_reset_seconds = completion_reset_seconds
        self.scheduler = QuestionScheduler(collaborators.question_generator)
        self.evaluation = EvaluationCoordinator(collaborators.evaluator)
        self.timer = TimerController(self._on_timer_tick, tick_seconds)
        self.capture = AnswerCapture(
            voice_capability,
            collaborators.audio_analyzer,
            on_draft=self._publish_draft,
            on_notice=self._publish_notice,
        )
        self.state = SessionState()
        self.outbox: "asyncio.Queue[WebSocketMessage]" = asyncio.Queue()
        self.awaiting_resume_choice = False
        self._generation = 0
        self._inflight: Dict[Hashable, asyncio.Task] = {}
        self._reset_handle: Optional[asyncio.TimerHandle] = None
        self._closed = False
        self._pending_write: Optional[Callable[[], Any]] = None
        self._writer: Optional[asyncio.Task] = None

    # ---- lifecycle -------------------------------------------------------

    def start(self) -> None:
        """Rehydrate the stored session before any other component runs."""
        result = self.persistence.rehydrate()
        self.state = result.state
        if result.notice:
            self._publish_notice(result.notice)
        if result.outcome == RehydrationOutcome.RESUME_PROMPT:
            self.awaiting_resume_choice = True
            self._publish_state()
            self.publish(WebSocketMessage(type="resume_prompt", content="Resume your interview or start over?"))
            logger.info("Waiting for the candidate to resume or start over")
            return
        self._publish_state()
        self._reconcile()

    def resume(self) -> None:
        if not self.awaiting_resume_choice:
            return
        logger.info("Candidate resumed the stored interview")
        self.awaiting_resume_choice = False
        self._publish_state()
        self._reconcile()

    def start_over(self) -> None:
        logger.info("Candidate chose to start over")
        self.awaiting_resume_choice = False
        self.dispatch(SessionReset())

    async def close(self) -> None:
        """Release every subscription and task. The stored session is kept."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        tasks = self._teardown()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await self.flush()
        logger.info("Interview orchestrator closed")

    # ---- candidate actions ----------------------------------------------

    def upload_resume(self, document: bytes, filename: str = "resume.pdf") -> bool:
        if self.awaiting_resume_choice or self.state.status != SessionStatus.GATHERING_INFO:
            return False
        if self.state.resumeUploaded or UPLOAD_OPERATION in self._inflight:
            logger.info("Ignoring duplicate resume upload")
            return False
        self._spawn(UPLOAD_OPERATION, lambda: self._parse_resume(document, filename))
        return True

    def send_message(self, text: str) -> None:
        """Chat input: fills candidate details, or answers the current question."""
        if self.awaiting_resume_choice:
            return
        if self.state.status == SessionStatus.GATHERING_INFO:
            self.dispatch(DetailProvided(text=text))
        elif self.state.status == SessionStatus.IN_PROGRESS:
            self.submit_answer(text)

    def submit_answer(self, text: str) -> None:
        if self.awaiting_resume_choice:
            return
        event = self.capture.submit_text(self.state, text)
        if event is not None:
            self.dispatch(event)

    def start_voice(self, permission_granted: bool) -> bool:
        if self.awaiting_resume_choice:
            return False
        return self.capture.start_voice(self.state, permission_granted)

    def feed_audio(self, chunk: bytes) -> None:
        self.capture.feed(chunk)

    def stop_voice(self) -> bool:
        """Stop listening and commit the recorded answer in the background."""
        question_index = self.capture.question_index
        if not self.capture.stop_listening():
            return False
        self._spawn(("voice", question_index), self.capture.commit_recording)
        return True

    # ---- event application ----------------------------------------------

    def dispatch(self, event: SessionEvent, generation: Optional[int] = None) -> None:
        """
        Apply one event and reconcile side effects.

        Args:
            event (SessionEvent): The event to apply.
            generation (int, optional): Generation the event was produced in.
                Events from an earlier generation are dropped.
        """
        if self._closed:
            return
        if generation is not None and generation != self._generation:
            logger.info(f"Dropping {type(event).__name__} from a previous session")
            return

        previous = self.state
        self.state = reduce_session(previous, event)

        if isinstance(event, SessionReset):
            self._generation += 1
            self._teardown()
            self._write(self.persistence.clear)
        elif self.state != previous:
            state = self.state
            self._write(lambda: self.persistence.save(state))
            if isinstance(event, EvaluationSucceeded):
                self._archive()

        if self.state != previous or isinstance(event, SessionReset):
            self._publish_state()
        self._reconcile()

    def _reconcile(self) -> None:
        if self.awaiting_resume_choice or self._closed:
            return
        state = self.state

        if state.status == SessionStatus.DETAILS_CONFIRMED:
            self.dispatch(InterviewStarted())
            return
        if state.status == SessionStatus.FINISHED:
            self.dispatch(EvaluationStarted())
            return

        self.timer.sync(state)

        if self.capture.phase == VoicePhase.LISTENING and (
            not state.is_awaiting_answer() or self.capture.question_index != state.currentQuestionIndex
        ):
            self.capture.abort()
        for key in [key for key in self._inflight if isinstance(key, tuple) and key[0] == "voice"]:
            if key[1] != state.currentQuestionIndex or state.status != SessionStatus.IN_PROGRESS:
                self._cancel_voice_commit(key[1])

        if needs_question(state):
            key = ("question", state.currentQuestionIndex)
            if key not in self._inflight:
                index = state.currentQuestionIndex
                self._spawn(key, lambda: self.scheduler.fetch(index))

        if state.status == SessionStatus.EVALUATING and EVALUATION_OPERATION not in self._inflight:
            snapshot = state
            self._spawn(EVALUATION_OPERATION, lambda: self.evaluation.evaluate(snapshot))

        if state.status == SessionStatus.COMPLETED and state.finalResult is not None:
            self._arm_completion_reset()
        elif self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

    # ---- tasks and subscriptions ----------------------------------------

    def _spawn(self, key: Hashable, factory: Callable[[], Awaitable[TaskResult]]) -> None:
        generation = self._generation

        async def runner() -> None:
            try:
                result = await factory()
            finally:
                if self._inflight.get(key) is task:
                    del self._inflight[key]
            events = result if isinstance(result, list) else [result] if result is not None else []
            for event in events:
                self.dispatch(event, generation)

        task = asyncio.create_task(runner(), name=f"interview-{key}")
        self._inflight[key] = task

    def _cancel(self, key: Hashable) -> None:
        task = self._inflight.pop(key, None)
        if task is not None:
            task.cancel()

    def _cancel_voice_commit(self, question_index: int) -> None:
        """
        Cancel the commit task of a stopped voice attempt and release the attempt.

        A task cancelled before its first step never runs its own cleanup, so the
        committing phase is ended here.
        """
        self._cancel(("voice", question_index))
        if self.capture.phase == VoicePhase.COMMITTING and self.capture.question_index == question_index:
            self.capture.abort()

    def _teardown(self) -> List[asyncio.Task]:
        """Stop the timer, voice capture, pending reset and every in-flight task."""
        self.timer.stop()
        self.capture.abort()
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None
        tasks = list(self._inflight.values())
        self._inflight.clear()
        for task in tasks:
            task.cancel()
        return tasks

    def _on_timer_tick(self, question_index: int) -> None:
        self.dispatch(TimerTicked(question_index=question_index))

    def _arm_completion_reset(self) -> None:
        if self._reset_handle is not None:
            return
        generation = self._generation
        loop = asyncio.get_running_loop()
        self._reset_handle = loop.call_later(
            self.completion_reset_seconds, self._completion_reset, generation
        )
        logger.info(f"Session will reset in {self.completion_reset_seconds}s")

    def _completion_reset(self, generation: int) -> None:
        self._reset_handle = None
        self.dispatch(SessionReset(), generation)

    async def _parse_resume(self, document: bytes, filename: str) -> SessionEvent:
        try:
            details = await self.collaborators.resume_parser.parse(document, filename)
        except Exception as e:
            logger.warning(f"Resume parsing failed, asking for details instead: {e}")
            details = CandidateDetails()
        return ResumeParsed(details=details)

    # ---- side channels ---------------------------------------------------

    def _write(self, operation: Callable[[], Any]) -> None:
        """
        Queue a store write. Writes run in a worker thread, one at a time and in
        order. Every write replaces the root record, so only the latest pending
        one is kept.
        """
        self._pending_write = operation
        if self._writer is None or self._writer.done():
            self._writer = asyncio.create_task(self._drain_writes(), name="interview-session-writer")

    async def _drain_writes(self) -> None:
        while self._pending_write is not None:
            operation, self._pending_write = self._pending_write, None
            try:
                await asyncio.to_thread(operation)
            except SQLAlchemyError as e:
                logger.error(f"Failed to persist session: {e}")

    async def flush(self) -> None:
        """Wait until every queued store write has completed."""
        if self._writer is not None:
            await asyncio.shield(self._writer)

    def _archive(self) -> None:
        if self.candidate_repository is None or self.state.finalResult is None:
            return
        try:
            self.candidate_repository.add(record_from_state(self.state))
        except SQLAlchemyError as e:
            logger.error(f"Failed to archive completed interview: {e}")

    def snapshot(self) -> Dict[str, Any]:
        data = self.state.model_dump(mode="json")
        data["voiceAvailable"] = self.capture.voice_available
        data["voicePhase"] = self.capture.phase.value
        return data

    def publish(self, message: WebSocketMessage) -> None:
        self.outbox.put_nowait(message)

    def _publish_state(self) -> None:
        self.publish(WebSocketMessage(type="state", state=self.snapshot()))

    def _publish_draft(self, text: str) -> None:
        self.publish(WebSocketMessage(type="transcript", content=text))

    def _publish_notice(self, text: str) -> None:
        self.publish(WebSocketMessage(type="notice", content=text))
        self._publish_state()
