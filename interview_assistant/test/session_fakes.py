"""
In-memory fakes for the collaborators, voice producers and key-value store,
builders for sessions at a given point of the interview, and small helpers
for driving an orchestrator from async tests.
"""

import asyncio
import threading
from types import SimpleNamespace
from typing import Callable, Dict, List, Optional, Set

from sqlalchemy.exc import OperationalError

from interview_assistant.constants.interview_constants import TOTAL_QUESTIONS
from interview_assistant.errors.exceptions import GenerationFailure
from interview_assistant.schemas.collaborator_schemas import EvaluationRequest, QuestionGenerationRequest
from interview_assistant.schemas.session_schemas import (
    AnswerCommitted,
    CandidateDetails,
    FinalResult,
    InterviewStarted,
    Question,
    QuestionReceived,
    QuestionType,
    ResumeParsed,
    Sentiment,
    SessionEvent,
    SessionState,
    VocalAnalysis,
    initial_session_state,
)
from interview_assistant.services.interview_session.interview_orchestrator import InterviewOrchestrator
from interview_assistant.services.interview_session.tools.session_reducer import reduce_session
from interview_assistant.services.persistence.session_store import KeyValueStore
from interview_assistant.services.voice_capture.chunk_audio_recorder import ChunkAudioRecorder
from interview_assistant.services.voice_capture.voice_capability import (
    EndCallback,
    LiveVoiceCapability,
    ResultCallback,
    SpeechRecognizer,
)


class FakeResumeParser:
    def __init__(self, details: Optional[CandidateDetails] = None, error: Optional[Exception] = None):
        self.details = details or CandidateDetails()
        self.error = error
        self.calls: List[str] = []

    async def parse(self, document: bytes, filename: str = "resume.pdf") -> CandidateDetails:
        self.calls.append(filename)
        if self.error is not None:
            raise self.error
        return self.details


class FakeQuestionGenerator:
    """Returns numbered questions; fails on the calls listed in fail_on (0-based)."""

    def __init__(self, fail_on: Optional[Set[int]] = None, gate: Optional[asyncio.Event] = None):
        self.fail_on = fail_on or set()
        self.gate = gate
        self.requests: List[QuestionGenerationRequest] = []

    async def generate(self, request: QuestionGenerationRequest) -> Question:
        call = len(self.requests)
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if call in self.fail_on:
            raise GenerationFailure("Question service unavailable")
        return Question(
            questionText=f"Question {call + 1} ({request.difficulty.value})",
            questionType=QuestionType.CONCEPTUAL if call % 2 == 0 else QuestionType.PROBLEM_SOLVING,
        )


class FakeEvaluator:
    def __init__(self, result: Optional[FinalResult] = None, error: Optional[Exception] = None):
        self.result = result or FinalResult(score=82, summary="Strong fundamentals, clear communication.")
        self.error = error
        self.requests: List[EvaluationRequest] = []

    async def evaluate(self, request: EvaluationRequest) -> FinalResult:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.result


class FakeAudioAnalyzer:
    def __init__(self, analysis: Optional[VocalAnalysis] = None, error: Optional[Exception] = None):
        self.analysis = analysis or VocalAnalysis(
            sentiment=Sentiment.POSITIVE, confidence=0.91, fillerWordCount=1, fillerWords=["um"]
        )
        self.error = error
        self.calls: List[bytes] = []

    async def analyze(self, audio: bytes) -> VocalAnalysis:
        self.calls.append(audio)
        if self.error is not None:
            raise self.error
        return self.analysis


class InMemoryStore(KeyValueStore):
    """Dict-backed store that also records the thread each write ran on."""

    def __init__(self, records: Optional[Dict[str, str]] = None):
        self.records: Dict[str, str] = dict(records or {})
        self.write_threads: List[int] = []

    def load(self, key: str) -> Optional[str]:
        return self.records.get(key)

    def save(self, key: str, value: str) -> None:
        self.write_threads.append(threading.get_ident())
        self.records[key] = value

    def delete(self, key: str) -> None:
        self.write_threads.append(threading.get_ident())
        self.records.pop(key, None)


class UnreadableStore(InMemoryStore):
    """Store whose reads fail the way an unreachable database does."""

    def load(self, key: str) -> Optional[str]:
        raise OperationalError("SELECT value FROM session_records", {}, Exception("database is locked"))


class FakeSpeechRecognizer(SpeechRecognizer):
    """Recognizer driven by the test: emit() results, end() the stream, set final_text."""

    def __init__(self, final_text: str = ""):
        self.final_text = final_text
        self.starts = 0
        self.fail_restart = False
        self.cancelled = False
        self.fed: List[bytes] = []
        self._on_result: Optional[ResultCallback] = None
        self._on_end: Optional[EndCallback] = None

    def start(self, on_result: ResultCallback, on_end: EndCallback) -> None:
        if self.starts > 0 and self.fail_restart:
            raise RuntimeError("recognizer unavailable")
        self.starts += 1
        self._on_result = on_result
        self._on_end = on_end

    def feed(self, chunk: bytes) -> None:
        self.fed.append(chunk)

    async def stop(self) -> str:
        return self.final_text

    def cancel(self) -> None:
        self.cancelled = True

    def emit(self, text: str, is_final: bool = False) -> None:
        self._on_result(text, is_final)

    def end(self) -> None:
        self._on_end()


class FakeVoice:
    """Live voice capability whose recognizers are kept for inspection."""

    def __init__(self, final_text: str = "I would use a hash map."):
        self.final_text = final_text
        self.recognizers: List[FakeSpeechRecognizer] = []
        self.capability = LiveVoiceCapability(self._make_recognizer, ChunkAudioRecorder)

    def _make_recognizer(self) -> FakeSpeechRecognizer:
        recognizer = FakeSpeechRecognizer(self.final_text)
        self.recognizers.append(recognizer)
        return recognizer

    @property
    def recognizer(self) -> FakeSpeechRecognizer:
        return self.recognizers[-1]


def fake_openai_client(content: Optional[str] = None, error: Optional[Exception] = None):
    """Stand-in for AsyncOpenAI exposing chat.completions.create()."""
    calls: List[dict] = []

    async def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create, calls=calls)))


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until predicate() holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not reached before timeout")
        await asyncio.sleep(0.001)


async def settle(rounds: int = 20) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


def drain(orchestrator: InterviewOrchestrator) -> list:
    """Every frame queued on the orchestrator's outbox so far."""
    messages = []
    while not orchestrator.outbox.empty():
        messages.append(orchestrator.outbox.get_nowait())
    return messages


def published_statuses(messages: list) -> List[str]:
    """Distinct consecutive statuses seen in state frames."""
    statuses: List[str] = []
    for message in messages:
        if message.type == "state":
            status = message.state["status"]
            if not statuses or statuses[-1] != status:
                statuses.append(status)
    return statuses




DETAILS = {"name": "Jane Doe", "email": "jane@example.com", "phone": "555-0100"}


def question(number: int) -> Question:
    return Question(questionText=f"Question {number}", questionType=QuestionType.CONCEPTUAL)


def reduce_all(state: SessionState, *events: SessionEvent) -> SessionState:
    for event in events:
        state = reduce_session(state, event)
    return state


def in_progress_state() -> SessionState:
    """Session with confirmed details that has not received its first question."""
    state = reduce_session(initial_session_state(), ResumeParsed(details=CandidateDetails(**DETAILS)))
    return reduce_session(state, InterviewStarted())


def awaiting_answer(question_index: int = 0, timer: int = 60) -> SessionState:
    """In-progress session whose first question_index rounds are answered."""
    state = in_progress_state()
    for index in range(question_index):
        state = reduce_all(
            state,
            QuestionReceived(question_index=index, question=question(index + 1), time_limit_seconds=60),
            AnswerCommitted(question_index=index, text=f"Answer {index + 1}"),
        )
    return reduce_session(
        state,
        QuestionReceived(question_index=question_index, question=question(question_index + 1), time_limit_seconds=timer),
    )


def finished_state() -> SessionState:
    state = awaiting_answer(TOTAL_QUESTIONS - 1)
    return reduce_session(state, AnswerCommitted(question_index=TOTAL_QUESTIONS - 1, text="Last answer"))
