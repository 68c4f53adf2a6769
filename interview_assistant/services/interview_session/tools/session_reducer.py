"""
Session Reducer Module

Pure transition function for interview sessions: reduce_session() takes the
current SessionState and one SessionEvent and returns the next state without
touching its input. Events that do not apply to the current state (a late
timer tick, a duplicate commit, a question for an index already filled) leave
the state unchanged.

Dependencies:
- loguru: For logging ignored events.
- app schemas and the status machine.
"""

from typing import Callable, Dict, Optional, Type

from loguru import logger

from interview_assistant.constants.interview_constants import (
    DETAILS_CONFIRMED_MESSAGE,
    EVALUATION_FAILURE_MESSAGE,
    FINAL_SCORE_MESSAGE,
    GENERATION_FAILURE_MESSAGE,
    GREETING_MESSAGE,
    MISSING_DETAIL_MESSAGE,
    TIMEOUT_ANSWER_TEXT,
    TOTAL_QUESTIONS,
)
from interview_assistant.schemas.session_schemas import (
    Answer,
    AnswerCommitted,
    BotNotice,
    DetailProvided,
    EvaluationFailed,
    EvaluationStarted,
    EvaluationSucceeded,
    InterviewStarted,
    Message,
    QuestionFailed,
    QuestionReceived,
    ResumeParsed,
    Sender,
    SessionEvent,
    SessionReset,
    SessionState,
    SessionStatus,
    TimerTicked,
    VocalAnalysis,
)
from .status_machine import confirm_details_if_complete, reset_state, transition


def _bot(state: SessionState, text: str) -> None:
    state.messages.append(Message(text=text, sender=Sender.BOT))


def _ask_for_missing_detail(state: SessionState) -> None:
    if confirm_details_if_complete(state):
        _bot(state, DETAILS_CONFIRMED_MESSAGE)
        return
    missing = state.candidateDetails.missing_fields()
    _bot(state, MISSING_DETAIL_MESSAGE.format(field=missing[0]))


def _apply_resume_parsed(state: SessionState, event: ResumeParsed) -> None:
    if state.resumeUploaded or state.status != SessionStatus.GATHERING_INFO:
        logger.info("Ignoring resume details: a resume was already applied to this session")
        return
    parsed = event.details.model_dump(exclude_none=True)
    state.candidateDetails = state.candidateDetails.model_copy(update=parsed)
    state.resumeUploaded = True
    _bot(state, GREETING_MESSAGE)
    _ask_for_missing_detail(state)


def _apply_detail_provided(state: SessionState, event: DetailProvided) -> None:
    text = event.text.strip()
    if not text or state.status != SessionStatus.GATHERING_INFO or not state.resumeUploaded:
        return
    state.messages.append(Message(text=text, sender=Sender.USER))
    missing = state.candidateDetails.missing_fields()
    if missing:
        setattr(state.candidateDetails, missing[0], text)
    _ask_for_missing_detail(state)


def _apply_interview_started(state: SessionState, event: InterviewStarted) -> None:
    if state.status == SessionStatus.DETAILS_CONFIRMED:
        transition(state, SessionStatus.IN_PROGRESS)


def _is_pending_fetch(state: SessionState, question_index: int) -> bool:
    return (
        state.status == SessionStatus.IN_PROGRESS
        and question_index == state.currentQuestionIndex
        and len(state.questions) == question_index
    )


def _apply_question_received(state: SessionState, event: QuestionReceived) -> None:
    if not _is_pending_fetch(state, event.question_index):
        logger.info(f"Dropping stale question for index {event.question_index}")
        return
    state.questions.append(event.question)
    _bot(state, event.question.questionText)
    state.timer = event.time_limit_seconds


def _apply_question_failed(state: SessionState, event: QuestionFailed) -> None:
    if not _is_pending_fetch(state, event.question_index):
        return
    _bot(state, GENERATION_FAILURE_MESSAGE.format(reason=event.reason))
    state.lastError = event.reason
    state.timer = 0
    transition(state, SessionStatus.COMPLETED)


def _commit(state: SessionState, question_index: int, text: str, analysis: Optional[VocalAnalysis]) -> bool:
    """Record the answer for question_index once; later commits for the same index are ignored."""
    if not state.is_awaiting_answer() or question_index != state.currentQuestionIndex:
        logger.info(f"Ignoring commit for question index {question_index}")
        return False
    state.answers.append(Answer(text=text, analysis=analysis))
    state.currentQuestionIndex = min(state.currentQuestionIndex + 1, TOTAL_QUESTIONS)
    state.timer = 0
    if len(state.answers) == TOTAL_QUESTIONS:
        transition(state, SessionStatus.FINISHED)
    return True


def _apply_timer_ticked(state: SessionState, event: TimerTicked) -> None:
    if not state.is_awaiting_answer() or event.question_index != state.currentQuestionIndex:
        return
    if state.timer > 1:
        state.timer -= 1
        return
    logger.info(f"Time limit reached for question index {event.question_index}")
    _commit(state, event.question_index, TIMEOUT_ANSWER_TEXT, None)


def _apply_answer_committed(state: SessionState, event: AnswerCommitted) -> None:
    if _commit(state, event.question_index, event.text, event.analysis) and event.text.strip():
        state.messages.append(Message(text=event.text, sender=Sender.USER))


def _apply_bot_notice(state: SessionState, event: BotNotice) -> None:
    _bot(state, event.text)


def _apply_evaluation_started(state: SessionState, event: EvaluationStarted) -> None:
    if state.status == SessionStatus.FINISHED:
        transition(state, SessionStatus.EVALUATING)


def _apply_evaluation_succeeded(state: SessionState, event: EvaluationSucceeded) -> None:
    if state.status != SessionStatus.EVALUATING:
        return
    state.finalResult = event.result
    _bot(state, FINAL_SCORE_MESSAGE.format(score=event.result.score))
    _bot(state, event.result.summary)
    transition(state, SessionStatus.COMPLETED)


def _apply_evaluation_failed(state: SessionState, event: EvaluationFailed) -> None:
    if state.status != SessionStatus.EVALUATING:
        return
    _bot(state, EVALUATION_FAILURE_MESSAGE.format(reason=event.reason))
    state.lastError = event.reason
    transition(state, SessionStatus.COMPLETED)


_HANDLERS: Dict[Type[SessionEvent], Callable[[SessionState, SessionEvent], None]] = {
    ResumeParsed: _apply_resume_parsed,
    DetailProvided: _apply_detail_provided,
    InterviewStarted: _apply_interview_started,
    QuestionReceived: _apply_question_received,
    QuestionFailed: _apply_question_failed,
    TimerTicked: _apply_timer_ticked,
    AnswerCommitted: _apply_answer_committed,
    BotNotice: _apply_bot_notice,
    EvaluationStarted: _apply_evaluation_started,
    EvaluationSucceeded: _apply_evaluation_succeeded,
    EvaluationFailed: _apply_evaluation_failed,
}


def reduce_session(state: SessionState, event: SessionEvent) -> SessionState:
    """
    Apply one event to a session.

    Args:
        state (SessionState): Current state. Never modified.
        event (SessionEvent): The event to apply.

    Returns:
        SessionState: The next state, equal to the input when the event does not apply.

    Raises:
        ValueError: If the event type has no handler.
    """
    if isinstance(event, SessionReset):
        return reset_state()
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise ValueError(f"Unsupported session event: {type(event).__name__}")
    next_state = state.model_copy(deep=True)
    handler(next_state, event)
    return next_state
