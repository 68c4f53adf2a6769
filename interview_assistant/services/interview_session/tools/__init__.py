from .status_machine import TRANSITIONS, can_transition, transition, reset_state
from .session_reducer import reduce_session
from .question_scheduler import QuestionScheduler, needs_question, round_for_index
from .timer_controller import TimerController, TimerHandle
from .answer_capture import AnswerCapture, VoicePhase
from .evaluation_coordinator import EvaluationCoordinator, build_transcript
from .session_persistence import RehydrationOutcome, RehydrationResult, SessionPersistence

__all__ = [
    "TRANSITIONS",
    "can_transition",
    "transition",
    "reset_state",
    "reduce_session",
    "QuestionScheduler",
    "needs_question",
    "round_for_index",
    "TimerController",
    "TimerHandle",
    "AnswerCapture",
    "VoicePhase",
    "EvaluationCoordinator",
    "build_transcript",
    "RehydrationOutcome",
    "RehydrationResult",
    "SessionPersistence",
]
