from .session_state import (
    SessionState,
    SessionStatus,
    CandidateDetails,
    Message,
    Sender,
    Question,
    QuestionType,
    Difficulty,
    Answer,
    VocalAnalysis,
    Sentiment,
    FinalResult,
    initial_session_state,
)
from .session_events import (
    SessionEvent,
    ResumeParsed,
    DetailProvided,
    InterviewStarted,
    QuestionReceived,
    QuestionFailed,
    TimerTicked,
    AnswerCommitted,
    BotNotice,
    EvaluationStarted,
    EvaluationSucceeded,
    EvaluationFailed,
    SessionReset,
)

__all__ = [
    "SessionState",
    "SessionStatus",
    "CandidateDetails",
    "Message",
    "Sender",
    "Question",
    "QuestionType",
    "Difficulty",
    "Answer",
    "VocalAnalysis",
    "Sentiment",
    "FinalResult",
    "initial_session_state",
    "SessionEvent",
    "ResumeParsed",
    "DetailProvided",
    "InterviewStarted",
    "QuestionReceived",
    "QuestionFailed",
    "TimerTicked",
    "AnswerCommitted",
    "BotNotice",
    "EvaluationStarted",
    "EvaluationSucceeded",
    "EvaluationFailed",
    "SessionReset",
]
