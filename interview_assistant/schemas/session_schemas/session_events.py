"""
Session Event Schemas

Every change to a SessionState is described by one of these events and applied
by the session reducer. Events produced by collaborator calls carry the
question index they were issued for, so late or duplicate results can be
recognised and dropped.

Dependencies:
- pydantic: For data validation
- typing: For type hints
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .session_state import CandidateDetails, FinalResult, Question, VocalAnalysis


class SessionEvent(BaseModel):
    """Base class for all session events."""
    model_config = ConfigDict(frozen=True)


class ResumeParsed(SessionEvent):
    details: CandidateDetails


class DetailProvided(SessionEvent):
    text: str


class InterviewStarted(SessionEvent):
    pass


class QuestionReceived(SessionEvent):
    question_index: int = Field(..., ge=0)
    question: Question
    time_limit_seconds: int = Field(..., gt=0)


class QuestionFailed(SessionEvent):
    question_index: int = Field(..., ge=0)
    reason: str


class TimerTicked(SessionEvent):
    question_index: int = Field(..., ge=0)


class AnswerCommitted(SessionEvent):
    question_index: int = Field(..., ge=0)
    text: str
    analysis: Optional[VocalAnalysis] = None


class BotNotice(SessionEvent):
    text: str


class EvaluationStarted(SessionEvent):
    pass


class EvaluationSucceeded(SessionEvent):
    result: FinalResult


class EvaluationFailed(SessionEvent):
    reason: str


class SessionReset(SessionEvent):
    pass
