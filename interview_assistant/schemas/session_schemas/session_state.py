"""
Session State Schemas

This module defines typed schemas for a single candidate's interview session:
candidate details, the chat transcript, the questions and answers of the six
rounds, the countdown and the final result.

Field names follow the wire format used by the client (camelCase), so a
snapshot can be sent over the WebSocket or persisted with model_dump_json().

Dependencies:
- pydantic: For data validation and serialization
- typing: For type hints
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from interview_assistant.constants.interview_constants import DETAIL_FIELDS, TOTAL_QUESTIONS


class SessionStatus(str, Enum):
    """Legal states of an interview session."""
    GATHERING_INFO = "gathering_info"
    DETAILS_CONFIRMED = "details_confirmed"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    EVALUATING = "evaluating"
    COMPLETED = "completed"


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class QuestionType(str, Enum):
    CONCEPTUAL = "conceptual"
    PROBLEM_SOLVING = "problem-solving"


class Sentiment(str, Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"


class CandidateDetails(BaseModel):
    """Contact details, filled by the resume parser and then conversationally."""
    name: Optional[str] = Field(default=None, description="Candidate's full name")
    email: Optional[str] = Field(default=None, description="Candidate's email address")
    phone: Optional[str] = Field(default=None, description="Candidate's phone number")

    def missing_fields(self) -> List[str]:
        """Fields still empty, in the order the bot asks for them."""
        return [field for field in DETAIL_FIELDS if not getattr(self, field)]

    def is_complete(self) -> bool:
        return not self.missing_fields()


class Message(BaseModel):
    text: str
    sender: Sender


class Question(BaseModel):
    questionText: str = Field(..., min_length=1, description="The interview question")
    questionType: QuestionType = Field(..., description="conceptual or problem-solving")


class VocalAnalysis(BaseModel):
    """Delivery metrics derived from a recorded spoken answer."""
    sentiment: Sentiment = Field(default=Sentiment.NEUTRAL, description="Overall sentiment of the answer")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Transcription confidence (0.0-1.0)")
    fillerWordCount: int = Field(default=0, ge=0, description="Number of filler words spoken")
    fillerWords: List[str] = Field(default_factory=list, description="Filler words in spoken order")


class Answer(BaseModel):
    text: str
    analysis: Optional[VocalAnalysis] = None


class FinalResult(BaseModel):
    score: int = Field(..., ge=0, le=100, description="Overall interview score (0-100)")
    summary: str = Field(..., description="Summary of the candidate's performance")


class SessionState(BaseModel):
    """Complete state of one candidate's interview session."""
    candidateDetails: CandidateDetails = Field(default_factory=CandidateDetails)
    resumeUploaded: bool = Field(default=False, description="Whether resume details were applied")
    messages: List[Message] = Field(default_factory=list, description="Ordered chat transcript")
    status: SessionStatus = Field(default=SessionStatus.GATHERING_INFO)
    questions: List[Question] = Field(default_factory=list)
    answers: List[Answer] = Field(default_factory=list)
    currentQuestionIndex: int = Field(default=0, ge=0, le=TOTAL_QUESTIONS)
    timer: int = Field(default=0, ge=0, description="Seconds left for the active question")
    finalResult: Optional[FinalResult] = None
    lastError: Optional[str] = Field(default=None, description="Failure that ended the session, if any")

    @model_validator(mode="after")
    def check_round_alignment(self) -> "SessionState":
        """Reject records whose questions, answers and index disagree."""
        index = self.currentQuestionIndex
        if len(self.answers) != index:
            raise ValueError(f"{len(self.answers)} answers recorded for question index {index}")
        if len(self.questions) not in (index, index + 1) or len(self.questions) > TOTAL_QUESTIONS:
            raise ValueError(f"{len(self.questions)} questions recorded for question index {index}")
        if len(self.answers) == TOTAL_QUESTIONS and self.status in (
            SessionStatus.GATHERING_INFO, SessionStatus.DETAILS_CONFIRMED, SessionStatus.IN_PROGRESS
        ):
            raise ValueError(f"All answers recorded but status is {self.status.value}")
        return self

    def current_question(self) -> Optional[Question]:
        if self.currentQuestionIndex < len(self.questions):
            return self.questions[self.currentQuestionIndex]
        return None

    def is_awaiting_answer(self) -> bool:
        """Whether the current round has a question that has not been answered yet."""
        return (
            self.status == SessionStatus.IN_PROGRESS
            and self.currentQuestionIndex < TOTAL_QUESTIONS
            and len(self.questions) > self.currentQuestionIndex
            and len(self.answers) == self.currentQuestionIndex
        )


def initial_session_state() -> SessionState:
    """The documented initial state every session starts from and resets to."""
    return SessionState()
