"""
Question Scheduler Module

Maps a question index onto the fixed difficulty ladder and asks the question
generator for that round's question. The result comes back as a session event
tagged with the index it was requested for.

Dependencies:
- loguru: For logging generation requests.
- app collaborators and schemas.
"""

import time

from loguru import logger

from interview_assistant.constants.interview_constants import QUESTION_LADDER, Rung, TOTAL_QUESTIONS
from interview_assistant.errors.exceptions import GenerationFailure
from interview_assistant.schemas.collaborator_schemas import QuestionGenerationRequest
from interview_assistant.schemas.session_schemas import (
    Difficulty,
    QuestionFailed,
    QuestionReceived,
    SessionEvent,
    SessionState,
    SessionStatus,
)
from interview_assistant.services.collaborators.collaborator_protocols import QuestionGenerator


def round_for_index(question_index: int) -> Rung:
    """Difficulty and time budget for a 0-based round index."""
    if not 0 <= question_index < TOTAL_QUESTIONS:
        raise ValueError(f"Question index {question_index} is outside the ladder")
    return QUESTION_LADDER[question_index]


def needs_question(state: SessionState) -> bool:
    """Whether the current round still has no question."""
    return (
        state.status == SessionStatus.IN_PROGRESS
        and state.currentQuestionIndex < TOTAL_QUESTIONS
        and len(state.questions) <= state.currentQuestionIndex
    )


class QuestionScheduler:
    def __init__(self, generator: QuestionGenerator):
        self.generator = generator

    async def fetch(self, question_index: int) -> SessionEvent:
        """
        Request the question for one round. Makes exactly one generator call.

        Returns:
            SessionEvent: QuestionReceived on success, QuestionFailed otherwise.
        """
        rung = round_for_index(question_index)
        request = QuestionGenerationRequest(
            difficulty=Difficulty(rung.difficulty),
            timeLimitSeconds=rung.time_limit_seconds,
        )
        logger.info(f"Requesting {rung.difficulty} question for round {question_index}")
        start_time = time.time()
        try:
            question = await self.generator.generate(request)
        except GenerationFailure as e:
            logger.error(f"Question generation failed for round {question_index}: {e.detail}")
            return QuestionFailed(question_index=question_index, reason=e.detail)
        except Exception as e:
            logger.error(f"Unexpected error generating question for round {question_index}: {e}")
            return QuestionFailed(question_index=question_index, reason="Failed to generate question")
        logger.debug(f"Question for round {question_index} generated in {time.time() - start_time:.3f}s")
        return QuestionReceived(
            question_index=question_index,
            question=question,
            time_limit_seconds=rung.time_limit_seconds,
        )
