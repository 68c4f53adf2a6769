"""
Evaluation Coordinator Module

Builds the ordered transcript of a finished interview and requests the final
score from the evaluator, once.

Dependencies:
- loguru: For logging.
- app collaborators and schemas.
"""

import time

from loguru import logger

from interview_assistant.errors.exceptions import EvaluationFailure
from interview_assistant.schemas.collaborator_schemas import EvaluationRequest, TranscriptEntry
from interview_assistant.schemas.session_schemas import (
    EvaluationFailed,
    EvaluationSucceeded,
    SessionEvent,
    SessionState,
)
from interview_assistant.services.collaborators.collaborator_protocols import Evaluator


def build_transcript(state: SessionState) -> EvaluationRequest:
    """Pair every committed answer with the question of the same index."""
    entries = [
        TranscriptEntry(
            questionText=question.questionText,
            answerText=answer.text,
            analysis=answer.analysis,
        )
        for question, answer in zip(state.questions, state.answers)
    ]
    return EvaluationRequest(transcript=entries)


class EvaluationCoordinator:
    def __init__(self, evaluator: Evaluator):
        self.evaluator = evaluator

    async def evaluate(self, state: SessionState) -> SessionEvent:
        """
        Score the transcript of a finished session.

        Args:
            state (SessionState): Snapshot taken when evaluation started.

        Returns:
            SessionEvent: EvaluationSucceeded with the final result, or EvaluationFailed.
        """
        start_time = time.time()
        try:
            request = build_transcript(state)
            result = await self.evaluator.evaluate(request)
        except EvaluationFailure as e:
            logger.error(f"Interview evaluation failed: {e.detail}")
            return EvaluationFailed(reason=e.detail)
        except Exception as e:
            logger.error(f"Unexpected error during interview evaluation: {e}")
            return EvaluationFailed(reason="Failed to evaluate interview")
        logger.info(f"Interview evaluated with score {result.score} in {time.time() - start_time:.3f}s")
        return EvaluationSucceeded(result=result)
