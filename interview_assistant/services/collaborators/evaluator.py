"""
Evaluator Service Module

Scores a complete interview transcript with an OpenAI-compatible chat model.

Dependencies:
- openai: For AI client interactions.
- loguru: For logging operations.
"""

import time
from typing import Optional

from loguru import logger
from openai import AsyncOpenAI

from interview_assistant.core.ai_client_manager import get_evaluation_client, get_model
from interview_assistant.core.secure_prompt_manager import secure_prompt_manager
from interview_assistant.errors.exceptions import EvaluationFailure
from interview_assistant.helper.extract_regex_fields import extract_evaluation_fields
from interview_assistant.schemas.collaborator_schemas import EvaluationRequest
from interview_assistant.schemas.session_schemas import FinalResult


def to_final_result(fields: dict) -> FinalResult:
    """
    Validate evaluator output.

    Raises:
        EvaluationFailure: If the score is missing or not within 0-100 after rounding, or the summary is empty.
    """
    try:
        score = round(float(fields["score"]))
    except (KeyError, TypeError, ValueError) as e:
        raise EvaluationFailure("Evaluator returned no score") from e
    if not 0 <= score <= 100:
        raise EvaluationFailure(f"Evaluator returned an out-of-range score: {score}")
    summary = str(fields.get("summary") or "").strip()
    if not summary:
        raise EvaluationFailure("Evaluator returned no summary")
    return FinalResult(score=score, summary=summary)


class LlmEvaluator:
    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self._client = client
        self.model = model or get_model("evaluation")

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = get_evaluation_client()
        return self._client

    async def evaluate(self, request: EvaluationRequest) -> FinalResult:
        """
        Score the transcript.

        Args:
            request (EvaluationRequest): Ordered question/answer pairs with optional vocal analysis.

        Returns:
            FinalResult: Integer score 0-100 and a summary.

        Raises:
            EvaluationFailure: If the model call fails or its output is unusable.
        """
        prompt = secure_prompt_manager.get_evaluation_prompt(request)
        llm_start_time = time.time()
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=800,
                temperature=0.1,
                response_format={"type": "json_object"},
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            logger.error(f"Evaluation call failed: {e}")
            raise EvaluationFailure("Failed to evaluate interview") from e
        logger.info(f"Evaluation LLM call completed in {time.time() - llm_start_time:.3f}s")

        content = response.choices[0].message.content if response.choices else None
        logger.debug(f"[AI_EVALUATION] Raw AI response: {content}")
        return to_final_result(extract_evaluation_fields(content or ""))
