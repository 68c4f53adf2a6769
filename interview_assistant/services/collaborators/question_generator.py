"""
Question Generator Service Module

Generates one interview question for a rung of the difficulty ladder using an
OpenAI-compatible chat model.

Dependencies:
- openai: For AI client interactions.
- pydantic: For validating the generated question.
- loguru: For logging operations.
"""

import time
from typing import Optional

from loguru import logger
from openai import AsyncOpenAI
from pydantic import ValidationError

from interview_assistant.core.ai_client_manager import get_model, get_question_generation_client
from interview_assistant.core.secure_prompt_manager import secure_prompt_manager
from interview_assistant.errors.exceptions import GenerationFailure
from interview_assistant.helper.extract_regex_fields import extract_question_fields
from interview_assistant.schemas.collaborator_schemas import QuestionGenerationRequest
from interview_assistant.schemas.session_schemas import Question


class LlmQuestionGenerator:
    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self._client = client
        self.model = model or get_model("question_generation")

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = get_question_generation_client()
        return self._client

    async def generate(self, request: QuestionGenerationRequest) -> Question:
        """
        Generate a question for the given difficulty and time budget.

        Raises:
            GenerationFailure: If the model call fails or returns no usable question.
        """
        prompt = secure_prompt_manager.get_question_generation_prompt(request)
        llm_start_time = time.time()
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=400,
                temperature=0.8,
                response_format={"type": "json_object"},
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            logger.error(f"Question generation call failed: {e}")
            raise GenerationFailure("Failed to generate question") from e
        logger.info(f"Question generation LLM call completed in {time.time() - llm_start_time:.3f}s")

        content = response.choices[0].message.content if response.choices else None
        fields = extract_question_fields(content or "")
        try:
            return Question(**fields)
        except ValidationError as e:
            logger.error(f"Generated question is invalid: {content}")
            raise GenerationFailure("Received an invalid question") from e
