"""
Question Generation API Route

Description:
Generates one interview question for a difficulty and time budget.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- interview_assistant.services.collaborators: For the question generator.
- loguru: For logging information about the request and any errors that occur.
"""
from fastapi import APIRouter, Depends, Request
from loguru import logger
from interview_assistant.core.route_limiters import limiter
from interview_assistant.errors.exceptions import GenerationFailure, InternalServerError
from interview_assistant.schemas.collaborator_schemas import QuestionGenerationRequest
from interview_assistant.schemas.session_schemas import Question
from interview_assistant.services.collaborators import InterviewCollaborators, get_interview_collaborators

router = APIRouter(
    prefix="/api",
    tags=["questions"],
    responses={404: {"description": "Not found"}}
)

@router.post("/generate-question", response_model=Question)
@limiter.limit("30/minute")
async def generate_question(
    request: Request,
    body: QuestionGenerationRequest,
    collaborators: InterviewCollaborators = Depends(get_interview_collaborators),
):
    try:
        return await collaborators.question_generator.generate(body)
    except GenerationFailure as e:
        logger.error(f"Error generating question: {e.detail}")
        raise InternalServerError("Failed to generate question from AI service.") from e
