"""
Interview Evaluation API Route

Description:
Scores a complete interview transcript.

Returns:
- FinalResult with an integer score (0-100) and a summary.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- interview_assistant.services.collaborators: For the evaluator.
- loguru: For logging information about the request and any errors that occur.
"""
from fastapi import APIRouter, Depends, Request
from loguru import logger
from interview_assistant.core.route_limiters import limiter
from interview_assistant.errors.exceptions import EvaluationFailure, InternalServerError
from interview_assistant.schemas.collaborator_schemas import EvaluationRequest
from interview_assistant.schemas.session_schemas import FinalResult
from interview_assistant.services.collaborators import InterviewCollaborators, get_interview_collaborators

router = APIRouter(
    prefix="/api",
    tags=["evaluation"],
    responses={404: {"description": "Not found"}}
)

@router.post("/evaluate-interview", response_model=FinalResult)
@limiter.limit("10/minute")
async def evaluate_interview(
    request: Request,
    body: EvaluationRequest,
    collaborators: InterviewCollaborators = Depends(get_interview_collaborators),
):
    try:
        return await collaborators.evaluator.evaluate(body)
    except EvaluationFailure as e:
        logger.error(f"Error evaluating interview: {e.detail}")
        raise InternalServerError("Failed to evaluate interview.") from e
