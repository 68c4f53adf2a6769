"""
Audio Analysis API Route

Description:
Analyzes a recorded answer for sentiment, confidence and filler words.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- interview_assistant.services.collaborators: For the audio analyzer.
- loguru: For logging information about the request and any errors that occur.
"""
from typing import Optional
from fastapi import APIRouter, Depends, File, Request, UploadFile
from loguru import logger
from interview_assistant.core.route_limiters import limiter
from interview_assistant.errors.exceptions import AudioAnalysisFailure, BadRequest, InternalServerError
from interview_assistant.schemas.session_schemas import VocalAnalysis
from interview_assistant.services.collaborators import InterviewCollaborators, get_interview_collaborators

router = APIRouter(
    prefix="/api",
    tags=["audio-analysis"],
    responses={404: {"description": "Not found"}}
)

@router.post("/analyze-audio", response_model=VocalAnalysis)
@limiter.limit("20/minute")
async def analyze_audio(
    request: Request,
    audio: Optional[UploadFile] = File(None),
    collaborators: InterviewCollaborators = Depends(get_interview_collaborators),
):
    if audio is None:
        raise BadRequest("No audio file uploaded.")
    recording = await audio.read()
    try:
        return await collaborators.audio_analyzer.analyze(recording)
    except AudioAnalysisFailure as e:
        logger.error(f"Error analyzing audio: {e.detail}")
        raise InternalServerError("Failed to analyze audio.") from e
