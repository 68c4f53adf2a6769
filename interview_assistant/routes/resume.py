"""
Resume Upload API Route

Description:
Extracts name, email and phone from an uploaded resume.

Returns:
- ResumeUploadResponse; fields the parser could not find are null.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- interview_assistant.services.collaborators: For the resume parser.
- loguru: For logging information about the request.
"""
from typing import Optional
from fastapi import APIRouter, Depends, File, Request, UploadFile
from loguru import logger
from interview_assistant.core.route_limiters import limiter
from interview_assistant.errors.exceptions import BadRequest
from interview_assistant.schemas.collaborator_schemas import ResumeUploadResponse
from interview_assistant.services.collaborators import InterviewCollaborators, get_interview_collaborators

router = APIRouter(
    prefix="/api",
    tags=["resume"],
    responses={404: {"description": "Not found"}}
)

@router.post("/upload-resume", response_model=ResumeUploadResponse)
@limiter.limit("10/minute")
async def upload_resume(
    request: Request,
    resume: Optional[UploadFile] = File(None),
    collaborators: InterviewCollaborators = Depends(get_interview_collaborators),
):
    if resume is None:
        raise BadRequest("No file uploaded.")
    document = await resume.read()
    logger.info(f"Resume upload received: {resume.filename}, {len(document)} bytes")
    details = await collaborators.resume_parser.parse(document, resume.filename or "resume.pdf")
    return ResumeUploadResponse(success=True, data=details)
