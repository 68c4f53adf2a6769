"""
Candidates API Route

Description:
Lists completed interviews for the interviewer dashboard, newest first.

Arguments:
- search: Optional case-insensitive match on the candidate's name.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- interview_assistant.services.persistence.candidate_repository: For the interview archive.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from interview_assistant.core.route_limiters import limiter
from interview_assistant.database import SessionLocal
from interview_assistant.schemas.collaborator_schemas import CandidateRecord
from interview_assistant.services.persistence.candidate_repository import CandidateRepository

router = APIRouter(
    prefix="/api",
    tags=["candidates"],
    responses={404: {"description": "Not found"}}
)

def get_candidate_repository() -> CandidateRepository:
    return CandidateRepository(SessionLocal)

@router.get("/candidates", response_model=List[CandidateRecord])
@limiter.limit("60/minute")
async def list_candidates(
    request: Request,
    search: Optional[str] = Query(None, max_length=100),
    repository: CandidateRepository = Depends(get_candidate_repository),
):
    return repository.list_candidates(search)
