"""
Description:
Schema for a completed interview as listed on the interviewer dashboard.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from interview_assistant.schemas.session_schemas import Answer

class CandidateRecord(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    questions: List[str] = Field(default_factory=list, description="Question texts in round order")
    answers: List[Answer] = Field(default_factory=list, description="Answers aligned with questions")
    score: int = Field(..., ge=0, le=100)
    summary: str
    createdAt: Optional[datetime] = None
