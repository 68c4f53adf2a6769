"""
Description: 
This module defines the schema for the resume upload response.

Dependencies:
- pydantic: For data validation and settings management.
"""
from pydantic import BaseModel, Field
from interview_assistant.schemas.session_schemas import CandidateDetails

class ResumeUploadResponse(BaseModel):
    success: bool = Field(default=True, description="False only when no file was received")
    data: CandidateDetails = Field(default_factory=CandidateDetails, description="Parsed details, null where not found")
