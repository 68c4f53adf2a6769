"""
Description: 
Schema for a question generation request.

Dependencies:
- pydantic: For data validation and settings management.
"""
from pydantic import BaseModel, Field
from interview_assistant.schemas.session_schemas import Difficulty

class QuestionGenerationRequest(BaseModel):
    difficulty: Difficulty = Field(..., description="Easy, Medium or Hard")
    timeLimitSeconds: int = Field(..., gt=0, description="Seconds the candidate has to answer")
