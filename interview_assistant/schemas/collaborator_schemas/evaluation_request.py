"""
Description: 
This module defines the schema for an interview evaluation request: the full
ordered transcript of questions, answers and optional vocal analysis.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from interview_assistant.schemas.session_schemas import VocalAnalysis

class TranscriptEntry(BaseModel):
    questionText: str
    answerText: str
    analysis: Optional[VocalAnalysis] = None

class EvaluationRequest(BaseModel):
    transcript: List[TranscriptEntry] = Field(..., min_length=1, description="Ordered question/answer pairs")
