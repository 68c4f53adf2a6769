from .question_request import QuestionGenerationRequest
from .evaluation_request import EvaluationRequest, TranscriptEntry
from .resume_upload_response import ResumeUploadResponse
from .candidate_record import CandidateRecord

__all__ = [
    "QuestionGenerationRequest",
    "EvaluationRequest",
    "TranscriptEntry",
    "ResumeUploadResponse",
    "CandidateRecord",
]
