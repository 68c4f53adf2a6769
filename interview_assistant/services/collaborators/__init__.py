from .collaborator_protocols import AudioAnalyzer, Evaluator, QuestionGenerator, ResumeParser
from .interview_collaborators import InterviewCollaborators, get_interview_collaborators

__all__ = [
    "AudioAnalyzer",
    "Evaluator",
    "QuestionGenerator",
    "ResumeParser",
    "InterviewCollaborators",
    "get_interview_collaborators",
]
