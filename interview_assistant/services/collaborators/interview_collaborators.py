"""
Interview Collaborators Module

Bundles the four collaborators an interview session talks to and builds the
production set.
"""

from dataclasses import dataclass
from typing import Optional

from .audio_analyzer import WhisperAudioAnalyzer
from .collaborator_protocols import AudioAnalyzer, Evaluator, QuestionGenerator, ResumeParser
from .evaluator import LlmEvaluator
from .question_generator import LlmQuestionGenerator
from .resume_parser import ApiLayerResumeParser


@dataclass
class InterviewCollaborators:
    resume_parser: ResumeParser
    question_generator: QuestionGenerator
    evaluator: Evaluator
    audio_analyzer: AudioAnalyzer


_collaborators: Optional[InterviewCollaborators] = None


def get_interview_collaborators() -> InterviewCollaborators:
    """Shared production collaborators. Clients and models load on first use."""
    global _collaborators
    if _collaborators is None:
        _collaborators = InterviewCollaborators(
            resume_parser=ApiLayerResumeParser(),
            question_generator=LlmQuestionGenerator(),
            evaluator=LlmEvaluator(),
            audio_analyzer=WhisperAudioAnalyzer(),
        )
    return _collaborators
