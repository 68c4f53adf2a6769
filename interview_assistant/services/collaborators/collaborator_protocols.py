"""
Collaborator Protocols Module

Interfaces of the four external capabilities an interview session consumes.
Production implementations live beside this module; tests pass fakes.

Dependencies:
- typing: For Protocol definitions.
- app schemas: For request and response models.
"""

from typing import Protocol

from interview_assistant.schemas.collaborator_schemas import EvaluationRequest, QuestionGenerationRequest
from interview_assistant.schemas.session_schemas import CandidateDetails, FinalResult, Question, VocalAnalysis


class ResumeParser(Protocol):  # document bytes -> contact details
    async def parse(self, document: bytes, filename: str = "resume.pdf") -> CandidateDetails: ...


class QuestionGenerator(Protocol):  # raises GenerationFailure
    async def generate(self, request: QuestionGenerationRequest) -> Question: ...


class Evaluator(Protocol):  # raises EvaluationFailure
    async def evaluate(self, request: EvaluationRequest) -> FinalResult: ...


class AudioAnalyzer(Protocol):  # raises AudioAnalysisFailure
    async def analyze(self, audio: bytes) -> VocalAnalysis: ...
