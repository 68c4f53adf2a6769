"""
Shared fixtures for the interview assistant tests.

Collaborators, voice producers and the key-value store are replaced by
in-memory fakes so sessions can be driven end to end without network access,
whisper models or a database file.
"""

import os
import tempfile
from typing import List

import pytest

# Configure the app before any interview_assistant module reads the environment
os.environ["ENV"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{os.path.join(tempfile.mkdtemp(), 'interview_assistant_test.db')}"
)

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from interview_assistant.models.session_models import Base
from interview_assistant.schemas.session_schemas import CandidateDetails
from interview_assistant.services.collaborators.interview_collaborators import InterviewCollaborators
from interview_assistant.services.interview_session.interview_orchestrator import InterviewOrchestrator
from interview_assistant.services.interview_session.tools.session_persistence import SessionPersistence
from interview_assistant.services.voice_capture.voice_capability import UnavailableVoiceCapability
from interview_assistant.test.session_fakes import (
    FakeAudioAnalyzer,
    FakeEvaluator,
    FakeQuestionGenerator,
    FakeResumeParser,
    FakeVoice,
    InMemoryStore,
)


@pytest.fixture
def collaborators() -> InterviewCollaborators:
    return InterviewCollaborators(
        resume_parser=FakeResumeParser(CandidateDetails(name="Jane Doe", email="jane@example.com", phone="555-0100")),
        question_generator=FakeQuestionGenerator(),
        evaluator=FakeEvaluator(),
        audio_analyzer=FakeAudioAnalyzer(),
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def voice() -> FakeVoice:
    return FakeVoice()


@pytest.fixture
def session_factory():
    """Session factory bound to a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
async def make_orchestrator(collaborators, store, voice):
    """
    Build orchestrators wired to the fakes. The tick and reset delays default to
    an hour so tests drive the countdown with explicit TimerTicked events.
    """
    created: List[InterviewOrchestrator] = []

    def factory(
        tick_seconds: float = 3600,
        completion_reset_seconds: float = 3600,
        voice_supported: bool = True,
        candidate_repository=None,
    ) -> InterviewOrchestrator:
        orchestrator = InterviewOrchestrator(
            collaborators=collaborators,
            persistence=SessionPersistence(store),
            voice_capability=voice.capability if voice_supported else UnavailableVoiceCapability(),
            candidate_repository=candidate_repository,
            tick_seconds=tick_seconds,
            completion_reset_seconds=completion_reset_seconds,
        )
        created.append(orchestrator)
        return orchestrator

    yield factory
    for orchestrator in created:
        await orchestrator.close()
