"""
Test API Routes

Exercises the REST endpoints through FastAPI's TestClient with the
collaborators and the candidate archive overridden.

Dependencies:
- pytest: For testing framework
- fastapi.testclient: For calling the application in-process
"""

import pytest
from fastapi.testclient import TestClient

from interview_assistant.errors.exceptions import AudioAnalysisFailure
from interview_assistant.main import app
from interview_assistant.routes.candidates import get_candidate_repository
from interview_assistant.schemas.session_schemas import EvaluationStarted, EvaluationSucceeded, FinalResult
from interview_assistant.services.collaborators import get_interview_collaborators
from interview_assistant.services.persistence.candidate_repository import CandidateRepository, record_from_state
from interview_assistant.test.session_fakes import (
    FakeAudioAnalyzer,
    FakeQuestionGenerator,
    finished_state,
    reduce_all,
)


@pytest.fixture
def repository(session_factory):
    return CandidateRepository(session_factory)


@pytest.fixture
def client(collaborators, repository):
    app.dependency_overrides[get_interview_collaborators] = lambda: collaborators
    app.dependency_overrides[get_candidate_repository] = lambda: repository
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "interview-assistant"}


class TestResumeRoute:
    """Test POST /api/upload-resume."""

    def test_upload_returns_details(self, client):
        response = client.post(
            "/api/upload-resume",
            files={"resume": ("resume.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"name": "Jane Doe", "email": "jane@example.com", "phone": "555-0100"},
        }

    def test_missing_file(self, client):
        response = client.post("/api/upload-resume")
        assert response.status_code == 400
        assert response.json() == {"detail": "No file uploaded."}


class TestQuestionRoute:
    """Test POST /api/generate-question."""

    def test_generates_question(self, client, collaborators):
        response = client.post("/api/generate-question", json={"difficulty": "Medium", "timeLimitSeconds": 120})
        assert response.status_code == 200
        assert response.json()["questionText"] == "Question 1 (Medium)"
        assert collaborators.question_generator.requests[0].timeLimitSeconds == 120

    def test_invalid_difficulty(self, client):
        response = client.post("/api/generate-question", json={"difficulty": "Impossible", "timeLimitSeconds": 60})
        assert response.status_code == 422

    def test_generation_failure(self, client, collaborators):
        collaborators.question_generator = FakeQuestionGenerator(fail_on={0})
        response = client.post("/api/generate-question", json={"difficulty": "Easy", "timeLimitSeconds": 60})
        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to generate question from AI service."}


class TestEvaluationRoute:
    """Test POST /api/evaluate-interview."""

    def test_evaluates_transcript(self, client, collaborators):
        body = {"transcript": [{"questionText": "What is a closure?", "answerText": "A function with scope."}]}
        response = client.post("/api/evaluate-interview", json=body)
        assert response.status_code == 200
        assert response.json() == {"score": 82, "summary": "Strong fundamentals, clear communication."}
        assert collaborators.evaluator.requests[0].transcript[0].answerText == "A function with scope."

    def test_empty_transcript(self, client):
        response = client.post("/api/evaluate-interview", json={"transcript": []})
        assert response.status_code == 422


class TestAudioAnalysisRoute:
    """Test POST /api/analyze-audio."""

    def test_analyzes_recording(self, client, collaborators):
        response = client.post("/api/analyze-audio", files={"audio": ("answer.webm", b"x" * 2000, "audio/webm")})
        assert response.status_code == 200
        assert response.json()["sentiment"] == "POSITIVE"
        assert response.json()["fillerWords"] == ["um"]

    def test_missing_file(self, client):
        response = client.post("/api/analyze-audio")
        assert response.status_code == 400

    def test_analysis_failure(self, client, collaborators):
        collaborators.audio_analyzer = FakeAudioAnalyzer(error=AudioAnalysisFailure())
        response = client.post("/api/analyze-audio", files={"audio": ("answer.webm", b"x", "audio/webm")})
        assert response.status_code == 500


class TestCandidatesRoute:
    """Test GET /api/candidates."""

    def test_lists_archived_interviews(self, client, repository):
        completed = reduce_all(
            finished_state(),
            EvaluationStarted(),
            EvaluationSucceeded(result=FinalResult(score=67, summary="Decent.")),
        )
        repository.add(record_from_state(completed))

        response = client.get("/api/candidates")
        assert response.status_code == 200
        records = response.json()
        assert len(records) == 1
        assert records[0]["name"] == "Jane Doe"
        assert records[0]["score"] == 67
        assert len(records[0]["answers"]) == 6

        assert client.get("/api/candidates", params={"search": "nobody"}).json() == []
