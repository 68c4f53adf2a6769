"""
Candidate Repository Module

Archive of completed interviews for the interviewer dashboard.

Dependencies:
- sqlalchemy: For queries against candidate_records.
- loguru: For logging.
"""

from typing import Callable, List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from interview_assistant.models.session_models import CandidateResult
from interview_assistant.schemas.collaborator_schemas import CandidateRecord
from interview_assistant.schemas.session_schemas import Answer, SessionState


def _to_schema(row: CandidateResult) -> CandidateRecord:
    return CandidateRecord(
        id=row.id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        questions=list(row.questions or []),
        answers=[Answer.model_validate(answer) for answer in row.answers or []],
        score=row.score,
        summary=row.summary,
        createdAt=row.created_at,
    )


def record_from_state(state: SessionState) -> CandidateRecord:
    """Archive entry for a session that completed with a final result."""
    if state.finalResult is None:
        raise ValueError("Only scored sessions can be archived")
    details = state.candidateDetails
    return CandidateRecord(
        name=details.name,
        email=details.email,
        phone=details.phone,
        questions=[question.questionText for question in state.questions],
        answers=state.answers,
        score=state.finalResult.score,
        summary=state.finalResult.summary,
    )


class CandidateRepository:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def add(self, record: CandidateRecord) -> CandidateRecord:
        with self.session_factory() as db:
            try:
                row = CandidateResult(
                    name=record.name,
                    email=record.email,
                    phone=record.phone,
                    questions=record.questions,
                    answers=[answer.model_dump(mode="json") for answer in record.answers],
                    score=record.score,
                    summary=record.summary,
                )
                db.add(row)
                db.commit()
                db.refresh(row)
                logger.info(f"Archived interview {row.id} with score {row.score}")
                return _to_schema(row)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to archive interview: {e}")
                raise

    def list_candidates(self, search: Optional[str] = None) -> List[CandidateRecord]:
        """Newest first; search matches the candidate name case-insensitively."""
        query = select(CandidateResult).order_by(CandidateResult.created_at.desc(), CandidateResult.id.desc())
        if search:
            query = query.where(CandidateResult.name.ilike(f"%{search.strip()}%"))
        with self.session_factory() as db:
            return [_to_schema(row) for row in db.scalars(query).all()]
