"""Session Models Module

SQLAlchemy models for interview session persistence: the key-value table that
mirrors live sessions and the archive of completed, scored interviews shown on
the interviewer dashboard.

Dependencies:
- sqlalchemy: For ORM functionality and database modeling.
- datetime: For timestamp handling.
- typing: For type annotations and optional fields.
"""

from datetime import datetime
from typing import Any, List, Optional
from sqlalchemy import DateTime, JSON, String, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass

class SessionRecord(Base):
    """Latest snapshot of one live interview session.

    Attributes:
        id (int): Primary key, auto-incrementing
        namespace (str): Client the session belongs to
        key (str): Record key inside the namespace
        payload (str): JSON snapshot of the session state
        updated_at (datetime): Timestamp of the last write
    """
    __tablename__ = "session_records"
    __table_args__ = (UniqueConstraint("namespace", "key", name="uq_session_records_namespace_key"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    namespace: Mapped[str] = mapped_column(String(128))
    key: Mapped[str] = mapped_column(String(64))
    payload: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"SessionRecord(namespace={self.namespace}, key={self.key})"

class CandidateResult(Base):
    """A completed interview with its final score.

    Attributes:
        id (int): Primary key, auto-incrementing
        name, email, phone (str, optional): Candidate contact details
        questions (List[str]): Question texts in round order
        answers (List[dict]): Serialized answers aligned with questions
        score (int): Final score, 0-100
        summary (str): Evaluator summary
        created_at (datetime): Timestamp when the interview was archived
    """
    __tablename__ = "candidate_records"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    questions: Mapped[List[str]] = mapped_column(JSON)
    answers: Mapped[List[Any]] = mapped_column(JSON)
    score: Mapped[int] = mapped_column()
    summary: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    def __repr__(self):
        return f"CandidateResult(id={self.id}, name={self.name}, score={self.score})"
