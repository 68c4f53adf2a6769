"""
Session Store Module

Namespaced key-value storage for session snapshots. Each candidate connection
gets its own namespace; inside it the session lives under a single fixed key.

Dependencies:
- sqlalchemy: For the session_records table.
- loguru: For logging.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from interview_assistant.models.session_models import SessionRecord


class KeyValueStore(ABC):
    """Durable storage contract used by session persistence."""

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class SqlSessionStore(KeyValueStore):
    def __init__(self, session_factory: Callable[[], Session], namespace: str):
        self.session_factory = session_factory
        self.namespace = namespace

    def _find(self, db: Session, key: str) -> Optional[SessionRecord]:
        return db.scalars(
            select(SessionRecord).where(SessionRecord.namespace == self.namespace, SessionRecord.key == key)
        ).first()

    def load(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            record = self._find(db, key)
            return record.payload if record else None

    def save(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            try:
                record = self._find(db, key)
                if record is None:
                    db.add(SessionRecord(namespace=self.namespace, key=key, payload=value))
                else:
                    record.payload = value
                    record.updated_at = datetime.now(timezone.utc)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to save session {self.namespace}/{key}: {e}")
                raise

    def delete(self, key: str) -> None:
        with self.session_factory() as db:
            try:
                record = self._find(db, key)
                if record is not None:
                    db.delete(record)
                    db.commit()
                    logger.debug(f"Deleted session record {self.namespace}/{key}")
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to delete session {self.namespace}/{key}: {e}")
                raise
