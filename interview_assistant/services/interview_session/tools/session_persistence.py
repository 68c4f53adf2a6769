"""
Session Persistence Module

Mirrors a session to the key-value store under the fixed root key and decides,
once at startup, what a rehydrated record means for the session.

Dependencies:
- pydantic: For parsing the stored snapshot.
- sqlalchemy: A store that cannot be read is handled like an unreadable record.
- loguru: For logging.
- app store and schemas.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from interview_assistant.constants.interview_constants import PERSISTENCE_ROOT_KEY, REHYDRATION_NOTICE
from interview_assistant.errors.exceptions import RehydrationError
from interview_assistant.schemas.session_schemas import SessionState, SessionStatus, initial_session_state
from interview_assistant.services.persistence.session_store import KeyValueStore


class RehydrationOutcome(str, Enum):
    FRESH = "fresh"  # nothing stored
    RESTORED = "restored"  # continue without asking
    RESUME_PROMPT = "resume_prompt"  # mid-interview, ask Resume or Start Over
    RESET = "reset"  # stored record discarded


@dataclass
class RehydrationResult:
    state: SessionState
    outcome: RehydrationOutcome
    notice: Optional[str] = None


class SessionPersistence:
    def __init__(self, store: KeyValueStore, key: str = PERSISTENCE_ROOT_KEY):
        self.store = store
        self.key = key

    def save(self, state: SessionState) -> None:
        self.store.save(self.key, state.model_dump_json())

    def clear(self) -> None:
        self.store.delete(self.key)

    def _load(self) -> Optional[SessionState]:
        try:
            raw = self.store.load(self.key)
        except SQLAlchemyError as e:
            raise RehydrationError(f"Stored session could not be read: {e}") from e
        if raw is None:
            return None
        try:
            state = SessionState.model_validate_json(raw)
        except ValidationError as e:
            raise RehydrationError(f"Stored session is unreadable: {e.error_count()} validation errors") from e
        if state.lastError:
            raise RehydrationError(f"Stored session ended with an error: {state.lastError}")
        return state

    def rehydrate(self) -> RehydrationResult:
        """
        Restore the stored session. Must run before any other component starts.

        A corrupt record, one carrying a failure marker, or a store that cannot
        be read is discarded and replaced by the initial state, with a notice
        for the candidate.
        """
        try:
            state = self._load()
        except RehydrationError as e:
            logger.warning(f"Discarding stored session: {e.detail}")
            try:
                self.clear()
            except SQLAlchemyError as clear_error:
                logger.error(f"Failed to clear stored session: {clear_error}")
            return RehydrationResult(initial_session_state(), RehydrationOutcome.RESET, REHYDRATION_NOTICE)

        if state is None:
            return RehydrationResult(initial_session_state(), RehydrationOutcome.FRESH)
        logger.info(f"Rehydrated session in status {state.status.value}")
        if state.status == SessionStatus.IN_PROGRESS:
            return RehydrationResult(state, RehydrationOutcome.RESUME_PROMPT)
        return RehydrationResult(state, RehydrationOutcome.RESTORED)
