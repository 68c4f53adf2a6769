"""
Status Machine Module

Legal session statuses and the transitions between them. Every status change
goes through transition(); a session only returns to gathering_info through
reset_state(), which replaces the whole record.

Dependencies:
- loguru: For logging transitions.
- app schemas and errors.
"""

from typing import Dict, FrozenSet

from loguru import logger

from interview_assistant.errors.exceptions import IllegalTransitionError
from interview_assistant.schemas.session_schemas import SessionState, SessionStatus, initial_session_state

TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.GATHERING_INFO: frozenset({SessionStatus.DETAILS_CONFIRMED}),
    SessionStatus.DETAILS_CONFIRMED: frozenset({SessionStatus.IN_PROGRESS}),
    # completed directly when question generation fails
    SessionStatus.IN_PROGRESS: frozenset({SessionStatus.FINISHED, SessionStatus.COMPLETED}),
    SessionStatus.FINISHED: frozenset({SessionStatus.EVALUATING}),
    SessionStatus.EVALUATING: frozenset({SessionStatus.COMPLETED}),
    SessionStatus.COMPLETED: frozenset({SessionStatus.GATHERING_INFO}),
}


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def transition(state: SessionState, target: SessionStatus) -> None:
    """
    Move state to the target status in place.

    Raises:
        IllegalTransitionError: If the table has no edge from the current status to target.
    """
    current = state.status
    if not can_transition(current, target):
        raise IllegalTransitionError(current.value, target.value)
    state.status = target
    logger.info(f"Session status {current.value} -> {target.value}")


def confirm_details_if_complete(state: SessionState) -> bool:
    """Flip gathering_info to details_confirmed once name, email and phone are all known."""
    if state.status == SessionStatus.GATHERING_INFO and state.candidateDetails.is_complete():
        transition(state, SessionStatus.DETAILS_CONFIRMED)
        return True
    return False


def reset_state() -> SessionState:
    """Any status -> gathering_info with a fresh record."""
    logger.info("Session reset to initial state")
    return initial_session_state()
