"""
Timer Controller Module

Per-question countdown. A TimerHandle owns the tick task for one question
index; sync() keeps exactly one handle alive while the session is waiting for
an answer and releases it on every other state.

Dependencies:
- asyncio: For the tick task.
- loguru: For logging.
"""

import asyncio
from typing import Callable, Optional

from loguru import logger

from interview_assistant.constants.interview_constants import TICK_SECONDS
from interview_assistant.schemas.session_schemas import SessionState


class TimerHandle:
    """Scoped subscription to the tick source of one question."""

    def __init__(self, question_index: int, task: asyncio.Task):
        self.question_index = question_index
        self._task = task

    def release(self) -> None:
        if not self._task.done():
            self._task.cancel()


class TimerController:
    def __init__(self, on_tick: Callable[[int], None], tick_seconds: float = TICK_SECONDS):
        """
        Args:
            on_tick: Called once per tick with the question index the timer was acquired for.
            tick_seconds: Tick period.
        """
        self._on_tick = on_tick
        self._tick_seconds = tick_seconds
        self._handle: Optional[TimerHandle] = None

    @property
    def active_index(self) -> Optional[int]:
        return self._handle.question_index if self._handle else None

    def acquire(self, question_index: int) -> TimerHandle:
        self.stop()
        task = asyncio.create_task(self._run(question_index), name=f"question-timer-{question_index}")
        self._handle = TimerHandle(question_index, task)
        logger.debug(f"Timer started for question index {question_index}")
        return self._handle

    def sync(self, state: SessionState) -> None:
        """Run the countdown only while the current question awaits an answer."""
        if not state.is_awaiting_answer():
            self.stop()
            return
        if self.active_index != state.currentQuestionIndex:
            self.acquire(state.currentQuestionIndex)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.release()
            logger.debug(f"Timer released for question index {self._handle.question_index}")
            self._handle = None

    async def _run(self, question_index: int) -> None:
        while True:
            await asyncio.sleep(self._tick_seconds)
            self._on_tick(question_index)
