"""Periodic background task that purges expired cache entries."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from mongocache.models.model_cache import SweepState

logger = logging.getLogger(__name__)


class SweepTimer:
    """Runs an async callback every `period` seconds while SWEEPING.

    State machine:
        IDLE --start()--> SWEEPING --stop()--> IDLE

    Exactly one asyncio task exists while SWEEPING. start() is a no-op when
    already SWEEPING. stop() cancels the task, or, when called from inside
    the callback, lets the loop finish after the callback returns.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], period: float):
        self._callback = callback
        self.period = period
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> SweepState:
        return SweepState.SWEEPING if self._task is not None else SweepState.IDLE

    @property
    def active(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop if IDLE."""
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Expiry sweep started (every {self.period}s)")

    def stop(self) -> None:
        """Return to IDLE, cancelling the sweep task if it is not the caller."""
        task = self._task
        if task is None:
            return
        self._task = None
        if task is not asyncio.current_task() and not task.done():
            task.cancel()
        logger.info("Expiry sweep stopped")

    async def _run(self) -> None:
        me = asyncio.current_task()
        while self._task is me:
            await asyncio.sleep(self.period)
            try:
                await self._callback()
            except Exception as e:
                # No caller to hand this to; keep the schedule running
                logger.exception(f"Expiry sweep failed: {e}")
