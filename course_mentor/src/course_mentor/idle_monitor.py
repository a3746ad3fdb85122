"""
Idle Monitor

Counts seconds of learner inactivity while the mentor panel is closed and
exposes the proactive "need help?" affordance.
"""

import asyncio
import logging
from typing import Optional

from course_mentor.session_state import SessionState

logger = logging.getLogger(__name__)


class IdleMonitor:
    """
    Owned idle ticker for a mentor session.

    Writes `state.idle_seconds`: one increment per tick while the panel is
    closed, reset to 0 on any learner activity. `tick()` is public so the
    counter can be driven without a running ticker.
    """

    def __init__(self, state: SessionState, tick_seconds: float = 1.0, threshold_seconds: int = 30):
        """
        Initialize IdleMonitor.

        Args:
            state: SessionState whose idle counter this monitor owns
            tick_seconds: Seconds between ticks
            threshold_seconds: Idle seconds after which help is offered
        """
        self.state = state
        self.tick_seconds = tick_seconds
        self.threshold_seconds = threshold_seconds
        self.task: Optional[asyncio.Task] = None

    @property
    def show_need_help(self) -> bool:
        return self.state.idle_seconds > self.threshold_seconds and not self.state.panel_open

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def tick(self):
        if self.state.panel_open:
            return
        self.state.idle_seconds += 1
        if self.state.idle_seconds == self.threshold_seconds + 1:
            logger.info(f"💬 [IdleMonitor] Session {self.state.session_id[:8]} idle for {self.state.idle_seconds}s, offering help")

    def reset(self):
        """Pointer or key activity."""
        self.state.idle_seconds = 0

    def start(self):
        """Start the ticker on the running loop (no-op when already running)."""
        if self.running:
            return
        self.task = asyncio.create_task(self._tick_loop())

    async def stop(self):
        if self.task is None:
            return
        self.task.cancel()
        try:
            await self.task
        except asyncio.CancelledError:
            pass
        self.task = None

    async def _tick_loop(self):
        while True:
            await asyncio.sleep(self.tick_seconds)
            self.tick()
