"""
Streaming Presenter

Simulated incremental reveal of an already complete response. The presenter
owns all pacing: one whitespace-delimited token per tick, then a single
completion callback. Each stream runs as an owned asyncio task that can be
cancelled at any point without delivering further callbacks.
"""

import asyncio
import logging
import re
from typing import Callable, List, Optional

from course_mentor.response_synthesizer import ResponsePayload

logger = logging.getLogger(__name__)

TokenCallback = Callable[[str], None]
DoneCallback = Callable[[str], None]

_TOKEN_PATTERN = re.compile(r"\S+\s*")


def tokenize(text: str) -> List[str]:
    """Split text into tokens, each keeping its trailing whitespace."""
    return _TOKEN_PATTERN.findall(text)


class CancelHandle:
    """Handle for one in-flight stream."""

    def __init__(self):
        self.task: Optional[asyncio.Task] = None
        self.cancelled = False
        self.finished = False

    @property
    def done(self) -> bool:
        return self.cancelled or self.finished

    def cancel(self):
        """Stop the stream. No callback fires after this returns."""
        if self.done:
            return
        self.cancelled = True
        if self.task is not None:
            self.task.cancel()

    async def wait(self):
        """Wait until the stream completes or is cancelled."""
        if self.task is None:
            return
        try:
            await self.task
        except asyncio.CancelledError:
            if not self.cancelled:
                raise


class StreamingPresenter:
    """
    Reveals text token by token.

    At most one stream is active per presenter: starting a new one cancels
    the previous handle first, so two streams never interleave.
    """

    def __init__(self, tick_seconds: float = 0.05):
        self.tick_seconds = tick_seconds
        self.active: Optional[CancelHandle] = None

    def present(self, payload: ResponsePayload, on_token: TokenCallback, on_done: DoneCallback) -> CancelHandle:
        """
        Start streaming `payload.text`.

        `on_token` receives the accumulated prefix (trailing whitespace
        stripped) once per token; `on_done` receives the full text once.
        Must be called from a running event loop.

        Args:
            payload: Complete response
            on_token: Called with each growing prefix
            on_done: Called once with the final text

        Returns:
            CancelHandle for this stream
        """
        self.cancel()

        handle = CancelHandle()
        handle.task = asyncio.create_task(self._run(handle, payload.text, on_token, on_done))
        self.active = handle
        return handle

    def cancel(self):
        """Cancel the active stream, if any."""
        if self.active is not None:
            self.active.cancel()
            self.active = None

    async def _run(self, handle: CancelHandle, text: str, on_token: TokenCallback, on_done: DoneCallback):
        tokens = tokenize(text)
        accumulated = ""

        for token in tokens:
            await asyncio.sleep(self.tick_seconds)
            if handle.cancelled:
                return
            accumulated += token
            on_token(accumulated.rstrip())

        if handle.cancelled:
            return
        handle.finished = True
        if self.active is handle:
            self.active = None
        logger.debug(f"💬 [StreamingPresenter] Delivered {len(tokens)} tokens")
        on_done(text)
