"""Latest-wins execution of debounced asynchronous recomputations."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LatestWins(Generic[T]):
    """Run one recomputation at a time, keyed by a monotonically increasing sequence number.

    ``submit`` cancels the previously issued task, waits ``debounce`` seconds,
    runs the factory and hands the result to ``apply`` only if no newer call
    was issued in the meantime. A superseded result is discarded even if it
    completes after the newer one.
    """

    def __init__(self, apply: Callable[[T], None], debounce: float = 0.0, name: str = "task") -> None:
        self._apply = apply
        self.debounce = debounce
        self.name = name
        self._sequence = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def sequence(self) -> int:
        return self._sequence

    def is_latest(self, token: int) -> bool:
        return token == self._sequence

    def submit(self, factory: Callable[[], Awaitable[T]]) -> asyncio.Task:
        self._sequence += 1
        token = self._sequence
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.ensure_future(self._run(token, factory))
        return self._task

    async def _run(self, token: int, factory: Callable[[], Awaitable[T]]) -> None:
        if self.debounce > 0:
            await asyncio.sleep(self.debounce)
        if not self.is_latest(token):
            return
        result = await factory()
        if not self.is_latest(token):
            logger.debug(f"Discarding stale {self.name} result (token {token}, latest {self._sequence})")
            return
        self._apply(result)

    async def wait(self) -> None:
        """Wait for the most recently issued task to finish."""
        if self._task is not None:
            await asyncio.wait([self._task])
