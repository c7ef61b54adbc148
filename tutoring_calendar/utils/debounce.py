# tutoring_calendar/utils/debounce.py
"""
Cancellable debounce timer on the running asyncio loop.

arm(value)  → (re)start the quiet-period timer with the latest value
cancel()    → drop the pending value
flush()     → fire the pending value now

Only the last value armed within the quiet period is delivered.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    def __init__(
        self,
        delay: float,
        callback: Callable[[T], Union[None, Awaitable[None]]],
    ):
        self.delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._value: Any = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, value: T) -> None:
        self.cancel()
        self._value = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._value = None

    def flush(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    async def drain(self) -> None:
        """Wait for async callbacks already fired."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _fire(self) -> None:
        value = self._value
        self._handle = None
        self._value = None

        try:
            result = self._callback(value)
        except Exception:
            logger.exception("Debounced callback failed")
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Debounced callback failed", exc_info=task.exception())
