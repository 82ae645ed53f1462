"""Cancellable scheduled work on the running event loop.

Recurring polling and one-shot delayed actions (such as restoring a setpoint
after a temporary override) are both modelled as a :class:`ScheduledHandle`
wrapping a background task:

- Cancelling a handle prevents any further run from starting.
- A callback that is already running is allowed to finish, but never
  reschedules itself afterwards.
- Exceptions raised by a callback are logged; a recurring schedule keeps going.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_LOGGER = logging.getLogger(__name__)


class ScheduledHandle:
    """Handle to scheduled work returned by :func:`call_later` and :func:`call_every`."""

    def __init__(self, name: str) -> None:
        """Initialize the handle.

        Args:
            name: Name used for the task and in log messages.
        """
        self.name = name
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False
        self._in_callback = False

    @property
    def cancelled(self) -> bool:
        """Check if the handle was cancelled."""
        return self._cancelled

    @property
    def done(self) -> bool:
        """Check if the scheduled work has finished for good."""
        return self._task is not None and self._task.done()

    def cancel(self) -> None:
        """Cancel the scheduled work.

        Interrupts a pending wait immediately. A callback that is currently
        running completes, after which nothing else is scheduled.
        """
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._in_callback and not self._task.done():
            self._task.cancel()
        _LOGGER.debug("Cancelled scheduled work %s", self.name)

    async def stop(self) -> None:
        """Cancel the scheduled work and wait for the background task to end."""
        self.cancel()
        if self._task is None or self._task is asyncio.current_task():
            return
        with contextlib.suppress(asyncio.CancelledError):
            await self._task

    async def _invoke(self, callback: Callable[[], Awaitable[object]]) -> None:
        self._in_callback = True
        try:
            await callback()
        except Exception:
            _LOGGER.exception("Error in scheduled work %s", self.name)
        finally:
            self._in_callback = False

    def __repr__(self) -> str:
        """Return detailed string representation of the handle."""
        return f"ScheduledHandle(name='{self.name}', cancelled={self._cancelled}, done={self.done})"


def call_later(
    delay: float,
    callback: Callable[[], Awaitable[object]],
    *,
    name: str = "call_later",
) -> ScheduledHandle:
    """Run ``callback`` once after ``delay`` seconds.

    Must be called from within a running event loop.

    Args:
        delay: Seconds to wait before running the callback.
        callback: Coroutine function to await.
        name: Name for the background task.

    Returns:
        Handle that can cancel the pending run.
    """
    handle = ScheduledHandle(name)

    async def _run() -> None:
        await asyncio.sleep(delay)
        if not handle.cancelled:
            await handle._invoke(callback)

    handle._task = asyncio.create_task(_run(), name=name)
    return handle


def call_every(
    interval: float,
    callback: Callable[[], Awaitable[object]],
    *,
    name: str = "call_every",
    immediate: bool = False,
) -> ScheduledHandle:
    """Run ``callback`` every ``interval`` seconds until cancelled.

    The interval is measured from the end of one run to the start of the
    next, so runs never overlap.

    Args:
        interval: Seconds between runs.
        callback: Coroutine function to await on every run.
        name: Name for the background task.
        immediate: Run once right away instead of waiting a full interval first.

    Returns:
        Handle that stops the schedule.
    """
    handle = ScheduledHandle(name)

    async def _run() -> None:
        try:
            if not immediate:
                await asyncio.sleep(interval)
            while not handle.cancelled:
                await handle._invoke(callback)
                if handle.cancelled:
                    break
                await asyncio.sleep(interval)
        except asyncio.CancelledError:
            _LOGGER.debug("Scheduled work %s cancelled", name)
            raise

    handle._task = asyncio.create_task(_run(), name=name)
    return handle
