"""Quiz countdown.

A cancelable periodic callback bound to one quiz id. The engine ignores
ticks whose id no longer names the live quiz, so a late tick can never touch
a newer quiz; cancel() additionally guarantees no tick fires afterwards.

Callbacks run wherever the scheduler runs them. loop_scheduler keeps them on
the event loop thread, alongside every other engine call.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol

import structlog

logger = structlog.get_logger(__name__)


class ScheduledCall(Protocol):
    """Handle returned by a scheduler."""

    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], ScheduledCall]


def loop_scheduler(loop: asyncio.AbstractEventLoop) -> Scheduler:
    """Scheduler running callbacks on an asyncio event loop."""

    def schedule(delay: float, callback: Callable[[], None]) -> ScheduledCall:
        return loop.call_later(delay, callback)

    return schedule


class QuizCountdown:
    """Calls on_tick(quiz_id) every interval seconds until cancelled."""

    def __init__(
        self,
        quiz_id: int,
        on_tick: Callable[[int], None],
        scheduler: Scheduler,
        interval: float = 1.0,
    ):
        self.quiz_id = quiz_id
        self._on_tick = on_tick
        self._interval = interval
        self._scheduler = scheduler
        self._handle: ScheduledCall | None = None
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._cancelled

    def start(self) -> None:
        if self._cancelled or self._handle is not None:
            return
        self._arm()
        logger.debug("countdown_started", quiz_id=self.quiz_id, interval=self._interval)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
        logger.debug("countdown_cancelled", quiz_id=self.quiz_id)

    def _arm(self) -> None:
        self._handle = self._scheduler(self._interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._on_tick(self.quiz_id)
        if not self._cancelled:
            self._arm()
