"""
Deferred actions on a virtual clock.

Presentation delays (dice animation, AI thinking, auto-skip) are modelled as
callbacks due at a point in time. Nothing runs on its own: the owner moves
the clock with ``advance`` or drains the queue with ``run_until_idle``.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable

from loguru import logger


@dataclass(order=True, slots=True)
class ScheduledAction:
    due: float
    serial: int
    callback: Callable[[], object] = field(compare=False)
    label: str = field(default="", compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    def __init__(self, max_actions: int = 100_000):
        self.now = 0.0
        self.max_actions = max_actions
        self._queue: list[ScheduledAction] = []
        self._serial = 0

    def schedule(
        self, delay: float, callback: Callable[[], object], label: str = ""
    ) -> ScheduledAction:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self._serial += 1
        action = ScheduledAction(self.now + delay, self._serial, callback, label)
        heapq.heappush(self._queue, action)
        return action

    def cancel(self, action: ScheduledAction) -> None:
        action.cancelled = True

    def cancel_all(self) -> None:
        for action in self._queue:
            action.cancelled = True
        self._queue.clear()

    @property
    def pending(self) -> int:
        return sum(1 for a in self._queue if not a.cancelled)

    def next_due(self) -> float | None:
        self._drop_cancelled()
        return self._queue[0].due if self._queue else None

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every action that falls due.

        Actions scheduled by callbacks run in the same call when they are due
        before the new time. Returns the number of actions run.
        """
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0].due <= target:
            ran += self._run_next()
        self.now = target
        return ran

    def run_until_idle(self) -> int:
        """Run actions in due order until none are left."""
        ran = 0
        while self._queue:
            if ran >= self.max_actions:
                logger.warning(f"Scheduler stopped after {ran} actions with work still queued")
                break
            ran += self._run_next()
        return ran

    def _run_next(self) -> int:
        action = heapq.heappop(self._queue)
        if action.cancelled:
            return 0
        self.now = max(self.now, action.due)
        action.callback()
        return 1

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
