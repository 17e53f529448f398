"""
Tick-driven task scheduling.

Hosts run game logic on one thread and advance a tick counter; repeating
tasks fire on that thread. ``TickScheduler`` is a minimal host-side
implementation: call ``tick_once()`` from the host loop (or ``advance()`` in
tests) and due tasks run in registration order.
"""

from __future__ import annotations

from typing import Callable, List, Protocol

import structlog

logger = structlog.get_logger()


class ScheduledTask:
    """Handle to a repeating task."""

    def __init__(self, callback: Callable[[], None], next_run: int, period: int):
        self.callback = callback
        self.next_run = next_run
        self.period = period
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(Protocol):
    def run_task_timer(
        self, callback: Callable[[], None], delay_ticks: int, period_ticks: int
    ) -> ScheduledTask:
        ...


class TickScheduler:
    """Runs repeating tasks against a manually advanced tick counter."""

    def __init__(self):
        self.current_tick = 0
        self._tasks: List[ScheduledTask] = []

    @property
    def pending_tasks(self) -> List[ScheduledTask]:
        return [task for task in self._tasks if not task.cancelled]

    def run_task_timer(
        self, callback: Callable[[], None], delay_ticks: int, period_ticks: int
    ) -> ScheduledTask:
        if delay_ticks < 0 or period_ticks < 0:
            raise ValueError("delay_ticks and period_ticks must be non-negative")

        task = ScheduledTask(callback, self.current_tick + delay_ticks, period_ticks)
        self._tasks.append(task)
        return task

    def tick_once(self) -> None:
        """Run every task due at the current tick, then advance the clock."""
        due = [t for t in self._tasks if not t.cancelled and t.next_run <= self.current_tick]

        for task in due:
            if task.cancelled:
                continue
            try:
                task.callback()
            except Exception as e:
                logger.error("Scheduled task failed", tick=self.current_tick, error=str(e))

            if task.period > 0:
                task.next_run = self.current_tick + task.period
            else:
                task.cancel()

        self._tasks = [t for t in self._tasks if not t.cancelled]
        self.current_tick += 1

    def advance(self, ticks: int) -> None:
        for _ in range(ticks):
            self.tick_once()

    def cancel_all(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()
