"""Deferred turn-continuation scheduler driven by an external clock."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from heapq import heappop, heappush

logger = logging.getLogger(__name__)

StepCallback = Callable[[], None]


@dataclass(slots=True)
class _PendingStep:
    step_id: int
    due_at: float
    run: StepCallback
    label: str
    cancelled: bool = False


class TurnScheduler:
    """One-shot delayed callbacks for match pacing.

    Time only moves when the driver calls `advance` or `run_due`, so tests
    and headless runs step through delays without sleeping. Steps due at the
    same instant run in the order they were scheduled.
    """

    def __init__(self) -> None:
        self._clock = 0.0
        self._last_step_id = 0
        self._steps: dict[int, _PendingStep] = {}
        self._heap: list[tuple[float, int]] = []

    @property
    def now_seconds(self) -> float:
        return self._clock

    @property
    def pending(self) -> int:
        """Number of scheduled steps that were not cancelled."""
        return len(self._active())

    def next_due_in(self) -> float | None:
        """Seconds until the earliest active step, or None when idle."""
        active = self._active()
        if not active:
            return None
        return max(0.0, min(step.due_at for step in active) - self._clock)

    def call_later(self, delay_seconds: float, callback: StepCallback, *, label: str = "") -> int:
        """Run `callback` once after `delay_seconds`; returns a step id for `cancel`."""
        if delay_seconds < 0.0:
            raise ValueError("delay_seconds must be >= 0")
        self._last_step_id += 1
        step = _PendingStep(
            step_id=self._last_step_id,
            due_at=self._clock + delay_seconds,
            run=callback,
            label=label,
        )
        self._steps[step.step_id] = step
        heappush(self._heap, (step.due_at, step.step_id))
        return step.step_id

    def cancel(self, step_id: int) -> None:
        step = self._steps.get(step_id)
        if step is not None:
            step.cancelled = True

    def cancel_all(self) -> int:
        """Drop every scheduled step and return how many were active."""
        dropped = self.pending
        self._steps.clear()
        self._heap.clear()
        return dropped

    def advance(self, delta_seconds: float) -> int:
        """Move the clock forward and run the steps that became due."""
        if delta_seconds < 0.0:
            raise ValueError("delta_seconds must be >= 0")
        return self.run_due(self._clock + delta_seconds)

    def advance_to_next(self) -> int:
        """Jump the clock to the earliest active step and run what is due."""
        active = self._active()
        if not active:
            return 0
        return self.run_due(max(self._clock, min(step.due_at for step in active)))

    def run_due(self, now_seconds: float) -> int:
        """Run steps due at or before `now_seconds`, including ones they schedule."""
        if now_seconds < self._clock:
            raise ValueError("now_seconds cannot move backwards")
        self._clock = now_seconds
        executed = 0
        while self._heap and self._heap[0][0] <= self._clock:
            _, step_id = heappop(self._heap)
            step = self._steps.pop(step_id, None)
            if step is None or step.cancelled:
                continue
            logger.debug("turn_step_run label=%s at=%.3f", step.label or "-", self._clock)
            step.run()
            executed += 1
        return executed

    def _active(self) -> list[_PendingStep]:
        return [step for step in self._steps.values() if not step.cancelled]
