# neuro_scoring/drivers.py
"""
Cooperative drivers for one task attempt.

A session runs three drivers: the frame driver (fed by the landmark
source), a fixed-interval driver relocating the ocular target and a
one-shot deadline driver ending the task. The host advances timer drivers
by calling ``tick(now)`` with a monotonic time in seconds; nothing runs in
the background.

Every driver holds the attempt's ``CancellationToken`` and checks it at
the top of each tick, so cancelling the token stops all of them at once.
"""
from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class CancellationToken:
    """Stop signal shared by the drivers of one attempt."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class FrameDriver(Generic[T]):
    """Forwards frames to ``handler`` until the token is cancelled."""

    def __init__(self, handler: Callable[[T], None], token: CancellationToken) -> None:
        self.handler = handler
        self.token = token

    def push(self, frame: T) -> bool:
        if self.token.cancelled:
            return False
        self.handler(frame)
        return True


class IntervalDriver:
    """
    Calls ``callback`` every ``interval`` seconds.

    Firings stay on the fixed grid ``start + k * interval`` however late the
    tick arrives. A tick that arrives after several intervals have elapsed
    fires once; missed firings are not replayed.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        token: CancellationToken,
        start: float,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.interval = interval
        self.callback = callback
        self.token = token
        self.next_fire = start + interval

    def tick(self, now: float) -> bool:
        if self.token.cancelled:
            return False
        if now < self.next_fire:
            return False
        while self.next_fire <= now:
            self.next_fire += self.interval
        self.callback()
        return True


class DeadlineDriver:
    """Calls ``callback`` exactly once when ``now`` reaches ``deadline``."""

    def __init__(
        self,
        deadline: float,
        callback: Callable[[], None],
        token: CancellationToken,
    ) -> None:
        self.deadline = deadline
        self.callback = callback
        self.token = token
        self.fired = False

    def remaining(self, now: float) -> float:
        return max(0.0, self.deadline - now)

    def tick(self, now: float) -> bool:
        if self.token.cancelled or self.fired:
            return False
        if now < self.deadline:
            return False
        self.fired = True
        self.callback()
        return True


class OneShotGuard:
    """Lets exactly one caller through; later calls see the first result."""

    def __init__(self) -> None:
        self._done = False
        self._value: Optional[object] = None

    @property
    def done(self) -> bool:
        return self._done

    def run(self, fn: Callable[[], T]) -> T:
        if not self._done:
            self._done = True
            self._value = fn()
        return self._value  # type: ignore[return-value]
