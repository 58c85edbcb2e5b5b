# neuro_scoring/proximity.py
"""
Ocular target state: the moving target, its relocation and the on-target
ratio of the gaze trace.

The frame loop reads the current target while the relocation driver writes
it. The target lives in a single-writer ``TargetCell`` holding an immutable
``Target``; a read is one reference load, so a frame always sees a whole
position, never half of an update.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import SessionConstants
from .utils import euclidean, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """Target position in normalized coordinates."""

    x: float
    y: float
    generation: int = 0


CENTER_TARGET = Target(0.5, 0.5, 0)


class TargetCell:
    """Single-writer value cell for the current target."""

    def __init__(self, initial: Target = CENTER_TARGET) -> None:
        self._value = initial
        self._writer: Optional[object] = None

    def claim_writer(self, owner: object) -> None:
        """Register the only object allowed to write; a second owner is refused."""
        if self._writer is not None and self._writer is not owner:
            raise RuntimeError("TargetCell already has a writer")
        self._writer = owner

    def write(self, owner: object, x: float, y: float) -> Target:
        if owner is not self._writer:
            raise RuntimeError("Only the registered writer may update the target")
        self._value = Target(x, y, self._value.generation + 1)
        return self._value

    def read(self) -> Target:
        return self._value


class TargetRelocator:
    """Draws a new target uniformly from ``[margin, 1 - margin]`` on each call."""

    def __init__(
        self,
        cell: TargetCell,
        margin: float = SessionConstants.TARGET_MARGIN,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.cell = cell
        self.margin = margin
        self.rng = rng if rng is not None else np.random.default_rng()
        cell.claim_writer(self)

    def relocate(self) -> Target:
        low, high = self.margin, 1.0 - self.margin
        x, y = self.rng.uniform(low, high, size=2)
        target = self.cell.write(self, float(x), float(y))
        logger.debug("Target relocated to (%.3f, %.3f)", target.x, target.y)
        return target


class TargetProximityTracker:
    """Counts frames whose gaze point lies within ``radius`` of the target."""

    def __init__(self, radius: float = SessionConstants.ON_TARGET_RADIUS) -> None:
        self.radius = radius
        self.on_target_frames = 0
        self.total_frames = 0

    def update(self, gaze_x: float, gaze_y: float, target: Target) -> bool:
        on_target = euclidean(gaze_x, gaze_y, target.x, target.y) < self.radius
        self.total_frames += 1
        if on_target:
            self.on_target_frames += 1
        return on_target

    @property
    def on_target_percent(self) -> int:
        """Rounded percentage of on-target frames; 0 when nothing was observed."""
        if self.total_frames == 0:
            return 0
        return int(round_half_up(self.on_target_frames / self.total_frames * 100.0))


def on_target_penalty_factor(on_target_percent: int) -> float:
    """
    Linear discount for mostly off-target pursuit: 0.6 at 0%, rising to 1.0
    at the 50% threshold and above.
    """
    threshold = SessionConstants.ON_TARGET_PENALTY_THRESHOLD
    if on_target_percent >= threshold:
        return 1.0
    floor = SessionConstants.ON_TARGET_PENALTY_FLOOR
    return floor + (on_target_percent / threshold) * (1.0 - floor)
