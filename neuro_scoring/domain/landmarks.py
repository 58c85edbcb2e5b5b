"""Landmark observations delivered by the detection model.

Coordinates are normalized to the video frame ([0, 1] on both axes). The
classes carry data and minimal helpers only; gaze derivation and scoring
live in their own modules.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from .enums import GazeConfidence, LandmarkKind


@dataclass(frozen=True)
class Landmark:
    """Single normalized landmark."""

    x: float
    y: float
    z: float = 0.0

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass(frozen=True)
class Detection:
    """Landmarks of one hand or one face found in a single video frame."""

    kind: LandmarkKind
    landmarks: Mapping[int, Landmark] = field(default_factory=dict)

    @classmethod
    def hand(cls, x: float, y: float, z: float = 0.0) -> Detection:
        """Hand detection carrying only the wrist landmark."""
        return cls(LandmarkKind.HAND, {0: Landmark(x, y, z)})

    def get(self, index: int) -> Optional[Landmark]:
        return self.landmarks.get(index)

    def is_empty(self) -> bool:
        return not self.landmarks


@dataclass(frozen=True)
class GazeEstimate:
    """Derived gaze position; confidence does not alter the geometry."""

    x: float
    y: float
    confidence: GazeConfidence

    @property
    def point(self) -> Tuple[float, float]:
        return (self.x, self.y)
