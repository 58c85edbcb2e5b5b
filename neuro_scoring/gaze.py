# neuro_scoring/gaze.py
"""
Gaze position derived from face-mesh landmarks.

Three tiers, each lowering the reported confidence:

  - HIGH:   mean of both iris centres (468/473), accepted only when each
            iris lies inside its eye-corner span (relative x in [-0.2, 1.2]).
            Glasses frames and lens reflections push the iris outside.
  - MEDIUM: mean of both eye-corner midpoints (33/133 left, 263/362 right).
  - LOW:    nose tip (1) shifted up by 0.05 as a face-centre approximation.

Confidence is reported alongside the geometry and never alters it.
"""
from __future__ import annotations

import logging
from typing import Optional

from .config import GazeConstants
from .domain import Detection, GazeConfidence, GazeEstimate, Landmark

logger = logging.getLogger(__name__)


def _relative_position(value: float, start: float, end: float) -> float:
    width = abs(end - start)
    if width <= GazeConstants.MIN_EYE_WIDTH:
        return 0.5
    return (value - start) / width


def _iris_inside(iris: Landmark, start: Landmark, end: Landmark) -> bool:
    rel = _relative_position(iris.x, start.x, end.x)
    return GazeConstants.IRIS_RELATIVE_MIN <= rel <= GazeConstants.IRIS_RELATIVE_MAX


def estimate_gaze(detection: Detection) -> Optional[GazeEstimate]:
    """
    Derive the gaze point of one face detection.

    Returns None when not even the nose tip is available; callers treat
    that like a frame without detection.
    """
    left_iris = detection.get(GazeConstants.LEFT_IRIS)
    right_iris = detection.get(GazeConstants.RIGHT_IRIS)
    left_outer = detection.get(GazeConstants.LEFT_EYE_OUTER)
    left_inner = detection.get(GazeConstants.LEFT_EYE_INNER)
    right_inner = detection.get(GazeConstants.RIGHT_EYE_INNER)
    right_outer = detection.get(GazeConstants.RIGHT_EYE_OUTER)

    corners = (left_outer, left_inner, right_inner, right_outer)
    has_corners = all(c is not None for c in corners)

    if left_iris is not None and right_iris is not None and has_corners:
        if _iris_inside(left_iris, left_outer, left_inner) and _iris_inside(
            right_iris, right_inner, right_outer
        ):
            return GazeEstimate(
                x=(left_iris.x + right_iris.x) / 2.0,
                y=(left_iris.y + right_iris.y) / 2.0,
                confidence=GazeConfidence.HIGH,
            )
        logger.debug("Iris landmarks outside eye corners, falling back to corners")

    if has_corners:
        left_x = (left_outer.x + left_inner.x) / 2.0
        left_y = (left_outer.y + left_inner.y) / 2.0
        right_x = (right_inner.x + right_outer.x) / 2.0
        right_y = (right_inner.y + right_outer.y) / 2.0
        return GazeEstimate(
            x=(left_x + right_x) / 2.0,
            y=(left_y + right_y) / 2.0,
            confidence=GazeConfidence.MEDIUM,
        )

    nose = detection.get(GazeConstants.NOSE_TIP)
    if nose is not None:
        return GazeEstimate(
            x=nose.x,
            y=nose.y - GazeConstants.NOSE_TO_EYE_OFFSET_Y,
            confidence=GazeConfidence.LOW,
        )
    return None
