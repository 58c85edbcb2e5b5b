"""Small numeric helpers shared by the scorers."""

from .numeric import clamp, round_half_up, euclidean

__all__ = [
    "clamp",
    "round_half_up",
    "euclidean",
]
