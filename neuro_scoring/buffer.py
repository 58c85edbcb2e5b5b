# neuro_scoring/buffer.py
"""Append-only sample buffer backed by a growable numpy array."""
from __future__ import annotations

from typing import Sequence, Union

import numpy as np

_INITIAL_CAPACITY = 256


class SampleBuffer:
    """
    Ordered, append-only sequence of points (``width=2``) or deltas
    (``width=1``) collected during one task attempt.

    Snapshots and trailing windows are read-only views. Appends only ever
    write past the current length, and growth copies into a new array, so a
    view taken earlier never changes.
    """

    def __init__(self, width: int = 2, capacity: int = _INITIAL_CAPACITY) -> None:
        if width not in (1, 2):
            raise ValueError("width must be 1 (deltas) or 2 (points)")
        self.width = width
        self._size = 0
        self._data = self._allocate(max(1, capacity))

    def _allocate(self, capacity: int) -> np.ndarray:
        if self.width == 1:
            return np.empty(capacity, dtype=float)
        return np.empty((capacity, self.width), dtype=float)

    def __len__(self) -> int:
        return self._size

    def append(self, sample: Union[float, Sequence[float]]) -> None:
        """Append one point or delta; never rejects a value."""
        if self._size == len(self._data):
            grown = self._allocate(2 * len(self._data))
            grown[: self._size] = self._data[: self._size]
            self._data = grown
        self._data[self._size] = sample
        self._size += 1

    def snapshot(self) -> np.ndarray:
        """Read-only view of everything collected so far."""
        return self._view(0, self._size)

    def trailing_window(self, n: int) -> np.ndarray:
        """Read-only view of the last ``n`` elements (fewer if not available)."""
        if n <= 0:
            return self._view(0, 0)
        return self._view(max(0, self._size - n), self._size)

    def _view(self, start: int, stop: int) -> np.ndarray:
        view = self._data[start:stop]
        view.setflags(write=False)
        return view
