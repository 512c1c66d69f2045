from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, Optional, Tuple

import numpy as np

from lorenzviz.core.errors import InvalidParameterError

Point3D = Tuple[float, float, float]


class TrajectoryBuffer:
    """
    Bounded, time-ordered sequence of visited points.

    Grows by one point per append until ``capacity`` is reached, then slides:
    every further append evicts exactly the oldest point.
    """

    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidParameterError(f"capacity must be a positive integer, got {capacity!r}")
        self.capacity = int(capacity)
        self._points: Deque[Point3D] = deque()

    def append_and_evict(self, point: Point3D) -> Optional[Point3D]:
        """Append ``point`` and return the evicted oldest point, if any."""
        self._points.append((float(point[0]), float(point[1]), float(point[2])))
        if len(self._points) > self.capacity:
            return self._points.popleft()
        return None

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point3D]:
        return iter(self._points)

    @property
    def oldest(self) -> Optional[Point3D]:
        return self._points[0] if self._points else None

    @property
    def newest(self) -> Optional[Point3D]:
        return self._points[-1] if self._points else None

    def as_array(self) -> np.ndarray:
        """Copy of the buffer as a (len, 3) float array."""
        if not self._points:
            return np.empty((0, 3), dtype=float)
        return np.array(self._points, dtype=float)
