"""Nearest-surface-wins depth buffer."""

from __future__ import annotations

from array import array
from typing import Optional

from .geometry import Point


class DepthBuffer:
    """Per-pixel nearest distance, initialised to +infinity."""

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError("DepthBuffer requires width and height >= 1")
        self.width = width
        self.height = height
        self._values = array("d", [float("inf")]) * (width * height)

    def contains(self, point: Point) -> bool:
        return 0 <= point.x < self.width and 0 <= point.y < self.height

    def _index(self, x: int, y: int) -> Optional[int]:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        return None

    def get(self, x: int, y: int) -> Optional[float]:
        index = self._index(x, y)
        if index is None:
            return None
        return self._values[index]

    def try_update(self, x: int, y: int, value: float) -> bool:
        """Store ``value`` if it is strictly nearer than the recorded one."""
        index = self._index(x, y)
        if index is None:
            return False
        if value < self._values[index]:
            self._values[index] = value
            return True
        return False

    def clear(self) -> None:
        self._values = array("d", [float("inf")]) * (self.width * self.height)


__all__ = ["DepthBuffer"]
