"""Bounded graph series fed one point per refresh tick."""

from __future__ import annotations

from collections import deque


class GraphSeries:
    def __init__(self, title: str, color: str, max_points: int = 60, locked_max_y: bool = True) -> None:
        self.title = title
        self.color = color
        self.locked_max_y = locked_max_y
        self.visible = True
        self._points: deque[float] = deque(maxlen=max(1, max_points))

    @property
    def max_points(self) -> int:
        return self._points.maxlen or 0

    def push(self, value: float) -> None:
        self._points.append(float(value))

    def points(self) -> tuple[float, ...]:
        return tuple(self._points)

    def max_y(self) -> float:
        if self.locked_max_y or not self._points:
            return 1.0
        return max(self._points)

    def clear(self) -> None:
        self._points.clear()
