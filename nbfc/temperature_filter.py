"""A moving-average filter over the temperatures of a fixed timespan."""

from __future__ import annotations

__all__ = ["TemperatureFilter"]


class TemperatureFilter:
    """Average the last ceil(timespan / poll_interval) readings."""

    def __init__(self, poll_interval: int, timespan: int) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval: Invalid argument")
        if timespan <= 0:
            raise ValueError("timespan: Invalid argument")
        size = -(-timespan // poll_interval)
        self._ring = [0.0] * size
        self._index = 0
        self._sum = 0.0
        self._full = False

    @property
    def size(self) -> int:
        """Number of readings averaged."""
        return len(self._ring)

    def filter(self, temperature: float) -> float:
        """Add a reading and return the current average."""
        self._sum += temperature - self._ring[self._index]
        self._ring[self._index] = temperature
        self._index += 1
        if self._index == len(self._ring):
            self._index = 0
            self._full = True
        count = len(self._ring) if self._full else self._index
        return self._sum / count