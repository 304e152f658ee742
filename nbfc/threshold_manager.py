"""Choose the active temperature threshold with hysteresis."""

from __future__ import annotations

from typing import Iterable

from nbfc.model_config import TemperatureThreshold

__all__ = ["ThresholdManager"]


class ThresholdManager:
    """Track the current threshold among thresholds sorted by up_threshold."""

    def __init__(self, thresholds: Iterable[TemperatureThreshold], legacy: bool = False) -> None:
        self.thresholds = sorted(thresholds, key=lambda t: t.up_threshold)
        self.legacy = legacy
        self._current: int | None = None

    @property
    def current(self) -> TemperatureThreshold | None:
        """The threshold selected last, or None."""
        return None if self._current is None else self.thresholds[self._current]

    def auto_select(self, temperature: float) -> TemperatureThreshold | None:
        """Move to the threshold that fits the temperature and return it; None if there are none."""
        size = len(self.thresholds)
        if not size:
            return None
        data = self.thresholds
        i = self._current or 0
        while i > 0 and temperature <= data[i].down_threshold:
            i -= 1
        step = 1 if self.legacy else 0
        while i < size - 1 and temperature >= data[i + step].up_threshold:
            i += 1
        self._current = i
        return data[i]