"""
Replay measurement source.

Feeds a fixed, pre-recorded sequence of readings to an alarm. Useful for
re-running a captured trace or for scripting scenarios in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List


class MeasurementSourceExhausted(RuntimeError):
    """Raised when a replay source has no readings left."""


@dataclass
class ScriptedMeasurementSource:
    """
    Measurement source returning scripted values in order.

    Parameters
    ----------
    values
        Readings to return, first to last.
    cycle
        If True, start over from the first value after the last one instead of
        raising.

    Raises
    ------
    ValueError
        If ``cycle`` is True and ``values`` is empty.
    """

    values: Iterable[float]
    cycle: bool = False

    _values: List[float] = field(init=False, repr=False)
    _pos: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self._values = [float(v) for v in self.values]
        if self.cycle and not self._values:
            raise ValueError("a cycling source needs at least one value")

    @property
    def remaining(self) -> int:
        """Number of readings left before exhaustion (ignores cycling)."""
        return len(self._values) - self._pos

    def next_measure(self) -> float:
        """
        Return the next scripted reading.

        Raises
        ------
        MeasurementSourceExhausted
            If every value was consumed and ``cycle`` is False.
        """
        if self._pos >= len(self._values):
            if not self.cycle:
                raise MeasurementSourceExhausted(
                    f"no readings left after {len(self._values)} value(s)"
                )
            self._pos = 0

        value = self._values[self._pos]
        self._pos += 1
        return value
