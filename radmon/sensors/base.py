"""
Measurement source contract.

Anything with a ``next_measure()`` method returning a float can feed a
:class:`radmon.core.threshold_alarm.ThresholdAlarm`: the random radiation
sensor, a replayed recording, or a test double.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MeasurementSource(Protocol):
    """
    Protocol interface for scalar measurement sources.

    Implementations are free to be random, deterministic or replay-based.
    Callers must not rely on any range of the returned values.

    Methods
    -------
    next_measure()
        Produce the next reading.
    """

    def next_measure(self) -> float:
        """
        Produce the next scalar reading.

        Returns
        -------
        float
            The measured value.
        """
        ...
