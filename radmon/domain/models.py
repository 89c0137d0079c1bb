"""
Domain models and enums.

This module defines the domain-level types shared by the alarm and its callers:
- AlarmStatus, the two states of the threshold alarm
- ThresholdLimits, the inclusive in-range band
- AlarmSnapshot, a read-only view of the alarm for displays and loggers

All models are immutable (frozen) dataclasses so a snapshot taken by a caller
never changes underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AlarmStatus(str, Enum):
    """
    Classification of the most recent evaluation.

    Members
    -------
    NORMAL : str
        The latest reading was inside the limits (or nothing was read yet).
    TRIGGERED : str
        The latest reading was outside the limits.
    """

    NORMAL = "NORMAL"
    TRIGGERED = "TRIGGERED"


@dataclass(frozen=True)
class ThresholdLimits:
    """
    Inclusive band of acceptable readings.

    A value equal to either bound is in range.

    Parameters
    ----------
    low
        Lowest acceptable reading.
    high
        Highest acceptable reading.

    Raises
    ------
    ValueError
        If ``low`` is greater than ``high``.
    """

    low: float
    high: float

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ValueError(f"low limit {self.low} is above high limit {self.high}")

    def contains(self, value: float) -> bool:
        """Return True if ``value`` lies within ``[low, high]``."""
        return self.low <= value <= self.high


@dataclass(frozen=True)
class AlarmSnapshot:
    """
    Point-in-time view of a threshold alarm.

    Parameters
    ----------
    status
        NORMAL or TRIGGERED, from the latest evaluation.
    alarm_on
        Same information as ``status`` as a flag.
    alarm_count
        Number of out-of-range evaluations since the alarm was created.
    last_value
        Reading seen by the latest evaluation; None before the first one.
    """

    status: AlarmStatus
    alarm_on: bool
    alarm_count: int
    last_value: Optional[float] = None
