"""
Threshold alarm.

This module contains the stateful evaluator that pulls one reading from a
:class:`MeasurementSource` per cycle and classifies it against fixed limits.

The alarm is non-latching: ``alarm_on`` always reflects the latest reading
only, while ``alarm_count`` accumulates every out-of-range reading since the
alarm was created.

Notes
-----
``check()`` performs an unsynchronized read-then-write on the alarm fields.
A caller sharing one alarm between threads must serialize calls itself.
"""

from __future__ import annotations

import logging
from typing import ClassVar, Optional

from radmon.domain.models import AlarmSnapshot, AlarmStatus, ThresholdLimits
from radmon.sensors.base import MeasurementSource
from radmon.sensors.radiation import RadiationSensor

logger = logging.getLogger(__name__)


class ThresholdAlarm:
    """
    Out-of-range alarm over a single measurement source.

    State Model
    -----------
    - NORMAL:    latest reading within ``[LOW_THRESHOLD, HIGH_THRESHOLD]``
                 (also the initial state)
    - TRIGGERED: latest reading strictly below the low or above the high limit

    Every evaluation landing in TRIGGERED increments ``alarm_count`` by one,
    including consecutive ones.

    Parameters
    ----------
    source
        Measurement source to read from. If None, a new
        :class:`RadiationSensor` is created for this alarm.
    """

    LOW_THRESHOLD: ClassVar[float] = 17.0
    HIGH_THRESHOLD: ClassVar[float] = 21.0

    def __init__(self, source: Optional[MeasurementSource] = None) -> None:
        self._source: MeasurementSource = source if source is not None else RadiationSensor()
        self._alarm_on = False
        self._alarm_count = 0
        self._last_value: Optional[float] = None

    def __repr__(self) -> str:
        return (
            f"ThresholdAlarm(source={self._source!r}, alarm_on={self._alarm_on}, "
            f"alarm_count={self._alarm_count})"
        )

    @property
    def source(self) -> MeasurementSource:
        """Measurement source read by :meth:`check`."""
        return self._source

    @property
    def limits(self) -> ThresholdLimits:
        return ThresholdLimits(low=self.LOW_THRESHOLD, high=self.HIGH_THRESHOLD)

    @property
    def alarm_on(self) -> bool:
        """True if the latest reading was out of range."""
        return self._alarm_on

    @property
    def alarm_count(self) -> int:
        """Number of out-of-range readings since creation."""
        return self._alarm_count

    @property
    def last_value(self) -> Optional[float]:
        return self._last_value

    @property
    def status(self) -> AlarmStatus:
        return AlarmStatus.TRIGGERED if self._alarm_on else AlarmStatus.NORMAL

    def check(self) -> None:
        """
        Run one evaluation cycle.

        Reads one value from the source and updates ``alarm_on`` and
        ``alarm_count``. A value equal to either threshold is in range.

        Exceptions raised by the source propagate unchanged and leave the
        alarm state as it was.
        """
        value = self._source.next_measure()
        was_on = self._alarm_on

        if value < self.LOW_THRESHOLD or value > self.HIGH_THRESHOLD:
            self._alarm_on = True
            self._alarm_count += 1
        else:
            self._alarm_on = False
        self._last_value = value

        logger.debug("reading evaluated", extra={"value": value, "alarm_count": self._alarm_count})

        if self._alarm_on and not was_on:
            logger.warning(
                "alarm triggered: %.3f outside [%s, %s]",
                value,
                self.LOW_THRESHOLD,
                self.HIGH_THRESHOLD,
                extra={"alarm_count": self._alarm_count},
            )
        elif was_on and not self._alarm_on:
            logger.info("alarm cleared: %.3f back in range", value)

    def snapshot(self) -> AlarmSnapshot:
        """Return an immutable view of the current alarm state."""
        return AlarmSnapshot(
            status=self.status,
            alarm_on=self._alarm_on,
            alarm_count=self._alarm_count,
            last_value=self._last_value,
        )
