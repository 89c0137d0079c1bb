"""
Unit tests for radmon.core.threshold_alarm.

These tests validate the ThresholdAlarm evaluation cycle:
- In-range and out-of-range classification
- Inclusive boundaries at both limits
- Non-latching behavior (an in-range reading clears the alarm)
- Trigger counter monotonicity
- Error propagation from the measurement source
- Default source construction

The tests use lightweight fake sources so every reading is deterministic.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List

import pytest

from radmon.core.threshold_alarm import ThresholdAlarm
from radmon.domain.models import AlarmSnapshot, AlarmStatus
from radmon.sensors.base import MeasurementSource
from radmon.sensors.radiation import RadiationSensor
from radmon.sensors.replay import MeasurementSourceExhausted, ScriptedMeasurementSource


@dataclass
class FixedSource:
    """
    Measurement source test double returning the same value on every call.

    Parameters
    ----------
    value
        Reading to return.
    """

    value: float
    calls: int = 0

    def next_measure(self) -> float:
        self.calls += 1
        return self.value


class FailingSource:
    """Measurement source whose every read fails."""

    def next_measure(self) -> float:
        raise OSError("detector offline")


def _alarm_after(values: List[float]) -> ThresholdAlarm:
    alarm = ThresholdAlarm(ScriptedMeasurementSource(values))
    for _ in values:
        alarm.check()
    return alarm


def test_initial_state_is_normal() -> None:
    """A fresh alarm is off, has no triggers and has seen no reading."""
    alarm = ThresholdAlarm(FixedSource(18.0))

    assert alarm.alarm_on is False
    assert alarm.alarm_count == 0
    assert alarm.status is AlarmStatus.NORMAL
    assert alarm.last_value is None


@pytest.mark.parametrize(
    "values, alarm_on, alarm_count",
    [
        ([18.5], False, 0),
        ([22.0], True, 1),
        ([16.9], True, 1),
        ([17.0], False, 0),
        ([21.0], False, 0),
        ([22.0, 22.0], True, 2),
    ],
)
def test_reference_scenarios(values: List[float], alarm_on: bool, alarm_count: int) -> None:
    """Each scripted sequence ends in the expected on/off flag and count."""
    alarm = _alarm_after(values)

    assert alarm.alarm_on is alarm_on
    assert alarm.alarm_count == alarm_count


@pytest.mark.parametrize("value", [17.0, 17.000001, 19.0, 20.999999, 21.0])
def test_in_range_values_keep_alarm_off(value: float) -> None:
    alarm = ThresholdAlarm(FixedSource(value))
    alarm.check()

    assert alarm.alarm_on is False
    assert alarm.alarm_count == 0
    assert alarm.status is AlarmStatus.NORMAL


@pytest.mark.parametrize(
    "value",
    [
        math.nextafter(17.0, -math.inf),
        math.nextafter(21.0, math.inf),
        -1000.0,
        0.0,
        1e9,
    ],
)
def test_out_of_range_values_trigger_once(value: float) -> None:
    """Values just past either limit trigger and add exactly one to the count."""
    alarm = ThresholdAlarm(FixedSource(value))
    alarm.check()

    assert alarm.alarm_on is True
    assert alarm.alarm_count == 1
    assert alarm.status is AlarmStatus.TRIGGERED


def test_alarm_is_not_latching() -> None:
    """An in-range reading after a trigger clears alarm_on but keeps the count."""
    alarm = ThresholdAlarm(ScriptedMeasurementSource([25.0, 19.0]))

    alarm.check()
    assert alarm.alarm_on is True

    alarm.check()
    assert alarm.alarm_on is False
    assert alarm.alarm_count == 1


def test_alarm_count_never_decreases() -> None:
    readings = [18.0, 22.0, 16.0, 19.0, 21.0, 30.0, 17.0, 10.0, 20.0]
    alarm = ThresholdAlarm(ScriptedMeasurementSource(readings))

    counts = []
    for _ in readings:
        alarm.check()
        counts.append(alarm.alarm_count)

    assert counts == [0, 1, 2, 2, 2, 3, 3, 4, 4]
    assert counts == sorted(counts)


def test_check_reads_one_value_per_call() -> None:
    src = FixedSource(18.0)
    alarm = ThresholdAlarm(src)

    alarm.check()
    alarm.check()
    alarm.check()

    assert src.calls == 3


def test_snapshot_reflects_latest_check() -> None:
    alarm = ThresholdAlarm(ScriptedMeasurementSource([23.5, 18.25]))

    alarm.check()
    assert alarm.snapshot() == AlarmSnapshot(
        status=AlarmStatus.TRIGGERED, alarm_on=True, alarm_count=1, last_value=23.5
    )

    alarm.check()
    assert alarm.snapshot() == AlarmSnapshot(
        status=AlarmStatus.NORMAL, alarm_on=False, alarm_count=1, last_value=18.25
    )


def test_reading_accessors_have_no_side_effects() -> None:
    src = FixedSource(30.0)
    alarm = ThresholdAlarm(src)
    alarm.check()

    for _ in range(3):
        assert alarm.alarm_on is True
        assert alarm.alarm_count == 1
        alarm.snapshot()

    assert src.calls == 1


def test_source_error_propagates_and_leaves_state_untouched() -> None:
    alarm = ThresholdAlarm(ScriptedMeasurementSource([30.0]))
    alarm.check()

    with pytest.raises(MeasurementSourceExhausted):
        alarm.check()

    assert alarm.alarm_on is True
    assert alarm.alarm_count == 1
    assert alarm.last_value == 30.0


def test_arbitrary_source_exception_is_not_caught() -> None:
    alarm = ThresholdAlarm(FailingSource())

    with pytest.raises(OSError, match="detector offline"):
        alarm.check()

    assert alarm.alarm_count == 0


def test_default_source_is_created_per_alarm() -> None:
    """Without an explicit source each alarm owns its own RadiationSensor."""
    a = ThresholdAlarm()
    b = ThresholdAlarm()

    assert isinstance(a.source, RadiationSensor)
    assert isinstance(a.source, MeasurementSource)
    assert a.source is not b.source


def test_source_is_read_only() -> None:
    src = FixedSource(18.0)
    alarm = ThresholdAlarm(src)

    assert alarm.source is src
    with pytest.raises(AttributeError):
        alarm.source = None  # type: ignore[misc]

    alarm.check()
    assert src.calls == 1


def test_alarms_compare_by_identity() -> None:
    """Two alarms in the same state over the same source are still distinct alarms."""
    src = FixedSource(18.0)

    assert ThresholdAlarm(src) != ThresholdAlarm(src)


def test_default_source_check_completes() -> None:
    alarm = ThresholdAlarm()

    for _ in range(100):
        alarm.check()

    assert 0 <= alarm.alarm_count <= 100
    assert alarm.last_value is not None


def test_limits_are_fixed() -> None:
    alarm = ThresholdAlarm(FixedSource(18.0))

    assert alarm.limits.low == 17.0
    assert alarm.limits.high == 21.0
    assert ThresholdAlarm.LOW_THRESHOLD == 17.0
    assert ThresholdAlarm.HIGH_THRESHOLD == 21.0


def test_transitions_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    alarm = ThresholdAlarm(ScriptedMeasurementSource([25.0, 26.0, 19.0]))

    with caplog.at_level(logging.DEBUG, logger="radmon.core.threshold_alarm"):
        alarm.check()
        alarm.check()
        alarm.check()

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    infos = [r for r in caplog.records if r.levelno == logging.INFO]
    debugs = [r for r in caplog.records if r.levelno == logging.DEBUG]

    # One WARNING per NORMAL -> TRIGGERED edge, not per trigger.
    assert len(warnings) == 1
    assert "alarm triggered" in warnings[0].getMessage()
    assert len(infos) == 1
    assert "alarm cleared" in infos[0].getMessage()
    assert len(debugs) == 3
