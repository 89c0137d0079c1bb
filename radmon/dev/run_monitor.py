from __future__ import annotations

import argparse
import logging
import math
import time
from dataclasses import replace
from typing import Callable, List, Optional

from radmon.config.logging_config import configure_logging
from radmon.config.yaml_config import MonitorConfig, load_monitor_config, validate_log_level
from radmon.core.threshold_alarm import ThresholdAlarm
from radmon.domain.models import AlarmSnapshot
from radmon.sensors.radiation import RadiationSensor

logger = logging.getLogger(__name__)


def run_polling_loop(
    alarm: ThresholdAlarm,
    cycles: int,
    interval_s: float,
    sleep: Callable[[float], None] = time.sleep,
    on_cycle: Optional[Callable[[int, AlarmSnapshot], None]] = None,
) -> AlarmSnapshot:
    """
    Drive ``alarm.check()`` on a fixed cadence.

    Parameters
    ----------
    alarm
        Alarm to evaluate.
    cycles
        Number of evaluations; 0 runs until interrupted.
    interval_s
        Pause between evaluations (not applied after the last one).
    sleep
        Sleep function, replaceable in tests.
    on_cycle
        Optional callback receiving the 1-based cycle number and the snapshot
        taken right after that cycle.

    Returns
    -------
    AlarmSnapshot
        Alarm state after the final evaluation.

    Notes
    -----
    Errors raised by the measurement source are not caught here.
    """
    cycle = 0
    while cycles == 0 or cycle < cycles:
        cycle += 1
        alarm.check()
        snap = alarm.snapshot()
        logger.info("cycle %d: %s", cycle, snap.status.value,
                    extra={"cycle": cycle, "value": snap.last_value, "alarm_count": snap.alarm_count})
        if on_cycle is not None:
            on_cycle(cycle, snap)
        if cycles == 0 or cycle < cycles:
            sleep(interval_s)
    return alarm.snapshot()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Radioactivity threshold monitor")
    parser.add_argument("--config", default=None, help="path to config.yaml")
    parser.add_argument("--cycles", type=int, default=None, help="number of checks, 0 = forever")
    parser.add_argument("--interval", type=float, default=None, help="seconds between checks")
    parser.add_argument("--seed", type=int, default=None, help="sensor RNG seed")
    parser.add_argument("--log-level", default=None)
    return parser


def apply_overrides(config: MonitorConfig, args: argparse.Namespace) -> MonitorConfig:
    """Return ``config`` with any command-line values layered on top."""
    sensor = config.sensor
    monitor = config.monitor
    if args.seed is not None:
        sensor = replace(sensor, seed=args.seed)
    if args.cycles is not None:
        if args.cycles < 0:
            raise ValueError("--cycles must not be negative")
        monitor = replace(monitor, cycles=args.cycles)
    if args.interval is not None:
        if not math.isfinite(args.interval) or args.interval < 0:
            raise ValueError("--interval must be a finite, non-negative number")
        monitor = replace(monitor, interval_s=args.interval)
    log_level = validate_log_level(args.log_level) if args.log_level else config.log_level
    return replace(config, sensor=sensor, monitor=monitor, log_level=log_level)


def main(argv: Optional[List[str]] = None) -> AlarmSnapshot:
    """
    Run the monitor from the command line.

    Notes
    -----
    - Loads configuration from ``config.yaml`` (or ``$RADMON_CONFIG``) when present.
    - Usage:
        python -m radmon.dev.run_monitor --config path/to/config.yaml --cycles 10
    """
    args = build_arg_parser().parse_args(argv)
    config = apply_overrides(load_monitor_config(args.config), args)
    configure_logging(config.log_level)

    sensor = RadiationSensor(
        offset=config.sensor.offset,
        span=config.sensor.span,
        seed=config.sensor.seed,
    )
    alarm = ThresholdAlarm(source=sensor)

    logger.info("monitor started, limits [%s, %s]", alarm.limits.low, alarm.limits.high)
    try:
        final = run_polling_loop(alarm, config.monitor.cycles, config.monitor.interval_s)
    except KeyboardInterrupt:
        final = alarm.snapshot()
        logger.info("monitor interrupted")

    logger.info("monitor stopped: %d alarm(s)", final.alarm_count, extra={"alarm_count": final.alarm_count})
    return final


if __name__ == "__main__":
    main()
