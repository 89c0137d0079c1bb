from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from radmon.sensors.radiation import DEFAULT_OFFSET, DEFAULT_SPAN

CONFIG_ENV_VAR = "RADMON_CONFIG"


@dataclass(frozen=True)
class SensorSettings:
    """Parameters of the default random radiation sensor."""
    offset: float = DEFAULT_OFFSET
    span: float = DEFAULT_SPAN
    seed: Optional[int] = None


@dataclass(frozen=True)
class PollingSettings:
    """Polling loop cadence. ``cycles == 0`` runs until interrupted."""
    interval_s: float = 1.0
    cycles: int = 0


@dataclass(frozen=True)
class MonitorConfig:
    """
    Root monitor configuration loaded from YAML.

    The alarm limits are fixed by the alarm itself and are not configurable
    here; this only tunes the sensor and the polling loop around it.
    """
    sensor: SensorSettings = field(default_factory=SensorSettings)
    monitor: PollingSettings = field(default_factory=PollingSettings)
    log_level: str = "INFO"


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("config.yaml must contain a YAML mapping at the root")
    return data


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"'{name}' section must be a mapping")
    return value


def _resolve_default_config_path() -> Optional[Path]:
    """
    Resolve config.yaml location.

    Priority:
    1) RADMON_CONFIG env var if provided
    2) ./config.yaml in current working directory

    Returns None when neither is available.
    """
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser().resolve()

    candidate = Path("config.yaml").resolve()
    if candidate.exists():
        return candidate
    return None


def _finite_float(name: str, value: Any) -> float:
    result = float(value)
    if not math.isfinite(result):
        raise ValueError(f"{name} must be a finite number, got {value!r}")
    return result


def _whole_int(name: str, value: Any) -> int:
    # bool is an int subclass
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{name} must be an integer, got {value!r}")
        return int(value)
    return int(value)


def validate_log_level(level: Any) -> str:
    """
    Normalize a logging level name to upper case.

    Raises
    ------
    ValueError
        If the name is not a level known to :mod:`logging`.
    """
    name = str(level).upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ValueError(f"unknown log level {level!r}")
    return name


def parse_monitor_config(raw: Dict[str, Any]) -> MonitorConfig:
    """
    Convert a raw YAML mapping into typed config objects.

    Raises
    ------
    ValueError
        If a value has the wrong type or is out of range.
    """
    try:
        s = _section(raw, "sensor")
        seed = s.get("seed")
        sensor = SensorSettings(
            offset=_finite_float("sensor.offset", s.get("offset", DEFAULT_OFFSET)),
            span=_finite_float("sensor.span", s.get("span", DEFAULT_SPAN)),
            seed=None if seed is None else _whole_int("sensor.seed", seed),
        )

        m = _section(raw, "monitor")
        monitor = PollingSettings(
            interval_s=_finite_float("monitor.interval_s", m.get("interval_s", 1.0)),
            cycles=_whole_int("monitor.cycles", m.get("cycles", 0)),
        )

        log_level = validate_log_level(_section(raw, "logging").get("level", "INFO"))
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid monitor config: {e}") from e

    if sensor.span <= 0:
        raise ValueError("sensor.span must be positive")
    if monitor.interval_s < 0:
        raise ValueError("monitor.interval_s must not be negative")
    if monitor.cycles < 0:
        raise ValueError("monitor.cycles must not be negative")

    return MonitorConfig(sensor=sensor, monitor=monitor, log_level=log_level)


def load_monitor_config(path: Optional[str] = None) -> MonitorConfig:
    """
    Load monitor configuration from YAML.

    Parameters
    ----------
    path
        Explicit path to config.yaml. If None, uses default resolution and
        falls back to built-in defaults when no file is found.

    Returns
    -------
    MonitorConfig
        Parsed and validated configuration.

    Raises
    ------
    FileNotFoundError
        If an explicit (or env-provided) config file does not exist.
    ValueError
        If the file content is invalid.
    """
    cfg_path = Path(path).expanduser().resolve() if path else _resolve_default_config_path()
    if cfg_path is None:
        return MonitorConfig()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config not found: {cfg_path}")

    return parse_monitor_config(_read_yaml(cfg_path))
