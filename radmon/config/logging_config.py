from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Iterable, Optional, Sequence

_DEFAULT_EXTRA_KEYS = (
    "value",
    "alarm_count",
    "cycle",
)

_configured_level: Optional[str | int] = None


class ContextualFormatter(logging.Formatter):
    """Formatter appending ``key=value`` pairs for the alarm's extra record fields."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or _DEFAULT_EXTRA_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in self._extra_keys
            if getattr(record, key, None) is not None
        ]
        return f"{line} | {' '.join(pairs)}" if pairs else line


def configure_logging(level: str | int = "INFO") -> None:
    """
    Install a single contextual stream handler on the root logger.

    Repeating the call with the same level is a no-op; a different level
    reinstalls the handler at that level.
    """
    global _configured_level
    if _configured_level == level:
        return

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": ContextualFormatter,
                    "fmt": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "style": "%",
                    "extra_keys": list(_DEFAULT_EXTRA_KEYS),
                }
            },
            "handlers": {
                "monitor": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "contextual",
                }
            },
            "root": {"handlers": ["monitor"], "level": level},
        }
    )

    _configured_level = level
