"""
Severity scale and per-logger level configuration.

The scale is the fixed, totally ordered set
``trace < debug < info < warn < error < fatal``. Only the tokens are part
of the public API; the ordering is an implementation detail of ``compare``.
"""

import logging
from enum import Enum
from typing import Any, Union

from chainlog.exceptions import InvalidLevel


TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class Severity(str, Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    @property
    def stdlib_level(self) -> int:
        """Matching ``logging`` level number, used when rendering through structlog."""
        return _STDLIB_LEVELS[self]

    def __str__(self) -> str:
        return self.value


_ORDER = (
    Severity.TRACE,
    Severity.DEBUG,
    Severity.INFO,
    Severity.WARN,
    Severity.ERROR,
    Severity.FATAL,
)

_STDLIB_LEVELS = {
    Severity.TRACE: TRACE,
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}

LEVEL_TOKENS = tuple(s.value for s in _ORDER)

SeverityLike = Union[Severity, str]


def is_valid(level: Any) -> bool:
    """Return True if ``level`` is one of the six severity tokens."""
    if isinstance(level, Severity):
        return True
    return isinstance(level, str) and level in LEVEL_TOKENS


def to_severity(level: Any, what: str = "log level") -> Severity:
    """
    Convert a token to a Severity.

    Args:
        level: A ``Severity`` member or one of the case-sensitive tokens
        what: Name of the setting being validated, used in the error

    Raises:
        InvalidLevel: If ``level`` is not on the scale
    """
    if not is_valid(level):
        raise InvalidLevel(level, what)
    return Severity(level)


def compare(a: SeverityLike, b: SeverityLike) -> int:
    """
    Compare two severities.

    Returns:
        -1, 0 or 1 when ``a`` is less urgent than, as urgent as, or more
        urgent than ``b``.

    Raises:
        InvalidLevel: If either side is not on the scale
    """
    ra = to_severity(a).rank
    rb = to_severity(b).rank
    return (ra > rb) - (ra < rb)


class LevelConfig:
    """
    Filter level, dump threshold and end-of-request level of one logger.

    No ordering is enforced between the three values. A dump threshold
    below the filter level behaves as if it were equal to it, since
    suppressed calls never trigger a dump.
    """

    def __init__(
        self,
        filter_level: SeverityLike = Severity.INFO,
        dump_threshold: SeverityLike = Severity.ERROR,
        end_level: SeverityLike = Severity.INFO,
    ):
        self._filter_level = to_severity(filter_level, "log level")
        self._dump_threshold = to_severity(dump_threshold, "dump threshold")
        self._end_level = to_severity(end_level, "end level")

    @property
    def filter_level(self) -> Severity:
        return self._filter_level

    @property
    def dump_threshold(self) -> Severity:
        return self._dump_threshold

    @property
    def end_level(self) -> Severity:
        return self._end_level

    def set_filter_level(self, level: SeverityLike) -> None:
        self._filter_level = to_severity(level, "log level")

    def set_dump_threshold(self, level: SeverityLike) -> None:
        self._dump_threshold = to_severity(level, "dump threshold")

    def set_end_level(self, level: SeverityLike) -> None:
        self._end_level = to_severity(level, "end level")

    def should_emit(self, severity: SeverityLike) -> bool:
        return compare(severity, self._filter_level) >= 0

    def should_dump(self, severity: SeverityLike) -> bool:
        return compare(severity, self._dump_threshold) >= 0

    def copy(self) -> "LevelConfig":
        return LevelConfig(self._filter_level, self._dump_threshold, self._end_level)

    def __repr__(self) -> str:
        return (
            f"LevelConfig(filter_level={self._filter_level.value!r}, "
            f"dump_threshold={self._dump_threshold.value!r}, "
            f"end_level={self._end_level.value!r})"
        )
