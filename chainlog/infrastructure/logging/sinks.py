"""
Sinks: destinations for log entries.

A sink is anything with ``emit(severity, fields, message)``. The core
treats it as fire-and-forget: no acknowledgement, no retry.
"""

import logging
import sys
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import structlog

from chainlog.config.settings import LoggingSettings, get_settings
from chainlog.core.levels import Severity
from chainlog.exceptions import InvalidStreamConfig
from chainlog.infrastructure.logging.config import build_processors, get_logger, stdlib_logger


logger = logging.getLogger(__name__)


@runtime_checkable
class Sink(Protocol):
    def emit(self, severity: Severity, fields: Dict[str, Any], message: str) -> None:
        ...


# Keys set by the sink or consumed by structlog's proxy methods
_RESERVED = ('event', 'method_name', 'level', 'message')


def _event_kwargs(severity: Severity, fields: Dict[str, Any]) -> Dict[str, Any]:
    kwargs = {}
    for key, value in fields.items():
        kwargs[f"{key}_field" if key in _RESERVED else key] = value
    kwargs['level'] = severity.value
    return kwargs


class StreamSink:
    """
    Renders entries through structlog and writes one line per entry to a
    text stream (stdout by default).
    """

    def __init__(self, stream: Any = None, settings: Optional[LoggingSettings] = None):
        self.stream = stream if stream is not None else sys.stdout
        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(self.stream),
            processors=build_processors(settings or get_settings()),
            wrapper_class=structlog.BoundLogger,
            context_class=dict,
        )

    def emit(self, severity: Severity, fields: Dict[str, Any], message: str) -> None:
        self._logger.msg(message, **_event_kwargs(severity, fields))


class StructlogSink:
    """
    Forwards entries to the globally configured structlog pipeline.

    Useful when the host application already routes structlog through the
    standard library handlers.
    """

    _METHODS = {
        Severity.TRACE: 'debug',
        Severity.DEBUG: 'debug',
        Severity.INFO: 'info',
        Severity.WARN: 'warning',
        Severity.ERROR: 'error',
        Severity.FATAL: 'critical',
    }

    def __init__(self, name: str = 'chainlog'):
        self.name = name
        stdlib_logger(name)
        self._logger = get_logger(name)

    def emit(self, severity: Severity, fields: Dict[str, Any], message: str) -> None:
        method = getattr(self._logger, self._METHODS[severity])
        method(message, **_event_kwargs(severity, fields))


class FanoutSink:
    """
    Writes every entry to each destination in order.

    A destination that raises is reported and skipped; the remaining
    destinations still receive the entry.
    """

    def __init__(self, sinks: Sequence[Sink]):
        self.sinks: Tuple[Sink, ...] = tuple(sinks)

    def emit(self, severity: Severity, fields: Dict[str, Any], message: str) -> None:
        for sink in self.sinks:
            try:
                sink.emit(severity, fields, message)
            except Exception:
                logger.exception("Destination %r failed while writing an entry", sink)


class MemorySink:
    """
    Keeps every ``(severity, fields, message)`` triple in ``entries``.

    Meant for tests and for embedding applications that inspect output.
    """

    def __init__(self):
        self.entries: List[Tuple[Severity, Dict[str, Any], str]] = []

    def emit(self, severity: Severity, fields: Dict[str, Any], message: str) -> None:
        self.entries.append((severity, dict(fields), message))

    def severities(self) -> List[Severity]:
        return [entry[0] for entry in self.entries]

    def clear(self) -> None:
        self.entries.clear()


def _as_sink(destination: Any, settings: LoggingSettings) -> Sink:
    if callable(getattr(destination, 'write', None)):
        return StreamSink(destination, settings)
    if isinstance(destination, Sink):
        return destination
    raise InvalidStreamConfig(
        f"Unsupported stream destination: {destination!r}",
        details={"destination": repr(destination)},
    )


def build_sink(streams: Any, settings: Optional[LoggingSettings] = None) -> Sink:
    """
    Build the sink of a logger from its ``streams`` option.

    Args:
        streams: Non-empty list or tuple of sinks or writable text streams,
            or None for the default stdout sink
        settings: Rendering options for stream destinations

    Raises:
        InvalidStreamConfig: If ``streams`` is not a non-empty list or tuple,
            or holds something that is neither a sink nor a stream
    """
    settings = settings or get_settings()
    if streams is None:
        return StreamSink(sys.stdout, settings)
    if not isinstance(streams, (list, tuple)):
        raise InvalidStreamConfig(
            "streams must be a list of destinations",
            details={"type": type(streams).__name__},
        )
    if not streams:
        raise InvalidStreamConfig("streams must not be empty")

    sinks = [_as_sink(destination, settings) for destination in streams]
    if len(sinks) == 1:
        return sinks[0]
    return FanoutSink(sinks)
