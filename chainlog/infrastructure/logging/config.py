"""
chainlog structlog configuration

Provides the structlog processor chain used to render entries: request
context injection, OpenTelemetry trace context, time formatting and JSON
or console output.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import structlog
from opentelemetry import trace

from chainlog.config.settings import LoggingSettings, LogFormat, get_settings
from chainlog.core.levels import TRACE


def add_request_context(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Add the active request's identifiers without duplication.

    Entries produced by a request logger already carry ``req_id``; this only
    fills it in for plain structlog calls made inside an active request.

    Args:
        logger: Logger instance
        method_name: Log method name
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with request context
    """
    from chainlog.infrastructure.logging.context import request_context

    ctx = request_context.get()
    if ctx is not None and 'req_id' not in event_dict:
        event_dict['req_id'] = ctx.req_id
    return event_dict


def add_trace_context(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Add OpenTelemetry trace context to log entries.

    Args:
        logger: Logger instance
        method_name: Log method name
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with trace context
    """
    span = trace.get_current_span()
    if span and span.is_recording():
        span_context = span.get_span_context()
        if 'trace_id' not in event_dict:
            event_dict['trace_id'] = format(span_context.trace_id, '032x')
        if 'span_id' not in event_dict:
            event_dict['span_id'] = format(span_context.span_id, '016x')
    return event_dict


def format_time(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Render the capture time as ISO 8601."""
    value = event_dict.get('time')
    if isinstance(value, datetime):
        event_dict['time'] = value.isoformat()
    return event_dict


def build_processors(settings: Optional[LoggingSettings] = None) -> List[Callable]:
    """
    Processor chain shared by the stream sink and the global configuration.

    Args:
        settings: Rendering options; process-wide settings when omitted

    Returns:
        Ordered list of structlog processors, renderer last
    """
    settings = settings or get_settings()

    processors: List[Callable] = [
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        format_time,
        add_request_context,
    ]
    if settings.include_trace_id:
        processors.append(add_trace_context)

    if settings.format == LogFormat.CONSOLE:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.EventRenamer('message'))
        processors.append(structlog.processors.JSONRenderer())
    return processors


class ChainlogStructlog:
    """
    Global structlog configuration.

    Routes structlog through the standard library so that entries written
    by ``StructlogSink`` end up in the application's logging handlers.
    """

    def __init__(self, settings: Optional[LoggingSettings] = None):
        self.settings = settings or get_settings()
        self.configure_structlog()

    def configure_structlog(self) -> None:
        logging.basicConfig(
            format="%(message)s",
            level=self.settings.level.stdlib_level,
        )

        structlog.configure(
            processors=[
                structlog.stdlib.add_logger_name,
                *build_processors(self.settings),
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )


# Singleton configuration instance
_logger_config: Optional[ChainlogStructlog] = None


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger bound to the chainlog configuration.

    Configures structlog on first use.

    Args:
        name: Logger name, typically module or component name

    Returns:
        Configured structlog BoundLogger instance
    """
    global _logger_config
    if _logger_config is None:
        _logger_config = ChainlogStructlog()

    return structlog.get_logger(name)


def reset_structlog() -> None:
    """Forget the global configuration (primarily for testing)."""
    global _logger_config
    _logger_config = None
    structlog.reset_defaults()


def stdlib_logger(name: str) -> logging.Logger:
    """Standard library logger that lets every chainlog severity through."""
    log = logging.getLogger(name)
    log.setLevel(TRACE)
    return log
