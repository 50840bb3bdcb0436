"""
chainlog logging infrastructure

- config: structlog processor chain and global configuration
- context: active request context (contextvars)
- sinks: destinations implementing ``emit(severity, fields, message)``
"""

from .config import (
    add_request_context,
    add_trace_context,
    build_processors,
    get_logger,
    reset_structlog,
    ChainlogStructlog,
)
from .context import request_context, get_current_request_logger
from .sinks import Sink, StreamSink, StructlogSink, FanoutSink, MemorySink, build_sink

__all__ = [
    'add_request_context',
    'add_trace_context',
    'build_processors',
    'get_logger',
    'reset_structlog',
    'ChainlogStructlog',
    'request_context',
    'get_current_request_logger',
    'Sink',
    'StreamSink',
    'StructlogSink',
    'FanoutSink',
    'MemorySink',
    'build_sink',
]
