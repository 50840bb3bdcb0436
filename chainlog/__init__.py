"""
chainlog - structured logging with request correlation chains

Named loggers with independent level configuration, request-scoped loggers
that carry a chain of correlation identifiers across service boundaries,
and default fields merged into every entry.
"""

from .core.levels import Severity, LevelConfig, LEVEL_TOKENS
from .core.uids import RequestChain
from .exceptions import ChainlogException, InvalidLevel, InvalidStreamConfig, ApiMisuse
from .logger import Logger
from .request_logger import RequestLogger
from .infrastructure.logging.context import get_current_request_logger
from .infrastructure.logging.sinks import Sink, StreamSink, StructlogSink, FanoutSink, MemorySink

__all__ = [
    'Logger',
    'RequestLogger',
    'Severity',
    'LevelConfig',
    'LEVEL_TOKENS',
    'RequestChain',
    'ChainlogException',
    'InvalidLevel',
    'InvalidStreamConfig',
    'ApiMisuse',
    'get_current_request_logger',
    'Sink',
    'StreamSink',
    'StructlogSink',
    'FanoutSink',
    'MemorySink',
]
