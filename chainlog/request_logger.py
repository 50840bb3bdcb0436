"""
Request-scoped loggers.

A ``RequestLogger`` correlates every entry produced while handling one
logical request. It carries the request's identifier chain, adds it to each
entry as ``req_id``, and keeps the entries hidden by the filter level in a
diagnostic buffer that is dumped when an entry reaches the dump threshold.
"""

import time
from collections.abc import Iterable
from contextvars import Token
from typing import Any, Dict, List, Tuple

from chainlog.config.settings import LoggingSettings
from chainlog.core.emitter import DiagnosticBuffer
from chainlog.core.fields import DefaultFields
from chainlog.core.levels import LevelConfig, Severity
from chainlog.core.uids import RequestChain
from chainlog.infrastructure.logging.context import activate, deactivate
from chainlog.infrastructure.logging.sinks import Sink
from chainlog.logger import BaseLogger


class RequestLogger(BaseLogger):
    """
    Logger bound to one request and its chain of identifiers.

    Levels and default fields are private copies taken from the parent at
    creation time; changing them never affects the parent, and vice versa.

    Used as a context manager, the request logger becomes the active request
    context of the current thread or task until the block exits.

    Attributes:
        chain: Immutable identifier chain, own identifier last
        start_time: Creation timestamp, used for ``elapsed_ms``
    """

    def __init__(
        self,
        name: str,
        levels: LevelConfig,
        default_fields: DefaultFields,
        sink: Sink,
        settings: LoggingSettings,
        chain: RequestChain,
    ):
        super().__init__(
            name,
            levels,
            default_fields,
            sink,
            settings,
            buffer=DiagnosticBuffer(settings.buffer_size),
        )
        self.chain = chain
        self.start_time = time.time()
        self._tokens: List[Token] = []

    @classmethod
    def spawn(
        cls,
        name: str,
        levels: LevelConfig,
        default_fields: DefaultFields,
        sink: Sink,
        settings: LoggingSettings,
        parent_uids: Iterable = (),
    ) -> "RequestLogger":
        return cls(
            name,
            levels,
            default_fields,
            sink,
            settings,
            RequestChain.create(parent_uids),
        )

    # Identifiers

    def get_uids(self) -> Tuple[str, ...]:
        return self.chain.uids

    def get_serialized_uids(self) -> str:
        return self.chain.serialize()

    @property
    def req_id(self) -> str:
        return self.chain.req_id()

    def _identity(self) -> Dict[str, Any]:
        return {"name": self.name, "req_id": self.req_id}

    # Nesting

    def new_request_logger(self) -> "RequestLogger":
        """Spawn a child for a nested operation; its chain extends this one."""
        return RequestLogger(
            self.name,
            self._levels.copy(),
            self._default_fields.copy(),
            self.sink,
            self.settings,
            self.chain.child(),
        )

    child = new_request_logger

    # End of request

    def elapsed_ms(self) -> float:
        return (time.time() - self.start_time) * 1000

    def _finish(self, severity: Severity, message: Any, args: tuple, fields: Dict[str, Any]) -> None:
        identity = self._identity()
        identity["elapsed_ms"] = self.elapsed_ms()
        self._emitter.log(
            severity,
            message,
            args,
            fields,
            self._default_fields.collect(),
            identity,
        )
        self._emitter.buffer.clear()

    def end(self, message: Any, /, *args, **fields) -> None:
        """
        Log the end of the request at the configured end level.

        Adds ``elapsed_ms`` since creation and discards buffered entries.
        """
        self._finish(self._levels.end_level, message, args, fields)

    def error_end(self, message: Any, /, *args, **fields) -> None:
        """Like ``end`` but at ``error`` severity, for failed requests."""
        self._finish(Severity.ERROR, message, args, fields)

    # Active request context

    def __enter__(self) -> "RequestLogger":
        self._tokens.append(activate(self))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        deactivate(self._tokens.pop())
        return False

    def __repr__(self) -> str:
        return f"RequestLogger(name={self.name!r}, req_id={self.req_id!r})"
