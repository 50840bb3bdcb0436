"""
Entry emitter: the emit / suppress / dump decision for every log call.

Each accepted call becomes one ``LogEntry`` that is handed to the sink and
then dropped. Request-scoped loggers additionally own a ``DiagnosticBuffer``
that keeps the entries hidden by the filter level, so that an entry at or
above the dump threshold can replay them.
"""

import logging
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Tuple

from chainlog.core.levels import LevelConfig, Severity, is_valid, to_severity
from chainlog.exceptions import ApiMisuse


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
    """One structured log entry, as handed to a sink."""
    severity: Severity
    fields: Dict[str, Any]
    message: str


class ArgumentKind(Enum):
    NONE = "none"
    MAPPING = "mapping"
    MISUSE = "misuse"


@dataclass(frozen=True)
class FieldsArgument:
    """
    Tagged classification of the positional extras of a log call.

    A call is ``log(message)`` or ``log(message, {field: value})``. Anything
    else (a non-mapping value, or more than one positional extra) is a
    ``MISUSE`` carrying the ``repr`` of the offending values.
    """
    kind: ArgumentKind
    fields: Dict[str, Any] = field(default_factory=dict)
    callparams: List[str] = field(default_factory=list)

    @classmethod
    def classify(cls, args: Tuple[Any, ...]) -> "FieldsArgument":
        if not args:
            return cls(ArgumentKind.NONE)
        if len(args) == 1:
            value = args[0]
            if value is None:
                return cls(ArgumentKind.NONE)
            if isinstance(value, Mapping) and all(isinstance(k, str) for k in value):
                return cls(ArgumentKind.MAPPING, fields=dict(value))
        return cls(ArgumentKind.MISUSE, callparams=[_safe_repr(a) for a in args])


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__}>"


def _safe_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return str(value)
    except Exception:
        return _safe_repr(value)


class DiagnosticBuffer:
    """Bounded, ordered store of entries suppressed by the filter level."""

    def __init__(self, size: int = 100):
        self._entries: Deque[LogEntry] = deque(maxlen=max(1, int(size)))

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def drain(self) -> List[LogEntry]:
        entries = list(self._entries)
        self._entries.clear()
        return entries

    def clear(self) -> None:
        self._entries.clear()

    @property
    def maxlen(self) -> int:
        return self._entries.maxlen

    def __len__(self) -> int:
        return len(self._entries)


class EntryEmitter:
    """
    Builds entries and routes them to the sink.

    The emitter reads ``levels`` on every call, so level changes made through
    the owning logger are observed by the very next call.

    Attributes:
        name: Component name reported in misuse entries
        sink: Destination implementing ``emit(severity, fields, message)``
        levels: Level configuration shared with the owning logger
        buffer: Diagnostic buffer, present only for request-scoped loggers
    """

    def __init__(
        self,
        name: str,
        sink: Any,
        levels: LevelConfig,
        buffer: Optional[DiagnosticBuffer] = None,
    ):
        self.name = name
        self.sink = sink
        self.levels = levels
        self.buffer = buffer

    def log(
        self,
        severity: Any,
        message: Any,
        args: Tuple[Any, ...] = (),
        call_fields: Optional[Dict[str, Any]] = None,
        defaults: Optional[Dict[str, Any]] = None,
        identity: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Process one log call.

        Args:
            severity: Severity of the call
            message: Log message, coerced to text when it is not a string
            args: Positional extras of the call, see ``FieldsArgument``
            call_fields: Keyword fields of the call
            defaults: Default fields of the owning logger
            identity: Fields set by the logger itself (name, request ids)

        A malformed call (unknown severity, or positional extras that are not
        a single field mapping) never raises. It is replaced by exactly one
        fatal entry describing the call.
        """
        text = _safe_str(message)
        defaults = defaults or {}
        identity = identity or {}
        argument = FieldsArgument.classify(args)

        if not is_valid(severity) or argument.kind is ArgumentKind.MISUSE:
            misuse = ApiMisuse(
                component=self.name,
                severity=severity.value if isinstance(severity, Severity) else _safe_str(severity),
                message=text,
                callparams=argument.callparams,
            )
            fields = dict(call_fields or {})
            fields.update(misuse.as_fields())
            self.dispatch(
                self.build_entry(Severity.FATAL, misuse.describe(), defaults, fields, identity)
            )
            return

        fields = dict(argument.fields)
        if call_fields:
            fields.update(call_fields)

        self.dispatch(self.build_entry(to_severity(severity), text, defaults, fields, identity))

    @staticmethod
    def build_entry(
        severity: Severity,
        message: str,
        defaults: Dict[str, Any],
        fields: Dict[str, Any],
        identity: Dict[str, Any],
    ) -> LogEntry:
        merged = dict(defaults)
        merged.update(fields)
        merged.update(identity)
        merged["time"] = datetime.now(timezone.utc)
        return LogEntry(severity=severity, fields=merged, message=message)

    def dispatch(self, entry: LogEntry) -> None:
        if not self.levels.should_emit(entry.severity):
            if self.buffer is not None:
                self.buffer.append(entry)
            return

        if self.buffer is not None and self.levels.should_dump(entry.severity):
            for held in self.buffer.drain():
                self.write(replace(held, fields={**held.fields, "dumped": True}))

        self.write(entry)

    def write(self, entry: LogEntry) -> None:
        try:
            self.sink.emit(entry.severity, entry.fields, entry.message)
        except Exception:
            logger.exception("Sink failed while writing an entry for %s", self.name)
