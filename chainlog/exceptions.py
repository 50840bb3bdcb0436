"""Custom exceptions for chainlog."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class ChainlogException(Exception):
    """Base exception for all chainlog errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class InvalidLevel(ChainlogException, ValueError):
    """Raised when a severity token is outside the supported scale."""

    def __init__(self, level: Any, what: str = "log level"):
        super().__init__(
            f"Invalid {what}: {level!r}",
            details={"level": repr(level), "setting": what},
        )
        self.level = level


class InvalidStreamConfig(ChainlogException, ValueError):
    """Raised when the ``streams`` option is not a non-empty sequence of sinks."""
    pass


@dataclass(frozen=True)
class ApiMisuse:
    """
    Record of a malformed logging call.

    Never raised. The entry emitter turns it into a single fatal entry so
    that logging bugs show up in the output instead of crashing the caller.

    Attributes:
        component: Name of the logger that received the call
        severity: Severity token of the original call
        message: Message of the original call
        callparams: ``repr`` of every offending positional argument
    """
    component: str
    severity: str
    message: str
    callparams: List[str] = field(default_factory=list)

    def describe(self) -> str:
        return (
            f"chainlog API was misused by {self.component}: "
            f"{self.severity!r} call needs a known severity and at most one field mapping"
        )

    def as_fields(self) -> Dict[str, Any]:
        return {
            "component": self.component,
            "misused_severity": self.severity,
            "original_message": self.message,
            "callparams": list(self.callparams),
        }
