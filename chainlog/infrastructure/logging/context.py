"""
Active request context.

A request logger entered with ``with`` becomes the active request context of
the current thread or asyncio task. The structlog ``add_request_context``
processor reads it to correlate plain structlog calls with the request.
"""

from contextvars import ContextVar, Token
from typing import Any, Optional


# Thread-safe context variable for the active request logger
request_context: ContextVar[Optional[Any]] = ContextVar(
    'request_context',
    default=None
)


def get_current_request_logger() -> Optional[Any]:
    """
    Get the active request logger.

    Returns:
        The innermost request logger entered in this context, None otherwise
    """
    return request_context.get()


def activate(request_logger: Any) -> Token:
    return request_context.set(request_logger)


def deactivate(token: Token) -> None:
    request_context.reset(token)
