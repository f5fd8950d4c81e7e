"""Request context helpers using ContextVars.

Carries the request id set by the middleware and the trip session id set by
the session endpoints so every log line can be tied back to both.
"""

from contextvars import ContextVar
from typing import Optional


# Public ContextVars (names are stable API)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)


def clear_context() -> None:
    """Reset context variables to defaults."""
    request_id_var.set(None)
    session_id_var.set(None)
