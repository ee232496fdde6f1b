"""Scoped logging context backed by contextvars.

Fields pushed here (run_id, user_id, job_id, ...) are attached to every log
record emitted inside the scope by ContextualFilter.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

_log_context: ContextVar[Dict[str, Any]] = ContextVar("jobmatch_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields currently in scope."""
    return dict(_log_context.get())


def push_log_context(**fields: Any) -> Token:
    """Layer new fields over the current context.

    Returns:
        Token to hand to pop_log_context() to restore the previous layer
    """
    return _log_context.set({**_log_context.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by push_log_context()."""
    _log_context.reset(token)


def clear_log_context() -> None:
    """Drop every field in scope (used by tests)."""
    _log_context.set({})


class log_context:
    """Context manager form of push/pop.

    Example:
        >>> with log_context(run_id="3f9c", job_id="abc"):
        ...     logger.info("Dispatching notifications")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token: Optional[Token] = None

    def __enter__(self) -> "log_context":
        self._token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self._token is not None:
            pop_log_context(self._token)
            self._token = None
        return False
