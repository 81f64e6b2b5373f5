"""Context propagation for structured logging.

Fields pushed here (announcement_id, catalog_version, batch_id, ...) are
attached to every log record emitted inside the scope. Context lives in a
ContextVar, so concurrent matcher calls in threads or tasks never see each
other's fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

_log_context: ContextVar[Dict[str, Any]] = ContextVar("bidflow_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return _log_context.get().copy()


def push_log_context(**fields) -> Token:
    """Merge fields into the active context.

    Returns:
        Token to hand to pop_log_context() to restore the previous fields

    Example:
        >>> token = push_log_context(batch_id="b-42")
        >>> pop_log_context(token)
    """
    return _log_context.set({**_log_context.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by push_log_context()."""
    _log_context.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Used by tests."""
    _log_context.set({})


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(announcement_id="20250101-00", catalog_version="2025.1"):
        ...     logger.info("Scoring announcement")
    """

    def __init__(self, **fields):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
