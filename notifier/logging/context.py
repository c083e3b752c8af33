"""Per-message logging scope.

While a queue message or submission event is being handled, its identifiers
(message_id, event_id) are attached to every log record by ContextualFilter.
The scope lives in a ContextVar, so listener worker threads never see each
other's identifiers.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator

_scope: ContextVar[Dict[str, Any]] = ContextVar("notifier_log_scope", default={})


def get_log_context() -> Dict[str, Any]:
    """Fields of the innermost active scope (a copy)."""
    return dict(_scope.get())


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Attach fields to every record logged inside the block.

    Nested scopes inherit the outer fields; an inner value for the same key
    wins until the inner block exits.

    Example:
        >>> with log_context(event_id="https://repo.example.org/events/e1"):
        ...     logger.info("Composing notification")  # carries event_id
    """
    token = _scope.set({**_scope.get(), **fields})
    try:
        yield get_log_context()
    finally:
        _scope.reset(token)
