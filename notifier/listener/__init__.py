"""Queue listener for submission event notifications."""

from .bridge import ListenerBridge
from .handler import SubmissionEventListener, parse_event_id
from .models import MessageOutcome, QueueMessage

__all__ = [
    "ListenerBridge",
    "MessageOutcome",
    "QueueMessage",
    "SubmissionEventListener",
    "parse_event_id",
]
