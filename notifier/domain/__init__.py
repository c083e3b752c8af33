"""Domain models for the Submission Notifier."""

from .models import (
    EVENT_NOTIFICATION_TYPES,
    EventType,
    Link,
    LinkRel,
    NotificationType,
    Param,
    Submission,
    SubmissionEvent,
    User,
)

__all__ = [
    "EVENT_NOTIFICATION_TYPES",
    "EventType",
    "Link",
    "LinkRel",
    "NotificationType",
    "Param",
    "Submission",
    "SubmissionEvent",
    "User",
]
