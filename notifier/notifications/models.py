"""Data models and exceptions for notification composition.

This module defines the Notification Intent produced by the composer and
consumed by dispatch, the result reported by the notification service, and
the exceptions shared by the notification pipeline.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from notifier.domain.models import NotificationType, Param


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class UnsupportedEventTypeError(NotificationError):
    """Raised when a submission event has a type no notification is defined for."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(f"Unhandled SubmissionEvent type '{event_type}'")


class NotificationIntent(BaseModel):
    """Who is notified, by whom, of what, with which template parameters.

    Created fresh per event by the composer and immutable afterwards.

    Attributes:
        type: Notification kind, selects the template set
        recipients: Recipient references (mailto: URIs or user resource ids)
        sender: Sender address
        cc: Additional addresses, exempt from the whitelist
        parameters: Template parameters
        event_ref: Identifier of the triggering event
        resource_ref: Identifier of the submission
    """

    type: NotificationType
    recipients: FrozenSet[str] = Field(default_factory=frozenset)
    sender: str
    cc: Tuple[str, ...] = Field(default_factory=tuple)
    parameters: Dict[Param, str] = Field(default_factory=dict)
    event_ref: Optional[str] = None
    resource_ref: Optional[str] = None

    @field_validator("sender")
    @classmethod
    def sender_not_blank(cls, v: str) -> str:
        """Reject a blank sender."""
        if not v or not v.strip():
            raise ValueError("sender cannot be empty or whitespace-only")
        return v.strip()

    def param(self, key: Param) -> str:
        """Get a parameter value, empty string when absent."""
        return self.parameters.get(key, "")

    model_config = {"frozen": True}


@dataclass
class NotificationResult:
    """Outcome of handling one submission event.

    Attributes:
        event_id: Identifier of the submission event
        status: "sent" or "suppressed"
        notification_type: Type of the dispatched notification, if any
        delivery_id: Transport-assigned message id when sent
        reason: Why the notification was not sent, if it was not
    """

    event_id: str
    status: str  # "sent", "suppressed"
    notification_type: Optional[NotificationType] = None
    delivery_id: Optional[str] = None
    reason: Optional[str] = None

    def is_sent(self) -> bool:
        """Check if a notification was dispatched."""
        return self.status == "sent"
