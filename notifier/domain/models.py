"""Core domain models for submissions, submission events and users.

This module defines the data structures read from the resource store and the
enumerations shared by composition and dispatch:
- Submission: the resource a notification is about
- SubmissionEvent: a lifecycle event on a submission
- User: a person a recipient reference may point to
- EventType / NotificationType: the event kinds and the notifications they map to
- Param: the fixed set of template parameter keys
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EventType(str, Enum):
    """Submission lifecycle event types."""

    APPROVAL_REQUESTED_NEWUSER = "approval-requested-newuser"
    APPROVAL_REQUESTED = "approval-requested"
    CHANGES_REQUESTED = "changes-requested"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    """Notification kinds, one per distinct event outcome."""

    SUBMISSION_APPROVAL_INVITE = "SUBMISSION_APPROVAL_INVITE"
    SUBMISSION_APPROVAL_REQUESTED = "SUBMISSION_APPROVAL_REQUESTED"
    SUBMISSION_CHANGES_REQUESTED = "SUBMISSION_CHANGES_REQUESTED"
    SUBMISSION_SUBMISSION_SUBMITTED = "SUBMISSION_SUBMISSION_SUBMITTED"
    SUBMISSION_SUBMISSION_CANCELLED = "SUBMISSION_SUBMISSION_CANCELLED"


# 1:1 mapping from event type to the notification it produces
EVENT_NOTIFICATION_TYPES: Dict[EventType, NotificationType] = {
    EventType.APPROVAL_REQUESTED_NEWUSER: NotificationType.SUBMISSION_APPROVAL_INVITE,
    EventType.APPROVAL_REQUESTED: NotificationType.SUBMISSION_APPROVAL_REQUESTED,
    EventType.CHANGES_REQUESTED: NotificationType.SUBMISSION_CHANGES_REQUESTED,
    EventType.SUBMITTED: NotificationType.SUBMISSION_SUBMISSION_SUBMITTED,
    EventType.CANCELLED: NotificationType.SUBMISSION_SUBMISSION_CANCELLED,
}


class Param(str, Enum):
    """Template parameter keys.

    The value is the name a template uses to reference the parameter,
    e.g. ``{{to}}`` or ``{{ resource_metadata.title }}``.
    """

    TO = "to"
    FROM = "from"
    CC = "cc"
    RESOURCE_METADATA = "resource_metadata"
    EVENT_METADATA = "event_metadata"
    LINKS = "link_metadata"
    SUBJECT = "subject"


class LinkRel(str, Enum):
    """Relations for links included in notifications."""

    SUBMISSION_REVIEW_INVITE = "submission-review-invite"
    SUBMISSION_REVIEW = "submission-review"
    SUBMISSION_VIEW = "submission-view"


class Link(BaseModel):
    """A typed hyperlink rendered into a notification."""

    rel: LinkRel = Field(..., description="Relation of the link to the submission")
    href: str = Field(..., min_length=1, description="Link target")

    model_config = {"use_enum_values": True}


class _Resource(BaseModel):
    """Base for records fetched from the resource store.

    Accepts both camelCase (as served by the store) and snake_case keys.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Resource identifier")

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        """Strip whitespace from the identifier."""
        if not v or not v.strip():
            raise ValueError("Resource id cannot be empty or whitespace-only")
        return v.strip()


class Submission(_Resource):
    """A submission whose lifecycle events trigger notifications."""

    submitter: Optional[str] = Field(
        None, description="Submitter reference (mailto: URI or user resource id)"
    )
    preparers: List[str] = Field(
        default_factory=list, description="References of users who prepared the submission"
    )
    metadata: Optional[str] = Field(
        None, description="Opaque metadata blob, typically JSON, passed through verbatim"
    )

    @field_validator("preparers", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """Treat a missing preparers list as empty."""
        return v if v is not None else []


class SubmissionEvent(_Resource):
    """A lifecycle event performed on a submission.

    ``event_type`` is kept as the raw string from the store so that an
    unrecognized type reaches the composer and fails loudly there.
    """

    submission: str = Field(..., description="Identifier of the parent submission")
    event_type: str = Field(..., description="Event type, see EventType")
    performed_by: Optional[str] = Field(None, description="Actor reference")
    performer_role: Optional[str] = Field(None, description="Role of the actor")
    comment: Optional[str] = Field(None, description="Free-text comment from the actor")
    link: Optional[str] = Field(None, description="Link to the submission in the UI")


class User(_Resource):
    """A user that an opaque recipient reference resolves to."""

    email: Optional[str] = Field(None, description="Email address")
    display_name: Optional[str] = Field(None, description="Name for display")
