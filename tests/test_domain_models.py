"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError

from notifier.domain.models import (
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
from tests.helpers import EVENT_ID, PREPARER, SUBMISSION_ID, SUBMITTER


class TestSubmission:
    """Tests for Submission model."""

    def test_camel_case_payload(self):
        submission = Submission.model_validate(
            {
                "id": SUBMISSION_ID,
                "submitter": SUBMITTER,
                "preparers": [PREPARER],
                "metadata": '{"title": "Article"}',
            }
        )

        assert submission.submitter == SUBMITTER
        assert submission.preparers == [PREPARER]
        assert submission.metadata == '{"title": "Article"}'

    def test_null_preparers_become_empty(self):
        submission = Submission(id=SUBMISSION_ID, preparers=None)

        assert submission.preparers == []
        assert submission.submitter is None

    def test_id_is_stripped(self):
        assert Submission(id=f"  {SUBMISSION_ID}  ").id == SUBMISSION_ID

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError):
            Submission(id="   ")


class TestSubmissionEvent:
    """Tests for SubmissionEvent model."""

    def test_accepts_camel_case_and_snake_case(self):
        camel = SubmissionEvent.model_validate(
            {
                "id": EVENT_ID,
                "submission": SUBMISSION_ID,
                "eventType": "submitted",
                "performedBy": PREPARER,
                "performerRole": "submitter",
            }
        )
        snake = SubmissionEvent(
            id=EVENT_ID,
            submission=SUBMISSION_ID,
            event_type="submitted",
            performed_by=PREPARER,
            performer_role="submitter",
        )

        assert camel == snake

    def test_unknown_event_type_is_kept(self):
        """Unrecognized types are rejected at composition, not at parse time."""
        event = SubmissionEvent(id=EVENT_ID, submission=SUBMISSION_ID, event_type="archived")

        assert event.event_type == "archived"

    def test_submission_required(self):
        with pytest.raises(ValidationError):
            SubmissionEvent(id=EVENT_ID, event_type="submitted")


class TestUser:
    def test_user_fields(self):
        user = User.model_validate(
            {"id": "https://repo.example.org/users/1", "email": "jane@x.edu", "displayName": "Jane"}
        )

        assert user.email == "jane@x.edu"
        assert user.display_name == "Jane"


class TestEnumerations:
    """Tests for the event and notification enumerations."""

    def test_every_event_type_maps_to_a_notification_type(self):
        assert set(EVENT_NOTIFICATION_TYPES) == set(EventType)
        assert set(EVENT_NOTIFICATION_TYPES.values()) == set(NotificationType)

    def test_new_user_approval_is_an_invite(self):
        assert (
            EVENT_NOTIFICATION_TYPES[EventType.APPROVAL_REQUESTED_NEWUSER]
            == NotificationType.SUBMISSION_APPROVAL_INVITE
        )

    def test_param_names(self):
        assert {p.value for p in Param} == {
            "to",
            "from",
            "cc",
            "resource_metadata",
            "event_metadata",
            "link_metadata",
            "subject",
        }

    def test_link_serializes_rel_value(self):
        link = Link(rel=LinkRel.SUBMISSION_VIEW, href="https://ui.example.org/s1")

        assert link.model_dump() == {"rel": "submission-view", "href": "https://ui.example.org/s1"}

    def test_link_requires_href(self):
        with pytest.raises(ValidationError):
            Link(rel=LinkRel.SUBMISSION_VIEW, href="")
