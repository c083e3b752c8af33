"""Determines who receives the notification for a submission event."""

from typing import Set

from notifier.domain.models import EventType, Submission, SubmissionEvent

from .models import UnsupportedEventTypeError
from .whitelist import Whitelist


def parse_event_type(event: SubmissionEvent) -> EventType:
    """Map the raw event type string to an EventType.

    Raises:
        UnsupportedEventTypeError: If the type is not recognized
    """
    try:
        return EventType(event.event_type.strip().lower())
    except (ValueError, AttributeError):
        raise UnsupportedEventTypeError(str(event.event_type)) from None


class RecipientAnalyzer:
    """Computes the whitelisted recipient set for a submission event.

    | Event type                           | Recipients  |
    |--------------------------------------|-------------|
    | approval-requested(-newuser)         | submitter   |
    | changes-requested, submitted         | preparers   |
    | cancelled by the submitter           | preparers   |
    | cancelled by anyone else             | submitter   |
    """

    def __init__(self, whitelist: Whitelist):
        self.whitelist = whitelist

    def analyze(self, submission: Submission, event: SubmissionEvent) -> Set[str]:
        """Return the recipients for the event after whitelist filtering.

        Raises:
            UnsupportedEventTypeError: If the event type is not recognized
        """
        event_type = parse_event_type(event)

        if event_type in (EventType.APPROVAL_REQUESTED_NEWUSER, EventType.APPROVAL_REQUESTED):
            raw = self._submitter(submission)
        elif event_type in (EventType.CHANGES_REQUESTED, EventType.SUBMITTED):
            raw = set(submission.preparers)
        elif event_type == EventType.CANCELLED:
            if submission.submitter is not None and submission.submitter == event.performed_by:
                raw = set(submission.preparers)
            else:
                raw = self._submitter(submission)
        else:
            raise UnsupportedEventTypeError(event_type.value)

        return self.whitelist.filter(raw)

    @staticmethod
    def _submitter(submission: Submission) -> Set[str]:
        return {submission.submitter} if submission.submitter else set()
