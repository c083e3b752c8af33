"""Composes a Notification Intent from a submission and one of its events."""

import json
from typing import Dict, List

from notifier.config.exceptions import MissingRecipientConfigError
from notifier.config.models import AppConfig, RecipientConfig
from notifier.domain.models import (
    EVENT_NOTIFICATION_TYPES,
    EventType,
    Link,
    LinkRel,
    Param,
    Submission,
    SubmissionEvent,
)
from notifier.logging import get_logger

from .models import NotificationIntent
from .recipients import RecipientAnalyzer, parse_event_type
from .whitelist import Whitelist

logger = get_logger(__name__, component="composer")

LINK_RELS: Dict[EventType, LinkRel] = {
    EventType.APPROVAL_REQUESTED_NEWUSER: LinkRel.SUBMISSION_REVIEW_INVITE,
    EventType.APPROVAL_REQUESTED: LinkRel.SUBMISSION_REVIEW,
    EventType.CHANGES_REQUESTED: LinkRel.SUBMISSION_REVIEW,
    EventType.SUBMITTED: LinkRel.SUBMISSION_VIEW,
    EventType.CANCELLED: LinkRel.SUBMISSION_VIEW,
}


class Composer:
    """Builds fully populated Notification Intents.

    Holds only the configuration snapshot it was created with; safe to share
    between threads.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the composer.

        Args:
            config: Configuration snapshot providing the mode and recipient configs
        """
        if config is None:
            raise ValueError("AppConfig must not be None")
        self.config = config

    def compose(self, submission: Submission, event: SubmissionEvent) -> NotificationIntent:
        """Compose the notification for a submission event.

        Args:
            submission: The submission the event belongs to
            event: The submission event being notified

        Returns:
            NotificationIntent ready for dispatch

        Raises:
            ValueError: If submission or event is None
            MissingRecipientConfigError: If no recipient config exists for the mode
            UnsupportedEventTypeError: If the event type is not recognized
        """
        if submission is None:
            raise ValueError("Submission must not be None")
        if event is None:
            raise ValueError("SubmissionEvent must not be None")

        if event.submission != submission.id:
            logger.warning(
                f"Event {event.id} references submission {event.submission}, "
                f"composing for {submission.id}",
                extra={"event": "composer.resource_mismatch", "event_id": event.id},
            )

        recipient_config = self.select_recipient_config()

        parameters: Dict[Param, str] = {
            Param.EVENT_METADATA: event.model_dump_json(exclude_none=True),
            Param.RESOURCE_METADATA: submission.metadata or "",
        }

        event_type = parse_event_type(event)
        links = self._links(event, event_type)
        if links:
            parameters[Param.LINKS] = json.dumps([link.model_dump() for link in links])

        cc = tuple(recipient_config.global_cc)
        if cc:
            parameters[Param.CC] = ",".join(cc)

        sender = recipient_config.from_address
        parameters[Param.FROM] = sender

        analyzer = RecipientAnalyzer(Whitelist(recipient_config.whitelist))
        recipients = analyzer.analyze(submission, event)
        parameters[Param.TO] = ",".join(sorted(recipients))

        notification_type = EVENT_NOTIFICATION_TYPES[event_type]

        intent = NotificationIntent(
            type=notification_type,
            recipients=frozenset(recipients),
            sender=sender,
            cc=cc,
            parameters=parameters,
            event_ref=event.id,
            resource_ref=submission.id,
        )

        logger.info(
            f"Composed {notification_type.value} for event {event.id} "
            f"({len(recipients)} recipients, {len(cc)} cc)",
            extra={
                "event": "composer.composed",
                "event_id": event.id,
                "notification_type": notification_type.value,
                "recipient_count": len(recipients),
                "cc_count": len(cc),
            },
        )

        return intent

    def select_recipient_config(self) -> RecipientConfig:
        """Select the recipient configuration for the active mode.

        Raises:
            MissingRecipientConfigError: If none matches the mode
        """
        recipient_config = self.config.get_recipient_config()
        if recipient_config is None:
            raise MissingRecipientConfigError(self.config.mode.value)
        return recipient_config

    @staticmethod
    def _links(event: SubmissionEvent, event_type: EventType) -> List[Link]:
        if not event.link:
            return []
        return [Link(rel=LINK_RELS[event_type], href=event.link)]
