"""Notification service: turns a submission event id into a sent email.

This module provides the NotificationService that orchestrates the
notification flow: reading the event and its submission from the resource
store, composing the Notification Intent and dispatching it.
"""

import logging
from typing import Optional

from notifier.config.holder import ConfigHolder
from notifier.dispatch.parameterizer import TemplateParameterizer
from notifier.dispatch.resolvers import TemplateResolver
from notifier.dispatch.service import DispatchService, MailTransport
from notifier.domain.models import Submission, SubmissionEvent
from notifier.logging import get_logger
from notifier.logging.context import log_context
from notifier.resources.store import ResourceStore

from .composer import Composer
from .models import NotificationResult

logger = get_logger(__name__, component="notification")


def is_self_submission(submission: Submission) -> bool:
    """A submission prepared by nobody but its submitter.

    Nobody else is involved, so there is nobody to notify.
    """
    submitter = (submission.submitter or "").strip().casefold()
    preparers = {p.strip().casefold() for p in submission.preparers if p and p.strip()}
    return not preparers or preparers == {submitter}


class NotificationService:
    """Coordinates the notification flow for one submission event at a time.

    The service itself is stateless; each call reads a single configuration
    snapshot from the holder and builds its composer and dispatcher from it,
    so a concurrent reload never mixes two configurations within one event.
    """

    def __init__(
        self,
        config_holder: ConfigHolder,
        resource_store: ResourceStore,
        transport: MailTransport,
        resolver: TemplateResolver,
        parameterizer: Optional[TemplateParameterizer] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            config_holder: Source of the current configuration snapshot
            resource_store: Store the event, submission and users are read from
            transport: Mail transport used by dispatch
            resolver: Template resolver used by dispatch
            parameterizer: Template renderer (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.config_holder = config_holder
        self.resource_store = resource_store
        self.transport = transport
        self.resolver = resolver
        self.parameterizer = parameterizer or TemplateParameterizer()
        self.logger = logger_instance or logger

    def notify(self, event_id: str) -> NotificationResult:
        """Send the notification for a submission event.

        Args:
            event_id: Identifier of the SubmissionEvent

        Returns:
            NotificationResult with status "sent" or "suppressed"

        Raises:
            ResourceStoreError: If the event or submission cannot be read
            ConfigurationError: If the active mode has no recipient configuration
            UnsupportedEventTypeError: If the event type is not recognized
            DispatchError: If the notification could not be sent
        """
        with log_context(event_id=event_id):
            config = self.config_holder.get()

            event = self.resource_store.read_resource(event_id, SubmissionEvent)
            submission = self.resource_store.read_resource(event.submission, Submission)

            if is_self_submission(submission):
                self.logger.info(
                    f"Suppressing notification for event {event_id}: self-submission",
                    extra={
                        "event": "notification.suppressed",
                        "reason": "self_submission",
                        "submission_id": submission.id,
                    },
                )
                return NotificationResult(
                    event_id=event_id, status="suppressed", reason="self_submission"
                )

            intent = Composer(config).compose(submission, event)

            dispatcher = DispatchService(
                config,
                resolver=self.resolver,
                transport=self.transport,
                parameterizer=self.parameterizer,
                resource_store=self.resource_store,
            )
            delivery_id = dispatcher.dispatch(intent)

            self.logger.info(
                f"Notification {intent.type.value} sent for event {event_id}",
                extra={
                    "event": "notification.sent",
                    "notification_type": intent.type.value,
                    "delivery_id": delivery_id,
                },
            )
            return NotificationResult(
                event_id=event_id,
                status="sent",
                notification_type=intent.type,
                delivery_id=delivery_id,
            )
