"""Submission event listener."""

import json
from typing import Optional

from notifier.config.holder import ConfigHolder
from notifier.config.models import ListenerConfig, Mode
from notifier.logging import get_logger
from notifier.logging.context import log_context
from notifier.notifications.service import NotificationService

from .models import MessageOutcome, QueueMessage

logger = get_logger(__name__, component="listener")


def parse_event_id(body: str) -> Optional[str]:
    """Extract the resource id from a message body (``@id``, falling back to ``id``)."""
    try:
        payload = json.loads(body)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    for key in ("@id", "id"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _header_matches(value: Optional[str], accepted: str) -> bool:
    # Repository headers may carry several comma-separated types
    if not value:
        return False
    return accepted in (part.strip() for part in value.split(","))


class SubmissionEventListener:
    """Filters queue messages and notifies on newly created submission events.

    Delivery is at-least-once: a message whose processing fails is nacked so
    the broker redelivers it, unless ``listener.ack_on_failure`` is set.
    Messages that can never succeed (filtered, unparsable) are acked.
    """

    def __init__(self, config_holder: ConfigHolder, notification_service: NotificationService):
        self.config_holder = config_holder
        self.notification_service = notification_service

    def handle(self, message: QueueMessage) -> MessageOutcome:
        """
        Process one message.

        Args:
            message: Message received from the queue

        Returns:
            MessageOutcome telling the broker to ack or nack the message
        """
        config = self.config_holder.get()
        listener_config = config.listener

        with log_context(message_id=message.id):
            if Mode(config.mode) == Mode.DISABLED:
                logger.debug(
                    "Notifications disabled, acknowledging message",
                    extra={"event": "listener.message.skipped", "reason": "disabled"},
                )
                return MessageOutcome.ACK

            if not self._accepts(message, listener_config):
                logger.debug(
                    "Message is not a submission event creation, acknowledging",
                    extra={"event": "listener.message.skipped", "reason": "filtered"},
                )
                return MessageOutcome.ACK

            event_id = parse_event_id(message.body)
            if event_id is None:
                logger.error(
                    "Unable to parse event id from message body, discarding",
                    extra={"event": "listener.message.poison", "body_length": len(message.body)},
                )
                return MessageOutcome.ACK

            try:
                result = self.notification_service.notify(event_id)
            except Exception as e:
                outcome = MessageOutcome.ACK if listener_config.ack_on_failure else MessageOutcome.NACK
                logger.error(
                    f"Notification for event {event_id} failed: {e}",
                    exc_info=True,
                    extra={
                        "event": f"listener.message.{'acked' if outcome == MessageOutcome.ACK else 'nacked'}",
                        "event_id": event_id,
                        "error_type": type(e).__name__,
                    },
                )
                return outcome

            logger.info(
                f"Processed event {event_id}: {result.status}",
                extra={
                    "event": "listener.message.acked",
                    "event_id": event_id,
                    "status": result.status,
                },
            )
            return MessageOutcome.ACK

    @staticmethod
    def _accepts(message: QueueMessage, listener_config: ListenerConfig) -> bool:
        return _header_matches(
            message.headers.get(listener_config.resource_type_header),
            listener_config.accepted_resource_type,
        ) and _header_matches(
            message.headers.get(listener_config.event_type_header),
            listener_config.accepted_event_type,
        )
