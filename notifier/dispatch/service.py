"""Dispatch of Notification Intents as email.

Dispatch resolves the template set for the notification type, renders the
subject, body and footer, resolves recipient references to addresses and
hands the message to the mail transport. It runs synchronously and never
retries; any failure surfaces as a DispatchError chained to its cause.
"""

from email.message import EmailMessage
from enum import Enum
from typing import Dict, Optional, Protocol

from notifier.config.exceptions import MissingTemplateError
from notifier.config.models import AppConfig, TemplateSection
from notifier.domain.models import Param
from notifier.logging import get_logger
from notifier.notifications.models import NotificationIntent
from notifier.resources.store import ResourceStore

from .addresses import RecipientResolver, join_addresses
from .exceptions import DispatchError, InvalidNotificationError
from .parameterizer import TemplateParameterizer
from .resolvers import TemplateResolver

logger = get_logger(__name__, component="dispatch")

RESOURCE_HEADER = "X-Notification-Resource"
TYPE_HEADER = "X-Notification-Type"


class MailTransport(Protocol):
    """Sends a message and returns the transport-assigned delivery id."""

    def send(self, message: EmailMessage) -> str:
        ...


class DispatchState(str, Enum):
    """Stages a dispatch passes through, as reported in the logs."""

    CREATED = "created"
    TEMPLATES_RESOLVED = "templates_resolved"
    RENDERED = "rendered"
    RECIPIENTS_RESOLVED = "recipients_resolved"
    SENT = "sent"
    FAILED = "failed"


class DispatchService:
    """Delivers Notification Intents by email."""

    def __init__(
        self,
        config: AppConfig,
        resolver: TemplateResolver,
        transport: MailTransport,
        parameterizer: Optional[TemplateParameterizer] = None,
        resource_store: Optional[ResourceStore] = None,
    ):
        """
        Initialize dispatch service.

        Args:
            config: Configuration snapshot providing the template sets
            resolver: Template resolver (usually the composite chain)
            transport: Mail transport
            parameterizer: Template renderer (creates default if None)
            resource_store: Store used to resolve user recipient references
        """
        self.config = config
        self.resolver = resolver
        self.transport = transport
        self.parameterizer = parameterizer or TemplateParameterizer()
        self.recipients = RecipientResolver(resource_store)

    def dispatch(self, intent: NotificationIntent) -> str:
        """
        Send the notification.

        Args:
            intent: Notification to deliver

        Returns:
            Delivery id (Message-ID) assigned by the transport

        Raises:
            DispatchError: On any failure; the original exception is chained
        """
        self._log_state(intent, DispatchState.CREATED)
        try:
            rendered = self._render(intent)
            message = self._build_message(intent, rendered)
            delivery_id = self.transport.send(message)
        except Exception as e:
            self._log_state(intent, DispatchState.FAILED, error_type=type(e).__name__)
            logger.error(
                f"Dispatch of {intent.type.value} for event {intent.event_ref} failed: {e}",
                extra={
                    "event": "dispatch.failed",
                    "notification_type": intent.type.value,
                    "event_id": intent.event_ref,
                    "error_type": type(e).__name__,
                },
            )
            raise DispatchError(
                f"Failed to dispatch {intent.type.value} notification for "
                f"event {intent.event_ref}: {e}",
                intent,
            ) from e

        self._log_state(intent, DispatchState.SENT, delivery_id=delivery_id)
        logger.info(
            f"Sent {intent.type.value} for event {intent.event_ref} as {delivery_id}",
            extra={
                "event": "dispatch.sent",
                "notification_type": intent.type.value,
                "event_id": intent.event_ref,
                "delivery_id": delivery_id,
            },
        )
        return delivery_id

    def _render(self, intent: NotificationIntent) -> Dict[TemplateSection, str]:
        template_set = self.config.get_template_set(intent.type)
        if template_set is None:
            raise MissingTemplateError(intent.type.value)

        params = dict(intent.parameters)
        rendered: Dict[TemplateSection, str] = {section: "" for section in TemplateSection}
        sections = [s for s in TemplateSection if template_set.ref_for(s) is not None]

        # Subject goes first; body and footer may reference it
        for section in TemplateSection:
            reference = template_set.ref_for(section)
            if reference is not None:
                # render_stream closes the stream, so only one is open at a time
                text = self.parameterizer.render_stream(self.resolver.resolve(reference), params)
                if section == TemplateSection.SUBJECT:
                    text = " ".join(text.split())
                rendered[section] = text
            if section == TemplateSection.SUBJECT:
                params[Param.SUBJECT] = rendered[TemplateSection.SUBJECT]

        self._log_state(intent, DispatchState.TEMPLATES_RESOLVED, sections=[s.value for s in sections])
        self._log_state(intent, DispatchState.RENDERED)
        return rendered

    def _build_message(
        self, intent: NotificationIntent, rendered: Dict[TemplateSection, str]
    ) -> EmailMessage:
        if not intent.sender or not intent.sender.strip():
            raise InvalidNotificationError("missing sender")

        to = join_addresses(self.recipients.resolve(intent.recipients))
        if not to:
            raise InvalidNotificationError("missing recipient")
        self._log_state(intent, DispatchState.RECIPIENTS_RESOLVED, to=to)

        message = EmailMessage()
        message["From"] = intent.sender
        message["To"] = to
        cc = join_addresses(intent.cc)
        if cc:
            message["Cc"] = cc
        message["Subject"] = rendered[TemplateSection.SUBJECT]
        if intent.resource_ref:
            message[RESOURCE_HEADER] = intent.resource_ref
        message[TYPE_HEADER] = intent.type.value

        message.set_content(
            "\n\n".join([rendered[TemplateSection.BODY], rendered[TemplateSection.FOOTER]])
        )
        return message

    @staticmethod
    def _log_state(intent: NotificationIntent, state: DispatchState, **fields) -> None:
        logger.debug(
            f"Dispatch {state.value}",
            extra={
                "event": "dispatch.state",
                "state": state.value,
                "notification_type": intent.type.value,
                **fields,
            },
        )
