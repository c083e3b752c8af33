"""Exceptions raised while resolving, rendering and sending notifications."""

from typing import TYPE_CHECKING, List, Optional

from notifier.notifications.models import NotificationError

if TYPE_CHECKING:
    from notifier.notifications.models import NotificationIntent


class InvalidNotificationError(NotificationError):
    """Raised when an intent cannot be turned into a deliverable message."""

    pass


class ResolutionAttempt:
    """One resolver's attempt at fetching a template."""

    def __init__(self, resolver: str, error: Optional[BaseException] = None):
        self.resolver = resolver
        self.error = error

    def describe(self) -> str:
        if self.error is None:
            return f"{self.resolver}: no result"
        return f"{self.resolver}: {type(self.error).__name__}: {self.error}"

    def __repr__(self) -> str:
        return f"ResolutionAttempt({self.describe()!r})"


class TemplateResolutionError(NotificationError):
    """Raised when no resolver could produce a template.

    Carries every attempt, not only the last one.
    """

    def __init__(self, reference: str, attempts: List[ResolutionAttempt]):
        self.reference = reference
        self.attempts = attempts
        shown = reference if len(reference) <= 80 else reference[:77] + "..."
        lines = [f"Unable to resolve template '{shown}':"]
        lines.extend(f"  - {attempt.describe()}" for attempt in attempts)
        super().__init__("\n".join(lines))

    @property
    def causes(self) -> List[BaseException]:
        """Exceptions raised by the individual resolvers."""
        return [attempt.error for attempt in self.attempts if attempt.error is not None]


class TemplateRenderError(NotificationError):
    """Raised when a template cannot be read or rendered."""

    pass


class SMTPDeliveryError(NotificationError):
    """Raised when the mail transport fails to deliver a message."""

    pass


class InvalidRecipientError(SMTPDeliveryError):
    """Raised when the mail relay refuses one or more recipient addresses.

    Attributes:
        refused: Mapping of refused address to (SMTP code, server response)
    """

    def __init__(self, message: str, refused: Optional[dict] = None):
        super().__init__(message)
        self.refused = refused or {}


class DispatchError(NotificationError):
    """Raised when dispatching a notification fails at any step.

    The original exception is chained as ``__cause__``; ``intent`` is the
    notification that failed.
    """

    def __init__(self, message: str, intent: "NotificationIntent"):
        super().__init__(message)
        self.intent = intent

    @property
    def root_cause(self) -> BaseException:
        """Innermost exception of the cause chain (self if nothing is chained)."""
        current: BaseException = self
        seen = set()
        while current.__cause__ is not None and id(current) not in seen:
            seen.add(id(current))
            current = current.__cause__
        return current

    def find_cause(self, exc_type: type) -> Optional[BaseException]:
        """Return the first exception of the given type in the cause chain."""
        current: Optional[BaseException] = self.__cause__
        while current is not None:
            if isinstance(current, exc_type):
                return current
            current = current.__cause__
        return None
