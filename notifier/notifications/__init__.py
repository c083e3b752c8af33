"""Notification composition for submission events.

- Whitelist: recipient policy for a runtime mode
- RecipientAnalyzer: who is notified of which event type
- Composer: builds Notification Intents
- NotificationIntent / NotificationResult: data passed between stages

NotificationService lives in ``notifier.notifications.service`` and is not
re-exported here, since it depends on the dispatch package, which in turn
depends on these models.
"""

from .composer import Composer
from .models import (
    NotificationError,
    NotificationIntent,
    NotificationResult,
    UnsupportedEventTypeError,
)
from .recipients import RecipientAnalyzer, parse_event_type
from .whitelist import Whitelist

__all__ = [
    "Composer",
    "NotificationError",
    "NotificationIntent",
    "NotificationResult",
    "RecipientAnalyzer",
    "UnsupportedEventTypeError",
    "Whitelist",
    "parse_event_type",
]
