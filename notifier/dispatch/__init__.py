"""Notification dispatch: template resolution, rendering and email delivery."""

from .addresses import RecipientResolver, parse_mailto
from .exceptions import (
    DispatchError,
    InvalidNotificationError,
    InvalidRecipientError,
    ResolutionAttempt,
    SMTPDeliveryError,
    TemplateRenderError,
    TemplateResolutionError,
)
from .parameterizer import TemplateParameterizer, build_template_context
from .resolvers import (
    CompositeTemplateResolver,
    FileTemplateResolver,
    HttpTemplateResolver,
    InlineTemplateResolver,
    PackageTemplateResolver,
    TemplateResolver,
    default_resolver,
)
from .service import DispatchService, DispatchState, MailTransport
from .smtp_client import SMTPClient

__all__ = [
    "CompositeTemplateResolver",
    "DispatchError",
    "DispatchService",
    "DispatchState",
    "FileTemplateResolver",
    "HttpTemplateResolver",
    "InlineTemplateResolver",
    "InvalidNotificationError",
    "InvalidRecipientError",
    "MailTransport",
    "PackageTemplateResolver",
    "RecipientResolver",
    "ResolutionAttempt",
    "SMTPClient",
    "SMTPDeliveryError",
    "TemplateParameterizer",
    "TemplateRenderError",
    "TemplateResolutionError",
    "TemplateResolver",
    "build_template_context",
    "default_resolver",
    "parse_mailto",
]
