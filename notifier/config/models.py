"""Configuration schema models using Pydantic."""

from email.utils import parseaddr
from enum import Enum
from typing import Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator, model_validator

from notifier.domain.models import NotificationType


class Mode(str, Enum):
    """Runtime modes, each selecting a recipient configuration."""

    DISABLED = "disabled"
    DEMO = "demo"
    PRODUCTION = "production"


class TemplateSection(str, Enum):
    """Sections of a notification template set."""

    SUBJECT = "SUBJECT"
    BODY = "BODY"
    FOOTER = "FOOTER"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _validate_address(value: str) -> str:
    """Validate an address that may carry a display name (``Name <a@b.org>``)."""
    stripped = value.strip()
    _, address = parseaddr(stripped)
    if not address:
        raise ValueError(f"Invalid email address: '{value}'")
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email address: '{value}' - {e}") from e
    return stripped


class RecipientConfig(BaseModel):
    """Recipient policy for one runtime mode.

    A missing or empty whitelist allows every recipient; this is the usual
    production setting. A populated whitelist restricts direct delivery to the
    listed recipients, which is handy for demos. Global CC addresses receive
    every notification regardless of the whitelist.
    """

    mode: Mode = Field(..., description="Mode this configuration applies to")
    global_cc: List[str] = Field(
        default_factory=list, description="Addresses copied on every notification"
    )
    whitelist: Optional[List[str]] = Field(
        None, description="Recipients allowed to receive notifications (empty = all)"
    )
    from_address: str = Field(..., min_length=1, description="Sender address")

    @field_validator("global_cc")
    @classmethod
    def validate_global_cc(cls, v: List[str]) -> List[str]:
        """Drop blank entries and validate the remaining addresses."""
        return [_validate_address(address) for address in v if address and address.strip()]

    @field_validator("whitelist")
    @classmethod
    def strip_whitelist(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Strip whitespace and drop blank whitelist entries."""
        if v is None:
            return None
        return [entry.strip() for entry in v if entry and entry.strip()]

    @field_validator("from_address")
    @classmethod
    def validate_from_address(cls, v: str) -> str:
        """Validate the sender address."""
        return _validate_address(v)

    model_config = {"use_enum_values": True, "frozen": True}


class TemplateSet(BaseModel):
    """Subject, body and footer template references for one notification type.

    Each reference is inline template text or a location
    (``classpath:``, ``file:``, ``http(s):`` or a filesystem path).
    """

    notification_type: NotificationType = Field(
        ..., description="Notification type the templates render"
    )
    refs: Dict[TemplateSection, str] = Field(
        default_factory=dict, description="Template reference per section"
    )

    @field_validator("refs", mode="before")
    @classmethod
    def normalize_section_names(cls, v):
        """Accept section names in any case (``body`` or ``BODY``)."""
        if not isinstance(v, dict):
            return v
        normalized = {}
        for key, value in v.items():
            if isinstance(key, TemplateSection):
                normalized[key] = value
            else:
                normalized[str(key).strip().upper()] = value
        return normalized

    def ref_for(self, section: TemplateSection) -> Optional[str]:
        """Get the reference for a section, or None when the section is absent."""
        return self.refs.get(section)

    model_config = {"frozen": True}


class EmailConfig(BaseModel):
    """Mail transport settings."""

    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    timeout: int = Field(30, ge=1, le=300, description="SMTP socket timeout in seconds")

    model_config = {"frozen": True}


class ListenerConfig(BaseModel):
    """Queue listener settings."""

    concurrency: int = Field(4, ge=1, le=64, description="Worker pool size")
    resource_type_header: str = Field(
        "org.fcrepo.jms.resourceType", description="Header carrying the resource type"
    )
    event_type_header: str = Field(
        "org.fcrepo.jms.eventType", description="Header carrying the repository event type"
    )
    accepted_resource_type: str = Field(
        "http://oapass.org/ns/pass#SubmissionEvent",
        description="Resource type that triggers notification",
    )
    accepted_event_type: str = Field(
        "http://fedora.info/definitions/v4/event#ResourceCreation",
        description="Repository event type that triggers notification",
    )
    ack_on_failure: bool = Field(
        False, description="Acknowledge messages whose processing failed instead of nacking"
    )

    model_config = {"frozen": True}


class ResourceStoreConfig(BaseModel):
    """Resource store (HTTP) client settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for resource reads (seconds)"
    )
    user_agent: str = Field(
        "SubmissionNotifier/0.1", min_length=1, description="User-Agent for HTTP requests"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "frozen": True}


class AppConfig(BaseModel):
    """Root configuration object for the Submission Notifier.

    Instances are immutable snapshots; a reload produces a new instance.
    """

    mode: Mode = Field(Mode.PRODUCTION, description="Runtime mode")
    recipient_config: List[RecipientConfig] = Field(
        ..., min_length=1, description="Recipient configuration per mode"
    )
    templates: List[TemplateSet] = Field(
        default_factory=list, description="Template set per notification type"
    )
    email: EmailConfig = Field(default_factory=EmailConfig, description="Mail transport settings")
    listener: ListenerConfig = Field(
        default_factory=ListenerConfig, description="Queue listener settings"
    )
    resources: ResourceStoreConfig = Field(
        default_factory=ResourceStoreConfig, description="Resource store settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    reload_interval_seconds: Optional[int] = Field(
        None, ge=30, le=86400, description="Reload the config file periodically (unset = never)"
    )

    @model_validator(mode="after")
    def validate_uniqueness(self):
        """Reject duplicate recipient configurations and template sets."""
        seen_modes = set()
        for recipient_config in self.recipient_config:
            if recipient_config.mode in seen_modes:
                raise ValueError(
                    f"Duplicate recipient_config for mode '{recipient_config.mode}'"
                )
            seen_modes.add(recipient_config.mode)

        seen_types = set()
        for template_set in self.templates:
            if template_set.notification_type in seen_types:
                raise ValueError(
                    f"Duplicate templates for notification type "
                    f"'{template_set.notification_type.value}'"
                )
            seen_types.add(template_set.notification_type)

        return self

    def get_recipient_config(self, mode: Optional[Mode] = None) -> Optional[RecipientConfig]:
        """Get the recipient configuration for a mode (defaults to the active mode)."""
        wanted = Mode(mode or self.mode).value
        for recipient_config in self.recipient_config:
            if Mode(recipient_config.mode).value == wanted:
                return recipient_config
        return None

    def get_template_set(self, notification_type: NotificationType) -> Optional[TemplateSet]:
        """Get the template set for a notification type."""
        for template_set in self.templates:
            if template_set.notification_type == notification_type:
                return template_set
        return None

    model_config = {"frozen": True}
