"""Configuration management module for the Submission Notifier."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import (
    ConfigurationError,
    MissingRecipientConfigError,
    MissingTemplateError,
)
from .holder import ConfigHolder, file_loader
from .loader import (
    apply_environment_overrides,
    load_app_config,
    load_config,
    validate_config_file,
)
from .models import (
    AppConfig,
    EmailConfig,
    ListenerConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    Mode,
    RecipientConfig,
    ResourceStoreConfig,
    TemplateSection,
    TemplateSet,
)

__all__ = [
    # Loader functions
    "load_config",
    "load_app_config",
    "apply_environment_overrides",
    "validate_config_file",
    "load_environment_config",
    "file_loader",
    # Snapshot holder
    "ConfigHolder",
    # Configuration models
    "AppConfig",
    "RecipientConfig",
    "TemplateSet",
    "EmailConfig",
    "ListenerConfig",
    "ResourceStoreConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "Mode",
    "TemplateSection",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
    "MissingRecipientConfigError",
    "MissingTemplateError",
]
