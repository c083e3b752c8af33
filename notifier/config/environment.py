"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError
from .models import Mode


class EnvironmentConfig:
    """Environment variable configuration holder.

    Holds the secrets and deployment-specific values that do not belong in
    the YAML file: SMTP connection details, resource store credentials and
    overrides for the runtime mode and log level.
    """

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_user: Optional[str] = None,
        smtp_pass: Optional[str] = None,
        smtp_timeout: Optional[int] = None,
        mode: Optional[str] = None,
        resource_store_user: Optional[str] = None,
        resource_store_pass: Optional[str] = None,
        log_level: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.smtp_timeout = smtp_timeout
        self.mode = mode
        self.resource_store_user = resource_store_user
        self.resource_store_pass = resource_store_pass
        self.log_level = log_level


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SMTP_HOST: SMTP server hostname
    - SMTP_PORT: SMTP server port (1-65535)

    Optional environment variables:
    - SMTP_USER / SMTP_PASS: SMTP authentication (both or neither)
    - SMTP_TIMEOUT: SMTP socket timeout in seconds (overrides email.timeout)
    - NOTIFICATION_MODE: Override the runtime mode (disabled, demo, production)
    - RESOURCE_STORE_USER / RESOURCE_STORE_PASS: Basic auth for the resource store
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    smtp_host = os.getenv("SMTP_HOST")
    smtp_port_str = os.getenv("SMTP_PORT")

    smtp_user = os.getenv("SMTP_USER")
    smtp_pass = os.getenv("SMTP_PASS")
    smtp_timeout_str = os.getenv("SMTP_TIMEOUT")
    mode = os.getenv("NOTIFICATION_MODE")
    resource_store_user = os.getenv("RESOURCE_STORE_USER")
    resource_store_pass = os.getenv("RESOURCE_STORE_PASS")
    log_level = os.getenv("LOG_LEVEL")

    if not smtp_host:
        errors.append("Missing required environment variable: SMTP_HOST")

    if not smtp_port_str:
        errors.append("Missing required environment variable: SMTP_PORT")

    smtp_port = None
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(
                    f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535."
                )
        except ValueError:
            errors.append(
                f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer."
            )

    smtp_timeout = None
    if smtp_timeout_str:
        try:
            smtp_timeout = int(smtp_timeout_str)
            if smtp_timeout < 1:
                errors.append(f"Invalid SMTP_TIMEOUT: {smtp_timeout}. Must be positive.")
        except ValueError:
            errors.append(
                f"Invalid SMTP_TIMEOUT: '{smtp_timeout_str}'. Must be a valid integer."
            )

    if mode:
        valid_modes = [m.value for m in Mode]
        if mode.lower() not in valid_modes:
            errors.append(
                f"Invalid NOTIFICATION_MODE: '{mode}'. Must be one of: {', '.join(valid_modes)}"
            )
        else:
            mode = mode.lower()

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if smtp_user and not smtp_pass:
        errors.append(
            "SMTP_USER is set but SMTP_PASS is not. Both must be set for authentication."
        )
    elif smtp_pass and not smtp_user:
        errors.append(
            "SMTP_PASS is set but SMTP_USER is not. Both must be set for authentication."
        )

    if bool(resource_store_user) != bool(resource_store_pass):
        errors.append(
            "RESOURCE_STORE_USER and RESOURCE_STORE_PASS must be set together."
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Ensure all required environment variables are set",
                "Verify SMTP_PORT is a number between 1 and 65535",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        smtp_timeout=smtp_timeout,
        mode=mode,
        resource_store_user=resource_store_user,
        resource_store_pass=resource_store_pass,
        log_level=log_level,
    )
