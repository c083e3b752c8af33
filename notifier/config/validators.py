"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

from notifier.domain.models import NotificationType


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    None of these stop the service from starting; they point at settings
    that will make notifications fail or go somewhere unexpected.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    mode = str(config_dict.get("mode", "production")).strip().lower()
    recipient_configs = config_dict.get("recipient_config", [])
    if not isinstance(recipient_configs, list):
        recipient_configs = []

    modes = {
        str(rc.get("mode", "")).strip().lower()
        for rc in recipient_configs
        if isinstance(rc, dict)
    }
    if mode != "disabled" and mode not in modes:
        warning_messages.append(
            f"No recipient_config for active mode '{mode}'; every notification will fail"
        )

    for rc in recipient_configs:
        if not isinstance(rc, dict):
            continue
        if str(rc.get("mode", "")).strip().lower() == "demo" and not rc.get("whitelist"):
            warning_messages.append(
                "Demo recipient_config has no whitelist; all recipients will be notified"
            )

    templates = config_dict.get("templates", [])
    if isinstance(templates, list):
        configured = {
            str(t.get("notification_type", "")).strip()
            for t in templates
            if isinstance(t, dict)
        }
        missing = sorted(t.value for t in NotificationType if t.value not in configured)
        if missing:
            warning_messages.append(
                f"No templates configured for notification types: {', '.join(missing)}"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
