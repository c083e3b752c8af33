"""Custom exceptions for configuration management."""

from typing import List, Optional


class ConfigurationError(Exception):
    """
    Exception raised when configuration is invalid or incomplete.

    This exception can store multiple validation errors and format them
    in a human-readable way with helpful suggestions. Configuration errors
    indicate a deployment defect and are never retried.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Primary error message
            errors: List of specific validation errors
            suggestions: List of helpful suggestions to fix the errors
        """
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with all errors and suggestions."""
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"  - {suggestion}")

        return "\n".join(parts)


class MissingRecipientConfigError(ConfigurationError):
    """No recipient configuration exists for the active runtime mode."""

    def __init__(self, mode: str):
        self.mode = mode
        super().__init__(
            f"Missing recipient configuration for mode '{mode}'",
            suggestions=[
                f"Add a recipient_config entry with mode: {mode}",
                "Check NOTIFICATION_MODE if it overrides the configured mode",
            ],
        )


class MissingTemplateError(ConfigurationError):
    """No template set exists for a notification type being dispatched."""

    def __init__(self, notification_type: str):
        self.notification_type = notification_type
        super().__init__(
            f"Missing notification template for type '{notification_type}'",
            suggestions=[
                f"Add a templates entry with notification_type: {notification_type}",
            ],
        )
