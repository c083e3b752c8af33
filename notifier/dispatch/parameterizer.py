"""Renders notification templates with Jinja2."""

import json
from typing import Any, BinaryIO, Dict, List, Mapping

from jinja2 import ChainableUndefined, Environment, TemplateError

from notifier.domain.models import Param
from notifier.logging import get_logger

from .exceptions import TemplateRenderError

logger = get_logger(__name__, component="dispatch")


def build_template_context(params: Mapping[Param, str]) -> Dict[str, Any]:
    """Bind parameters by their lowercase names.

    Values holding a JSON object or array are decoded so templates can reach
    into them (``{{ resource_metadata.title }}``) while ``{{ resource_metadata }}``
    still renders the original text. Any other value, including
    text that merely starts like JSON, binds as the plain string.
    """
    context: Dict[str, Any] = {}
    for key, value in params.items():
        name = Param(key).value
        context[name] = _decode(value)
    return context


class JSONObject(dict):
    """A decoded JSON object that renders as its source text."""

    def __init__(self, value: Dict[str, Any], source: str):
        super().__init__(value)
        self.source = source

    def __str__(self) -> str:
        return self.source


class JSONArray(list):
    """A decoded JSON array that renders as its source text."""

    def __init__(self, value: List[Any], source: str):
        super().__init__(value)
        self.source = source

    def __str__(self) -> str:
        return self.source


def _decode(value: str) -> Any:
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    if not stripped.startswith(("{", "[")):
        return value
    try:
        decoded = json.loads(stripped)
    except ValueError:
        return value
    if isinstance(decoded, dict):
        return JSONObject(decoded, value)
    if isinstance(decoded, list):
        return JSONArray(decoded, value)
    return value


class TemplateParameterizer:
    """Fills templates with Notification Intent parameters.

    Placeholders are ``{{to}}``-style expressions. Unresolved placeholders,
    including attribute lookups on missing values, render as empty text.
    Output is not HTML-escaped.
    """

    def __init__(self):
        self.environment = Environment(
            undefined=ChainableUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )

    def render(self, template_body: str, params: Mapping[Param, str]) -> str:
        """
        Render template text.

        Args:
            template_body: Jinja2 template source
            params: Template parameters

        Returns:
            Rendered text

        Raises:
            TemplateRenderError: If the template cannot be compiled or rendered
        """
        try:
            template = self.environment.from_string(template_body)
            return template.render(build_template_context(params))
        except TemplateError as e:
            logger.error(
                f"Failed to render template: {e}",
                extra={"event": "dispatch.template.render_failed", "error_type": type(e).__name__},
            )
            raise TemplateRenderError(f"Failed to render template: {e}") from e

    def render_stream(self, stream: BinaryIO, params: Mapping[Param, str]) -> str:
        """Read a UTF-8 template from a stream and render it; the stream is closed."""
        try:
            with stream:
                template_body = stream.read().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateRenderError(f"Failed to read template: {e}") from e
        return self.render(template_body, params)
