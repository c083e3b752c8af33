"""Template resolvers.

A template reference in the configuration is either inline template text or
a location: ``classpath:`` (bundled templates), ``file:``, ``http(s):`` or a
bare filesystem path. Each resolver handles one kind of reference and
returns None for references it does not recognize; the composite tries them
in order.
"""

import io
from importlib import resources
from pathlib import Path
from typing import BinaryIO, List, Optional, Protocol, Sequence

import requests

from notifier.logging import get_logger

from .exceptions import ResolutionAttempt, TemplateResolutionError

logger = get_logger(__name__, component="dispatch")

TEMPLATE_PACKAGE = "notifier.dispatch.email_templates"

PACKAGE_PREFIXES = ("classpath*:", "classpath:", "package:")


class TemplateResolver(Protocol):
    """Turns a template reference into a readable byte stream."""

    def resolve(self, reference: str) -> Optional[BinaryIO]:
        ...


class PackageTemplateResolver:
    """Resolves ``classpath:`` and ``package:`` references to bundled templates."""

    def __init__(self, package: str = TEMPLATE_PACKAGE):
        self.package = package

    def resolve(self, reference: str) -> Optional[BinaryIO]:
        for prefix in PACKAGE_PREFIXES:
            if reference.startswith(prefix):
                name = reference[len(prefix):].lstrip("/")
                break
        else:
            return None

        resource = resources.files(self.package)
        for part in name.split("/"):
            resource = resource / part
        if not resource.is_file():
            raise FileNotFoundError(f"No bundled template '{name}' in {self.package}")
        return resource.open("rb")


class FileTemplateResolver:
    """Resolves ``file:`` references and bare paths of existing files.

    Bare references are only treated as paths when the file exists, so inline
    template text falls through to the next resolver.
    """

    def resolve(self, reference: str) -> Optional[BinaryIO]:
        if reference.startswith("file://"):
            return open(reference[len("file://"):], "rb")
        if reference.startswith("file:"):
            return open(reference[len("file:"):], "rb")

        if "\n" in reference or "{{" in reference:
            return None
        try:
            path = Path(reference)
            if not path.is_file():
                return None
        except (OSError, ValueError):
            return None
        return path.open("rb")


class HttpTemplateResolver:
    """Resolves ``http:`` and ``https:`` references with a GET request."""

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self._session = session or requests.Session()

    def resolve(self, reference: str) -> Optional[BinaryIO]:
        if not reference.startswith(("http://", "https://")):
            return None
        response = self._session.get(reference, timeout=self.timeout)
        response.raise_for_status()
        return io.BytesIO(response.content)


class InlineTemplateResolver:
    """Treats the reference itself as the template text.

    Single-line references that look like locations are left alone, so a
    broken ``classpath:`` or ``file:`` reference fails resolution instead of
    rendering the reference text.
    """

    LOCATION_PREFIXES = PACKAGE_PREFIXES + ("file:", "http://", "https://")

    def resolve(self, reference: str) -> Optional[BinaryIO]:
        if "\n" not in reference and reference.strip().startswith(self.LOCATION_PREFIXES):
            return None
        return io.BytesIO(reference.encode("utf-8"))


class CompositeTemplateResolver:
    """Tries each resolver in order; the first non-None result wins.

    Resolver exceptions are recorded and resolution continues with the next
    resolver. When every resolver fails, TemplateResolutionError reports all
    attempts.
    """

    def __init__(self, resolvers: Sequence[TemplateResolver]):
        if resolvers is None:
            raise ValueError("Template resolvers must not be None")
        self.resolvers: List[TemplateResolver] = list(resolvers)

    def resolve(self, reference: str) -> BinaryIO:
        attempts: List[ResolutionAttempt] = []
        for resolver in self.resolvers:
            name = type(resolver).__name__
            try:
                stream = resolver.resolve(reference)
            except Exception as e:
                logger.debug(
                    f"{name} could not resolve template: {e}",
                    extra={
                        "event": "dispatch.template.resolver_failed",
                        "resolver": name,
                        "error_type": type(e).__name__,
                    },
                )
                attempts.append(ResolutionAttempt(name, e))
                continue
            if stream is not None:
                return stream
            attempts.append(ResolutionAttempt(name))

        raise TemplateResolutionError(reference, attempts)


def default_resolver(timeout: int = 30) -> CompositeTemplateResolver:
    """Build the standard resolver chain: bundled, file, HTTP, then inline text."""
    return CompositeTemplateResolver(
        [
            PackageTemplateResolver(),
            FileTemplateResolver(),
            HttpTemplateResolver(timeout=timeout),
            InlineTemplateResolver(),
        ]
    )
