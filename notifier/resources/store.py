"""Read access to submission, event and user records.

The resource store is addressed by resource id; for the HTTP store the id is
the URL of the resource itself.
"""

import logging
from typing import Dict, Optional, Protocol, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from notifier.logging import get_logger

from .exceptions import ResourceNotFoundError, ResourceStoreError

logger = get_logger(__name__, component="resources")

ModelT = TypeVar("ModelT", bound=BaseModel)


class ResourceStore(Protocol):
    """Anything that can read a typed record by id."""

    def read_resource(self, resource_id: str, kind: Type[ModelT]) -> ModelT:
        ...


class HttpResourceStore:
    """Resource store backed by a JSON-over-HTTP repository.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = "SubmissionNotifier/0.1",
        username: Optional[str] = None,
        password: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the store.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            username: Basic auth user (optional)
            password: Basic auth password (optional)
            session: Pre-built session, mainly for tests
        """
        if timeout < 1:
            raise ValueError(f"Timeout must be positive, got: {timeout}")
        if not user_agent or not user_agent.strip():
            raise ValueError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = session or requests.Session()
        self._session.headers.update(
            {"User-Agent": self.user_agent, "Accept": "application/json"}
        )
        if username and password:
            self._session.auth = (username, password)

    def read_resource(self, resource_id: str, kind: Type[ModelT]) -> ModelT:
        """Fetch a resource and parse it into ``kind``.

        Args:
            resource_id: Resource id (URL of the record)
            kind: Pydantic model class to validate the payload with

        Returns:
            Parsed model instance

        Raises:
            ResourceNotFoundError: On HTTP 404
            ResourceStoreError: On any other HTTP, transport or parsing failure
        """
        data = self._get_json(resource_id)

        if isinstance(data, dict):
            data = dict(data)
            data.setdefault("id", data.get("@id", resource_id))

        try:
            return kind.model_validate(data)
        except ValidationError as e:
            logger.error(
                f"Resource {resource_id} is not a valid {kind.__name__}",
                extra={
                    "event": "resources.read.invalid",
                    "resource_id": resource_id,
                    "kind": kind.__name__,
                    "error_count": e.error_count(),
                },
            )
            raise ResourceStoreError(
                f"Resource {resource_id} is not a valid {kind.__name__}: {e}",
                resource_id,
            ) from e

    def _get_json(self, resource_id: str) -> Dict:
        try:
            logger.debug(
                f"HTTP GET {resource_id}",
                extra={
                    "event": "resources.read.request",
                    "resource_id": resource_id,
                    "timeout": self.timeout,
                },
            )
            response = self._session.get(resource_id, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {resource_id} timed out after {self.timeout} seconds",
                extra={"event": "resources.read.timeout", "resource_id": resource_id},
            )
            raise ResourceStoreError(
                f"Request to {resource_id} timed out after {self.timeout} seconds",
                resource_id,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {resource_id} failed: {e}",
                extra={
                    "event": "resources.read.error",
                    "error_type": type(e).__name__,
                    "resource_id": resource_id,
                },
            )
            raise ResourceStoreError(f"Request to {resource_id} failed: {e}", resource_id) from e

        if response.status_code == 404:
            logger.warning(
                f"Resource not found: {resource_id}",
                extra={"event": "resources.read.not_found", "resource_id": resource_id},
            )
            raise ResourceNotFoundError(resource_id)

        if response.status_code >= 400:
            log_level = logging.WARNING if response.status_code >= 500 else logging.ERROR
            logger.log(
                log_level,
                f"HTTP {response.status_code} error from {resource_id}",
                extra={
                    "event": "resources.read.error",
                    "status_code": response.status_code,
                    "resource_id": resource_id,
                },
            )
            raise ResourceStoreError(
                f"HTTP {response.status_code}: {response.reason}",
                resource_id,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResourceStoreError(
                f"Failed to parse JSON response from {resource_id}: {e}", resource_id
            ) from e
