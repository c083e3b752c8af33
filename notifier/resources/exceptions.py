"""Exceptions raised by resource store clients."""


class ResourceStoreError(Exception):
    """Base exception for resource store failures.

    Raised for transport errors, unexpected status codes and payloads that
    cannot be parsed into the requested model.
    """

    def __init__(self, message: str, resource_id: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.resource_id = resource_id
        self.status_code = status_code


class ResourceNotFoundError(ResourceStoreError):
    """The requested resource does not exist (HTTP 404)."""

    def __init__(self, resource_id: str) -> None:
        super().__init__(f"Resource not found: {resource_id}", resource_id, status_code=404)
