"""Resource store clients."""

from .exceptions import ResourceNotFoundError, ResourceStoreError
from .store import HttpResourceStore, ResourceStore

__all__ = [
    "HttpResourceStore",
    "ResourceNotFoundError",
    "ResourceStore",
    "ResourceStoreError",
]
