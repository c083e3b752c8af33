"""Turns recipient references into email addresses."""

from typing import Iterable, List, Optional, Set
from urllib.parse import unquote, urlsplit

from notifier.domain.models import User
from notifier.logging import get_logger
from notifier.resources.store import ResourceStore

logger = get_logger(__name__, component="dispatch")


def parse_mailto(reference: str) -> Optional[List[str]]:
    """Extract the addresses of a ``mailto:`` URI.

    The query part is dropped and the path percent-decoded. Returns None when
    the reference is not a mailto URI.
    """
    parts = urlsplit(reference.strip())
    if parts.scheme.lower() != "mailto":
        return None
    path = unquote(parts.path)
    return [address.strip() for address in path.split(",") if address.strip()]


class RecipientResolver:
    """Resolves recipient references to addresses.

    ``mailto:`` URIs are decoded directly; any other reference is read from
    the resource store as a User and its email used.
    """

    def __init__(self, resource_store: Optional[ResourceStore] = None):
        self.resource_store = resource_store

    def resolve(self, references: Iterable[str]) -> List[str]:
        """
        Resolve references to a sorted, de-duplicated list of addresses.

        Users without an email address are skipped with a warning.

        Raises:
            ResourceStoreError: If a user reference cannot be read
        """
        addresses: Set[str] = set()
        for reference in references:
            if not reference or not reference.strip():
                continue
            mailto = parse_mailto(reference)
            if mailto is not None:
                addresses.update(mailto)
                continue

            email = self._user_email(reference.strip())
            if email:
                addresses.add(email)
        return sorted(addresses)

    def _user_email(self, reference: str) -> Optional[str]:
        if self.resource_store is None:
            raise ValueError(
                f"Cannot resolve recipient '{reference}': no resource store configured"
            )
        user = self.resource_store.read_resource(reference, User)
        if not user.email or not user.email.strip():
            logger.warning(
                f"User {reference} has no email address, skipping",
                extra={"event": "dispatch.recipient.no_email", "user": reference},
            )
            return None
        return user.email.strip()


def join_addresses(addresses: Iterable[str]) -> str:
    """Comma-join addresses, dropping blanks."""
    return ",".join(address.strip() for address in addresses if address and address.strip())
