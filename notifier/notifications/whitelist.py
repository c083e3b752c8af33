"""Recipient whitelist policy."""

from typing import AbstractSet, Iterable, Optional, Set


class Whitelist:
    """Filters recipient candidates against an allow-list.

    An absent or empty whitelist allows every candidate. Otherwise a candidate
    passes when its case-folded value equals a case-folded whitelist entry.
    Global CC addresses are never filtered; callers keep them out of here.
    """

    def __init__(self, entries: Optional[Iterable[str]] = None):
        self._entries = frozenset(e.casefold() for e in entries) if entries else frozenset()

    @property
    def allows_all(self) -> bool:
        return not self._entries

    def filter(self, candidates: AbstractSet[str]) -> Set[str]:
        """Return the allowed subset of candidates.

        The input is never mutated.

        Raises:
            ValueError: If candidates is None
        """
        if candidates is None:
            raise ValueError("Recipient candidates must not be None")

        if self.allows_all:
            return set(candidates)

        return {c for c in candidates if c.casefold() in self._entries}

    __call__ = filter
