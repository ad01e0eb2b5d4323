"""
Reverse search from description text to codes.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .catalog_loader import CodeCatalog


@dataclass(frozen=True)
class SearchMatch:
    """A code whose description (or category name) matched the query."""
    category: str
    code: str
    position: str
    name: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "category": self.category,
            "code": self.code,
            "position": self.position,
            "name": self.name,
            "description": self.description,
        }


def reverse_search(catalog: CodeCatalog, query: str) -> List[SearchMatch]:
    """
    Find codes whose description or category display name contains ``query``.

    Matching is case-insensitive substring containment. Results follow catalog
    order, one entry per (category, code). An empty or blank query matches
    nothing.
    """
    needle = query.strip().casefold()
    if not needle:
        return []

    matches: List[SearchMatch] = []
    for category in catalog:
        name_hit = needle in category.name.casefold()
        for code, description in category.codes.items():
            if name_hit or needle in description.casefold():
                matches.append(SearchMatch(
                    category=category.id,
                    code=code,
                    position=category.position,
                    name=category.name,
                    description=description,
                ))
    return matches


class SearchDebouncer:
    """
    Latest-wins gate for search-as-you-type.

    Every ``submit`` supersedes the previous query. ``ready`` hands out the
    newest query once ``delay`` seconds have passed without another submit.
    """

    def __init__(self, delay: float = 0.3, clock: Callable[[], float] = time.monotonic):
        self.delay = delay
        self._clock = clock
        self._lock = threading.Lock()
        self._ticket = 0
        self._pending: Optional[str] = None
        self._submitted_at = 0.0

    def submit(self, query: str) -> int:
        """Record a new query; returns its ticket."""
        with self._lock:
            self._ticket += 1
            self._pending = query
            self._submitted_at = self._clock()
            return self._ticket

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._ticket

    def ready(self) -> Optional[str]:
        """Return the pending query when its delay has elapsed, else None."""
        with self._lock:
            if self._pending is None:
                return None
            if self._clock() - self._submitted_at < self.delay:
                return None
            query, self._pending = self._pending, None
            return query


def debounced_search(
    debouncer: SearchDebouncer,
    catalog: CodeCatalog,
    query: str,
    wait: Callable[[float], None] = time.sleep,
) -> Optional[List[SearchMatch]]:
    """
    Submit ``query``, wait out the debounce delay and search only if it is
    still the newest query.

    Returns None when a later submit superseded this one during the wait;
    the catalog is never scanned for a superseded query.
    """
    ticket = debouncer.submit(query)
    wait(debouncer.delay)
    if not debouncer.is_current(ticket):
        return None
    latest = debouncer.ready()
    if latest is None:
        return None
    return reverse_search(catalog, latest)
