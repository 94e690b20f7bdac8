"""Crawl frontier: a LIFO work stack with constant-time membership checks."""

from collections import Counter
from typing import Iterator, List, Optional

from docscheck.models import FrontierEntry


class Frontier:
    """Stack of URLs awaiting a visit.

    Entries are popped most-recently-added first, which makes the crawl
    depth-first. A counter of queued URLs answers "already queued?" without
    scanning the stack; it counts rather than flags because seeds are pushed
    unconditionally and may repeat.
    """

    def __init__(self, entries: Optional[List[FrontierEntry]] = None):
        self._stack: List[FrontierEntry] = []
        self._queued: Counter = Counter()
        for entry in entries or []:
            self.push(entry.url, entry.depth)

    def push(self, url: str, depth: int) -> None:
        self._stack.append(FrontierEntry(url=url, depth=depth))
        self._queued[url] += 1

    def pop(self) -> FrontierEntry:
        """Remove and return the most recently pushed entry.

        Raises:
            IndexError: If the frontier is empty
        """
        entry = self._stack.pop()
        self._queued[entry.url] -= 1
        if self._queued[entry.url] <= 0:
            del self._queued[entry.url]
        return entry

    def contains(self, url: str) -> bool:
        """Whether ``url`` is waiting anywhere in the stack."""
        return url in self._queued

    def __contains__(self, url: str) -> bool:
        return self.contains(url)

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)

    def __iter__(self) -> Iterator[FrontierEntry]:
        # Top of the stack first
        return reversed(self._stack)
