"""
FIFO frontier with a visited set and a hard page budget.
"""
from __future__ import annotations

import math
from collections import deque
from typing import Deque, Set


class CrawlFrontier:
    """Breadth-first queue of pending URLs.

    ``len(pending) + len(visited)`` never grows past ``budget``: offers are
    refused once that sum reaches the cap. The seed is always the first entry.
    """

    def __init__(self, seed_url: str, budget: int) -> None:
        if budget < 1:
            raise ValueError("budget must be >= 1")
        self.budget = budget
        self._pending: Deque[str] = deque()
        self._queued: Set[str] = set()
        self.visited: Set[str] = set()
        self.offer(seed_url)

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return bool(self._pending)

    def __contains__(self, url: object) -> bool:
        return url in self._queued or url in self.visited

    @property
    def has_capacity(self) -> bool:
        return len(self._pending) + len(self.visited) < self.budget

    @property
    def exhausted(self) -> bool:
        """True once nothing more may be visited."""
        return not self._pending or len(self.visited) >= self.budget

    def offer(self, url: str) -> bool:
        """Append *url* unless it is known already or the budget is spent."""
        if url in self or not self.has_capacity:
            return False
        self._pending.append(url)
        self._queued.add(url)
        return True

    def pop(self) -> str:
        url = self._pending.popleft()
        self._queued.discard(url)
        return url

    def mark_visited(self, url: str) -> bool:
        """Record *url* as visited; False if it already was."""
        if url in self.visited:
            return False
        self.visited.add(url)
        return True

    def progress(self) -> int:
        """Percentage of the budget visited so far, rounded half up."""
        return min(100, math.floor(len(self.visited) * 100 / self.budget + 0.5))
