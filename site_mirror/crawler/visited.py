"""
Process-wide record of URLs that have already been scheduled.
"""
from __future__ import annotations

import threading
from typing import Iterator, Set


class VisitedSet:
    """
    Set of claimed URLs with an atomic check-and-set.

    :meth:`try_claim` is the only way in: the membership test and the
    insertion happen under one lock, so two callers racing on the same URL
    get exactly one ``True``.  Entries are never removed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._claimed: Set[str] = set()

    def try_claim(self, url: str) -> bool:
        with self._lock:
            if url in self._claimed:
                return False
            self._claimed.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._claimed

    def __len__(self) -> int:
        with self._lock:
            return len(self._claimed)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(sorted(self._claimed))


__all__ = ("VisitedSet",)
