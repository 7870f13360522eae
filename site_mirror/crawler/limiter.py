"""
Admission control for recursive fetch tasks.
"""
from __future__ import annotations

import asyncio


class AdmissionLimiter:
    """
    Fixed-capacity token gate.

    ``acquire()`` waits until a token is free; ``release()`` hands it back and
    must be paired with exactly one earlier ``acquire()``.  The number of
    outstanding tokens never exceeds :attr:`capacity`.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._sem = asyncio.Semaphore(capacity)
        self._outstanding = 0
        self._peak = 0

    @property
    def outstanding(self) -> int:
        return self._outstanding

    @property
    def peak(self) -> int:
        """Highest number of tokens held at once since creation."""
        return self._peak

    async def acquire(self) -> None:
        await self._sem.acquire()
        self._outstanding += 1
        self._peak = max(self._peak, self._outstanding)

    def release(self) -> None:
        if self._outstanding == 0:
            raise RuntimeError("release() called without a matching acquire()")
        self._outstanding -= 1
        self._sem.release()


__all__ = ("AdmissionLimiter",)
