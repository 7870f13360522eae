"""
Error taxonomy for a single crawl target.

Every error here is terminal for the target that produced it and never for
the crawl as a whole.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class MirrorError(Exception):
    """Base class: something went wrong while mirroring *url*."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class TransportError(MirrorError):
    """Network, DNS, connection, timeout or body read failure."""

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(url, f"transport error for {url}: {reason}")
        self.reason = reason


class NonSuccessStatus(MirrorError):
    """The server answered, but not with 200 OK."""

    def __init__(self, url: str, status: int) -> None:
        super().__init__(url, f"{url} answered with status {status}")
        self.status = status


class StorageError(MirrorError):
    """The resource could not be written to (or read back from) the mirror."""

    def __init__(self, path: Path, reason: object, url: Optional[str] = None) -> None:
        super().__init__(url or "", f"storage error at {path}: {reason}")
        self.path = path
        self.reason = reason


class MalformedReference(MirrorError):
    """A link inside a document could not be turned into an absolute URL."""

    def __init__(self, url: str, reference: str, reason: object) -> None:
        super().__init__(url, f"malformed reference {reference!r} in {url}: {reason}")
        self.reference = reference


__all__ = (
    "MirrorError",
    "TransportError",
    "NonSuccessStatus",
    "StorageError",
    "MalformedReference",
)
