"""
Data models for the SiteMirror crawler.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path


class ContentKind(enum.Enum):
    """What the scheduler needs to know about a stored resource."""

    HTML = "html"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class CrawlTarget:
    """One unit of discovery work: a URL and the depth it was found at."""

    url: str
    depth: int


@dataclass(frozen=True, slots=True)
class MirrorEntry:
    """Result of one successful fetch-and-store."""

    source_url: str
    local_path: Path
    content_kind: ContentKind

    @property
    def is_html(self) -> bool:
        return self.content_kind is ContentKind.HTML


@dataclass(slots=True)
class CrawlStats:
    """Outcome counters for a finished crawl."""

    stored: int = 0
    failed: int = 0
    skipped: int = 0
    dropped: int = 0
