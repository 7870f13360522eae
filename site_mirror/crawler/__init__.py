"""
Core of SiteMirror: scheduling, de-duplication, admission control and
path mapping between the HTTP, HTML and filesystem collaborators.
"""
from site_mirror.crawler.crawler import MirrorCrawler
from site_mirror.crawler.errors import (
    MalformedReference,
    MirrorError,
    NonSuccessStatus,
    StorageError,
    TransportError,
)
from site_mirror.crawler.fetcher import Fetcher
from site_mirror.crawler.limiter import AdmissionLimiter
from site_mirror.crawler.link_extractor import extract_links
from site_mirror.crawler.models import ContentKind, CrawlStats, CrawlTarget, MirrorEntry
from site_mirror.crawler.path_mapper import map_url_to_path
from site_mirror.crawler.storage import MirrorStorage
from site_mirror.crawler.visited import VisitedSet

__all__ = [
    "AdmissionLimiter",
    "ContentKind",
    "CrawlStats",
    "CrawlTarget",
    "Fetcher",
    "MalformedReference",
    "MirrorCrawler",
    "MirrorEntry",
    "MirrorError",
    "MirrorStorage",
    "NonSuccessStatus",
    "StorageError",
    "TransportError",
    "VisitedSet",
    "extract_links",
    "map_url_to_path",
]
