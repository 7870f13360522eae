"""
Link extraction from stored HTML documents.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Union
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_mirror.crawler.errors import MalformedReference
from site_mirror.logger import logger

#: elements that may pull in another resource
REFERENCE_TAGS: Sequence[str] = ("a", "img", "link", "script")
#: attribute precedence: lazy-load, then source, then hyperlink
REFERENCE_ATTRS: Sequence[str] = ("data-src", "src", "href")

_SCHEMES = ("http", "https")


def referenced_value(tag: Tag) -> Optional[str]:
    """Value of the first attribute from :data:`REFERENCE_ATTRS` present on *tag*."""
    for name in REFERENCE_ATTRS:
        if tag.has_attr(name):
            value = tag.get(name)
            return value if isinstance(value, str) else None
    return None


def resolve_reference(source_url: str, reference: str) -> str:
    """
    Resolve *reference* against *source_url*, dropping any fragment.

    Raises :class:`MalformedReference` when the result is not a valid URL.
    """
    try:
        absolute, _ = urldefrag(urljoin(source_url, reference.strip()))
        # .port validates the authority part
        urlparse(absolute).port
    except ValueError as exc:
        raise MalformedReference(source_url, reference, exc) from exc
    return absolute


def in_scope(url: str, source_url: str) -> bool:
    """True if *url* is http(s) and on the same host (and port) as *source_url*."""
    parsed = urlparse(url)
    return parsed.scheme in _SCHEMES and parsed.netloc == urlparse(source_url).netloc


def extract_links(document: Union[str, Path], source_url: str) -> List[str]:
    """
    Extract same-host links from the stored HTML *document*.

    Each ``a``/``img``/``link``/``script`` element yields at most one link,
    taken from the first attribute found among ``data-src``, ``src`` and
    ``href``.  Malformed references are logged and skipped; cross-host links
    are filtered out.  The result keeps document order without duplicates.
    """
    soup = BeautifulSoup(Path(document).read_bytes(), "html.parser")
    links: List[str] = []
    for tag in soup.find_all(REFERENCE_TAGS):
        if not isinstance(tag, Tag):
            continue
        raw = referenced_value(tag)
        if raw is None or not raw.strip():
            continue
        try:
            absolute = resolve_reference(source_url, raw)
        except MalformedReference as exc:
            logger.warning("Skipping %s", exc)
            continue
        if not in_scope(absolute, source_url):
            logger.debug("Out of scope: %s (from %s)", absolute, source_url)
            continue
        links.append(absolute)
    return list(dict.fromkeys(links))


__all__ = ("extract_links", "resolve_reference", "referenced_value", "in_scope")
