"""
Fetcher module: one HTTP GET per URL, body streamed into the mirror tree.
"""
from __future__ import annotations

import asyncio
from http import HTTPStatus
from typing import AsyncIterator, Final

from aiohttp import ClientError, ClientResponse, ClientSession

from site_mirror.crawler.errors import NonSuccessStatus, TransportError
from site_mirror.crawler.models import ContentKind, MirrorEntry
from site_mirror.crawler.storage import MirrorStorage

HTML_CONTENT_TYPE: Final[str] = "text/html; charset=utf-8"
CHUNK_SIZE: Final[int] = 64 * 1024


def classify_content_type(header: str, *, strict: bool = True) -> ContentKind:
    """
    Decide whether a ``Content-Type`` header value denotes HTML.

    In strict mode only the exact string ``text/html; charset=utf-8`` counts.
    Otherwise the media type is compared case-insensitively and parameters
    are ignored.
    """
    if strict:
        return ContentKind.HTML if header == HTML_CONTENT_TYPE else ContentKind.OTHER
    mime = header.split(";", 1)[0].strip().lower()
    return ContentKind.HTML if mime == "text/html" else ContentKind.OTHER


class Fetcher:
    """Performs a single fetch of a URL and persists the response body."""

    def __init__(
        self,
        session: ClientSession,
        storage: MirrorStorage,
        *,
        strict_content_type: bool = True,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self.session = session
        self.storage = storage
        self.strict_content_type = strict_content_type
        self.chunk_size = chunk_size

    async def fetch_and_store(self, url: str) -> MirrorEntry:
        """
        Fetch *url* exactly once and write its body below the mirror root.

        Raises :class:`TransportError`, :class:`NonSuccessStatus` or
        :class:`~site_mirror.crawler.errors.StorageError`.  Nothing is
        retried.
        """
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                if resp.status != HTTPStatus.OK:
                    raise NonSuccessStatus(url, resp.status)
                kind = classify_content_type(
                    resp.headers.get("Content-Type", ""), strict=self.strict_content_type
                )
                path = self.storage.path_for(url)
                await self.storage.write_stream(path, self._body(url, resp))
        except (ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(url, exc) from exc
        return MirrorEntry(source_url=url, local_path=path, content_kind=kind)

    async def _body(self, url: str, resp: ClientResponse) -> AsyncIterator[bytes]:
        # read failures must not look like OSError to the storage layer
        try:
            async for chunk in resp.content.iter_chunked(self.chunk_size):
                yield chunk
        except (ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(url, exc) from exc


__all__ = ("Fetcher", "classify_content_type", "HTML_CONTENT_TYPE")
