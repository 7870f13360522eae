"""
Recursive same-host mirror with bounded concurrency.

The seed page is fetched directly; every link found on a stored HTML page
becomes a :class:`CrawlTarget` one level deeper.  A target is claimed in the
:class:`VisitedSet` before it waits for an :class:`AdmissionLimiter` token, so
duplicates never take capacity.  Each admitted target runs as its own task,
holding its token only for its fetch and link extraction; it dispatches its
own children after releasing it.
"""
from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Set

from aiohttp import ClientSession, ClientTimeout

from site_mirror.config import MirrorConfig
from site_mirror.crawler.errors import MirrorError
from site_mirror.crawler.fetcher import Fetcher
from site_mirror.crawler.limiter import AdmissionLimiter
from site_mirror.crawler.link_extractor import extract_links
from site_mirror.crawler.models import CrawlStats, CrawlTarget, MirrorEntry
from site_mirror.crawler.storage import MirrorStorage
from site_mirror.crawler.visited import VisitedSet
from site_mirror.logger import LOGGER_NAME

__all__ = ("MirrorCrawler", "LinkExtractor")

LinkExtractor = Callable[[Path, str], Iterable[str]]


class _FetchesAndStores(Protocol):
    async def fetch_and_store(self, url: str) -> MirrorEntry: ...


class MirrorCrawler:
    """Mirrors every same-host resource reachable from ``config.seed_url``."""

    def __init__(
        self,
        config: MirrorConfig,
        *,
        visited: Optional[VisitedSet] = None,
        limiter: Optional[AdmissionLimiter] = None,
        fetcher: Optional[_FetchesAndStores] = None,
        extractor: Optional[LinkExtractor] = None,
    ) -> None:
        self.config = config
        self.visited = visited if visited is not None else VisitedSet()
        self.limiter = limiter if limiter is not None else AdmissionLimiter(config.concurrency)
        self.fetcher = fetcher
        self.extractor: LinkExtractor = extractor or extract_links
        self.stats = CrawlStats()
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger(LOGGER_NAME)
        self._tasks: Set[asyncio.Task[None]] = set()

    async def __aenter__(self) -> MirrorCrawler:
        if self.fetcher is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self.fetcher = Fetcher(
                self.session,
                MirrorStorage(self.config.output_dir),
                strict_content_type=self.config.strict_content_type,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._cancel_outstanding()
        if self.session and not self.session.closed:
            await self.session.close()

    @property
    def outstanding(self) -> int:
        return len(self._tasks)

    async def crawl(self) -> CrawlStats:
        """Run the crawl to completion and return its counters."""
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized, use 'async with MirrorCrawler(...)'")
        seed = CrawlTarget(str(self.config.seed_url), 0)
        self.logger.info("Mirroring %s into %s", seed.url, self.config.output_dir)
        start = time.monotonic()
        try:
            if self._claim(seed):
                await self._dispatch(await self._process(seed), seed.depth + 1)
            await self._join()
        except BaseException:
            await self._cancel_outstanding()
            raise
        duration = time.monotonic() - start
        self.logger.info(
            "Finished in %.2f s: %d stored, %d failed, %d already seen, %d beyond depth",
            duration,
            self.stats.stored,
            self.stats.failed,
            self.stats.skipped,
            self.stats.dropped,
        )
        return self.stats

    # ------------------------------------------------------------------ #
    # Per-target steps
    # ------------------------------------------------------------------ #

    def _claim(self, target: CrawlTarget) -> bool:
        if self.config.max_depth and target.depth > self.config.max_depth:
            self.stats.dropped += 1
            self.logger.debug("Beyond depth %d: %s", self.config.max_depth, target.url)
            return False
        if not self.visited.try_claim(target.url):
            self.stats.skipped += 1
            self.logger.debug("Already claimed: %s", target.url)
            return False
        self.logger.debug("Claimed %s (depth %d)", target.url, target.depth)
        return True

    def _may_descend(self, depth: int) -> bool:
        return not self.config.max_depth or depth < self.config.max_depth

    async def _process(self, target: CrawlTarget) -> List[str]:
        """Fetch and store *target*; return the links it contributes."""
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized")
        try:
            entry = await self.fetcher.fetch_and_store(target.url)
        except MirrorError as exc:
            self.stats.failed += 1
            self.logger.warning("Failed %s", exc)
            return []
        self.stats.stored += 1
        self.logger.info("Stored %s -> %s", entry.source_url, entry.local_path)
        if not entry.is_html or not self._may_descend(target.depth):
            return []
        try:
            return list(self.extractor(entry.local_path, entry.source_url))
        except (OSError, MirrorError) as exc:
            self.logger.warning("Cannot parse %s: %s", entry.local_path, exc)
            return []

    async def _dispatch(self, links: Iterable[str], depth: int) -> None:
        for url in links:
            target = CrawlTarget(url, depth)
            if not self._claim(target):
                continue
            await self.limiter.acquire()
            task = asyncio.create_task(self._run_admitted(target))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run_admitted(self, target: CrawlTarget) -> None:
        try:
            links = await self._process(target)
        finally:
            self.limiter.release()
        await self._dispatch(links, target.depth + 1)

    # ------------------------------------------------------------------ #
    # Completion tracking
    # ------------------------------------------------------------------ #

    async def _join(self) -> None:
        while self._tasks:
            done, _ = await asyncio.wait(set(self._tasks))
            for task in done:
                if task.cancelled():
                    continue
                error = task.exception()
                if error is not None:
                    raise error

    async def _cancel_outstanding(self) -> None:
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
