"""site_mirror.engine: подготовка корня зеркала и запуск обхода."""

from __future__ import annotations

from pathlib import Path

from site_mirror.config import MirrorConfig
from site_mirror.crawler.crawler import MirrorCrawler
from site_mirror.crawler.models import CrawlStats
from site_mirror.logger import logger

__all__ = ["prepare_output", "start_mirror"]


def prepare_output(path: Path) -> Path:
    """Создаёт корневую папку зеркала (вместе с родителями), если её нет."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Mirror root ready: %s", path)
    return path


async def start_mirror(cfg: MirrorConfig) -> CrawlStats:
    """
    Запускает зеркалирование в контексте краулера и возвращает счётчики.

    Parameters
    ----------
    cfg : MirrorConfig
        Конфигурация зеркалирования.

    Returns
    -------
    CrawlStats
        Число сохранённых, неудачных и пропущенных ресурсов.
    """
    prepare_output(cfg.output_dir)
    async with MirrorCrawler(cfg) as crawler:
        return await crawler.crawl()
