from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web

from site_mirror.config import MirrorConfig


@pytest.fixture()
def mirror_root(tmp_path) -> Path:
    """Empty directory used as the mirror root."""
    root = tmp_path / "mirror"
    root.mkdir()
    return root


@pytest.fixture()
def basic_config(mirror_root) -> MirrorConfig:
    """
    Return a basic valid MirrorConfig for crawler tests.
    """
    return MirrorConfig(
        seed_url="http://site/",
        output_dir=mirror_root,
        max_depth=0,
        concurrency=2,
        timeout=2.0,
        user_agent="TestAgent/1.0",
    )


@pytest.fixture()
def write_html(tmp_path) -> Callable[[str], Path]:
    """Write an HTML document into tmp_path and return its path."""

    def _write(markup: str, name: str = "page.html") -> Path:
        path = tmp_path / name
        path.write_text(markup, encoding="utf-8")
        return path

    return _write


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[Callable[[web.Application], Awaitable[str]]]:
    """Start aiohttp apps on free local ports; yield a starter returning the base URL."""
    runners: list[web.AppRunner] = []

    async def _start(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    try:
        yield _start
    finally:
        for runner in runners:
            await runner.cleanup()
