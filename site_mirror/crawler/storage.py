"""
On-disk side of the mirror: directory creation and streamed file writes.
"""
from __future__ import annotations

from pathlib import Path
from typing import AsyncIterable, Union

import aiofiles

from site_mirror.crawler.errors import StorageError
from site_mirror.crawler.path_mapper import map_url_to_path
from site_mirror.logger import logger

# ValueError: the decoded URL path may carry characters the OS rejects (NUL)
_FS_ERRORS = (OSError, ValueError)


class MirrorStorage:
    """Writes fetched bodies below a single mirror root."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def path_for(self, url: str) -> Path:
        return map_url_to_path(url, self.root)

    def ensure_dir(self, path: Path) -> None:
        """Create *path* and its parents; failures become :class:`StorageError`."""
        try:
            path.mkdir(parents=True, exist_ok=True)
        except _FS_ERRORS as exc:
            raise StorageError(path, exc) from exc

    def check_within_root(self, path: Path) -> None:
        try:
            root = self.root.resolve()
            target = path.resolve()
        except _FS_ERRORS as exc:
            raise StorageError(path, exc) from exc
        if target != root and root not in target.parents:
            raise StorageError(path, f"outside of mirror root {root}")

    async def write_stream(self, path: Path, chunks: AsyncIterable[bytes]) -> int:
        """
        Write all *chunks* to *path*, creating missing parent directories.

        Returns the number of bytes written.  Errors raised by *chunks* itself
        propagate unchanged; a partially written file is left in place.
        """
        self.check_within_root(path)
        self.ensure_dir(path.parent)
        written = 0
        try:
            async with aiofiles.open(path, "wb") as fh:
                async for chunk in chunks:
                    await fh.write(chunk)
                    written += len(chunk)
        except _FS_ERRORS as exc:
            raise StorageError(path, exc) from exc
        logger.debug("Wrote %d bytes to %s", written, path)
        return written


__all__ = ("MirrorStorage",)
