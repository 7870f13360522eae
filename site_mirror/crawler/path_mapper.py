"""
URL -> local path mapping for the mirror tree.
"""
from __future__ import annotations

from pathlib import Path
from typing import Final, Union
from urllib.parse import unquote, urlsplit

INDEX_NAME: Final[str] = "index.html"


def map_url_to_path(url: str, root: Union[str, Path]) -> Path:
    """
    Return where *url* lives under the mirror *root*.

    An empty path or ``/`` maps to ``root/index.html``; anything else keeps the
    URL's path hierarchy, percent-decoded and split on ``/`` so the host
    separator is used.  Query strings and fragments do not take part.

    ``..`` segments are passed through untouched: a hostile URL can point
    outside *root*.  :class:`~site_mirror.crawler.storage.MirrorStorage`
    refuses such writes.
    """
    path = unquote(urlsplit(url).path)
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return Path(root) / INDEX_NAME
    return Path(root).joinpath(*segments)


__all__ = ("INDEX_NAME", "map_url_to_path")
