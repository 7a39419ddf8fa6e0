#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/utils/images.py
"""Image path resolution for ``\\includegraphics``."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath
from typing import Optional, Union
from urllib.parse import unquote, urlparse

from export2tex.options.settings import ImagePathSettings

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def is_remote_url(url: str) -> bool:
    """Return True for URLs with a network or data scheme.

    Single-letter schemes are treated as Windows drive letters.

    Examples
    --------
        >>> is_remote_url("https://example.com/a.png")
        True
        >>> is_remote_url("C:/images/a.png")
        False

    """
    scheme = urlparse(url).scheme
    return len(scheme) > 1


def _local_path(url: str) -> str:
    return unquote(url).replace("\\", "/")


def resolve_image_path(
    url: str,
    mode: ImagePathSettings,
    root_dir: Optional[PathLike] = None,
    export_dir: Optional[PathLike] = None,
) -> str:
    """Rewrite an image location according to ``mode``.

    Parameters
    ----------
    url : str
        Image location as written in the document, relative to the root of
        the document collection
    mode : ImagePathSettings
        RELATIVE_TO_ROOT keeps the url; FULL_PATH joins it onto
        ``root_dir``; BASE_NAME keeps only the file name;
        RELATIVE_TO_EXPORT makes it relative to ``export_dir``
    root_dir : str or Path, optional
        Root directory of the document collection
    export_dir : str or Path, optional
        Directory the .tex file is written to

    Returns
    -------
    str
        Path with forward slashes. Remote URLs, and modes whose directory
        was not supplied, return ``url`` unchanged.

    Examples
    --------
        >>> resolve_image_path("img/a.png", ImagePathSettings.BASE_NAME)
        'a.png'
        >>> resolve_image_path("img/a.png", ImagePathSettings.FULL_PATH, root_dir="/vault")
        '/vault/img/a.png'

    """
    if not url or is_remote_url(url) or mode is ImagePathSettings.RELATIVE_TO_ROOT:
        return url

    local = _local_path(url)

    if mode is ImagePathSettings.BASE_NAME:
        return PurePosixPath(local).name

    if root_dir is None:
        logger.debug("No root directory for image path mode %s, keeping %s", mode.name, url)
        return url

    full_path = Path(root_dir) / local

    if mode is ImagePathSettings.FULL_PATH:
        return full_path.as_posix()

    if export_dir is None:
        logger.debug("No export directory for relative image path, keeping %s", url)
        return url

    try:
        relative = os.path.relpath(full_path, Path(export_dir))
    except ValueError:
        # Different drives on Windows have no relative path
        logger.debug("Image %s is not reachable from %s, using full path", full_path, export_dir)
        return full_path.as_posix()
    return Path(relative).as_posix()


__all__ = ["is_remote_url", "resolve_image_path"]
