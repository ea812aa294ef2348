"""URL helpers for mount points and description base paths."""

from __future__ import annotations

import re

from api_explorer.settings import DEFAULT_MOUNT_PATH

__all__ = ["url_join", "normalize_mount_path", "strip_trailing_slash"]

_SLASH_RUN = re.compile(r"/+")


def url_join(*parts: str) -> str:
    """Join URL segments with ``/`` and collapse repeated slashes.

    >>> url_join("/explorer/", "/swagger.json")
    "/explorer/swagger.json"
    """
    return _SLASH_RUN.sub("/", "/".join(parts))


def strip_trailing_slash(path: str) -> str:
    return path.rstrip("/")


def normalize_mount_path(path: str | None) -> str:
    """Return ``path`` with exactly one leading slash and no trailing slash.

    ``None`` or an empty string resolves to the default mount path. The root
    path is rejected: the explorer always lives under its own prefix.
    """
    if not path:
        return DEFAULT_MOUNT_PATH
    normalized = strip_trailing_slash(url_join("/", path.strip()))
    if not normalized:
        raise ValueError(f"Explorer cannot be mounted at the root path (got {path!r})")
    return normalized
