# installer_fetch/core/fetch/keys.py
"""
Deterministic cache key layout for installer artifacts.

A key is ``<package>_<sanitized url prefix>_<md5(url)>``. The sanitized prefix
keeps entries readable on disk; the digest keeps two URLs apart even when
their prefixes collapse to the same text.
"""

from __future__ import annotations

import re
from hashlib import md5 as _md5lib
from pathlib import Path

MAX_URL_SEGMENT = 128
NAME_RECORD_SUFFIX = ".txt"
BINARY_RECORD_SUFFIX = ".bin"

_UNSAFE_RUN = re.compile(r"[^A-Za-z0-9_.-]+")


def _md5(data: bytes | str) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return _md5lib(data).hexdigest()


def sanitize_url(url: str) -> str:
    """Collapse unsafe character runs to ``_`` and keep at most 128 characters."""
    return _UNSAFE_RUN.sub("_", url)[:MAX_URL_SEGMENT]


def derive_key(package_name: str, url: str) -> str:
    return f"{package_name}_{sanitize_url(url)}_{_md5(url)}"


def entry_paths(package_name: str, url: str, root: Path) -> dict[str, Path]:
    """
    Local entry files for (package, url) under ``root``.

    Layout:
      - <key>.txt   original file name (UTF-8)
      - <key>.bin   raw artifact bytes
    """
    key = derive_key(package_name, url)
    return {
        "name": root / f"{key}{NAME_RECORD_SUFFIX}",
        "binary": root / f"{key}{BINARY_RECORD_SUFFIX}",
    }


def entry_urls(package_name: str, url: str, base_url: str) -> dict[str, str]:
    """Same layout as :func:`entry_paths` for a remote mirror rooted at ``base_url``."""
    key = derive_key(package_name, url)
    base = base_url.rstrip("/")
    return {
        "name": f"{base}/{key}{NAME_RECORD_SUFFIX}",
        "binary": f"{base}/{key}{BINARY_RECORD_SUFFIX}",
    }
