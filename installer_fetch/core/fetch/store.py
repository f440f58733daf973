# installer_fetch/core/fetch/store.py
"""
Package cache store: a local directory, or a read-only HTTP mirror.

Public API
----------
class CacheStore:
    is_enabled() -> bool
    is_remote() -> bool
    read(package_name, url)          context manager yielding CacheHit | None
    contains(package_name, url) -> bool
    write(package_name, url, source) -> bool
    restore(package_name, url, destination) -> Path | None

def restore_path(destination, file_name) -> Path

Invariants & Guardrails
-----------------------
- Nothing inside the store raises on a cache *read*: missing, partial, or
  unreachable entries are all a miss (None), logged at DEBUG.
- Remote lookups download into a private temporary directory that is removed
  when the ``read`` context exits, whatever happened inside it.
- Remote locations are never written to; they are populated out-of-band.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from installer_fetch.schemas.models import CacheHit, CacheSettings, FetchPolicy

from .errors import CacheWriteError
from .keys import entry_paths, entry_urls
from .transports import HttpTransport, Transport

logger = logging.getLogger(__name__)


def _read_name_record(path: Path) -> str | None:
    name = path.read_text(encoding="utf-8-sig").strip()
    return Path(name).name or None


def restore_path(destination: Path, file_name: str) -> Path:
    """
    Where a cached artifact lands for a given caller destination.

    - existing directory            → destination / file_name
    - base name differs from record → destination.parent / file_name
    - otherwise                     → destination
    """
    if destination.is_dir():
        return destination / file_name
    if destination.name != file_name:
        return destination.parent / file_name
    return destination


class CacheStore:
    def __init__(
        self,
        settings: CacheSettings | None = None,
        *,
        policy: FetchPolicy | None = None,
        http: Transport | None = None,
    ) -> None:
        self.settings = settings or CacheSettings()
        self.policy = policy or FetchPolicy()
        self._http = http or HttpTransport(self.policy)

    def is_enabled(self) -> bool:
        return self.settings.is_enabled

    def is_remote(self) -> bool:
        return self.settings.is_remote

    # ---------- Reading ----------

    @contextmanager
    def read(self, package_name: str, url: str) -> Iterator[CacheHit | None]:
        """
        Look up the entry for (package_name, url).

        The yielded ``binary_path`` is only valid inside the ``with`` block:
        for remote mirrors it points into a temporary directory.
        """
        if not self.is_enabled():
            yield None
            return

        if self.is_remote():
            with tempfile.TemporaryDirectory(prefix="installer-fetch-") as tmp:
                yield self._read_remote(package_name, url, Path(tmp))
            return

        yield self._read_local(package_name, url)

    def _read_local(self, package_name: str, url: str) -> CacheHit | None:
        root = self.settings.local_root
        assert root is not None
        paths = entry_paths(package_name, url, root)
        if not (paths["name"].is_file() and paths["binary"].is_file()):
            logger.debug("Cache miss for %s (%s)", package_name, url)
            return None
        try:
            name = _read_name_record(paths["name"])
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Unreadable cache entry %s: %s", paths["name"], exc)
            return None
        if not name:
            logger.debug("Empty name record %s", paths["name"])
            return None
        logger.debug("Cache hit for %s (%s): %s", package_name, url, name)
        return CacheHit(file_name=name, binary_path=paths["binary"])

    def _read_remote(self, package_name: str, url: str, tmp: Path) -> CacheHit | None:
        urls = entry_urls(package_name, url, str(self.settings.cache_location))
        try:
            name_record = self._http.fetch(urls["name"], tmp / "name.txt", quiet=True)
            name = _read_name_record(name_record.path)
            if not name:
                logger.debug("Empty remote name record %s", urls["name"])
                return None
            binary = self._http.fetch(urls["binary"], tmp / "entry.bin", quiet=True)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Remote cache miss for %s (%s): %s", package_name, url, exc)
            return None
        logger.debug("Remote cache hit for %s (%s): %s", package_name, url, name)
        return CacheHit(file_name=name, binary_path=binary.path)

    def contains(self, package_name: str, url: str) -> bool:
        with self.read(package_name, url) as hit:
            return hit is not None

    def restore(self, package_name: str, url: str, destination: Path) -> Path | None:
        """Copy a cached artifact to where the caller expects it; None on a miss."""
        with self.read(package_name, url) as hit:
            if hit is None:
                return None
            final = restore_path(destination, hit.file_name)
            try:
                final.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(hit.binary_path, final)
            except OSError as exc:
                logger.debug("Could not restore %s from cache to %s: %s", url, final, exc)
                return None
        logger.info("Restored %s from cache to %s", hit.file_name, final)
        return final.resolve()

    # ---------- Writing ----------

    def write(self, package_name: str, url: str, source: Path) -> bool:
        """
        Store ``source`` as the entry for (package_name, url), replacing any
        previous one. Returns False when nothing was written (disabled or remote).
        """
        if not self.is_enabled():
            return False
        if self.is_remote():
            logger.debug("Cache location %s is a remote mirror; not writing %s", self.settings.cache_location, url)
            return False

        root = self.settings.local_root
        assert root is not None
        paths = entry_paths(package_name, url, root)
        try:
            root.mkdir(parents=True, exist_ok=True)
            paths["name"].write_text(source.name, encoding="utf-8")
            shutil.copyfile(source, paths["binary"])
        except OSError as exc:
            raise CacheWriteError(f"Unable to cache {url!r} for {package_name!r} in {root}: {exc}") from exc

        logger.debug("Cached %s for %s as %s", url, package_name, paths["binary"].name)
        return True


__all__ = ["CacheStore", "restore_path"]
