# installer_fetch/core/fetch/orchestrator.py
"""
Cache-first installer fetch for one package.

Flow
----
1) Resolve which variant to install (host bit-width) and which to cache only.
2) Cache lookup for the install URL → on hit, copy into place and return.
3) On miss, fetch with the transport for the URL's scheme (fatal on failure).
4) Write the fetched artifact back to the cache (best-effort).
5) Fetch + cache the other variant into a scratch directory (best-effort).
6) Return the installed path.
"""

from __future__ import annotations

import logging
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from installer_fetch.schemas.models import Bitness, FetchPolicy, FetchRequest, FetchResult

from .errors import CacheWriteError, FetchError, PackageFetchError
from .store import CacheStore
from .transports import Transport, transport_for
from .variants import host_is_64bit, resolve_variants

logger = logging.getLogger(__name__)

TransportFactory = Callable[[str, FetchPolicy], Transport]


class FetchOrchestrator:
    def __init__(
        self,
        store: CacheStore | None = None,
        policy: FetchPolicy | None = None,
        *,
        transport_factory: TransportFactory = transport_for,
        host_64bit: bool | None = None,
    ) -> None:
        self.policy = policy or FetchPolicy()
        self.store = store or CacheStore(policy=self.policy)
        self._transport_for = transport_factory
        if host_64bit is None:
            host_64bit = host_is_64bit()
        self.host_64bit = host_64bit and not self.policy.force_32bit

    # ---------- Public API ----------

    def fetch(self, package_name: str, destination: Path, url: str, alternate_url: str | None = None) -> Path:
        """Produce the installer for ``package_name`` at ``destination``; returns its path."""
        request = FetchRequest(package_name=package_name, destination=destination, url=url, alternate_url=alternate_url)
        return self.run(request).path

    def run(self, request: FetchRequest) -> FetchResult:
        pkg = request.package_name
        plan = resolve_variants(request.url, request.alternate_url, self.host_64bit)
        logger.debug("Variant plan for %s: %s", pkg, plan)

        cached = self.store.restore(pkg, plan.install_url, request.destination)
        if cached is not None:
            return FetchResult(path=cached, url=plan.install_url, bitness=plan.install_bitness, from_cache=True)

        try:
            fetched = self._transport_for(plan.install_url, self.policy).fetch(plan.install_url, request.destination)
        except FetchError as exc:
            raise PackageFetchError(pkg, plan.install_url, str(exc)) from exc

        self._cache(pkg, plan.install_url, fetched.path)

        if plan.cache_only_url and plan.cache_only_bitness:
            self._cache_only(pkg, plan.cache_only_url, plan.cache_only_bitness, request.destination)

        if self.policy.settle_delay_s:
            time.sleep(self.policy.settle_delay_s)

        return FetchResult(path=fetched.path, url=plan.install_url, bitness=plan.install_bitness)

    # ---------- Internals ----------

    def _cache(self, package_name: str, url: str, path: Path) -> None:
        try:
            self.store.write(package_name, url, path)
        except CacheWriteError as exc:
            logger.debug("Cache write skipped: %s", exc)

    def _cache_only(self, package_name: str, url: str, bitness: Bitness, destination: Path) -> None:
        """Fetch the other variant purely to populate the cache; never fatal."""
        if not self.store.is_enabled() or self.store.is_remote():
            logger.debug("No writable cache; skipping %d-bit variant %s", bitness, url)
            return

        scratch_parent = destination if destination.is_dir() else destination.parent
        try:
            scratch_parent.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(prefix=".cache-only-", dir=scratch_parent) as tmp:
                fetched = self._transport_for(url, self.policy).fetch(url, Path(tmp), quiet=True)
                self.store.write(package_name, url, fetched.path)
        except (FetchError, OSError) as exc:
            logger.warning("Could not cache %d-bit variant of %s from %s: %s", bitness, package_name, url, exc)
            return
        logger.info("Cached %d-bit variant of %s", bitness, package_name)


__all__ = ["FetchOrchestrator", "TransportFactory"]
