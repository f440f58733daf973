# installer_fetch/core/fetch/variants.py
"""
Choose which installer variant to install on this host and which one to
fetch only for the cache.

Packages ship either one universal installer (``url``) or a 32-bit ``url``
plus a 64-bit ``alternate_url``. On a 64-bit host the alternate wins; the
other variant is still fetched so the cache holds both.
"""

from __future__ import annotations

import platform
import sys

from installer_fetch.schemas.models import VariantPlan

_64BIT_MACHINES = {"amd64", "x86_64", "arm64", "aarch64", "ia64", "ppc64", "ppc64le", "s390x"}


def host_is_64bit() -> bool:
    if sys.maxsize > 2**32:
        return True
    # 32-bit interpreter on a 64-bit OS still counts as a 64-bit host.
    return platform.machine().lower() in _64BIT_MACHINES


def resolve_variants(primary_url: str, alternate_url: str | None, host_64bit: bool) -> VariantPlan:
    alternate = (alternate_url or "").strip() or None

    if host_64bit and alternate:
        return VariantPlan(
            install_url=alternate,
            install_bitness=64,
            cache_only_url=primary_url if primary_url != alternate else None,
            cache_only_bitness=32 if primary_url != alternate else None,
        )

    if alternate and alternate != primary_url:
        return VariantPlan(
            install_url=primary_url,
            install_bitness=32,
            cache_only_url=alternate,
            cache_only_bitness=64,
        )

    return VariantPlan(install_url=primary_url, install_bitness=32)
