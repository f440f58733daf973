# installer_fetch/core/fetch/errors.py
"""
Typed errors + utilities for the installer fetcher.

Exports
-------
- FetchError, NetworkError, SourceNotFoundError, CacheWriteError,
  PackageFetchError
- FETCH_ERRORS
- classify_fetch_error(exc)
- fetch_error_guard()
"""

from __future__ import annotations

import ftplib
from collections.abc import Iterator
from contextlib import contextmanager

import requests

# =========================
# Exception types
# =========================


class FetchError(RuntimeError):
    """Base class for fetcher-related failures."""


class NetworkError(FetchError):
    """HTTP/FTP transport failure while attempting to fetch a resource."""


class SourceNotFoundError(FetchError):
    """A local (or file: URI) source does not exist."""


class CacheWriteError(FetchError):
    """The cache entry could not be written (missing permissions, disk full...)."""


class PackageFetchError(FetchError):
    """The installer for a package could not be produced at all."""

    def __init__(self, package_name: str, url: str, reason: str) -> None:
        self.package_name = package_name
        self.url = url
        self.reason = reason
        super().__init__(f"Unable to fetch {url!r} for package {package_name!r}: {reason}")


# Selector tuple for grouped exception handling
FETCH_ERRORS = (
    NetworkError,
    SourceNotFoundError,
    CacheWriteError,
    PackageFetchError,
)

# =========================
# Classification helpers
# =========================


def classify_fetch_error(exc: Exception) -> FetchError:
    """
    Map arbitrary exceptions raised inside a transport to a typed FetchError.

    Heuristics:
      - FetchError subclasses → passed through
      - requests.* errors → NetworkError
      - FileNotFoundError → SourceNotFoundError
      - ftplib errors, dropped connections, timeouts → NetworkError
      - Fallback → FetchError
    """
    if isinstance(exc, FetchError):
        return exc

    msg = f"{type(exc).__name__}: {exc}"

    if isinstance(exc, requests.RequestException):
        return NetworkError(msg)
    if isinstance(exc, FileNotFoundError):
        return SourceNotFoundError(msg)
    if isinstance(exc, (ftplib.Error, EOFError, ConnectionError, TimeoutError)):
        return NetworkError(msg)

    return FetchError(msg)


@contextmanager
def fetch_error_guard() -> Iterator[None]:
    """Context manager to normalize unexpected exceptions from transport internals."""
    try:
        yield
    except FETCH_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_fetch_error(exc) from exc


__all__ = [
    "FetchError",
    "NetworkError",
    "SourceNotFoundError",
    "CacheWriteError",
    "PackageFetchError",
    "FETCH_ERRORS",
    "classify_fetch_error",
    "fetch_error_guard",
]
