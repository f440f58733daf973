from .errors import (
    FETCH_ERRORS,
    CacheWriteError,
    FetchError,
    NetworkError,
    PackageFetchError,
    SourceNotFoundError,
    classify_fetch_error,
    fetch_error_guard,
)
from .keys import derive_key, entry_paths, entry_urls, sanitize_url
from .orchestrator import FetchOrchestrator
from .store import CacheStore, restore_path
from .transports import FtpTransport, HttpTransport, LocalTransport, source_kind, transport_for
from .variants import host_is_64bit, resolve_variants

__all__ = [
    "FetchError",
    "NetworkError",
    "SourceNotFoundError",
    "CacheWriteError",
    "PackageFetchError",
    "FETCH_ERRORS",
    "classify_fetch_error",
    "fetch_error_guard",
    "derive_key",
    "sanitize_url",
    "entry_paths",
    "entry_urls",
    "CacheStore",
    "restore_path",
    "HttpTransport",
    "FtpTransport",
    "LocalTransport",
    "source_kind",
    "transport_for",
    "host_is_64bit",
    "resolve_variants",
    "FetchOrchestrator",
]
