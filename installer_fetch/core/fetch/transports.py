# installer_fetch/core/fetch/transports.py
"""
Fetch primitives: one transport per URL scheme family.

Public API
----------
SourceKind = Literal["http", "ftp", "local"]

def source_kind(url) -> SourceKind
def transport_for(url, policy) -> Transport

class Transport(Protocol):
    def fetch(self, url, destination, *, quiet=False) -> Fetched

Destination handling is shared by all transports:
  - existing directory → the transport picks the file name
  - anything else      → used verbatim as the target file (parent created)
"""

from __future__ import annotations

import ftplib
import logging
import mimetypes
import os
import shutil
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Literal, Protocol
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import requests
from requests.structures import CaseInsensitiveDict

from installer_fetch.schemas.models import Fetched, FetchPolicy

from .errors import NetworkError, SourceNotFoundError, fetch_error_guard

logger = logging.getLogger(__name__)

SourceKind = Literal["http", "ftp", "local"]

_DEFAULT_STEM = "download"
_FTP_PORT = 21

# ---------------------------
# Helpers
# ---------------------------


def source_kind(url: str) -> SourceKind:
    scheme = urlparse(url).scheme.lower()
    if scheme in ("http", "https"):
        return "http"
    if scheme == "ftp":
        return "ftp"
    return "local"


def _safe_name(name: str | None) -> str | None:
    if not name:
        return None
    # Drop any directory part a server might smuggle in.
    name = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if name in ("", ".", ".."):
        return None
    return name


def filename_from_disposition(disposition: str | None) -> str | None:
    """Return the filename component from a Content-Disposition header."""
    if not disposition:
        return None
    parts = [segment.strip() for segment in disposition.split(";") if segment.strip()]
    # RFC 6266: filename* wins over filename when both are present.
    for part in parts:
        if part.lower().startswith("filename*="):
            value = part.split("=", 1)[1].strip()
            _, _, encoded = value.partition("''")
            candidate = _safe_name(unquote(encoded or value).strip('"'))
            if candidate:
                return candidate
    for part in parts:
        if part.lower().startswith("filename="):
            candidate = _safe_name(part.split("=", 1)[1].strip().strip('"'))
            if candidate:
                return candidate
    return None


def filename_from_url(url: str | None) -> str | None:
    if not url:
        return None
    return _safe_name(unquote(urlparse(url).path))


def _extension_for(content_type: str | None) -> str:
    if content_type:
        ext = mimetypes.guess_extension(content_type.split(";", 1)[0].strip())
        if ext:
            return ext
    return ""


def filename_from_response(headers: dict[str, str], response_url: str | None, request_url: str) -> str:
    """
    Pick a file name for an HTTP download written into a directory.

    Order: Content-Disposition, final (post-redirect) URL, request URL, and
    finally ``download`` plus an extension guessed from Content-Type.
    """
    hdrs = CaseInsensitiveDict(headers or {})
    return (
        filename_from_disposition(hdrs.get("Content-Disposition"))
        or filename_from_url(response_url)
        or filename_from_url(request_url)
        or _DEFAULT_STEM + _extension_for(hdrs.get("Content-Type"))
    )


def _target_for(destination: Path, pick_name: Callable[[], str]) -> Path:
    if destination.is_dir():
        return destination / pick_name()
    destination.parent.mkdir(parents=True, exist_ok=True)
    return destination


@contextmanager
def _partial_file(target: Path) -> Iterator[BinaryIO]:
    """Write to ``<target>.part`` and move into place only once complete."""
    part = target.with_name(target.name + ".part")
    try:
        with part.open("wb") as f:
            yield f
        os.replace(part, target)
    except BaseException:
        part.unlink(missing_ok=True)
        raise


# ---------------------------
# Transports
# ---------------------------


class Transport(Protocol):
    def fetch(self, url: str, destination: Path, *, quiet: bool = False) -> Fetched: ...


class HttpTransport:
    """Streaming HTTP(S) download; redirects, proxies and .netrc are handled by requests."""

    def __init__(self, policy: FetchPolicy | None = None) -> None:
        self.policy = policy or FetchPolicy()

    def fetch(self, url: str, destination: Path, *, quiet: bool = False) -> Fetched:
        level = logging.DEBUG if (quiet or self.policy.quiet) else logging.INFO
        headers = {"User-Agent": self.policy.user_agent, "Accept": "*/*"}
        logger.log(level, "Downloading %s", url)

        with fetch_error_guard():
            resp = requests.get(url, headers=headers, timeout=self.policy.timeout_s, stream=True)
            try:
                if resp.status_code >= 400:
                    raise NetworkError(f"HTTP {resp.status_code} for {url}")
                target = _target_for(
                    destination,
                    lambda: filename_from_response(dict(resp.headers), getattr(resp, "url", None), url),
                )
                written = 0
                with _partial_file(target) as f:
                    for chunk in resp.iter_content(chunk_size=self.policy.chunk_size):
                        if chunk:
                            f.write(chunk)
                            written += len(chunk)
            finally:
                resp.close()

        logger.log(level, "Saved %s (%d bytes) to %s", url, written, target)
        return Fetched(path=target.resolve(), bytes_written=written)


class FtpTransport:
    """Binary RETR over plain FTP; URL credentials or anonymous login."""

    def __init__(self, policy: FetchPolicy | None = None) -> None:
        self.policy = policy or FetchPolicy()

    def fetch(self, url: str, destination: Path, *, quiet: bool = False) -> Fetched:
        level = logging.DEBUG if (quiet or self.policy.quiet) else logging.INFO
        parsed = urlparse(url)
        remote_path = unquote(parsed.path)
        if not parsed.hostname or not remote_path:
            raise NetworkError(f"Malformed FTP URL: {url}")

        logger.log(level, "Downloading %s", url)
        with fetch_error_guard():
            target = _target_for(destination, lambda: filename_from_url(url) or _DEFAULT_STEM)
            with ftplib.FTP(timeout=self.policy.timeout_s) as ftp:
                ftp.connect(parsed.hostname, parsed.port or _FTP_PORT)
                ftp.login(unquote(parsed.username or "anonymous"), unquote(parsed.password or ""))
                with _partial_file(target) as f:
                    ftp.retrbinary(f"RETR {remote_path}", f.write, blocksize=self.policy.chunk_size)
            written = target.stat().st_size

        logger.log(level, "Saved %s (%d bytes) to %s", url, written, target)
        return Fetched(path=target.resolve(), bytes_written=written)


class LocalTransport:
    """Copy from a filesystem path or a ``file:`` URI."""

    def __init__(self, policy: FetchPolicy | None = None) -> None:
        self.policy = policy or FetchPolicy()

    @staticmethod
    def source_path(url: str) -> Path:
        if url.lower().startswith("file:"):
            return Path(url2pathname(urlparse(url).path))
        return Path(url)

    def fetch(self, url: str, destination: Path, *, quiet: bool = False) -> Fetched:
        source = self.source_path(url)
        if not source.is_file():
            raise SourceNotFoundError(f"Source file not found: {source}")

        with fetch_error_guard():
            target = _target_for(destination, lambda: source.name)
            if target.exists() and target.resolve() == source.resolve():
                logger.debug("Source and destination are the same file: %s", source)
            else:
                shutil.copyfile(source, target)

        level = logging.DEBUG if (quiet or self.policy.quiet) else logging.INFO
        logger.log(level, "Copied %s to %s", source, target)
        return Fetched(path=target.resolve(), bytes_written=target.stat().st_size)


_TRANSPORTS: dict[SourceKind, type[HttpTransport] | type[FtpTransport] | type[LocalTransport]] = {
    "http": HttpTransport,
    "ftp": FtpTransport,
    "local": LocalTransport,
}


def transport_for(url: str, policy: FetchPolicy | None = None) -> Transport:
    return _TRANSPORTS[source_kind(url)](policy)


__all__ = [
    "SourceKind",
    "Transport",
    "HttpTransport",
    "FtpTransport",
    "LocalTransport",
    "source_kind",
    "transport_for",
    "filename_from_disposition",
    "filename_from_url",
    "filename_from_response",
]
