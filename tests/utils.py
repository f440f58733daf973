"""
Shared fakes and factories for the test suite.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from installer_fetch.core.fetch.errors import NetworkError
from installer_fetch.schemas.models import Fetched

# -----------------------------
# Files
# -----------------------------


def make_artifact(directory: Path, name: str = "setup.exe", content: bytes = b"MZ\x90\x00installer") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    p = directory / name
    p.write_bytes(content)
    return p


# -----------------------------
# requests fakes
# -----------------------------


class FakeResponse:
    def __init__(
        self,
        *,
        status: int = 200,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        url: str | None = None,
        chunk: int = 4,
        fail_after: int | None = None,
    ):
        self.status_code = status
        self.headers = headers or {}
        self.url = url
        self._body = body
        self._chunk = chunk
        self._fail_after = fail_after
        self.closed = False

    def iter_content(self, chunk_size: int = 1024) -> Iterable[bytes]:
        # Small chunks to exercise the streaming path
        for n, i in enumerate(range(0, len(self._body), self._chunk)):
            if self._fail_after is not None and n >= self._fail_after:
                import requests

                raise requests.ConnectionError("connection reset by peer")
            yield self._body[i : i + self._chunk]

    def close(self) -> None:
        self.closed = True


# -----------------------------
# Transport fakes
# -----------------------------


class FakeTransport:
    """
    In-memory transport: ``sources`` maps url -> (file name, bytes).
    Unknown URLs raise NetworkError like a 404 would.
    """

    def __init__(self, sources: dict[str, tuple[str, bytes]], calls: list[tuple[str, Path, bool]]):
        self.sources = sources
        self.calls = calls

    def fetch(self, url: str, destination: Path, *, quiet: bool = False) -> Fetched:
        self.calls.append((url, destination, quiet))
        if url not in self.sources:
            raise NetworkError(f"HTTP 404 for {url}")
        name, data = self.sources[url]
        if destination.is_dir():
            target = destination / name
        else:
            destination.parent.mkdir(parents=True, exist_ok=True)
            target = destination
        target.write_bytes(data)
        return Fetched(path=target.resolve(), bytes_written=len(data))


class FakeTransportFactory:
    """Callable compatible with FetchOrchestrator(transport_factory=...)."""

    def __init__(self, sources: dict[str, tuple[str, bytes]] | None = None):
        self.sources = dict(sources or {})
        self.calls: list[tuple[str, Path, bool]] = []

    def __call__(self, url, policy):
        return FakeTransport(self.sources, self.calls)

    @property
    def urls(self) -> list[str]:
        return [c[0] for c in self.calls]


class FakeMirror:
    """Remote cache mirror: serves raw bytes by URL, records every destination."""

    def __init__(self, files: dict[str, bytes] | None = None):
        self.files = dict(files or {})
        self.destinations: list[Path] = []

    def fetch(self, url: str, destination: Path, *, quiet: bool = False) -> Fetched:
        assert quiet is True
        self.destinations.append(destination)
        if url not in self.files:
            raise NetworkError(f"HTTP 404 for {url}")
        destination.write_bytes(self.files[url])
        return Fetched(path=destination, bytes_written=len(self.files[url]))
