from __future__ import annotations

from pathlib import Path

import pytest

from installer_fetch.core.fetch import CacheStore, entry_urls
from installer_fetch.schemas.models import CacheSettings
from tests.utils import FakeMirror, FakeResponse, make_artifact

MIRROR = "https://mirror.example.com/pkgcache"
URL = "https://downloads.example.com/tool/tool-setup.exe"


def _mirror_with_entry(name: bytes = b"tool-setup.exe", data: bytes = b"BIN") -> FakeMirror:
    urls = entry_urls("tool", URL, MIRROR)
    return FakeMirror({urls["name"]: name, urls["binary"]: data})


def test_remote_hit_downloads_both_records_and_cleans_up() -> None:
    mirror = _mirror_with_entry()
    store = CacheStore(CacheSettings(cache_location=MIRROR), http=mirror)

    assert store.is_remote() is True
    with store.read("tool", URL) as hit:
        assert hit is not None
        assert hit.file_name == "tool-setup.exe"
        assert hit.binary_path.read_bytes() == b"BIN"
        tmp_dir = hit.binary_path.parent

    assert len(mirror.destinations) == 2
    assert not tmp_dir.exists()


def test_remote_missing_binary_is_a_miss_and_cleans_up() -> None:
    urls = entry_urls("tool", URL, MIRROR)
    mirror = FakeMirror({urls["name"]: b"tool-setup.exe"})
    store = CacheStore(CacheSettings(cache_location=MIRROR), http=mirror)

    with store.read("tool", URL) as hit:
        assert hit is None

    assert mirror.destinations
    assert all(not d.parent.exists() for d in mirror.destinations)


def test_remote_missing_name_record_skips_binary_fetch() -> None:
    mirror = FakeMirror()
    store = CacheStore(CacheSettings(cache_location=MIRROR), http=mirror)

    assert store.contains("tool", URL) is False
    assert len(mirror.destinations) == 1


def test_temp_files_removed_even_when_caller_raises() -> None:
    store = CacheStore(CacheSettings(cache_location=MIRROR), http=_mirror_with_entry())

    with pytest.raises(RuntimeError):
        with store.read("tool", URL) as hit:
            tmp_dir = hit.binary_path.parent
            raise RuntimeError("boom")

    assert not tmp_dir.exists()


def test_remote_restore_copies_out_of_temp(dest_dir: Path) -> None:
    store = CacheStore(CacheSettings(cache_location=MIRROR), http=_mirror_with_entry(data=b"12345"))

    final = store.restore("tool", URL, dest_dir)

    assert final == (dest_dir / "tool-setup.exe").resolve()
    assert final.read_bytes() == b"12345"


def test_remote_root_is_never_written(tmp_path: Path) -> None:
    mirror = FakeMirror()
    store = CacheStore(CacheSettings(cache_location=MIRROR), http=mirror)

    assert store.write("tool", URL, make_artifact(tmp_path)) is False
    assert mirror.destinations == []


def test_remote_lookup_with_real_http_transport(monkeypatch) -> None:
    urls = entry_urls("tool", URL, MIRROR)
    bodies = {urls["name"]: b"tool-setup.exe", urls["binary"]: b"BIN"}
    seen: list[str] = []

    def fake_get(url: str, *, headers: dict[str, str], timeout: float, stream: bool):
        seen.append(url)
        if url in bodies:
            return FakeResponse(status=200, body=bodies[url], url=url)
        return FakeResponse(status=404, url=url)

    monkeypatch.setattr("installer_fetch.core.fetch.transports.requests.get", fake_get)
    store = CacheStore(CacheSettings(cache_location=MIRROR))

    with store.read("tool", URL) as hit:
        assert hit is not None
        assert hit.file_name == "tool-setup.exe"
        assert hit.binary_path.read_bytes() == b"BIN"

    assert seen == [urls["name"], urls["binary"]]
    assert store.contains("tool", "https://downloads.example.com/other.exe") is False
