from __future__ import annotations

from pathlib import Path

import pytest

from installer_fetch.core.fetch import CacheStore
from installer_fetch.schemas.models import CacheSettings, FetchPolicy
from tests.utils import FakeTransportFactory, make_artifact

_ENV_VARS = (
    "INSTALLER_FETCH_MACHINE_CACHE_LOCATION",
    "INSTALLER_FETCH_CACHE_LOCATION",
    "INSTALLER_FETCH_USER_AGENT",
    "INSTALLER_FETCH_TIMEOUT",
    "INSTALLER_FETCH_FORCE_X86",
    "INSTALLER_FETCH_DEBUG",
)


# -------- Isolation from the developer's environment --------
@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


# -------- Cache fixtures --------
@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def local_store(cache_dir: Path) -> CacheStore:
    """Store rooted at a (not yet created) local directory."""
    return CacheStore(CacheSettings(cache_location=str(cache_dir)))


@pytest.fixture
def disabled_store() -> CacheStore:
    return CacheStore(CacheSettings())


@pytest.fixture
def policy() -> FetchPolicy:
    return FetchPolicy(user_agent="TestAgent/1.0", timeout_s=5.0)


# -------- Files / transports --------
@pytest.fixture
def artifact_factory(tmp_path: Path):
    """
    Callable factory to create a source artifact under tmp_path/src.

    Usage:
        p = artifact_factory("tool.msi", b"bytes")
    """

    def _factory(name: str = "setup.exe", content: bytes = b"MZ\x90\x00installer") -> Path:
        return make_artifact(tmp_path / "src", name, content)

    return _factory


@pytest.fixture
def transports():
    """Fresh in-memory transport factory; tests fill ``.sources``."""
    return FakeTransportFactory()


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    d = tmp_path / "dest"
    d.mkdir()
    return d


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks integration tests")
