# installer_fetch/schemas/models.py

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Bitness = Literal[32, 64]

_REMOTE_SCHEMES = ("http://", "https://")

# =========================
# Configuration
# =========================


class CacheSettings(BaseModel):
    """
    Resolved cache configuration for one process.

    The location is either an absolute local directory or an http(s) base URL
    pointing at a read-only mirror. ``None`` disables caching altogether.
    """

    model_config = ConfigDict(frozen=True)

    cache_location: str | None = Field(
        None,
        description="Local directory or http(s) base URL of the package cache. None disables caching.",
    )

    @field_validator("cache_location")
    @classmethod
    def _blank_is_unset(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def is_enabled(self) -> bool:
        return self.cache_location is not None

    @property
    def is_remote(self) -> bool:
        return self.cache_location is not None and self.cache_location.lower().startswith(_REMOTE_SCHEMES)

    @property
    def local_root(self) -> Path | None:
        if not self.is_enabled or self.is_remote:
            return None
        return Path(str(self.cache_location))


class FetchPolicy(BaseModel):
    """
    Knobs shared by the fetch primitives and the orchestrator.

    Proxies and credentials are not configured here: requests picks them up
    from the environment (``HTTP(S)_PROXY``, ``.netrc``) like any other client.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    user_agent: str = Field(
        "installer-fetch/0.1 (+package-cache)",
        description="User-Agent string used in HTTP requests.",
    )
    timeout_s: float = Field(
        60.0,
        gt=0,
        description="Connect/read timeout in seconds for HTTP and FTP transfers.",
    )
    chunk_size: int = Field(
        1024 * 1024,
        gt=0,
        description="Streaming chunk size in bytes.",
    )
    settle_delay_s: float = Field(
        0.0,
        ge=0,
        description="Pause after a completed fetch before returning to the caller.",
    )
    force_32bit: bool = Field(
        False,
        description="Treat the host as 32-bit when choosing which variant to install.",
    )
    quiet: bool = Field(
        False,
        description="Log transfer progress at DEBUG instead of INFO.",
    )


# =========================
# Fetch values
# =========================


class FetchRequest(BaseModel):
    """One caller request: which package, where to put it, and from where."""

    package_name: str = Field("", description="Package identifier; used verbatim in cache keys.")
    destination: Path = Field(..., description="Destination file path, or an existing directory.")
    url: str = Field(..., min_length=1, description="Primary (32-bit or universal) installer URL.")
    alternate_url: str | None = Field(None, description="Optional 64-bit installer URL.")


class FetchResult(BaseModel):
    """Where the artifact ended up and how it got there."""

    path: Path = Field(..., description="Absolute path of the installed artifact.")
    url: str = Field(..., description="URL that was installed.")
    bitness: Bitness = Field(..., description="Bit-width of the installed variant.")
    from_cache: bool = Field(False, description="True when the artifact was restored from the cache.")


class VariantPlan(BaseModel):
    """Which URL to install and which one to fetch only for the cache."""

    model_config = ConfigDict(frozen=True)

    install_url: str
    install_bitness: Bitness
    cache_only_url: str | None = None
    cache_only_bitness: Bitness | None = None


class CacheHit(BaseModel):
    """A readable cache entry: the recorded file name and a local copy of the bytes."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    binary_path: Path


class Fetched(BaseModel):
    """Outcome of one fetch primitive call."""

    model_config = ConfigDict(frozen=True)

    path: Path
    bytes_written: int = Field(0, ge=0)
