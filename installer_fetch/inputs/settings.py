# installer_fetch/inputs/settings.py
"""
Settings loader for the installer fetcher.

The cache location is resolved once per process, in this order:

1) machine scope: INSTALLER_FETCH_MACHINE_CACHE_LOCATION, else
   /etc/installer-fetch/settings.json
2) user scope:    INSTALLER_FETCH_CACHE_LOCATION, else
   ~/.config/installer-fetch/settings.json
3) unset → caching disabled

Settings files are JSON objects; only ``cache_location`` is read from them:

   { "cache_location": "/srv/pkgcache" }
   { "cache_location": "https://mirror.example.com/pkgcache" }

Environment overrides for the fetch policy (optional)
-----------------------------------------------------
- INSTALLER_FETCH_USER_AGENT -> FetchPolicy.user_agent
- INSTALLER_FETCH_TIMEOUT    -> FetchPolicy.timeout_s (float)
- INSTALLER_FETCH_FORCE_X86  -> FetchPolicy.force_32bit (1/true/yes/on)

Public API
----------
- resolve_cache_location(machine, user) -> str | None   (pure)
- SettingsError (ValueError subclass) on unreadable or invalid settings
- class SettingsLoader:
    - load_settings() -> CacheSettings
    - load_policy(**overrides) -> FetchPolicy
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from installer_fetch.schemas.models import CacheSettings, FetchPolicy

_TRUTHY = {"1", "true", "yes", "on"}


class SettingsError(ValueError):
    """A settings file or policy override could not be parsed or validated."""


class SettingsFile(BaseModel):
    """Shape of a machine- or user-scoped settings file."""

    model_config = ConfigDict(extra="ignore")

    cache_location: str | None = Field(None, description="Local directory or http(s) base URL.")


def resolve_cache_location(machine: str | None, user: str | None) -> str | None:
    """First non-blank value wins: machine scope, then user scope."""
    for value in (machine, user):
        if value and value.strip():
            return value.strip()
    return None


@dataclass(frozen=True)
class SettingsLoader:
    """
    Environment- and file-backed settings.

    Paths are fields so tests (and unusual installs) can point elsewhere.
    """

    env_prefix: str = "INSTALLER_FETCH_"
    machine_file: Path = Path("/etc/installer-fetch/settings.json")
    user_file: Path = field(default_factory=lambda: Path.home() / ".config" / "installer-fetch" / "settings.json")

    # ---------- Public API ----------

    def load_settings(self) -> CacheSettings:
        machine = os.getenv(f"{self.env_prefix}MACHINE_CACHE_LOCATION") or self._file_location(self.machine_file)
        user = os.getenv(f"{self.env_prefix}CACHE_LOCATION") or self._file_location(self.user_file)
        return CacheSettings(cache_location=resolve_cache_location(machine, user))

    def load_policy(self, **overrides: Any) -> FetchPolicy:
        """Build a FetchPolicy from env overrides plus explicit non-null keyword overrides."""
        prefix = self.env_prefix
        updates: dict[str, Any] = {}

        ua = os.getenv(f"{prefix}USER_AGENT")
        if ua:
            updates["user_agent"] = ua

        timeout = os.getenv(f"{prefix}TIMEOUT")
        if timeout:
            try:
                updates["timeout_s"] = float(timeout)
            except ValueError:
                # Ignore bad value; keep the default
                pass

        force_x86 = os.getenv(f"{prefix}FORCE_X86")
        if force_x86:
            updates["force_32bit"] = force_x86.strip().lower() in _TRUTHY

        updates.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return FetchPolicy.model_validate(updates)
        except ValidationError as e:
            raise SettingsError(f"Fetch policy validation failed:\n{e}") from e

    # ---------- Internals ----------

    def _file_location(self, p: Path) -> str | None:
        if not p.is_file():
            return None
        try:
            raw = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SettingsError(f"Invalid JSON in {p}: {e}") from e
        try:
            return SettingsFile.model_validate(raw).cache_location
        except ValidationError as e:
            raise SettingsError(f"Settings validation failed for {p}:\n{e}") from e


# ----------------------------
# Convenience function
# ----------------------------


def load_settings() -> CacheSettings:
    """Convenience wrapper for one-shot callers."""
    return SettingsLoader().load_settings()
