from installer_fetch.core.fetch import CacheStore, FetchOrchestrator, PackageFetchError
from installer_fetch.inputs.settings import SettingsLoader, load_settings
from installer_fetch.schemas.models import CacheSettings, FetchPolicy, FetchRequest, FetchResult

__all__ = [
    "CacheSettings",
    "CacheStore",
    "FetchOrchestrator",
    "FetchPolicy",
    "FetchRequest",
    "FetchResult",
    "PackageFetchError",
    "SettingsLoader",
    "load_settings",
]
