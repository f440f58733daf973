# fetch_cli.py

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from installer_fetch.core.fetch import CacheStore, FetchOrchestrator, PackageFetchError
from installer_fetch.core.logs import configure_logging
from installer_fetch.inputs.settings import SettingsError, SettingsLoader
from installer_fetch.schemas.models import CacheSettings


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Fetch a package installer through the package cache")
    p.add_argument("--package", type=str, required=True, help="Package name (cache key prefix)")
    p.add_argument("--dest", type=str, required=True, help="Destination file, or an existing directory")
    p.add_argument("--url", type=str, required=True, help="32-bit or universal installer URL")
    p.add_argument("--url64", type=str, default=None, help="Optional 64-bit installer URL")
    p.add_argument("--cache", type=str, default=None, help="Override the configured cache location")
    p.add_argument("--force-x86", action="store_true", help="Install the 32-bit variant on a 64-bit host")
    p.add_argument("--user-agent", type=str, default=None)
    p.add_argument("--timeout", type=float, default=None, help="Transfer timeout in seconds")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)
    configure_logging(verbose=args.verbose)

    loader = SettingsLoader()
    try:
        settings = CacheSettings(cache_location=args.cache) if args.cache else loader.load_settings()
        policy = loader.load_policy(
            user_agent=args.user_agent,
            timeout_s=args.timeout,
            force_32bit=True if args.force_x86 else None,
        )
    except SettingsError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    orchestrator = FetchOrchestrator(CacheStore(settings, policy=policy), policy)
    try:
        path = orchestrator.fetch(args.package, Path(args.dest), args.url, args.url64)
    except PackageFetchError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(str(path))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
