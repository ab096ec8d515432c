"""
pokeapi-snapshots unified CLI.

Mirrors PokeAPI resources into versioned JSON snapshots plus a manifest
pointer, for use as static data by a client application.

Usage
-----
# Sync
python cli.py sync abilities                 # one resource
python cli.py sync all                       # pokemon, abilities, moves
python cli.py sync moves --pool 10           # override MOVES_POOL

# Housekeeping
python cli.py init all                       # create bootstrap manifests
python cli.py status                         # published version + entry counts

Pool width defaults to 5 and can be set per resource with POKEMON_POOL,
ABILITIES_POOL and MOVES_POOL.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from configs.constants import Constants
from utils.logger import setup_logging

logger = logging.getLogger("cli")

ALL = "all"


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def build_engine(args: argparse.Namespace, resource_name: str):
    from scraper.base import ScrapeConfig
    from scraper.catalog import CatalogClient
    from scraper.fetcher import EntryFetcher
    from sync.config import SyncConfig
    from sync.engine import SnapshotSyncEngine
    from sync.resources import get_resource
    from sync.store import JsonBlobStore
    from utils.custom_threading import ThreadExecutor

    resource = get_resource(resource_name)
    scrape_config = ScrapeConfig(
        api_base=args.api_base,
        timeout=args.timeout,
        max_retries=args.retries,
        calls_per_second=args.rps,
    )
    sync_config = SyncConfig.for_resource(
        resource,
        base_dir=Path(args.base_dir),
        pool_size=getattr(args, "pool", None),
    )
    return SnapshotSyncEngine(
        resource=resource,
        store=JsonBlobStore(sync_config.base_dir),
        catalog=CatalogClient(scrape_config),
        fetcher=EntryFetcher(scrape_config),
        config=sync_config,
        executor=ThreadExecutor(progress_every=Constants.PROGRESS_EVERY),
    )


def _selected(resource: Optional[str]) -> List[str]:
    if resource in (None, ALL):
        return list(Constants.RESOURCES)
    return [resource]


# ---------------------------------------------------------------------------
# Sub-command handlers
# ---------------------------------------------------------------------------


def cmd_sync(args: argparse.Namespace) -> int:
    """Run the sync for one resource, or each in turn for ``all``."""
    from scraper.base import ScraperError
    from sync.engine import ManifestError

    exit_code = 0
    for name in _selected(args.resource):
        logger.info("=" * 60)
        logger.info(f"Syncing {name}")
        try:
            report = build_engine(args, name).sync()
        except (ManifestError, ScraperError, OSError) as exc:
            logger.error(f"[FATAL] {name}: {exc}")
            exit_code = 1
            continue

        if report.changed:
            logger.info(
                f"[OK] {name}: {report.snapshot_url} | "
                f"added={report.added} | failed={report.failed}"
            )
        else:
            logger.info(f"[OK] {name}: nothing to update ({report.reason})")
    return exit_code


def cmd_status(args: argparse.Namespace) -> int:
    """Print the published version and entry count per resource."""
    from sync.engine import ManifestError

    exit_code = 0
    for name in _selected(args.resource):
        try:
            status = build_engine(args, name).status()
        except (ManifestError, OSError) as exc:
            print(f"{name:10s} {exc}")
            exit_code = 1
            continue
        present = "" if status.snapshot_present else "  (snapshot file missing)"
        print(
            f"{name:10s} version={status.version or '-':10s} "
            f"entries={status.entries:>5}  {status.snapshot_url or '-'}{present}"
        )
    return exit_code


def cmd_init(args: argparse.Namespace) -> int:
    """Create bootstrap manifests where none exist."""
    for name in _selected(args.resource):
        build_engine(args, name).init()
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    resource_choices = list(Constants.RESOURCES) + [ALL]

    root = argparse.ArgumentParser(
        prog="pokeapi-snapshots",
        description="Mirror PokeAPI resources into versioned JSON snapshots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    root.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    # ---- shared settings ----
    root.add_argument("--base-dir", default=Constants.PUBLIC_DIR, metavar="DIR")
    root.add_argument("--api-base", default=Constants.POKEAPI_BASE_URL, metavar="URL")
    root.add_argument(
        "--timeout",
        type=float,
        default=Constants.REQUEST_TIMEOUT,
        help="Per-request timeout in seconds",
    )
    root.add_argument(
        "--rps",
        type=float,
        default=0.0,
        help="Requests per second across all workers (0 = unlimited)",
    )
    root.add_argument("--retries", type=int, default=0, help="Transport retries per request")

    subparsers = root.add_subparsers(dest="command", required=True)

    # -- sync --
    sync_p = subparsers.add_parser("sync", help="Fetch new entries and publish a snapshot")
    sync_p.add_argument("resource", choices=resource_choices)
    sync_p.add_argument(
        "--pool",
        type=int,
        default=None,
        help="Concurrent detail fetches (overrides the <RESOURCE>_POOL env var)",
    )
    sync_p.set_defaults(func=cmd_sync)

    # -- status --
    status_p = subparsers.add_parser("status", help="Show the published snapshot per resource")
    status_p.add_argument("resource", nargs="?", default=ALL, choices=resource_choices)
    status_p.set_defaults(func=cmd_status)

    # -- init --
    init_p = subparsers.add_parser("init", help="Create bootstrap manifests")
    init_p.add_argument("resource", choices=resource_choices)
    init_p.set_defaults(func=cmd_init)

    return root


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if getattr(args, "pool", None) is not None and args.pool < 1:
        parser.error("--pool must be a positive integer")

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
