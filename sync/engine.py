"""
Incremental snapshot synchronization.

One engine instance mirrors one resource type.  A run walks through strictly
sequential stages and may stop early at two of them:

  1. load      : manifest → previous snapshot (or an empty one: bootstrap)
  2. probe     : remote count <= local count → no-op   (skipped on bootstrap)
  3. diff      : full listing minus known keys; nothing missing → no-op
  4. fetch     : missing entries through the bounded thread pool
  5. publish   : write the new dated snapshot, THEN repoint the manifest
  6. retire    : delete the superseded snapshot file (best-effort)

A crash anywhere before stage 5's manifest write leaves the old manifest and
old snapshot untouched and valid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Set, Tuple

from scraper.extractors import Extractor
from scraper.models import ListingEntry
from sync.config import SyncConfig
from sync.resources import ResourceSpec
from sync.store import BlobFormatError, BlobNotFoundError, BlobReadError, JsonBlobStore
from utils.custom_threading import ThreadExecutor

Snapshot = Dict[str, Dict[str, Any]]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ManifestError(Exception):
    """The manifest cannot be used; the run is aborted before any write."""


class ManifestNotFoundError(ManifestError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Manifest not found: {path}")
        self.path = path


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------


class Catalog(Protocol):
    def probe_count(self, endpoint: str) -> Optional[int]:
        """Cheap remote total, or ``None`` when unknown."""

    def list_all(self, endpoint: str) -> Sequence[ListingEntry]:
        """Every listing entry, deduplicated by name."""


class Fetcher(Protocol):
    def fetch_one(self, endpoint: str, name: str, extractor: Extractor) -> Dict[str, Any]:
        """One projected record; raises on failure."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class Manifest:
    """
    Pointer to the currently published snapshot.

    ``resource_url`` is ``None`` only before the first successful sync.  Keys
    other than ``version`` and the resource's URL key are carried through
    untouched in ``extra``.
    """

    version: Optional[str] = None
    resource_url: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], url_key: str) -> "Manifest":
        url = data.get(url_key)
        version = data.get("version")
        return cls(
            version=str(version) if version else None,
            resource_url=str(url) if url else None,
            extra={k: v for k, v in data.items() if k not in ("version", url_key)},
        )

    def to_dict(self, url_key: str) -> Dict[str, Any]:
        return {"version": self.version, url_key: self.resource_url, **self.extra}


class SyncOutcome(str, Enum):
    NOOP = "noop"
    UPDATED = "updated"


@dataclass
class SyncReport:
    """Result of one run; counts are returned, not just logged."""

    resource: str
    outcome: SyncOutcome
    reason: str
    local_count: int
    remote_count: Optional[int] = None
    version: Optional[str] = None
    snapshot_url: Optional[str] = None
    added: int = 0
    failed: int = 0
    retired: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.outcome is SyncOutcome.UPDATED


@dataclass
class SnapshotStatus:
    resource: str
    version: Optional[str]
    snapshot_url: Optional[str]
    snapshot_present: bool
    entries: int


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def compute_missing(listing: Sequence[ListingEntry], known_keys: Set[str]) -> List[str]:
    """Names in *listing* that are not in *known_keys*, in listing order, once each."""
    missing: List[str] = []
    seen: Set[str] = set()
    for entry in listing:
        name = entry.name
        if not name or name in known_keys or name in seen:
            continue
        seen.add(name)
        missing.append(name)
    return missing


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class SnapshotSyncEngine:
    """
    Mirrors one PokeAPI resource into a versioned JSON snapshot.

    Parameters
    ----------
    resource : ResourceSpec
        Which resource, where it lives, and how to project its entries.
    store : JsonBlobStore
        Persisted manifest and snapshot files.
    catalog : Catalog
        Count probe and full listing.
    fetcher : Fetcher
        Per-entry detail fetch.
    config : SyncConfig, optional
        Pool width (and base dir, used only by callers building the store).
    executor : ThreadExecutor, optional
        Bounded pool for stage 4.
    today : callable, optional
        Clock for the version string; defaults to the current UTC date.
    """

    def __init__(
        self,
        resource: ResourceSpec,
        store: JsonBlobStore,
        catalog: Catalog,
        fetcher: Fetcher,
        config: Optional[SyncConfig] = None,
        executor: Optional[ThreadExecutor] = None,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self.resource = resource
        self.store = store
        self.catalog = catalog
        self.fetcher = fetcher
        self.config = config or SyncConfig()
        self.executor = executor or ThreadExecutor()
        self.today = today
        self.logger = logging.getLogger(f"{self.__class__.__name__}[{resource.name}]")

    # ------------------------------------------------------------------
    # Stage 1: load state
    # ------------------------------------------------------------------

    def load_manifest(self) -> Manifest:
        path = self.resource.manifest_path
        try:
            data = self.store.read(path)
        except BlobNotFoundError as exc:
            raise ManifestNotFoundError(path) from exc
        except BlobFormatError as exc:
            raise ManifestError(f"Manifest is not valid JSON: {exc}") from exc
        except BlobReadError as exc:
            raise ManifestError(f"Manifest could not be read: {exc}") from exc

        if not isinstance(data, dict):
            self.logger.warning(f"{path} is not a JSON object; treating it as empty.")
            data = {}
        return Manifest.from_dict(data, self.resource.url_key)

    def load_snapshot(self, manifest: Manifest) -> Tuple[Snapshot, Optional[str]]:
        """
        Return ``(snapshot, previous_file_name)``.

        Any reason the previous snapshot cannot be used yields an empty
        snapshot, which the caller treats as bootstrap.
        """
        if not manifest.resource_url:
            self.logger.info(f"Manifest has no {self.resource.url_key}. Bootstrapping from scratch.")
            return {}, None

        file_name = ResourceSpec.file_name_from_url(manifest.resource_url)
        if not file_name:
            self.logger.warning(
                f"Cannot derive a file name from {manifest.resource_url!r}. Bootstrapping."
            )
            return {}, None

        path = self.resource.snapshot_path(file_name)
        if not self.store.exists(path):
            self.logger.info(f"Previous snapshot {file_name} is missing. Bootstrapping from scratch.")
            return {}, file_name

        try:
            data = self.store.read(path)
        except (BlobNotFoundError, BlobFormatError, BlobReadError) as exc:
            self.logger.warning(f"Previous snapshot unreadable ({exc}). Bootstrapping.")
            return {}, file_name

        if not isinstance(data, dict):
            self.logger.warning(f"Previous snapshot {file_name} is not a JSON object. Bootstrapping.")
            return {}, file_name

        self.logger.info(f"Current file: {file_name} ({len(data)} entries)")
        return data, file_name

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    def sync(self) -> SyncReport:
        resource = self.resource

        manifest = self.load_manifest()
        snapshot, previous_file = self.load_snapshot(manifest)
        known_keys = set(snapshot)
        local_count = len(known_keys)
        bootstrap = local_count == 0

        # Stage 2: cheap count probe
        remote_count = self.catalog.probe_count(resource.endpoint)
        self.logger.info(f"Local entries: {local_count} | API count: {remote_count}")

        if not bootstrap and remote_count is not None and remote_count <= local_count:
            self.logger.info("Count has not grown. Nothing to update.")
            return SyncReport(
                resource=resource.name,
                outcome=SyncOutcome.NOOP,
                reason="count-not-grown",
                local_count=local_count,
                remote_count=remote_count,
                version=manifest.version,
                snapshot_url=manifest.resource_url,
            )

        # Stage 3: full listing and diff
        listing = self.catalog.list_all(resource.endpoint)
        missing = compute_missing(listing, known_keys)
        self.logger.info(f"Listing has {len(listing)} entries, {len(missing)} missing locally")

        if not missing:
            self.logger.info("No missing entries. Nothing to update.")
            return SyncReport(
                resource=resource.name,
                outcome=SyncOutcome.NOOP,
                reason="no-missing-entries",
                local_count=local_count,
                remote_count=remote_count,
                version=manifest.version,
                snapshot_url=manifest.resource_url,
            )

        # Stage 4: bounded concurrent fetch
        self.logger.info(f"Fetching {len(missing)} entries with pool width {self.config.pool_size}")
        result = self.executor.run(missing, self.config.pool_size, self._fetch_entry)
        fetched = dict(result.succeeded)
        for name in missing:
            if name in fetched:
                snapshot[name] = fetched[name]

        # Stage 5: publish snapshot before manifest
        version = self.today().isoformat()
        new_file = resource.snapshot_file(version)
        self.store.write(resource.snapshot_path(new_file), snapshot)

        manifest.version = version
        manifest.resource_url = resource.snapshot_url(new_file)
        self.store.write(resource.manifest_path, manifest.to_dict(resource.url_key))
        self.logger.info(f"Published {new_file}; manifest now at version {version}")

        # Stage 6: retire the superseded file
        retired = self._retire(previous_file, new_file)

        self.logger.info(f"Total added: {len(fetched)} | failed: {result.failed}")
        return SyncReport(
            resource=resource.name,
            outcome=SyncOutcome.UPDATED,
            reason="published",
            local_count=local_count,
            remote_count=remote_count,
            version=version,
            snapshot_url=manifest.resource_url,
            added=len(fetched),
            failed=result.failed,
            retired=retired,
        )

    def _fetch_entry(self, name: str) -> Dict[str, Any]:
        return self.fetcher.fetch_one(self.resource.endpoint, name, self.resource.extractor)

    def _retire(self, previous_file: Optional[str], new_file: str) -> Optional[str]:
        if not previous_file:
            return None
        if previous_file == new_file:
            self.logger.info("Old and new snapshot share a name (same day). Not deleting.")
            return None
        if self.store.delete(self.resource.snapshot_path(previous_file)):
            self.logger.info(f"Deleted old snapshot: {previous_file}")
            return previous_file
        return None

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def status(self) -> SnapshotStatus:
        """Describe the published state without touching the network."""
        manifest = self.load_manifest()
        snapshot, previous_file = self.load_snapshot(manifest)
        present = previous_file is not None and self.store.exists(
            self.resource.snapshot_path(previous_file)
        )
        return SnapshotStatus(
            resource=self.resource.name,
            version=manifest.version,
            snapshot_url=manifest.resource_url,
            snapshot_present=present,
            entries=len(snapshot),
        )

    def init(self) -> bool:
        """Write a bootstrap manifest if none exists.  Returns ``True`` if one was created."""
        path = self.resource.manifest_path
        if self.store.exists(path):
            self.logger.info(f"{path} already exists; leaving it alone.")
            return False
        self.store.write(path, Manifest().to_dict(self.resource.url_key))
        self.logger.info(f"Created bootstrap manifest {path}")
        return True
