"""Snapshot + manifest synchronization exported for convenience."""

from .config import SyncConfig, pool_size_from_env
from .engine import (
    Manifest,
    ManifestError,
    ManifestNotFoundError,
    SnapshotStatus,
    SnapshotSyncEngine,
    SyncOutcome,
    SyncReport,
    compute_missing,
    utc_today,
)
from .resources import RESOURCES, ResourceSpec, get_resource
from .store import BlobFormatError, BlobNotFoundError, BlobReadError, JsonBlobStore

__all__ = [
    "BlobFormatError",
    "BlobNotFoundError",
    "BlobReadError",
    "JsonBlobStore",
    "Manifest",
    "ManifestError",
    "ManifestNotFoundError",
    "RESOURCES",
    "ResourceSpec",
    "SnapshotStatus",
    "SnapshotSyncEngine",
    "SyncConfig",
    "SyncOutcome",
    "SyncReport",
    "compute_missing",
    "get_resource",
    "pool_size_from_env",
    "utc_today",
]
