"""Process configuration for a sync run."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from configs.constants import Constants
from sync.resources import ResourceSpec

logger = logging.getLogger(__name__)


@dataclass
class SyncConfig:
    """
    Configuration for one resource sync.

    Parameters
    ----------
    base_dir : Path
        Directory that holds every ``<resource>/manifest.json``.
    pool_size : int
        Maximum concurrent detail fetches.
    """

    base_dir: Path = field(default_factory=lambda: Path(Constants.PUBLIC_DIR))
    pool_size: int = Constants.DEFAULT_POOL_SIZE

    def __post_init__(self) -> None:
        # Accept plain strings so callers can write SyncConfig(base_dir="…")
        self.base_dir = Path(self.base_dir)
        if self.pool_size < 1:
            raise ValueError(f"pool_size must be >= 1, got {self.pool_size}")

    @classmethod
    def for_resource(
        cls,
        resource: ResourceSpec,
        base_dir: Optional[Path] = None,
        pool_size: Optional[int] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "SyncConfig":
        """
        Build a config for *resource*.

        An explicit *pool_size* wins; otherwise ``resource.pool_env`` is read
        from *environ* (``os.environ`` by default).  Unset, non-integer or
        non-positive values fall back to the default width.
        """
        if pool_size is None:
            pool_size = pool_size_from_env(resource.pool_env, environ)
        return cls(
            base_dir=base_dir if base_dir is not None else Path(Constants.PUBLIC_DIR),
            pool_size=pool_size,
        )


def pool_size_from_env(
    variable: str, environ: Optional[Mapping[str, str]] = None
) -> int:
    env = os.environ if environ is None else environ
    raw = env.get(variable)
    if raw is None or not raw.strip():
        return Constants.DEFAULT_POOL_SIZE
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning(
            f"{variable}={raw!r} is not a positive integer; "
            f"using {Constants.DEFAULT_POOL_SIZE}"
        )
        return Constants.DEFAULT_POOL_SIZE
    return value
