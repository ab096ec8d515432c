"""Static description of each mirrored resource type."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict

from configs.constants import Constants
from scraper.extractors import EXTRACTORS, Extractor


@dataclass(frozen=True)
class ResourceSpec:
    """
    Everything the sync engine needs to know about one resource type.

    Parameters
    ----------
    name : str
        CLI-facing name (``"abilities"``).
    endpoint : str
        PokeAPI path segment (``"ability"``).
    directory : str
        Publish directory under the base dir, also the URL prefix.
    url_key : str
        Manifest key holding the current snapshot URL.
    file_prefix : str
        Snapshot files are named ``<file_prefix>.<version>.json``.
    pool_env : str
        Environment variable that sets the fetch pool width.
    extractor : Extractor
        Detail document → snapshot record.
    """

    name: str
    endpoint: str
    directory: str
    url_key: str
    file_prefix: str
    pool_env: str
    extractor: Extractor

    @property
    def manifest_path(self) -> str:
        return f"{self.directory}/{Constants.MANIFEST_FILE}"

    def snapshot_file(self, version: str) -> str:
        return f"{self.file_prefix}.{version}.json"

    def snapshot_path(self, file_name: str) -> str:
        return f"{self.directory}/{file_name}"

    def snapshot_url(self, file_name: str) -> str:
        return f"/{self.directory}/{file_name}"

    @staticmethod
    def file_name_from_url(url: str) -> str:
        """Last path segment of a manifest URL (``"/abilities/x.json"`` → ``"x.json"``)."""
        return PurePosixPath(url.strip()).name


RESOURCES: Dict[str, ResourceSpec] = {
    name: ResourceSpec(name=name, extractor=EXTRACTORS[name], **settings)
    for name, settings in Constants.RESOURCES.items()
}


def get_resource(name: str) -> ResourceSpec:
    try:
        return RESOURCES[name]
    except KeyError as exc:
        raise KeyError(
            f"Unknown resource '{name}' (expected one of: {', '.join(RESOURCES)})"
        ) from exc

