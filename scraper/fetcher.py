"""Detail-document fetcher: one catalog entry in, one snapshot record out."""

from __future__ import annotations

from typing import Any, Dict
from urllib.parse import quote

from scraper.base import BaseScraper, ScraperError
from scraper.extractors import Extractor


class FetchError(ScraperError):
    """A single entry could not be fetched or projected.

    Recoverable: the entry is left out of this run and retried on the next.
    """

    def __init__(self, name: str, cause: Exception) -> None:
        super().__init__(f"{name}: {cause}")
        self.name = name
        self.cause = cause


class EntryFetcher(BaseScraper):
    """Fetches ``/<endpoint>/<name>`` and applies a resource extractor."""

    def fetch_one(self, endpoint: str, name: str, extractor: Extractor) -> Dict[str, Any]:
        try:
            document = self.get_json(f"{endpoint}/{quote(name, safe='')}")
        except ScraperError as exc:
            raise FetchError(name, exc) from exc

        if not isinstance(document, dict):
            raise FetchError(
                name, TypeError(f"expected an object, got {type(document).__name__}")
            )

        try:
            return extractor(name, document)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise FetchError(name, exc) from exc
