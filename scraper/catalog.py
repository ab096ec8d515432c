"""
Paginated catalog listing client.

Two calls matter to a sync run:

  - probe_count() : ``GET /<endpoint>?limit=1``; only the server-reported
    ``count`` is used, as a cheap "has anything grown?" signal.
  - list_all()    : every ``{name, url}`` reference, deduplicated by name.
"""

from __future__ import annotations

from typing import List, Optional, Set

from pydantic import ValidationError

from configs.constants import Constants
from scraper.base import BaseScraper, CatalogFormatError
from scraper.models import CatalogPage, ListingEntry


class CatalogClient(BaseScraper):
    """Reads PokeAPI's paginated list endpoints."""

    def _get_page(self, endpoint: str) -> CatalogPage:
        url = self.url_for(endpoint)
        data = self.get_json(url)
        if not isinstance(data, dict):
            raise CatalogFormatError(url, f"expected an object, got {type(data).__name__}")
        try:
            return CatalogPage.model_validate(data)
        except ValidationError as exc:
            raise CatalogFormatError(url, str(exc)) from exc

    def probe_count(self, endpoint: str) -> Optional[int]:
        """Return the remote total for *endpoint*, or ``None`` when the server does not say."""
        page = self._get_page(f"{endpoint}?limit={Constants.PROBE_PAGE_SIZE}")
        return page.count

    def list_all(self, endpoint: str) -> List[ListingEntry]:
        """
        Return every listing entry for *endpoint*.

        Asks for one oversized page and then follows ``next`` links in case
        the server caps the page size.  Entries without a name are skipped
        and duplicate names keep their first occurrence.
        """
        entries: List[ListingEntry] = []
        seen_names: Set[str] = set()
        visited: Set[str] = set()

        url: Optional[str] = self.url_for(
            f"{endpoint}?limit={Constants.LISTING_PAGE_SIZE}&offset=0"
        )
        while url and url not in visited:
            visited.add(url)
            page = self._get_page(url)
            for entry in page.results:
                if entry is None or not entry.name or entry.name in seen_names:
                    continue
                seen_names.add(entry.name)
                entries.append(entry)
            url = page.next

        self.logger.debug(f"{endpoint}: {len(entries)} entries over {len(visited)} page(s)")
        return entries

