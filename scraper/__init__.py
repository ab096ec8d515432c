"""PokeAPI clients exported for convenience."""

from .base import (
    BaseScraper,
    CatalogFormatError,
    HttpError,
    RateLimiter,
    ScrapeConfig,
    ScraperError,
    TransportError,
)
from .catalog import CatalogClient
from .extractors import EXTRACTORS, extract_ability, extract_move, extract_pokemon
from .fetcher import EntryFetcher, FetchError

__all__ = [
    "BaseScraper",
    "CatalogClient",
    "CatalogFormatError",
    "EntryFetcher",
    "EXTRACTORS",
    "FetchError",
    "HttpError",
    "RateLimiter",
    "ScrapeConfig",
    "ScraperError",
    "TransportError",
    "extract_ability",
    "extract_move",
    "extract_pokemon",
]
