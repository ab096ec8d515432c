"""
Base HTTP client for the PokeAPI snapshot mirror.

Every client (catalog listing, entry detail) inherits from BaseScraper and
gets the following for free:

  - A requests.Session with a descriptive User-Agent and a urllib3 Retry
    adapter (zero retries unless configured otherwise)
  - An optional fixed-interval rate limiter shared by all worker threads
  - Relative endpoint resolution against the configured API base
  - get_json(), which raises typed errors instead of returning None

There is no response cache: every run reads the live catalog.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from configs.constants import Constants

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ScraperError(Exception):
    """Base class for every failure talking to the remote catalog."""


class HttpError(ScraperError):
    """The server answered with a non-success status."""

    def __init__(self, status: int, url: str) -> None:
        super().__init__(f"HTTP {status} GET {url}")
        self.status = status
        self.url = url


class TransportError(ScraperError):
    """The request never produced a response (DNS, refused, timeout …)."""

    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(f"Request failed for {url}: {cause}")
        self.url = url
        self.cause = cause


class CatalogFormatError(ScraperError):
    """A response body was not the JSON shape we expected."""

    def __init__(self, url: str, detail: str) -> None:
        super().__init__(f"Unexpected payload from {url}: {detail}")
        self.url = url
        self.detail = detail


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------


@dataclass
class ScrapeConfig:
    """
    Configuration shared by every BaseScraper subclass.

    Parameters
    ----------
    api_base : str
        Root URL that relative endpoints are resolved against.
    timeout : float
        Per-request timeout in seconds.  Every call is a single bounded
        request.
    max_retries : int
        Transport-level retries.  Defaults to 0: a failed entry is simply
        picked up again on the next sync run.
    calls_per_second : float
        Global request rate cap across all threads.  ``0`` disables it.
    user_agent : str
        Sent on every request.
    """

    api_base: str = Constants.POKEAPI_BASE_URL
    timeout: float = Constants.REQUEST_TIMEOUT
    max_retries: int = 0
    calls_per_second: float = 0.0
    user_agent: str = Constants.USER_AGENT

    def __post_init__(self) -> None:
        self.api_base = self.api_base.rstrip("/")


# ---------------------------------------------------------------------------
# Rate limiter dataclass
# ---------------------------------------------------------------------------


@dataclass
class RateLimiter:
    """
    Fixed-interval rate limiter, safe to share between pool workers.

    Tracks the timestamp of the last outbound call and sleeps just long
    enough to honour ``calls_per_second`` before each new request.  A
    non-positive rate turns :py:meth:`wait` into a no-op.
    """

    calls_per_second: float = 0.0
    # Mutable state, excluded from __init__ and __repr__
    _last_call: float = field(default=0.0, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def wait(self) -> None:
        """Block until it is safe to make the next request."""
        if self.calls_per_second <= 0:
            return
        interval = 1.0 / self.calls_per_second
        with self._lock:
            now = time.monotonic()
            sleep_for = interval - (now - self._last_call)
            if sleep_for > 0:
                time.sleep(sleep_for)
            self._last_call = time.monotonic()


# ---------------------------------------------------------------------------
# Base client
# ---------------------------------------------------------------------------


class BaseScraper:
    """
    Shared HTTP plumbing for the catalog and detail clients.

    Parameters
    ----------
    config : ScrapeConfig, optional
        Defaults to the public PokeAPI with no rate limit.
    session : requests.Session, optional
        Injected session (tests pass a mock).  When omitted one is built
        with :py:meth:`_build_session`.
    """

    def __init__(
        self,
        config: Optional[ScrapeConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or ScrapeConfig()
        self._rate_limiter = RateLimiter(self.config.calls_per_second)
        self._session = session if session is not None else self._build_session()
        self.logger = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------
    # Session setup
    # ------------------------------------------------------------------

    def _build_session(self) -> requests.Session:
        """Build a requests.Session with retry policy and a descriptive User-Agent."""
        session = requests.Session()
        retry = Retry(
            total=self.config.max_retries,
            backoff_factor=1.0,
            status_forcelist=[429, 500, 502, 503, 504],
            respect_retry_after_header=True,
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers["User-Agent"] = self.config.user_agent
        session.headers["Accept"] = "application/json"
        return session

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def url_for(self, endpoint: str) -> str:
        """Resolve a relative endpoint (``"ability?limit=1"``) or pass a full URL through."""
        if endpoint.startswith("http"):
            return endpoint
        return f"{self.config.api_base}/{endpoint.lstrip('/')}"

    def get_json(self, endpoint: str) -> Any:
        """
        Fetch *endpoint* and return the parsed JSON body.

        Raises
        ------
        HttpError
            On any non-2xx status.
        TransportError
            When no response was received (connection error, timeout).
        CatalogFormatError
            When the body is not valid JSON.
        """
        url = self.url_for(endpoint)
        self._rate_limiter.wait()
        self.logger.debug(f"GET {url}")
        try:
            resp = self._session.get(url, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise TransportError(url, exc) from exc

        if not 200 <= resp.status_code < 300:
            raise HttpError(resp.status_code, url)

        try:
            return resp.json()
        except ValueError as exc:
            raise CatalogFormatError(url, f"invalid JSON ({exc})") from exc
