import json
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Set
from unittest.mock import Mock

import pytest
import requests

from scraper.base import HttpError
from scraper.models import ListingEntry
from sync.resources import get_resource
from sync.store import JsonBlobStore

API = "https://pokeapi.co/api/v2"


def make_response(payload: Any, status: int = 200, url: str = API) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    response._content = json.dumps(payload).encode("utf-8")
    return response


def routed_session(routes: Dict[str, Any]) -> Mock:
    """Mock session whose ``get`` answers from *routes* (URL → payload, Response or exception)."""
    session = Mock(spec=requests.Session)

    def get(url: str, timeout: Optional[float] = None) -> requests.Response:
        if url not in routes:
            return make_response({"detail": "Not found."}, status=404, url=url)
        answer = routes[url]
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, requests.Response):
            return answer
        return make_response(answer, url=url)

    session.get.side_effect = get
    return session


class FakeCatalog:
    """In-memory catalog that records every call."""

    def __init__(self, names: Iterable[str], count: Optional[int] = None, error: Exception = None) -> None:
        self.names = list(names)
        self.count = count
        self.error = error
        self.calls: List[str] = []

    def probe_count(self, endpoint: str) -> Optional[int]:
        self.calls.append("probe")
        return self.count

    def list_all(self, endpoint: str) -> List[ListingEntry]:
        self.calls.append("list")
        if self.error is not None:
            raise self.error
        return [ListingEntry(name=name, url=f"{API}/{endpoint}/{name}/") for name in self.names]


class FakeFetcher:
    """Returns canned records; names in ``failing`` raise."""

    def __init__(self, records: Dict[str, Dict[str, Any]], failing: Set[str] = frozenset()) -> None:
        self.records = records
        self.failing = set(failing)
        self.fetched: List[str] = []

    def fetch_one(self, endpoint: str, name: str, extractor: Callable) -> Dict[str, Any]:
        self.fetched.append(name)
        if name in self.failing:
            raise HttpError(500, f"{API}/{endpoint}/{name}")
        return self.records[name]


@pytest.fixture
def store(tmp_path) -> JsonBlobStore:
    return JsonBlobStore(tmp_path)


@pytest.fixture
def abilities():
    return get_resource("abilities")


@pytest.fixture
def fixed_today() -> Callable[[], date]:
    return lambda: date(2026, 2, 21)
