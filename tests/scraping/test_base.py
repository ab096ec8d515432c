from unittest.mock import Mock

import pytest

from scraper import base
from scraper.base import BaseScraper, RateLimiter, ScrapeConfig


def test_rate_limiter_disabled_never_sleeps(monkeypatch):
    sleep = Mock()
    monkeypatch.setattr(base.time, "sleep", sleep)

    limiter = RateLimiter(calls_per_second=0)
    for _ in range(5):
        limiter.wait()

    sleep.assert_not_called()


def test_rate_limiter_spaces_out_calls(monkeypatch):
    clock = iter([100.0, 100.0, 100.1, 100.5])
    sleep = Mock()
    monkeypatch.setattr(base.time, "monotonic", lambda: next(clock))
    monkeypatch.setattr(base.time, "sleep", sleep)

    limiter = RateLimiter(calls_per_second=2)
    limiter.wait()
    limiter.wait()

    sleep.assert_called_once()
    assert sleep.call_args.args[0] == pytest.approx(0.4)


def test_session_has_no_retries_by_default():
    scraper = BaseScraper(ScrapeConfig(user_agent="tester/1.0"))

    adapter = scraper._session.get_adapter("https://pokeapi.co/api/v2/ability")
    assert adapter.max_retries.total == 0
    assert scraper._session.headers["User-Agent"] == "tester/1.0"


def test_url_for_resolves_relative_and_keeps_absolute():
    scraper = BaseScraper(ScrapeConfig(api_base="https://pokeapi.co/api/v2/"), session=Mock())

    assert scraper.url_for("/ability?limit=1") == "https://pokeapi.co/api/v2/ability?limit=1"
    assert scraper.url_for("https://elsewhere/x") == "https://elsewhere/x"
