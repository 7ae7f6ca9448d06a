import os
from unittest import mock

import pytest

from config import Settings
from errors import ConfigurationError
from services import feed
from services.cache import CacheState


def test_build_feed_survives_missing_config(request) -> None:
    with mock.patch.dict(os.environ, {"CACHE_TTL_MINUTES": "2"}, clear=True):
        settings = Settings()

    cache = feed.build_feed(settings)
    request.addfinalizer(cache.close)

    assert cache.ttl_seconds == 120
    assert cache.state() is CacheState.EMPTY
    assert "YOUTUBE_API_KEY" in cache.status()["last_error"]
    with pytest.raises(ConfigurationError):
        cache.handle()


class FakeFeed:
    def __init__(self) -> None:
        self.warmed_with_lock_held: list[bool] = []
        self.closed = 0

    def warm(self, timeout=None) -> bool:
        self.warmed_with_lock_held.append(feed._feed_lock.locked())
        return True

    def close(self) -> None:
        self.closed += 1


def test_get_feed_builds_once_and_warms_outside_the_lock(monkeypatch) -> None:
    built = []

    def fake_build(settings, warm=True):
        assert warm is False
        built.append(FakeFeed())
        return built[-1]

    monkeypatch.setattr(feed, "_feed", None)
    monkeypatch.setattr(feed, "build_feed", fake_build)

    first = feed.get_feed()
    assert feed.get_feed() is first
    assert len(built) == 1
    assert first.warmed_with_lock_held == [False]


def test_close_feed_releases_the_controller(monkeypatch) -> None:
    fake = FakeFeed()
    monkeypatch.setattr(feed, "_feed", fake)

    feed.close_feed()
    feed.close_feed()

    assert fake.closed == 1
    assert feed._feed is None


def test_build_feed_wires_fetcher_close(monkeypatch) -> None:
    closed = []
    monkeypatch.setattr(feed.YouTubeFetcher, "close", lambda self: closed.append(self))
    with mock.patch.dict(os.environ, {}, clear=True):
        settings = Settings()

    cache = feed.build_feed(settings, warm=False)
    cache.close()

    assert len(closed) == 1
