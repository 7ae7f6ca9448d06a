"""Process-wide feed controller, built once per worker and pre-warmed."""

import logging
import threading

from config import Settings, settings
from services.cache import SnapshotCache
from services.youtube import YouTubeFetcher

logger = logging.getLogger(__name__)

_feed: SnapshotCache | None = None
_feed_lock = threading.Lock()


def build_feed(settings: Settings, warm: bool = True) -> SnapshotCache:
    """Wire a YouTube fetcher into a snapshot cache.

    With `warm`, one fetch is attempted right away; a failure leaves the
    cache empty and the first request retries.
    """
    fetcher = YouTubeFetcher.from_settings(settings)
    feed = SnapshotCache(
        fetcher.fetch, ttl_seconds=settings.cache_ttl_seconds, close=fetcher.close
    )
    if warm:
        feed.warm(timeout=settings.invocation_timeout_seconds)
    return feed


def get_feed() -> SnapshotCache:
    """Return the worker's feed controller, creating it on first call.

    Only construction is under the module lock; the warm-up fetch runs
    after it is released and is shared through the cache like any refresh.
    """
    global _feed
    with _feed_lock:
        created = _feed is None
        if created:
            logger.info("Initializing feed cache (ttl=%.0fs)", settings.cache_ttl_seconds)
            _feed = build_feed(settings, warm=False)
        feed = _feed
    if created:
        feed.warm(timeout=settings.invocation_timeout_seconds)
    return feed


def close_feed() -> None:
    """Drop the worker's controller and release its HTTP client."""
    global _feed
    with _feed_lock:
        feed, _feed = _feed, None
    if feed is not None:
        feed.close()
