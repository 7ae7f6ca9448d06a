"""Single-entry in-memory TTL cache for the channel feed snapshot.

The hosting runtime dispatches overlapping invocations on a thread pool.
When the entry is empty or stale exactly one of them refreshes it; the
others wait on the same in-flight Future and get the same outcome. Nothing
is persisted; a new worker process starts empty.
"""

import enum
import logging
import threading
import time
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from errors import FeedError, FetchCancelledError

logger = logging.getLogger(__name__)


class CacheState(enum.Enum):
    EMPTY = "empty"
    FRESH = "fresh"
    STALE = "stale"


@dataclass
class CacheEntry:
    """Last good payload plus the time of the last fetch attempt."""

    value: str | None = None
    fetched_at: float | None = None
    last_error: str | None = None

    def state(self, now: float, ttl_seconds: float) -> CacheState:
        if self.value is None:
            return CacheState.EMPTY
        if self.fetched_at is None or now - self.fetched_at >= ttl_seconds:
            return CacheState.STALE
        return CacheState.FRESH


def _remaining(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


class SnapshotCache:
    """Serve a cached payload, refreshing it at most once per TTL window.

    Args:
        fetch: Called with the caller's remaining deadline (or None); returns
            a validated payload or raises a FeedError.
        ttl_seconds: Age at which the cached payload becomes stale.
        clock: Wall-clock source, injectable for tests.
        close: Releases whatever backs `fetch`; called once by close().
    """

    def __init__(
        self,
        fetch: Callable[[float | None], str],
        ttl_seconds: float,
        clock: Callable[[], float] = time.time,
        close: Callable[[], None] | None = None,
    ):
        self._fetch = fetch
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry = CacheEntry()
        self._lock = threading.Lock()
        self._inflight: Future | None = None
        self._close = close

    def close(self) -> None:
        if self._close is not None:
            self._close()
            self._close = None

    def state(self) -> CacheState:
        with self._lock:
            return self._entry.state(self._clock(), self.ttl_seconds)

    def handle(self, timeout: float | None = None) -> str:
        """Return the feed payload, refreshing it first if empty or stale.

        Raises the fetch error when nothing is cached, and FetchCancelledError
        when `timeout` runs out first. A failed refresh of a stale entry is
        not an error: the previous payload is returned.
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._lock:
            if self._entry.state(self._clock(), self.ttl_seconds) is CacheState.FRESH:
                return self._entry.value
            flight = self._inflight
            leader = flight is None
            if leader:
                flight = self._inflight = Future()

        if leader:
            self._refresh(flight, _remaining(deadline))
            return flight.result()

        try:
            return flight.result(timeout=_remaining(deadline))
        except FutureTimeoutError:
            raise FetchCancelledError() from None

    def warm(self, timeout: float | None = None) -> bool:
        """Pre-warm at startup. Failure is logged, never raised."""
        try:
            self.handle(timeout)
        except FeedError as e:
            logger.warning("Feed pre-warm failed, starting empty: %s", e)
            return False
        return True

    def status(self) -> dict:
        """Snapshot of the cache state for health checks."""
        with self._lock:
            now = self._clock()
            state = self._entry.state(now, self.ttl_seconds)
            fetched_at = self._entry.fetched_at
            last_error = self._entry.last_error
            refreshing = self._inflight is not None

        return {
            "state": state.value,
            "fetched_at": (
                datetime.fromtimestamp(fetched_at, tz=timezone.utc).isoformat()
                if fetched_at is not None
                else None
            ),
            "age_seconds": round(now - fetched_at, 1) if fetched_at is not None else None,
            "ttl_seconds": self.ttl_seconds,
            "refreshing": refreshing,
            "last_error": last_error,
        }

    def _refresh(self, flight: Future, timeout: float | None) -> None:
        """Run one fetch and settle `flight` with its outcome."""
        try:
            payload = self._fetch(timeout)
        except FetchCancelledError as e:
            # Not stamped: the next caller retries instead of waiting out the TTL.
            with self._lock:
                self._inflight = None
                self._entry.last_error = str(e)
                flight.set_exception(e)
            return
        except FeedError as e:
            with self._lock:
                self._inflight = None
                self._entry.fetched_at = self._clock()
                self._entry.last_error = str(e)
                previous = self._entry.value
                if previous is None:
                    flight.set_exception(e)
                else:
                    flight.set_result(previous)
            if previous is None:
                logger.warning("Feed fetch failed with nothing cached: %s", e)
            else:
                logger.warning("Feed refresh failed, serving stale snapshot: %s", e)
            return
        except Exception as e:
            logger.exception("Unexpected error refreshing feed")
            with self._lock:
                self._inflight = None
                flight.set_exception(e)
            return

        with self._lock:
            self._inflight = None
            self._entry.value = payload
            self._entry.fetched_at = self._clock()
            self._entry.last_error = None
            flight.set_result(payload)
        logger.info("Feed snapshot refreshed (%d bytes)", len(payload))
