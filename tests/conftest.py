"""Shared test fixtures and fakes."""

from __future__ import annotations

import json
import threading

import pytest

SAMPLE_RESPONSE = {
    "kind": "youtube#searchListResponse",
    "etag": "etag-page",
    "nextPageToken": "CAoQAA",
    "regionCode": "US",
    "pageInfo": {"totalResults": 2, "resultsPerPage": 10},
    "items": [
        {
            "kind": "youtube#searchResult",
            "etag": "etag-1",
            "id": {"kind": "youtube#video", "videoId": "abc123"},
            "snippet": {
                "publishedAt": "2026-10-01T12:00:00Z",
                "channelId": "UC123",
                "title": "Newest upload",
                "description": "First",
                "thumbnails": {
                    "default": {"url": "https://i.ytimg.com/vi/abc123/default.jpg", "width": 120, "height": 90},
                    "medium": {"url": "https://i.ytimg.com/vi/abc123/mqdefault.jpg", "width": 320, "height": 180},
                    "high": {"url": "https://i.ytimg.com/vi/abc123/hqdefault.jpg", "width": 480, "height": 360},
                },
                "channelTitle": "Test Channel",
                "liveBroadcastContent": "none",
                "publishTime": "2026-10-01T12:00:00Z",
            },
        },
        {
            "kind": "youtube#searchResult",
            "etag": "etag-2",
            "id": {"kind": "youtube#video", "videoId": "def456"},
            "snippet": {"title": "Older upload", "channelId": "UC123"},
        },
    ],
}

SAMPLE_BODY = json.dumps(SAMPLE_RESPONSE).encode()


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingFetcher:
    """Fetch callable returning (or raising) queued results in order.

    The last result repeats once the queue is exhausted. Set `gate` to make
    every call block until the event is set.
    """

    def __init__(self, *results: str | Exception) -> None:
        self._results = list(results)
        self._lock = threading.Lock()
        self.calls = 0
        self.timeouts: list[float | None] = []
        self.gate: threading.Event | None = None

    def queue(self, *results: str | Exception) -> None:
        self._results.extend(results)

    def __call__(self, timeout: float | None = None) -> str:
        with self._lock:
            self.calls += 1
            self.timeouts.append(timeout)
            result = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if self.gate is not None:
            self.gate.wait(5)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
