"""YouTube Data API client for a channel's latest uploads.

One `search.list` call per fetch. The response body is validated against
services.schema before it is handed back, so callers only ever see a
canonical JSON string.
"""

import logging
import time

import httpx

from config import Settings
from errors import (
    ConfigurationError,
    FetchCancelledError,
    ResponseReadError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from services.schema import normalize_payload

logger = logging.getLogger(__name__)

EMPTY_REQUEST_URL = "request url is empty"


def search_params(settings: Settings) -> dict[str, str]:
    """Query parameters for the channel's newest videos, newest first."""
    return {
        "part": "snippet",
        "channelId": settings.youtube_channel_id or "",
        "maxResults": str(settings.youtube_max_results),
        "order": "date",
        "type": "video",
        "key": settings.youtube_api_key or "",
    }


def build_request_url(settings: Settings) -> str:
    missing = settings.validate()
    if missing:
        raise ConfigurationError(f"{EMPTY_REQUEST_URL}: missing {', '.join(missing)}")

    url = httpx.URL(settings.youtube_search_url, params=search_params(settings))
    logger.info("YouTube request URL: %s", url.copy_set_param("key", "REDACTED"))
    return str(url)


class YouTubeFetcher:
    """Stateless apart from a pooled HTTP client; never retries."""

    def __init__(
        self,
        request_url: str,
        timeout: float = 10,
        transport: httpx.BaseTransport | None = None,
        unconfigured_reason: str | None = None,
    ):
        self.request_url = request_url
        self._timeout = timeout
        self._unconfigured_reason = unconfigured_reason or EMPTY_REQUEST_URL
        self._client = httpx.Client(transport=transport)

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.BaseTransport | None = None
    ) -> "YouTubeFetcher":
        """Build a fetcher, keeping an empty target if the config is incomplete.

        The error is logged here and raised again on every fetch, so a
        misconfigured deployment still starts and reports why it can't serve.
        """
        try:
            request_url = build_request_url(settings)
            reason = None
        except ConfigurationError as e:
            logger.error("%s", e)
            request_url, reason = "", str(e)
        return cls(
            request_url,
            timeout=settings.upstream_timeout_seconds,
            transport=transport,
            unconfigured_reason=reason,
        )

    def fetch(self, timeout: float | None = None) -> str:
        """Fetch the search results and return them as canonical JSON.

        Args:
            timeout: Remaining caller deadline in seconds. When it runs out
                the HTTP call is aborted and FetchCancelledError is raised.
                Without it the client's own timeout applies and counts as a
                transport failure.
        """
        if not self.request_url:
            raise ConfigurationError(self._unconfigured_reason)
        if timeout is not None and timeout <= 0:
            raise FetchCancelledError()

        # httpx timeouts bound each connect/read separately; the deadline
        # bounds the whole call, so a trickling body can't outlive it.
        deadline = None if timeout is None else time.monotonic() + timeout
        effective = self._timeout if timeout is None else timeout
        try:
            with self._client.stream("GET", self.request_url, timeout=effective) as resp:
                if resp.is_error:
                    raise UpstreamStatusError(resp.status_code, resp.reason_phrase)
                chunks = []
                try:
                    for chunk in resp.iter_bytes():
                        chunks.append(chunk)
                        _check_deadline(deadline)
                except httpx.TimeoutException as e:
                    if timeout is not None:
                        raise FetchCancelledError() from e
                    raise ResponseReadError(f"Timed out reading upstream body: {e}") from e
                except httpx.HTTPError as e:
                    raise ResponseReadError(f"Failed to read upstream body: {e}") from e
        except httpx.TimeoutException as e:
            if timeout is not None:
                raise FetchCancelledError() from e
            raise UpstreamTransportError(f"Upstream request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(f"Upstream request failed: {e}") from e

        _check_deadline(deadline)
        return normalize_payload(b"".join(chunks))

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "YouTubeFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _check_deadline(deadline: float | None) -> None:
    if deadline is not None and time.monotonic() >= deadline:
        raise FetchCancelledError()
