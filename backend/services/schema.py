"""Schema for the YouTube Data API `search.list` response.

Only the fields the feed consumers read are modelled. Unknown fields are
dropped and missing ones take their zero value, so the canonical payload
always has the same shape regardless of what the upstream includes.
"""

import pydantic
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from errors import PayloadValidationError


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Thumbnail(_Model):
    height: int = 0
    url: str = ""
    width: int = 0


class Thumbnails(_Model):
    default: Thumbnail = Thumbnail()
    high: Thumbnail = Thumbnail()
    medium: Thumbnail = Thumbnail()


class Snippet(_Model):
    channel_id: str = ""
    channel_title: str = ""
    description: str = ""
    live_broadcast_content: str = ""
    publish_time: str = ""
    published_at: str = ""
    thumbnails: Thumbnails = Thumbnails()
    title: str = ""


class ResourceId(_Model):
    kind: str = ""
    video_id: str = ""


class SearchResult(_Model):
    etag: str = ""
    id: ResourceId = ResourceId()
    kind: str = ""
    snippet: Snippet = Snippet()


class PageInfo(_Model):
    results_per_page: int = 0
    total_results: int = 0


class SearchListResponse(_Model):
    etag: str = ""
    items: list[SearchResult] = []
    kind: str = ""
    next_page_token: str = ""
    page_info: PageInfo = PageInfo()
    region_code: str = ""


def normalize_payload(body: bytes | str) -> str:
    """Validate an upstream body and return its canonical JSON string."""
    try:
        parsed = SearchListResponse.model_validate_json(body)
    except pydantic.ValidationError as e:
        raise PayloadValidationError(
            f"Upstream payload failed validation ({e.error_count()} errors): {e.errors()[0]['msg']}"
        ) from e
    return parsed.model_dump_json(by_alias=True)
