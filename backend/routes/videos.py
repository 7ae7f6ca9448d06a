"""Latest channel videos — the cached YouTube search snapshot."""

import json
import logging

import azure.functions as func
from fastapi import APIRouter
from fastapi.responses import Response

from config import settings
from errors import FeedError
from services.cache import SnapshotCache
from services.feed import get_feed

logger = logging.getLogger(__name__)

bp = func.Blueprint()
router = APIRouter()


def videos_response(feed: SnapshotCache) -> func.HttpResponse:
    """Build the Functions response for one invocation."""
    try:
        payload = feed.handle(timeout=settings.invocation_timeout_seconds)
    except FeedError as e:
        logger.warning("Latest videos unavailable: %s", e)
        return func.HttpResponse(
            json.dumps({"error": str(e)}), mimetype="application/json", status_code=e.status_code
        )

    return func.HttpResponse(payload, mimetype="application/json")


@bp.route(route="videos/latest", methods=["GET"])
def latest_videos_function(req: func.HttpRequest) -> func.HttpResponse:
    return videos_response(get_feed())


@router.get("/videos/latest")
def latest_videos() -> Response:
    """Cached search results; errors go through the centralized handlers."""
    payload = get_feed().handle(timeout=settings.invocation_timeout_seconds)
    return Response(payload, media_type="application/json")
