"""Health and readiness check routes."""

import json

import azure.functions as func
from fastapi import APIRouter

from config import settings
from services.cache import SnapshotCache
from services.feed import get_feed

bp = func.Blueprint()
router = APIRouter()


def ready_body() -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": "channel-feed-api", "commit": settings.git_sha}


def health_body(feed: SnapshotCache) -> dict:
    """Cache state plus any missing configuration. Never triggers a fetch."""
    missing = settings.validate()
    cache = feed.status()
    if missing:
        status = "misconfigured"
    elif cache["state"] == "empty":
        status = "degraded"
    else:
        status = "ok"
    return {
        "status": status,
        "service": "channel-feed-api",
        "commit": settings.git_sha,
        "missing_config": missing,
        "cache": cache,
    }


@router.get("/ready")
async def ready() -> dict:
    return ready_body()


@router.get("/health")
def health() -> dict:
    return health_body(get_feed())


@bp.route(route="ready", methods=["GET"])
def ready_function(req: func.HttpRequest) -> func.HttpResponse:
    return func.HttpResponse(json.dumps(ready_body()), mimetype="application/json")


@bp.route(route="health", methods=["GET"])
def health_function(req: func.HttpRequest) -> func.HttpResponse:
    return func.HttpResponse(json.dumps(health_body(get_feed())), mimetype="application/json")
