"""FastAPI application entry point for local runs of the channel feed API."""

import asyncio
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from errors import register_error_handlers

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Channel Feed API", version="1.0.0")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.videos import router as videos_router

    app.include_router(health_router)
    app.include_router(videos_router)

    @app.on_event("startup")
    async def _warm_feed() -> None:
        missing = settings.validate()
        if missing:
            logger.warning("Missing env vars (video feed will fail): %s", ", ".join(missing))

        from services.feed import get_feed

        await asyncio.to_thread(get_feed)

    @app.on_event("shutdown")
    async def _close_feed() -> None:
        from services.feed import close_feed

        close_feed()

    return app


app = create_app()
