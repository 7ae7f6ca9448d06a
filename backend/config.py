"""Centralized configuration — all env vars in one place."""

import os


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # YouTube Data API (the lowercase names are the legacy deployment's)
        self.youtube_api_key: str | None = os.getenv("YOUTUBE_API_KEY") or os.getenv("apiKey")
        self.youtube_channel_id: str | None = os.getenv("YOUTUBE_CHANNEL_ID") or os.getenv("channelId")
        self.youtube_search_url: str = os.getenv(
            "YOUTUBE_SEARCH_URL", "https://www.googleapis.com/youtube/v3/search"
        )
        self.youtube_max_results: int = int(os.getenv("YOUTUBE_MAX_RESULTS", "10"))

        # Snapshot cache
        self.cache_ttl_minutes: float = float(os.getenv("CACHE_TTL_MINUTES", "15"))
        self.upstream_timeout_seconds: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))
        self.invocation_timeout_seconds: float = float(os.getenv("INVOCATION_TIMEOUT_SECONDS", "30"))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_minutes * 60

    def validate(self) -> list[str]:
        """Return list of missing required env vars for the video feed."""
        required = ["YOUTUBE_API_KEY", "YOUTUBE_CHANNEL_ID"]
        return [var for var in required if not getattr(self, _attr_for(var))]


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "YOUTUBE_API_KEY": "youtube_api_key",
        "YOUTUBE_CHANNEL_ID": "youtube_channel_id",
    }
    return mapping.get(env_var, env_var.lower())
