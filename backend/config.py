"""Centralized configuration — all env vars in one place."""

import os

from dotenv import load_dotenv

load_dotenv()

# Upstream Roblox web APIs
ROBLOX_APIS = {
    "users": "https://users.roblox.com",
    "presence": "https://presence.roblox.com",
    "games": "https://games.roblox.com",
    "thumbnails": "https://thumbnails.roblox.com",
}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.port: int = _int_env("PORT", 3000)
        self.cors_origins: list[str] = os.getenv("ALLOWED_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Response cache
        self.cache_ttl_seconds: int = _int_env("CACHE_TTL_SECONDS", 10)
        self.cache_max_entries: int = _int_env("CACHE_MAX_ENTRIES", 10_000)

        # Per-client throttling
        self.rate_limit_window_ms: int = _int_env("RATE_LIMIT_WINDOW_MS", 60_000)
        self.rate_limit_max_requests: int = _int_env("RATE_LIMIT_MAX_REQUESTS", 30)
        self.rate_limit_max_identities: int = _int_env("RATE_LIMIT_MAX_IDENTITIES", 10_000)
        self.trust_proxy: bool = _bool_env("TRUST_PROXY")

        # Roblox upstream
        self.roblosecurity: str | None = os.getenv("ROBLOSECURITY") or None
        self.user_agent: str = os.getenv("USER_AGENT", "RobloxPlayerFinder/1.0")
        self.upstream_timeout_seconds: int = _int_env("UPSTREAM_TIMEOUT_SECONDS", 10)
        self.find_player_max_servers: int = _int_env("FIND_PLAYER_MAX_SERVERS", 500)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return human-readable warnings about the current configuration."""
        warnings = []
        if not self.roblosecurity:
            warnings.append("ROBLOSECURITY not set; upstream calls are unauthenticated")
        if "*" in self.cors_origins and self.is_production:
            warnings.append("ALLOWED_ORIGINS is '*' in production")
        return warnings


settings = Settings()
