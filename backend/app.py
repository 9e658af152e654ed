"""FastAPI application entry point for the Roblox player finder proxy."""

import logging
import sys

import httpx
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings
from errors import register_error_handlers
from services.cache import TTLCache
from services.rate_limiter import SlidingWindowRateLimiter
from services.roblox_api import RobloxAPI

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


def create_app(
    app_settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title="Roblox Player Finder", version="1.0.0")

    # Process-wide state shared by every request
    app.state.settings = app_settings
    app.state.cache = TTLCache(
        ttl_seconds=app_settings.cache_ttl_seconds,
        max_entries=app_settings.cache_max_entries,
    )
    app.state.rate_limiter = SlidingWindowRateLimiter(
        window_ms=app_settings.rate_limit_window_ms,
        max_requests=app_settings.rate_limit_max_requests,
        max_identities=app_settings.rate_limit_max_identities,
    )
    app.state.roblox = RobloxAPI(app_settings, transport=transport)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if app_settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.find_player import router as find_player_router
    from routes.health import router as health_router
    from routes.proxy import router as proxy_router

    app.include_router(health_router)
    app.include_router(proxy_router)
    app.include_router(find_player_router)

    @app.on_event("startup")
    async def _validate_config() -> None:
        for warning in app_settings.validate():
            logger.warning("Config: %s", warning)

    @app.on_event("shutdown")
    async def _close_upstream() -> None:
        await app.state.roblox.aclose()

    return app


app = create_app()


if __name__ == "__main__":
    logger.info("Proxy server running on port %d", settings.port)
    for route in ("POST /api/username-to-id", "POST /api/presence", "POST /api/servers",
                  "POST /api/find-player", "POST /api/thumbnail", "GET /health"):
        logger.info("  - %s", route)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
