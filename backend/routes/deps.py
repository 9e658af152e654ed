"""Shared route dependencies: process-wide state and the rate-limit gate."""

from fastapi import Request

from errors import RateLimitedError
from services.cache import TTLCache
from services.roblox_api import RobloxAPI


def client_identity(request: Request) -> str:
    """Rate-limit bucket key for the caller, normally its source IP."""
    if request.app.state.settings.trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def enforce_rate_limit(request: Request) -> None:
    allowed, retry_after = request.app.state.rate_limiter.check(client_identity(request))
    if not allowed:
        raise RateLimitedError(retry_after)


def get_cache(request: Request) -> TTLCache:
    return request.app.state.cache


def get_roblox(request: Request) -> RobloxAPI:
    return request.app.state.roblox
