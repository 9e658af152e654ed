"""Async client for the public Roblox web APIs.

Wraps the four upstream services the proxy talks to (users, presence,
games, thumbnails) behind a shared ``httpx.AsyncClient``. Every call
carries the same header set, plus the ``.ROBLOSECURITY`` cookie when a
session credential is configured. Failures are raised as
``UpstreamError`` and never retried.
"""

import logging

import httpx

from config import ROBLOX_APIS, Settings
from errors import UpstreamError
from services.models import PlayerIdentity, ServerPage

logger = logging.getLogger(__name__)

SERVERS_PAGE_SIZE = 100


def build_headers(settings: Settings) -> dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "User-Agent": settings.user_agent,
    }
    if settings.roblosecurity:
        headers["Cookie"] = f".ROBLOSECURITY={settings.roblosecurity}"
    return headers


class RobloxAPI:
    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
        base_urls: dict[str, str] | None = None,
    ):
        self.base_urls = {**ROBLOX_APIS, **(base_urls or {})}
        self._client = httpx.AsyncClient(
            headers=build_headers(settings),
            timeout=settings.upstream_timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        service: str,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        json: dict | None = None,
    ) -> dict:
        url = f"{self.base_urls[service]}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            resp = await self._client.request(method, url, params=params, json=json)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or type(e).__name__) from e
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {service}: {e}") from e
        if not isinstance(data, dict):
            raise UpstreamError(f"Unexpected payload from {service}: {type(data).__name__}")
        return data

    async def resolve_username(self, username: str) -> PlayerIdentity | None:
        """Look up a single username. Returns None when no user matches."""
        data = await self._request(
            "users",
            "POST",
            "/v1/usernames/users",
            json={"usernames": [username], "excludeBannedUsers": False},
        )
        users = data.get("data") or []
        if not users:
            return None
        return PlayerIdentity.from_payload(users[0])

    async def get_presences(self, user_ids: list[int]) -> list[dict]:
        data = await self._request(
            "presence", "POST", "/v1/presence/users", json={"userIds": user_ids}
        )
        presences = data.get("userPresences")
        if not isinstance(presences, list):
            raise UpstreamError("Presence response missing userPresences")
        return presences

    async def list_public_servers(
        self, place_id: int, cursor: str | None = None, limit: int = SERVERS_PAGE_SIZE
    ) -> ServerPage:
        params: dict = {"limit": limit}
        if cursor:
            params["cursor"] = cursor
        data = await self._request(
            "games", "GET", f"/v1/games/{place_id}/servers/Public", params=params
        )
        servers = data.get("data")
        if not isinstance(servers, list):
            raise UpstreamError("Server list response missing data")
        return ServerPage(servers=servers, next_page_cursor=data.get("nextPageCursor"))

    async def get_avatar_thumbnail(
        self, user_id: int, size: str = "420x420", thumbnail_type: str = "avatar"
    ) -> dict | None:
        """First thumbnail result for a user, or None when upstream returns none.

        A result for a Blocked or Pending image is still returned; its
        ``imageUrl`` is null.
        """
        data = await self._request(
            "thumbnails",
            "GET",
            f"/v1/users/{thumbnail_type}",
            params={"userIds": user_id, "size": size, "format": "Png"},
        )
        results = data.get("data") or []
        if not results:
            return None
        return results[0]
