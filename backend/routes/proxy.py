"""Pass-through routes — one Roblox API call each, reshaped and cached.

Every route is rate limited per client and answers repeated identical
queries from the shared response cache until the entry expires.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from errors import ClientError, NotFoundError
from routes.deps import enforce_rate_limit, get_cache, get_roblox
from services.cache import TTLCache, presence_key, servers_key, thumbnail_key, username_key
from services.roblox_api import RobloxAPI

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", dependencies=[Depends(enforce_rate_limit)])


class UsernameRequest(BaseModel):
    username: str | None = None


class PresenceRequest(BaseModel):
    userIds: list[int] | None = None


class ServersRequest(BaseModel):
    placeId: int | None = None
    cursor: str | None = None


class ThumbnailRequest(BaseModel):
    userId: int | None = None
    size: str | None = None
    type: str | None = None


@router.post("/username-to-id")
async def username_to_id(
    body: UsernameRequest,
    cache: TTLCache = Depends(get_cache),
    roblox: RobloxAPI = Depends(get_roblox),
) -> dict:
    """Resolve a username to its user id and display name."""
    if not body.username:
        raise ClientError("Username required")

    key = username_key(body.username)
    cached = cache.get(key)
    if cached is not None:
        return cached

    identity = await roblox.resolve_username(body.username)
    if identity is None:
        raise NotFoundError("User not found")

    result = {
        "success": True,
        "userId": identity.user_id,
        "username": identity.username,
        "displayName": identity.display_name,
    }
    cache.set(key, result)
    return result


@router.post("/presence")
async def presence(
    body: PresenceRequest,
    cache: TTLCache = Depends(get_cache),
    roblox: RobloxAPI = Depends(get_roblox),
) -> dict:
    """Presence for a list of user ids, verbatim from upstream."""
    if body.userIds is None:
        raise ClientError("userIds array required")

    key = presence_key(body.userIds)
    cached = cache.get(key)
    if cached is not None:
        return cached

    result = {
        "success": True,
        "userPresences": await roblox.get_presences(body.userIds),
    }
    cache.set(key, result)
    return result


@router.post("/servers")
async def servers(
    body: ServersRequest,
    cache: TTLCache = Depends(get_cache),
    roblox: RobloxAPI = Depends(get_roblox),
) -> dict:
    """One page (100 servers) of the public server listing for a place."""
    if not body.placeId:
        raise ClientError("placeId required")

    key = servers_key(body.placeId, body.cursor)
    cached = cache.get(key)
    if cached is not None:
        return cached

    page = await roblox.list_public_servers(body.placeId, cursor=body.cursor)
    result = {
        "success": True,
        "servers": page.servers,
        "nextPageCursor": page.next_page_cursor,
    }
    cache.set(key, result)
    return result


@router.post("/thumbnail")
async def thumbnail(
    body: ThumbnailRequest,
    cache: TTLCache = Depends(get_cache),
    roblox: RobloxAPI = Depends(get_roblox),
) -> dict:
    """Avatar image URL; ``type`` other than "avatar" gives the headshot crop."""
    if not body.userId:
        raise ClientError("userId required")

    size = body.size or "420x420"
    thumbnail_type = "avatar" if (body.type or "avatar") == "avatar" else "avatar-headshot"

    key = thumbnail_key(body.userId, size, thumbnail_type)
    cached = cache.get(key)
    if cached is not None:
        return cached

    found = await roblox.get_avatar_thumbnail(body.userId, size, thumbnail_type)
    if found is None:
        raise NotFoundError("Thumbnail not found")

    result = {"success": True, "imageUrl": found.get("imageUrl")}
    cache.set(key, result)
    return result
