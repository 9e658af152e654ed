"""Composite route: which live server is a player on?"""

import logging

from fastapi import APIRouter, Depends, Request

from errors import ClientError
from routes.deps import enforce_rate_limit, get_roblox
from routes.proxy import UsernameRequest
from services.player_locator import locate_player
from services.roblox_api import RobloxAPI

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", dependencies=[Depends(enforce_rate_limit)])


@router.post("/find-player")
async def find_player(
    body: UsernameRequest,
    request: Request,
    roblox: RobloxAPI = Depends(get_roblox),
) -> dict:
    """Resolve, check presence, then scan public servers. Never cached."""
    if not body.username:
        raise ClientError("username required")

    max_servers = request.app.state.settings.find_player_max_servers
    logger.info("Locating %s (scan cap %d)", body.username, max_servers)
    return await locate_player(roblox, body.username, max_servers=max_servers)
