"""Find the live game server a player is currently on.

Resolution runs in three steps:

1. Resolve the username to a user id (404 if nobody matches).
2. Fetch presence. Anything other than In Game, or In Game with the place
   hidden by privacy settings, ends the search as a successful
   ``found: false`` response carrying a status string.
3. Walk the public server listing for the place, page by page, and stop
   at the first server whose player ids contain the target user. The
   scan gives up after ``max_servers`` servers or when the listing runs
   out, in which case the player is assumed to be in a private/VIP server.

Pages are fetched strictly one after another. Results are never cached.
"""

import logging
import math

from errors import NotFoundError, UpstreamError
from services.models import PlayerIdentity, Presence, ServerInstance, presence_status
from services.roblox_api import SERVERS_PAGE_SIZE, RobloxAPI

logger = logging.getLogger(__name__)

DEFAULT_MAX_SERVERS = 500
UNKNOWN_GAME = "Unknown Game"


async def scan_servers(
    api: RobloxAPI,
    place_id: int,
    user_id: int,
    max_servers: int = DEFAULT_MAX_SERVERS,
    page_size: int = SERVERS_PAGE_SIZE,
) -> tuple[ServerInstance | None, int]:
    """Scan public servers for ``user_id``.

    Returns (matched server or None, number of servers scanned without a match).
    """
    # Empty pages that still carry a cursor would never advance the count
    max_pages = math.ceil(max_servers / page_size) + 1
    cursor = None
    scanned = 0
    pages = 0

    while scanned < max_servers and pages < max_pages:
        page = await api.list_public_servers(place_id, cursor=cursor, limit=page_size)
        pages += 1

        for raw in page.servers:
            # Only the matching entry is parsed; malformed non-matches are skipped
            player_ids = raw.get("playerIds") if isinstance(raw, dict) else None
            if not isinstance(player_ids, list) or user_id not in player_ids:
                continue
            server = ServerInstance.from_payload(raw)
            logger.info("Found user %s in server %s (page %d)", user_id, server.job_id, pages)
            return server, scanned

        scanned += len(page.servers)
        cursor = page.next_page_cursor
        logger.debug("Scanned %d servers for place %s", scanned, place_id)
        if not cursor:
            break

    return None, scanned


async def locate_player(
    api: RobloxAPI, username: str, max_servers: int = DEFAULT_MAX_SERVERS
) -> dict:
    identity = await api.resolve_username(username)
    if identity is None:
        raise NotFoundError("User not found")

    presences = await api.get_presences([identity.user_id])
    if not presences:
        raise UpstreamError("Presence response was empty")
    presence = Presence.from_payload(presences[0])

    if not presence.in_game:
        return {
            **_identity_fields(identity),
            "found": False,
            "status": presence_status(presence.presence_type),
        }

    if presence.place_id is None:
        return {
            **_identity_fields(identity),
            "found": False,
            "status": "In Game (Private)",
            "error": "User privacy settings prevent seeing which game they are in",
        }

    place_id = presence.place_id
    game_name = presence.last_location or UNKNOWN_GAME
    server, scanned = await scan_servers(api, place_id, identity.user_id, max_servers)

    if server is not None:
        return {
            **_identity_fields(identity),
            "found": True,
            "placeId": place_id,
            "gameName": game_name,
            "jobId": server.job_id,
            "serverInfo": server.info(),
        }

    logger.info("User %s not in %d public servers of place %s", identity.user_id, scanned, place_id)
    return {
        **_identity_fields(identity),
        "found": False,
        "placeId": place_id,
        "gameName": game_name,
        "status": "In Game (Private Server)",
        "error": (
            f"Scanned {scanned} servers but player not found. "
            "They might be in a private/VIP server."
        ),
    }


def _identity_fields(identity: PlayerIdentity) -> dict:
    return {
        "success": True,
        "userId": identity.user_id,
        "username": identity.username,
        "displayName": identity.display_name,
    }
