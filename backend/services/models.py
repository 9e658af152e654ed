"""Typed views over the Roblox API payloads the player locator reasons about."""

from dataclasses import dataclass, field
from enum import IntEnum

from errors import UpstreamError


class PresenceType(IntEnum):
    OFFLINE = 0
    ONLINE_WEBSITE = 1
    IN_GAME = 2
    IN_STUDIO = 3


PRESENCE_STATUS = {
    PresenceType.OFFLINE: "Offline",
    PresenceType.ONLINE_WEBSITE: "Online (Website)",
    PresenceType.IN_STUDIO: "In Studio",
}


def presence_status(presence_type: int) -> str:
    """Human status for a presence type that is not In Game."""
    return PRESENCE_STATUS.get(presence_type, "Unknown")


@dataclass(frozen=True)
class PlayerIdentity:
    user_id: int
    username: str
    display_name: str

    @classmethod
    def from_payload(cls, data: dict) -> "PlayerIdentity":
        try:
            return cls(
                user_id=int(data["id"]),
                username=data["name"],
                display_name=data.get("displayName", data["name"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Malformed user payload: {e!r}") from e


@dataclass(frozen=True)
class Presence:
    presence_type: int
    place_id: int | None = None
    last_location: str | None = None

    @classmethod
    def from_payload(cls, data: dict) -> "Presence":
        try:
            place_id = data.get("placeId")
            return cls(
                presence_type=int(data["userPresenceType"]),
                place_id=int(place_id) if place_id else None,
                last_location=data.get("lastLocation") or None,
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Malformed presence payload: {e!r}") from e

    @property
    def in_game(self) -> bool:
        return self.presence_type == PresenceType.IN_GAME


@dataclass(frozen=True)
class ServerInstance:
    job_id: str
    player_ids: frozenset[int] = field(default_factory=frozenset)
    playing: int = 0
    max_players: int = 0
    fps: float = 0.0
    ping: float = 0.0

    @classmethod
    def from_payload(cls, data: dict) -> "ServerInstance":
        try:
            return cls(
                job_id=data["id"],
                player_ids=frozenset(int(p) for p in data.get("playerIds") or ()),
                playing=data.get("playing", 0),
                max_players=data.get("maxPlayers", 0),
                fps=data.get("fps", 0.0),
                ping=data.get("ping", 0.0),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Malformed server payload: {e!r}") from e

    def info(self) -> dict:
        return {
            "playing": self.playing,
            "maxPlayers": self.max_players,
            "fps": self.fps,
            "ping": self.ping,
        }


@dataclass(frozen=True)
class ServerPage:
    """One page of the public server listing, kept as raw dicts for pass-through."""

    servers: list[dict]
    next_page_cursor: str | None
