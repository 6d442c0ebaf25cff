"""
Outgoing request descriptors.

A `ServerRequest` is a message kind plus a JSON-serializable payload. The
dispatcher owns the wire encoding; this package only decides what to ask
for and in which order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List

if TYPE_CHECKING:
    from pogoprofile.domain.models.avatar import PlayerAvatar
    from pogoprofile.domain.models.tutorial import TutorialState
    from pogoprofile.session.locale import PlayerLocale


class RequestType(Enum):
    GET_PLAYER = "GET_PLAYER"
    CHECK_CHALLENGE = "CHECK_CHALLENGE"
    GET_HATCHED_EGGS = "GET_HATCHED_EGGS"
    GET_INVENTORY = "GET_INVENTORY"
    CHECK_AWARDED_BADGES = "CHECK_AWARDED_BADGES"
    DOWNLOAD_SETTINGS = "DOWNLOAD_SETTINGS"
    SET_AVATAR = "SET_AVATAR"
    ENCOUNTER_TUTORIAL_COMPLETE = "ENCOUNTER_TUTORIAL_COMPLETE"
    CLAIM_CODENAME = "CLAIM_CODENAME"
    MARK_TUTORIAL_COMPLETE = "MARK_TUTORIAL_COMPLETE"
    LEVEL_UP_REWARDS = "LEVEL_UP_REWARDS"
    EQUIP_BADGE = "EQUIP_BADGE"


@dataclass(frozen=True)
class ServerRequest:
    type: RequestType
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "payload": dict(self.payload)}


def names_of(requests: Iterable[ServerRequest]) -> List[str]:
    """Request kind names, for log lines and error details."""
    return [request.type.value for request in requests]


# ============================================================================
# Builders
# ============================================================================


def get_player(locale: PlayerLocale) -> ServerRequest:
    return ServerRequest(RequestType.GET_PLAYER, {"player_locale": locale.to_dict()})


def check_challenge() -> ServerRequest:
    return ServerRequest(RequestType.CHECK_CHALLENGE, {"debug_request": False})


def get_hatched_eggs() -> ServerRequest:
    return ServerRequest(RequestType.GET_HATCHED_EGGS)


def get_inventory(last_timestamp_ms: int = 0) -> ServerRequest:
    return ServerRequest(
        RequestType.GET_INVENTORY, {"last_timestamp_ms": last_timestamp_ms}
    )


def check_awarded_badges() -> ServerRequest:
    return ServerRequest(RequestType.CHECK_AWARDED_BADGES)


def download_settings(settings_hash: str = "") -> ServerRequest:
    return ServerRequest(RequestType.DOWNLOAD_SETTINGS, {"hash": settings_hash})


def set_avatar(avatar: PlayerAvatar) -> ServerRequest:
    return ServerRequest(RequestType.SET_AVATAR, {"player_avatar": avatar.to_dict()})


def encounter_tutorial_complete(pokedex_id: int) -> ServerRequest:
    return ServerRequest(
        RequestType.ENCOUNTER_TUTORIAL_COMPLETE, {"pokemon_id": pokedex_id}
    )


def claim_codename(codename: str) -> ServerRequest:
    return ServerRequest(RequestType.CLAIM_CODENAME, {"codename": codename})


def mark_tutorial_complete(
    flag: TutorialState,
    send_marketing_emails: bool = False,
    send_push_notifications: bool = False,
) -> ServerRequest:
    return ServerRequest(
        RequestType.MARK_TUTORIAL_COMPLETE,
        {
            "tutorials_completed": [flag.name],
            "send_marketing_emails": send_marketing_emails,
            "send_push_notifications": send_push_notifications,
        },
    )


def level_up_rewards(level: int) -> ServerRequest:
    return ServerRequest(RequestType.LEVEL_UP_REWARDS, {"level": level})


def equip_badge(badge_type: str, badge_level: int) -> ServerRequest:
    return ServerRequest(
        RequestType.EQUIP_BADGE, {"badge_type": badge_type, "badge_level": badge_level}
    )
