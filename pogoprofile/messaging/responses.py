"""
Typed response structures.

Every response class builds itself from a decoded mapping via `from_dict`.
`from_dict` raises KeyError, TypeError or ValueError on malformed input;
the decoder turns those into `DecodeError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pogoprofile.domain.models.avatar import PlayerAvatar
from pogoprofile.domain.models.profile import (
    ContactSettings,
    DailyBonus,
    EquippedBadge,
    PlayerStats,
)


def _mapping(data: Any, name: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{name} must be an object, got {type(data).__name__}")
    return data


def _currency_entry(entry: Any) -> Tuple[Any, Any]:
    # Left uncoerced; the mirror skips entries it cannot read.
    if isinstance(entry, dict):
        return entry.get("name"), entry.get("amount", 0)
    return None, entry


def _optional_player(data: Dict[str, Any], key: str) -> Optional["PlayerData"]:
    raw = data.get(key)
    return PlayerData.from_dict(raw) if raw is not None else None


# ============================================================================
# Player record
# ============================================================================


@dataclass(frozen=True)
class PlayerData:
    """The server's player record. Opaque to everything but the mirror."""

    username: str
    avatar: PlayerAvatar = field(default_factory=PlayerAvatar)
    daily_bonus: DailyBonus = field(default_factory=DailyBonus)
    contact_settings: ContactSettings = field(default_factory=ContactSettings)
    currencies: Tuple[Tuple[Any, Any], ...] = ()
    tutorial_state: Tuple[Any, ...] = ()
    remaining_codename_claims: int = 0
    creation_timestamp_ms: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "PlayerData":
        data = _mapping(data, "player_data")
        currencies = tuple(_currency_entry(entry) for entry in data.get("currencies", []))
        return cls(
            username=str(data["username"]),
            avatar=PlayerAvatar.from_dict(_mapping(data.get("avatar", {}), "avatar")),
            daily_bonus=DailyBonus.from_dict(
                _mapping(data.get("daily_bonus", {}), "daily_bonus")
            ),
            contact_settings=ContactSettings.from_dict(
                _mapping(data.get("contact_settings", {}), "contact_settings")
            ),
            currencies=currencies,
            tutorial_state=tuple(data.get("tutorial_state", [])),
            remaining_codename_claims=int(data.get("remaining_codename_claims", 0)),
            creation_timestamp_ms=int(data.get("creation_timestamp_ms", 0)),
        )


# ============================================================================
# Primary responses
# ============================================================================


@dataclass(frozen=True)
class GetPlayerResponse:
    player_data: PlayerData
    success: bool = True
    warn: bool = False
    banned: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "GetPlayerResponse":
        data = _mapping(data, "GetPlayerResponse")
        return cls(
            player_data=PlayerData.from_dict(data["player_data"]),
            success=bool(data.get("success", True)),
            warn=bool(data.get("warn", False)),
            banned=bool(data.get("banned", False)),
        )


@dataclass(frozen=True)
class CheckChallengeResponse:
    show_challenge: bool = False
    challenge_url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "CheckChallengeResponse":
        data = _mapping(data, "CheckChallengeResponse")
        return cls(
            show_challenge=bool(data.get("show_challenge", False)),
            challenge_url=str(data.get("challenge_url", "")),
        )


@dataclass(frozen=True)
class SetAvatarResponse:
    player_data: PlayerData
    status: str = "SUCCESS"

    @classmethod
    def from_dict(cls, data: Any) -> "SetAvatarResponse":
        data = _mapping(data, "SetAvatarResponse")
        return cls(
            player_data=PlayerData.from_dict(data["player_data"]),
            status=str(data.get("status", "SUCCESS")),
        )


@dataclass(frozen=True)
class EncounterTutorialCompleteResponse:
    result: str = "SUCCESS"
    pokemon: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "EncounterTutorialCompleteResponse":
        data = _mapping(data, "EncounterTutorialCompleteResponse")
        return cls(
            result=str(data.get("result", "SUCCESS")),
            pokemon=dict(_mapping(data.get("pokemon_data", {}), "pokemon_data")),
        )


@dataclass(frozen=True)
class ClaimCodenameResponse:
    class Status(Enum):
        UNSET = "UNSET"
        SUCCESS = "SUCCESS"
        CODENAME_NOT_AVAILABLE = "CODENAME_NOT_AVAILABLE"
        CODENAME_NOT_VALID = "CODENAME_NOT_VALID"
        CURRENT_OWNER = "CURRENT_OWNER"
        CODENAME_CHANGE_NOT_ALLOWED = "CODENAME_CHANGE_NOT_ALLOWED"

    status: "ClaimCodenameResponse.Status"
    codename: str = ""
    user_message: str = ""
    is_assignable: bool = False
    updated_player: Optional[PlayerData] = None

    @property
    def remaining_claims(self) -> int:
        """Claims left according to the server; zero when it did not say."""
        if self.updated_player is None:
            return 0
        return self.updated_player.remaining_codename_claims

    @classmethod
    def from_dict(cls, data: Any) -> "ClaimCodenameResponse":
        data = _mapping(data, "ClaimCodenameResponse")
        return cls(
            status=cls.Status(data.get("status", "UNSET")),
            codename=str(data.get("codename", "")),
            user_message=str(data.get("user_message", "")),
            is_assignable=bool(data.get("is_assignable", False)),
            updated_player=_optional_player(data, "updated_player"),
        )


@dataclass(frozen=True)
class MarkTutorialCompleteResponse:
    player_data: PlayerData
    success: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> "MarkTutorialCompleteResponse":
        data = _mapping(data, "MarkTutorialCompleteResponse")
        return cls(
            player_data=PlayerData.from_dict(data["player_data"]),
            success=bool(data.get("success", True)),
        )


@dataclass(frozen=True)
class ItemAward:
    item_id: str
    count: int

    @classmethod
    def from_dict(cls, data: Any) -> "ItemAward":
        data = _mapping(data, "item")
        count = int(data.get("count", 0))
        if count < 0:
            raise ValueError(f"item {data['item_id']!r} has negative count {count}")
        return cls(item_id=str(data["item_id"]), count=count)


@dataclass(frozen=True)
class LevelUpRewardsResponse:
    class Result(Enum):
        UNSET = "UNSET"
        SUCCESS = "SUCCESS"
        AWARDED_ALREADY = "AWARDED_ALREADY"

    result: "LevelUpRewardsResponse.Result"
    items_awarded: Tuple[ItemAward, ...] = ()
    items_unlocked: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "LevelUpRewardsResponse":
        data = _mapping(data, "LevelUpRewardsResponse")
        return cls(
            result=cls.Result(data.get("result", "UNSET")),
            items_awarded=tuple(
                ItemAward.from_dict(entry) for entry in data.get("items_awarded", [])
            ),
            items_unlocked=tuple(str(item) for item in data.get("items_unlocked", [])),
        )


@dataclass(frozen=True)
class CheckAwardedBadgesResponse:
    success: bool = False
    awarded_badges: Tuple[str, ...] = ()
    awarded_badge_levels: Tuple[int, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "CheckAwardedBadgesResponse":
        data = _mapping(data, "CheckAwardedBadgesResponse")
        badges = tuple(str(badge) for badge in data.get("awarded_badges", []))
        levels = tuple(int(level) for level in data.get("awarded_badge_levels", []))
        if len(levels) != len(badges):
            raise ValueError(
                f"{len(badges)} awarded badges but {len(levels)} badge levels"
            )
        return cls(
            success=bool(data.get("success", False)),
            awarded_badges=badges,
            awarded_badge_levels=levels,
        )

    def pairs(self) -> List[Tuple[str, int]]:
        return list(zip(self.awarded_badges, self.awarded_badge_levels))


@dataclass(frozen=True)
class EquipBadgeResponse:
    class Result(Enum):
        UNSET = "UNSET"
        SUCCESS = "SUCCESS"
        COOLDOWN_ACTIVE = "COOLDOWN_ACTIVE"
        NOT_QUALIFIED = "NOT_QUALIFIED"

    result: "EquipBadgeResponse.Result"
    equipped: Optional[EquippedBadge] = None

    @classmethod
    def from_dict(cls, data: Any) -> "EquipBadgeResponse":
        data = _mapping(data, "EquipBadgeResponse")
        equipped = None
        raw = data.get("equipped")
        if raw is not None:
            raw = _mapping(raw, "equipped")
            equipped = EquippedBadge(
                badge_type=str(raw["badge_type"]), level=int(raw.get("level", 0))
            )
        return cls(result=cls.Result(data.get("result", "UNSET")), equipped=equipped)


# ============================================================================
# Standard batch companions
# ============================================================================


@dataclass(frozen=True)
class GetHatchedEggsResponse:
    success: bool = True
    pokemon_ids: Tuple[int, ...] = ()
    experience_awarded: Tuple[int, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "GetHatchedEggsResponse":
        data = _mapping(data, "GetHatchedEggsResponse")
        return cls(
            success=bool(data.get("success", True)),
            pokemon_ids=tuple(int(p) for p in data.get("pokemon_ids", [])),
            experience_awarded=tuple(int(x) for x in data.get("experience_awarded", [])),
        )


@dataclass(frozen=True)
class GetInventoryResponse:
    success: bool = True
    items: Tuple[ItemAward, ...] = ()
    player_stats: Optional[PlayerStats] = None
    new_timestamp_ms: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "GetInventoryResponse":
        data = _mapping(data, "GetInventoryResponse")
        stats = data.get("player_stats")
        return cls(
            success=bool(data.get("success", True)),
            items=tuple(ItemAward.from_dict(entry) for entry in data.get("items", [])),
            player_stats=(
                PlayerStats.from_dict(_mapping(stats, "player_stats"))
                if stats is not None
                else None
            ),
            new_timestamp_ms=int(data.get("new_timestamp_ms", 0)),
        )


@dataclass(frozen=True)
class DownloadSettingsResponse:
    hash: str = ""
    settings: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "DownloadSettingsResponse":
        data = _mapping(data, "DownloadSettingsResponse")
        return cls(
            hash=str(data.get("hash", "")),
            settings=dict(_mapping(data.get("settings", {}), "settings")),
        )
