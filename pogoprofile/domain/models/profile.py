"""
Profile mirror: the client-held copy of server-authoritative player state.

Purpose
-------
Hold the last player snapshot the server sent, together with everything
derived from it (avatar, daily bonus, contact settings, currency ledger,
tutorial progress), plus the two pieces of state that arrive through other
calls: player stats (inventory refresh) and the equipped badge (badge sync).

Invariants
----------
- `player_data` is replaced wholesale, never patched.
- `avatar`, `daily_bonus`, `contact_settings`, `currencies` and `tutorial`
  always come from the same `player_data` instance. `apply_snapshot` builds
  every derived value first and only then assigns them.
- Unknown or malformed currency entries never enter the ledger; they are
  logged and skipped while the rest of the snapshot still applies.
- Marking a milestone is idempotent.

Ownership
---------
Only the bootstrap orchestrator and the services it owns write to the
mirror. Everything else reads.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from pogoprofile.core.logging.logger import get_logger
from pogoprofile.domain.models.avatar import PlayerAvatar
from pogoprofile.domain.models.base import DomainValidationError
from pogoprofile.domain.models.currency import CurrencyKind, CurrencyLedger
from pogoprofile.domain.models.tutorial import TutorialProgress, TutorialState
from pogoprofile.modules.shared.exceptions import InvalidCurrencyKind

if TYPE_CHECKING:
    from pogoprofile.messaging.responses import PlayerData

logger = get_logger(__name__)


def _currency_name(raw: Any) -> str:
    if not isinstance(raw, str) or not raw:
        raise DomainValidationError(
            f"currency name must be a non-empty string, got {raw!r}",
            field="currency.name",
        )
    return raw


def _currency_amount(raw: Any) -> int:
    """Numeric strings are accepted; anything else non-integer is rejected."""
    if isinstance(raw, str):
        return int(raw.strip())
    return raw


# ============================================================================
# Value objects derived from the player record
# ============================================================================


@dataclass(frozen=True)
class DailyBonus:
    next_collected_timestamp_ms: int = 0
    next_defender_bonus_collect_timestamp_ms: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyBonus":
        return cls(
            next_collected_timestamp_ms=int(data.get("next_collected_timestamp_ms", 0)),
            next_defender_bonus_collect_timestamp_ms=int(
                data.get("next_defender_bonus_collect_timestamp_ms", 0)
            ),
        )


@dataclass(frozen=True)
class ContactSettings:
    send_marketing_emails: bool = False
    send_push_notifications: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContactSettings":
        return cls(
            send_marketing_emails=bool(data.get("send_marketing_emails", False)),
            send_push_notifications=bool(data.get("send_push_notifications", False)),
        )


@dataclass(frozen=True)
class PlayerStats:
    """
    Progress counters from the inventory refresh.

    An empty (level 0) instance stands in until the server sends real stats,
    so level checks fail closed.
    """

    level: int = 0
    experience: int = 0
    prev_level_xp: int = 0
    next_level_xp: int = 0
    km_walked: float = 0.0
    pokemons_encountered: int = 0
    pokemons_captured: int = 0
    poke_stop_visits: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerStats":
        return cls(
            level=int(data.get("level", 0)),
            experience=int(data.get("experience", 0)),
            prev_level_xp=int(data.get("prev_level_xp", 0)),
            next_level_xp=int(data.get("next_level_xp", 0)),
            km_walked=float(data.get("km_walked", 0.0)),
            pokemons_encountered=int(data.get("pokemons_encountered", 0)),
            pokemons_captured=int(data.get("pokemons_captured", 0)),
            poke_stop_visits=int(data.get("poke_stop_visits", 0)),
        )


@dataclass(frozen=True)
class EquippedBadge:
    badge_type: str
    level: int = 0


# ============================================================================
# ProfileMirror
# ============================================================================


class ProfileMirror:
    """
    In-memory snapshot of player state for one session.

    Created empty; populated by the first successful profile fetch.

    >>> mirror = ProfileMirror()
    >>> mirror.is_populated
    False
    """

    def __init__(self) -> None:
        self.player_data: Optional[PlayerData] = None
        self.avatar: Optional[PlayerAvatar] = None
        self.daily_bonus: Optional[DailyBonus] = None
        self.contact_settings: Optional[ContactSettings] = None
        self.currencies = CurrencyLedger()
        self.tutorial = TutorialProgress()
        self.stats = PlayerStats()
        self.equipped_badge: Optional[EquippedBadge] = None

    # ------------------------------------------------------------------ #
    # Snapshot application
    # ------------------------------------------------------------------ #

    def apply_snapshot(self, player_data: PlayerData) -> None:
        """
        Replace the player record and everything derived from it.

        Bad currency entries are logged and skipped; every other derived
        field is computed before any attribute is assigned.
        """
        ledger = CurrencyLedger()
        skipped = []
        for name, amount in player_data.currencies:
            try:
                ledger.record(_currency_name(name), _currency_amount(amount))
            except InvalidCurrencyKind as exc:
                skipped.append(name)
                logger.warning(
                    "Skipping unknown currency in player snapshot",
                    extra={"currency": name, "error_code": exc.error_code},
                )
            except (DomainValidationError, ValueError) as exc:
                skipped.append(name)
                logger.warning(
                    "Skipping invalid currency entry in player snapshot",
                    extra={"currency": name, "amount": amount, "error": str(exc)},
                )

        progress = TutorialProgress()
        for raw in player_data.tutorial_state:
            flag = TutorialState.parse(raw)
            if flag is None:
                logger.warning(
                    "Ignoring unknown tutorial flag in player snapshot",
                    extra={"tutorial_flag": raw},
                )
                continue
            progress.mark(flag)

        avatar = player_data.avatar
        daily_bonus = player_data.daily_bonus
        contact_settings = player_data.contact_settings

        self.player_data = player_data
        self.avatar = avatar
        self.daily_bonus = daily_bonus
        self.contact_settings = contact_settings
        self.currencies = ledger
        self.tutorial = progress

        logger.debug(
            "Applied player snapshot",
            extra={
                "username": player_data.username,
                "currencies": ledger.as_dict(),
                "skipped_currencies": skipped,
                "tutorial": sorted(flag.name for flag in progress.completed),
            },
        )

    def record_currency(self, name: str, amount: int) -> CurrencyKind:
        """Overwrite one balance. Raises InvalidCurrencyKind for unknown names."""
        return self.currencies.record(name, amount)

    def apply_stats(self, stats: PlayerStats) -> None:
        self.stats = stats

    def set_equipped_badge(self, badge: EquippedBadge) -> None:
        self.equipped_badge = badge

    # ------------------------------------------------------------------ #
    # Milestones
    # ------------------------------------------------------------------ #

    def mark_milestone(self, flag: TutorialState) -> bool:
        """Idempotent; returns True only when the flag was newly marked."""
        return self.tutorial.mark(flag)

    def is_milestone_complete(self, flag: TutorialState) -> bool:
        return self.tutorial.is_complete(flag)

    # ------------------------------------------------------------------ #
    # Read accessors
    # ------------------------------------------------------------------ #

    @property
    def is_populated(self) -> bool:
        return self.player_data is not None

    @property
    def username(self) -> Optional[str]:
        return self.player_data.username if self.player_data else None

    @property
    def remaining_codename_claims(self) -> int:
        return self.player_data.remaining_codename_claims if self.player_data else 0

    def get_currency(self, kind: CurrencyKind) -> int:
        return self.currencies.get(kind)

    def to_dict(self) -> Dict[str, Any]:
        """Summary for logs and diagnostics."""
        return {
            "username": self.username,
            "avatar": self.avatar.to_dict() if self.avatar else None,
            "currencies": self.currencies.as_dict(),
            "tutorial": sorted(flag.name for flag in self.tutorial.completed),
            "level": self.stats.level,
            "equipped_badge": asdict(self.equipped_badge) if self.equipped_badge else None,
            "remaining_codename_claims": self.remaining_codename_claims,
        }
