"""Domain models for the profile mirror."""

from pogoprofile.domain.models.avatar import COSMETIC_SLOTS, Gender, PlayerAvatar
from pogoprofile.domain.models.base import DomainValidationError
from pogoprofile.domain.models.currency import CurrencyKind, CurrencyLedger
from pogoprofile.domain.models.profile import (
    ContactSettings,
    DailyBonus,
    EquippedBadge,
    PlayerStats,
    ProfileMirror,
)
from pogoprofile.domain.models.tutorial import (
    BOOTSTRAP_ORDER,
    TutorialProgress,
    TutorialState,
)

__all__ = [
    "COSMETIC_SLOTS",
    "BOOTSTRAP_ORDER",
    "ContactSettings",
    "CurrencyKind",
    "CurrencyLedger",
    "DailyBonus",
    "DomainValidationError",
    "EquippedBadge",
    "Gender",
    "PlayerAvatar",
    "PlayerStats",
    "ProfileMirror",
    "TutorialProgress",
    "TutorialState",
]
