"""
Default avatar policy: a uniformly random loadout.

Slot ranges come from ``avatar.ranges`` in the tunables. A gender block
overrides ``avatar.ranges.any`` slot by slot.
"""

from __future__ import annotations

import secrets
from typing import Any, Dict

from pogoprofile.core.config.manager import ConfigManager
from pogoprofile.core.exceptions import ConfigurationError
from pogoprofile.domain.models.avatar import COSMETIC_SLOTS, Gender, PlayerAvatar


def slot_ranges(gender: Gender, config: Any = ConfigManager) -> Dict[str, int]:
    """Number of options per cosmetic slot for `gender`."""
    ranges = dict(config.get_mapping("avatar.ranges.any"))
    ranges.update(config.get(f"avatar.ranges.{gender.name.lower()}", None) or {})

    resolved: Dict[str, int] = {}
    for slot in COSMETIC_SLOTS:
        count = ranges.get(slot)
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ConfigurationError(
                f"avatar.ranges.{slot}",
                f"expected a positive option count for {gender.name}, got {count!r}",
            )
        resolved[slot] = count
    return resolved


def random_avatar(config: Any = ConfigManager) -> PlayerAvatar:
    rng = secrets.SystemRandom()
    gender = Gender.FEMALE if rng.randrange(100) % 2 == 0 else Gender.MALE
    ranges = slot_ranges(gender, config)
    return PlayerAvatar(
        gender=gender,
        **{slot: rng.randrange(count) for slot, count in ranges.items()},
    )
