"""Avatar value objects."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from pogoprofile.domain.models.base import validate_non_negative

COSMETIC_SLOTS: Tuple[str, ...] = (
    "skin",
    "hair",
    "shirt",
    "pants",
    "hat",
    "shoes",
    "eyes",
    "backpack",
)


class Gender(Enum):
    MALE = 0
    FEMALE = 1

    @classmethod
    def parse(cls, value: Any) -> "Gender":
        if isinstance(value, Gender):
            return value
        if isinstance(value, str):
            return cls[value.upper()]
        return cls(value)


@dataclass(frozen=True)
class PlayerAvatar:
    """Gender plus one option index per cosmetic slot."""

    gender: Gender = Gender.MALE
    skin: int = 0
    hair: int = 0
    shirt: int = 0
    pants: int = 0
    hat: int = 0
    shoes: int = 0
    eyes: int = 0
    backpack: int = 0

    def __post_init__(self) -> None:
        for slot in COSMETIC_SLOTS:
            validate_non_negative(getattr(self, slot), f"avatar.{slot}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerAvatar":
        slots = {slot: int(data.get(slot, 0)) for slot in COSMETIC_SLOTS}
        return cls(gender=Gender.parse(data.get("gender", 0)), **slots)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["gender"] = self.gender.name
        return payload
