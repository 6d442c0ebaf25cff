"""Player locale sent with every GET_PLAYER request."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict

from pogoprofile.core.config.config import Config
from pogoprofile.domain.models.base import validate_not_empty


@dataclass(frozen=True)
class PlayerLocale:
    country: str
    language: str
    timezone: str

    def __post_init__(self) -> None:
        validate_not_empty(self.country, "locale.country")
        validate_not_empty(self.language, "locale.language")
        validate_not_empty(self.timezone, "locale.timezone")

    @classmethod
    def from_config(cls) -> "PlayerLocale":
        return cls(
            country=Config.PLAYER_LOCALE_COUNTRY,
            language=Config.PLAYER_LOCALE_LANGUAGE,
            timezone=Config.PLAYER_LOCALE_TIMEZONE,
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
