"""Starter species selection."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Any, List

from pogoprofile.core.config.manager import ConfigManager
from pogoprofile.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class StarterSpecies:
    name: str
    pokedex_id: int


def available_starters(config: Any = ConfigManager) -> List[StarterSpecies]:
    species = config.get_mapping("starter.species")
    return [StarterSpecies(str(name), int(pokedex_id)) for name, pokedex_id in species.items()]


def resolve_starter(name: str, config: Any = ConfigManager) -> StarterSpecies:
    """Look up a starter by name (case-insensitive)."""
    for starter in available_starters(config):
        if starter.name == name.upper():
            return starter
    raise ConfigurationError("starter.species", f"{name!r} is not a starter species")


def random_starter(config: Any = ConfigManager) -> StarterSpecies:
    return secrets.choice(available_starters(config))
