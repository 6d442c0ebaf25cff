"""Random codename candidates."""

from __future__ import annotations

import secrets
from typing import Any

from pogoprofile.core.config.manager import ConfigManager
from pogoprofile.core.exceptions import ConfigurationError


def generate_codename(config: Any = ConfigManager) -> str:
    """
    Length uniform in [min_length, max_length), characters uniform over the
    configured alphabet (alphanumerics by default).
    """
    min_length = config.get_int("codename.min_length")
    max_length = config.get_int("codename.max_length")
    alphabet = config.get("codename.alphabet")

    if not 1 <= min_length < max_length:
        raise ConfigurationError(
            "codename.max_length",
            f"need 1 <= min_length < max_length, got {min_length} and {max_length}",
        )
    if not isinstance(alphabet, str) or not alphabet:
        raise ConfigurationError("codename.alphabet", "must be a non-empty string")

    length = min_length + secrets.randbelow(max_length - min_length)
    return "".join(secrets.choice(alphabet) for _ in range(length))
