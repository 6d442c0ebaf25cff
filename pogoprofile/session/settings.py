"""Settings collaborator: holds the last DOWNLOAD_SETTINGS answer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from pogoprofile.core.logging.logger import get_logger
from pogoprofile.messaging.responses import DownloadSettingsResponse

logger = get_logger(__name__)


class SettingsStore(ABC):
    hash: str = ""

    @abstractmethod
    def update_settings(self, response: DownloadSettingsResponse) -> None:
        """Apply a settings refresh from the standard batch."""


class SessionSettings(SettingsStore):
    def __init__(self) -> None:
        self.hash = ""
        self.values: Dict[str, Any] = {}

    def update_settings(self, response: DownloadSettingsResponse) -> None:
        # An unchanged hash comes back with an empty body
        if response.settings:
            self.values = dict(response.settings)
        if response.hash:
            self.hash = response.hash
        logger.debug("Settings refreshed", extra={"settings_hash": self.hash})

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)
