"""
Inventory collaborator.

`InventoryStore` is what the orchestrator needs from inventory bookkeeping;
`ItemBag` is a minimal in-memory implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator

from pogoprofile.core.logging.logger import get_logger
from pogoprofile.domain.models.base import validate_non_negative
from pogoprofile.messaging.responses import GetInventoryResponse

logger = get_logger(__name__)


@dataclass
class Item:
    item_id: str
    count: int = 0

    def add(self, amount: int) -> int:
        """Increase the count by `amount` and return the new count."""
        validate_non_negative(amount, f"{self.item_id}.amount")
        self.count += amount
        return self.count


class InventoryStore(ABC):
    last_timestamp_ms: int = 0

    @abstractmethod
    def update_inventories(self, response: GetInventoryResponse) -> None:
        """Apply an inventory refresh from the standard batch."""

    @abstractmethod
    def get_item(self, item_id: str) -> Item:
        """Return the live item record, creating an empty one if needed."""


class ItemBag(InventoryStore):
    def __init__(self) -> None:
        self._items: Dict[str, Item] = {}
        self.last_timestamp_ms = 0

    def update_inventories(self, response: GetInventoryResponse) -> None:
        for entry in response.items:
            self.get_item(entry.item_id).count = entry.count
        if response.new_timestamp_ms:
            self.last_timestamp_ms = response.new_timestamp_ms
        logger.debug(
            "Inventory refreshed",
            extra={"items": len(response.items), "timestamp_ms": self.last_timestamp_ms},
        )

    def get_item(self, item_id: str) -> Item:
        item = self._items.get(item_id)
        if item is None:
            item = Item(item_id)
            self._items[item_id] = item
        return item

    def count_of(self, item_id: str) -> int:
        item = self._items.get(item_id)
        return item.count if item else 0

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)
