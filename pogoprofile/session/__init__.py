"""Session collaborators: inventory, settings, locale, listeners, context."""

from pogoprofile.session.context import ProfileSession
from pogoprofile.session.inventory import InventoryStore, Item, ItemBag
from pogoprofile.session.listeners import ListenerRegistry, TutorialListener
from pogoprofile.session.locale import PlayerLocale
from pogoprofile.session.settings import SessionSettings, SettingsStore

__all__ = [
    "InventoryStore",
    "Item",
    "ItemBag",
    "ListenerRegistry",
    "PlayerLocale",
    "ProfileSession",
    "SessionSettings",
    "SettingsStore",
    "TutorialListener",
]
