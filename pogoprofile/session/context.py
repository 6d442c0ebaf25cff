"""
Per-session state shared by the orchestrator and its services.

One `ProfileSession` per authenticated game session. Its lock guards the
whole "send batch, apply results" critical section of every operation.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Optional

from pogoprofile.core.event.bus import EventBus
from pogoprofile.domain.models.profile import ProfileMirror
from pogoprofile.messaging.decoder import JsonResponseDecoder, ResponseDecoder
from pogoprofile.messaging.dispatcher import Dispatcher
from pogoprofile.session.inventory import InventoryStore, ItemBag
from pogoprofile.session.listeners import ListenerRegistry
from pogoprofile.session.locale import PlayerLocale
from pogoprofile.session.settings import SessionSettings, SettingsStore


class ProfileSession:
    def __init__(
        self,
        dispatcher: Dispatcher,
        decoder: Optional[ResponseDecoder] = None,
        *,
        inventory: Optional[InventoryStore] = None,
        settings: Optional[SettingsStore] = None,
        listeners: Optional[ListenerRegistry] = None,
        locale: Optional[PlayerLocale] = None,
        event_bus: Optional[EventBus] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.decoder = decoder or JsonResponseDecoder()
        self.inventory = inventory or ItemBag()
        self.settings = settings or SessionSettings()
        self.listeners = listeners or ListenerRegistry()
        self.locale = locale or PlayerLocale.from_config()
        self.event_bus = event_bus or EventBus()
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.mirror = ProfileMirror()
        self.lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"ProfileSession(session_id={self.session_id!r}, mirror={self.mirror.to_dict()!r})"
