"""
Pytest Configuration and Fixtures for pogoprofile Tests
=======================================================

Purpose
-------
Centralized test fixtures for the pogoprofile test suite. Provides a
scripted fake game server (acting as the dispatcher), session and
orchestrator factories, player snapshot factories and an event recorder.

Responsibilities
----------------
- Fake dispatcher that answers every request kind with JSON payloads
- Per-request-kind scripting of answers, raw payloads and failures
- Session/orchestrator construction with deterministic locale and ids
- Config override cleanup between tests

Non-Responsibilities
--------------------
- Test implementation (delegated to test files)
- Real transport (the dispatcher is always faked)

Architecture Notes
------------------
- All tests are unit tests: no network, no containers
- The fake server keeps its own player record so multi-step flows
  (mark milestone, refresh) see consistent state
- Scripted answers take priority over the server's default answer and are
  consumed in order
"""

from __future__ import annotations

import copy
import json
import os
from collections import defaultdict, deque
from typing import Any, Callable, Deque, Dict, List, Sequence

import pytest

from pogoprofile.core.config.manager import ConfigManager
from pogoprofile.core.logging.logger import get_logger
from pogoprofile.domain.models.profile import ProfileMirror
from pogoprofile.domain.models.tutorial import TutorialState
from pogoprofile.messaging.dispatcher import Dispatcher
from pogoprofile.messaging.requests import RequestType, ServerRequest
from pogoprofile.messaging.responses import PlayerData
from pogoprofile.modules.bootstrap.service import BootstrapOrchestrator
from pogoprofile.session.context import ProfileSession
from pogoprofile.session.locale import PlayerLocale

logger = get_logger(__name__)

# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure pytest environment."""
    os.environ.setdefault("LOG_LEVEL", "DEBUG")


@pytest.fixture(autouse=True)
def reset_config_overrides():
    """Drop runtime config overrides after every test."""
    yield
    ConfigManager.clear_overrides()


# ============================================================================
# PLAYER DATA FACTORIES
# ============================================================================


def make_player_dict(**overrides: Any) -> Dict[str, Any]:
    """Server-shaped player record with sensible defaults."""
    player: Dict[str, Any] = {
        "username": "",
        "avatar": {"gender": 0},
        "daily_bonus": {
            "next_collected_timestamp_ms": 1_000,
            "next_defender_bonus_collect_timestamp_ms": 2_000,
        },
        "contact_settings": {
            "send_marketing_emails": False,
            "send_push_notifications": False,
        },
        "currencies": [
            {"name": "STARDUST", "amount": 0},
            {"name": "POKECOIN", "amount": 0},
        ],
        "tutorial_state": [],
        "remaining_codename_claims": 10,
    }
    player.update(overrides)
    return player


@pytest.fixture
def player_data_factory() -> Callable[..., PlayerData]:
    """Build PlayerData from keyword overrides of the server record."""

    def _factory(**overrides: Any) -> PlayerData:
        return PlayerData.from_dict(make_player_dict(**overrides))

    return _factory


@pytest.fixture
def mirror_factory(player_data_factory) -> Callable[..., ProfileMirror]:
    """ProfileMirror with a snapshot applied (or empty with populated=False)."""

    def _factory(populated: bool = True, **overrides: Any) -> ProfileMirror:
        mirror = ProfileMirror()
        if populated:
            mirror.apply_snapshot(player_data_factory(**overrides))
        return mirror

    return _factory


# ============================================================================
# FAKE GAME SERVER (DISPATCHER)
# ============================================================================


class FakeGameServer(Dispatcher):
    """
    Scripted dispatcher backed by a tiny in-memory game server.

    Usage
    -----
    >>> server.script(RequestType.DOWNLOAD_SETTINGS, b"not json")
    >>> server.script(RequestType.GET_PLAYER, DispatchError("offline"))
    >>> server.script(RequestType.CLAIM_CODENAME, {"status": "CODENAME_NOT_AVAILABLE"})

    A scripted exception fails the whole batch that contains its request
    kind. A scripted dict is JSON-encoded; bytes are returned as-is.
    """

    def __init__(self) -> None:
        self.player: Dict[str, Any] = make_player_dict()
        self.inventory_items: List[Dict[str, Any]] = []
        self.player_stats: Dict[str, Any] = {"level": 5, "experience": 12_000}
        self.settings: Dict[str, Any] = {"map_refresh_seconds": 10}
        self.settings_hash = "settings-hash-1"
        self.awarded_badges: List[tuple] = []
        self.level_rewards: Dict[str, Any] = {"result": "SUCCESS", "items_awarded": []}
        self.batches: List[List[ServerRequest]] = []
        self._scripted: Dict[RequestType, Deque[Any]] = defaultdict(deque)

    # ------------------------------------------------------------------ #
    # Scripting / inspection
    # ------------------------------------------------------------------ #

    def script(self, kind: RequestType, *answers: Any) -> None:
        self._scripted[kind].extend(answers)

    def sent_kinds(self) -> List[List[RequestType]]:
        return [[request.type for request in batch] for batch in self.batches]

    def count(self, kind: RequestType) -> int:
        return sum(kinds.count(kind) for kinds in self.sent_kinds())

    def requests_of(self, kind: RequestType) -> List[ServerRequest]:
        return [r for batch in self.batches for r in batch if r.type is kind]

    def complete(self, *flags: TutorialState) -> None:
        for flag in flags:
            if flag.value not in self.player["tutorial_state"]:
                self.player["tutorial_state"].append(flag.value)

    # ------------------------------------------------------------------ #
    # Dispatcher
    # ------------------------------------------------------------------ #

    async def send(self, requests: Sequence[ServerRequest]) -> Sequence[bytes]:
        self.batches.append(list(requests))
        for request in requests:
            queue = self._scripted.get(request.type)
            if queue and isinstance(queue[0], BaseException):
                raise queue.popleft()

        payloads: List[bytes] = []
        for request in requests:
            queue = self._scripted.get(request.type)
            if queue:
                answer = queue.popleft()
            else:
                answer = self._answer(request)
            if not isinstance(answer, bytes):
                answer = json.dumps(answer).encode("utf-8")
            payloads.append(answer)
        return payloads

    def _snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self.player)

    def _answer(self, request: ServerRequest) -> Dict[str, Any]:
        kind, payload = request.type, request.payload

        if kind is RequestType.GET_PLAYER:
            return {"success": True, "player_data": self._snapshot()}
        if kind is RequestType.CHECK_CHALLENGE:
            return {"show_challenge": False}
        if kind is RequestType.GET_HATCHED_EGGS:
            return {"success": True}
        if kind is RequestType.GET_INVENTORY:
            return {
                "success": True,
                "items": copy.deepcopy(self.inventory_items),
                "player_stats": dict(self.player_stats),
                "new_timestamp_ms": 5_000,
            }
        if kind is RequestType.CHECK_AWARDED_BADGES:
            return {
                "success": True,
                "awarded_badges": [badge for badge, _ in self.awarded_badges],
                "awarded_badge_levels": [level for _, level in self.awarded_badges],
            }
        if kind is RequestType.DOWNLOAD_SETTINGS:
            return {"hash": self.settings_hash, "settings": dict(self.settings)}
        if kind is RequestType.SET_AVATAR:
            self.player["avatar"] = dict(payload["player_avatar"])
            return {"status": "SUCCESS", "player_data": self._snapshot()}
        if kind is RequestType.ENCOUNTER_TUTORIAL_COMPLETE:
            self.complete(TutorialState.POKEMON_CAPTURE)
            return {"result": "SUCCESS", "pokemon_data": {"pokemon_id": payload["pokemon_id"]}}
        if kind is RequestType.CLAIM_CODENAME:
            self.player["username"] = payload["codename"]
            return {
                "status": "SUCCESS",
                "codename": payload["codename"],
                "updated_player": self._snapshot(),
            }
        if kind is RequestType.MARK_TUTORIAL_COMPLETE:
            self.complete(*(TutorialState[name] for name in payload["tutorials_completed"]))
            return {"success": True, "player_data": self._snapshot()}
        if kind is RequestType.LEVEL_UP_REWARDS:
            return copy.deepcopy(self.level_rewards)
        if kind is RequestType.EQUIP_BADGE:
            return {
                "result": "SUCCESS",
                "equipped": {
                    "badge_type": payload["badge_type"],
                    "level": payload["badge_level"],
                },
            }
        raise AssertionError(f"FakeGameServer has no answer for {kind}")


@pytest.fixture
def claim_rejection() -> Callable[..., Dict[str, Any]]:
    """CLAIM_CODENAME rejection carrying the server's remaining-claims count."""

    def _rejection(
        status: str = "CODENAME_NOT_AVAILABLE", remaining: int = 3
    ) -> Dict[str, Any]:
        return {
            "status": status,
            "user_message": "That name is taken",
            "updated_player": make_player_dict(remaining_codename_claims=remaining),
        }

    return _rejection


# ============================================================================
# SESSION / ORCHESTRATOR FIXTURES
# ============================================================================


@pytest.fixture
def server() -> FakeGameServer:
    return FakeGameServer()


@pytest.fixture
def locale() -> PlayerLocale:
    return PlayerLocale(country="US", language="en", timezone="America/Los_Angeles")


@pytest.fixture
def session(server, locale) -> ProfileSession:
    return ProfileSession(server, locale=locale, session_id="test-session")


@pytest.fixture
def make_orchestrator(session) -> Callable[..., BootstrapOrchestrator]:
    def _factory(**kwargs: Any) -> BootstrapOrchestrator:
        kwargs.setdefault("codename_max_attempts", 5)
        return BootstrapOrchestrator(session, **kwargs)

    return _factory


@pytest.fixture
def orchestrator(make_orchestrator) -> BootstrapOrchestrator:
    return make_orchestrator()


@pytest.fixture
def recorded_events(session) -> List[tuple]:
    """(event_name, payload) for every event published on the session bus."""
    events: List[tuple] = []
    names = (
        "profile.synced",
        "tutorial.milestone_completed",
        "avatar.updated",
        "starter.captured",
        "codename.claimed",
        "codename.rejected",
        "level_rewards.accepted",
        "badge.equipped",
    )
    def _recorder(name: str) -> Callable[[Dict[str, Any]], None]:
        return lambda payload: events.append((name, payload))

    for name in names:
        session.event_bus.subscribe(
            name, _recorder(name), identifier=f"recorder@{name}"
        )
    return events
