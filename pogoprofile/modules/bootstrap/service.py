"""
Bootstrap Orchestrator
======================

Purpose
-------
Drive a freshly authenticated session through the account bootstrap and
keep the profile mirror in step with the server afterwards.

Bootstrap order
---------------
fetch_profile -> accept_legal_screen -> setup_avatar -> claim_codename
-> complete_starter_encounter -> complete_first_time_experience

Each public coroutine is one step and runs with the session lock held for
its whole "send batch, apply results" section. Milestone steps whose
milestone is already complete return ``StepResult(ALREADY_COMPLETE)``
without dispatching. `claim_codename` always attempts a fresh claim.

Failure model
-------------
- Dispatch and decode errors propagate unmodified; nothing from a failed
  batch is applied.
- Server-side rejections come back as result objects.
- When a server action committed but the follow-up sync failed, a
  `PartialSyncError` names the step to retry.

Events
------
profile.synced, tutorial.milestone_completed, avatar.updated,
starter.captured, codename.claimed, codename.rejected,
level_rewards.accepted, badge.equipped
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional

from pogoprofile.core.config.manager import ConfigManager
from pogoprofile.core.event.bus import EventBus
from pogoprofile.core.exceptions import PartialSyncError, ProfileSyncException
from pogoprofile.core.logging.logger import LogContext, get_logger
from pogoprofile.domain.models.avatar import PlayerAvatar
from pogoprofile.domain.models.tutorial import TutorialState
from pogoprofile.messaging import requests as msg
from pogoprofile.messaging.responses import PlayerData
from pogoprofile.modules.badges.service import BadgeSynchronizer, BadgeSyncResult
from pogoprofile.modules.bootstrap.avatar import random_avatar
from pogoprofile.modules.bootstrap.profile_sync import ProfileSynchronizer
from pogoprofile.modules.bootstrap.results import BootstrapState, StepResult, StepStatus
from pogoprofile.modules.bootstrap.starter import (
    StarterSpecies,
    random_starter,
    resolve_starter,
)
from pogoprofile.modules.codename.service import CodenameClaimer, CodenameClaimResult
from pogoprofile.modules.rewards.service import LevelRewardClaimer, LevelUpRewards
from pogoprofile.modules.shared.base_service import BaseService
from pogoprofile.session.context import ProfileSession
from pogoprofile.session.listeners import TutorialListener


class BootstrapOrchestrator(BaseService):
    """
    Bootstrap and profile sync for one session.

    Args:
        session: Per-session state; its lock serializes every operation
        config_manager: Tunables source, ``ConfigManager`` by default
        event_bus: Overrides the session's event bus
        codename_max_attempts: Local cap on codename claims per call

    Example:
        >>> orchestrator = BootstrapOrchestrator(ProfileSession(dispatcher))
        >>> await orchestrator.fetch_profile()
        >>> results = await orchestrator.run_bootstrap()
    """

    def __init__(
        self,
        session: ProfileSession,
        *,
        config_manager: Any = ConfigManager,
        event_bus: Optional[EventBus] = None,
        codename_max_attempts: Optional[int] = None,
    ) -> None:
        events = event_bus or session.event_bus
        super().__init__(session, config_manager, events, get_logger(__name__))

        def build(cls: type, **kwargs: Any) -> Any:
            return cls(
                session,
                config_manager,
                events,
                get_logger(f"{cls.__module__}.{cls.__name__}"),
                **kwargs,
            )

        self._sync: ProfileSynchronizer = build(ProfileSynchronizer)
        self._codenames: CodenameClaimer = build(
            CodenameClaimer,
            owner=self,
            sync=self._sync,
            max_attempts=codename_max_attempts,
        )
        self._rewards: LevelRewardClaimer = build(LevelRewardClaimer)
        self._badges: BadgeSynchronizer = build(BadgeSynchronizer)

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def session(self) -> ProfileSession:
        return self._session

    @property
    def state(self) -> BootstrapState:
        return BootstrapState.of(self.mirror)

    @property
    def events(self) -> EventBus:
        return self._events

    def add_listener(self, listener: TutorialListener) -> None:
        self._session.listeners.register(listener)

    @asynccontextmanager
    async def _operation(self, name: str) -> AsyncIterator[None]:
        async with self._session.lock:
            async with LogContext(
                session_id=self._session.session_id,
                component="bootstrap",
                operation=name,
            ):
                yield

    def _already_complete(self, step: str, flag: TutorialState) -> StepResult:
        self.log.debug(
            "Step skipped, milestone already complete",
            extra={"step": step, "milestone": flag.name},
        )
        return StepResult(step, StepStatus.ALREADY_COMPLETE, flag)

    # ------------------------------------------------------------------ #
    # Profile sync
    # ------------------------------------------------------------------ #

    async def fetch_profile(self) -> PlayerData:
        """GET_PLAYER with the session locale; replaces the mirror snapshot."""
        async with self._operation("fetch_profile"):
            player = await self._sync.fetch_profile()
            self.log_operation("fetch_profile", username=player.username)
            return player

    async def refresh_profile(self) -> PlayerData:
        """
        GET_PLAYER in the standard batch, applying player data, inventory
        and settings together. Retry this after a `PartialSyncError`.
        """
        async with self._operation("refresh_profile"):
            return await self._sync.refresh_profile()

    # ------------------------------------------------------------------ #
    # Milestone steps
    # ------------------------------------------------------------------ #

    async def _milestone_step(self, step: str, flag: TutorialState) -> StepResult:
        async with self._operation(step):
            if self.mirror.is_milestone_complete(flag):
                return self._already_complete(step, flag)
            await self._sync.mark_milestone(flag)
            return StepResult(step, StepStatus.COMPLETED, flag)

    async def mark_milestone(self, flag: TutorialState) -> StepResult:
        return await self._milestone_step("mark_milestone", flag)

    async def accept_legal_screen(self) -> StepResult:
        return await self._milestone_step("accept_legal_screen", TutorialState.LEGAL_SCREEN)

    async def complete_first_time_experience(self) -> StepResult:
        return await self._milestone_step(
            "complete_first_time_experience",
            TutorialState.FIRST_TIME_EXPERIENCE_COMPLETE,
        )

    async def setup_avatar(self) -> StepResult:
        """
        Pick an avatar (listener override, else random) and send SET_AVATAR.

        Every slot of the batch is decoded before anything is applied, so a
        bad inventory or settings payload leaves the mirror untouched.
        """
        step, flag = "setup_avatar", TutorialState.AVATAR_SELECTION
        async with self._operation(step):
            if self.mirror.is_milestone_complete(flag):
                return self._already_complete(step, flag)

            avatar: Optional[PlayerAvatar] = await self._session.listeners.first_answer(
                "select_avatar", self
            )
            if avatar is None:
                avatar = random_avatar(self._config)

            responses = await self.send_standard(msg.set_avatar(avatar))
            await self._sync.apply_player(responses.primary.player_data)
            self.apply_companions(responses)
            await self.emit_event("avatar.updated", {"avatar": avatar.to_dict()})

            result = StepResult(step, StepStatus.COMPLETED, flag, {"avatar": avatar.to_dict()})
            try:
                await self._sync.mark_milestone(flag)
            except ProfileSyncException as exc:
                raise PartialSyncError(step, "mark_milestone", result) from exc

            self.log_operation(step, gender=avatar.gender.name)
            return result

    async def complete_starter_encounter(self) -> StepResult:
        """
        Catch the starter, then re-sync the profile.

        Phase 1 (ENCOUNTER_TUTORIAL_COMPLETE) commits on the server; if the
        phase 2 refresh fails, `PartialSyncError` asks for ``refresh_profile``
        only.
        """
        step, flag = "complete_starter_encounter", TutorialState.POKEMON_CAPTURE
        async with self._operation(step):
            if self.mirror.is_milestone_complete(flag):
                return self._already_complete(step, flag)

            starter = await self._choose_starter()
            responses = await self.send_standard(
                msg.encounter_tutorial_complete(starter.pokedex_id)
            )
            self.apply_companions(responses)
            self.mirror.mark_milestone(flag)

            result = StepResult(
                step,
                StepStatus.COMPLETED,
                flag,
                {"starter": starter.name, "pokedex_id": starter.pokedex_id},
            )
            await self.emit_event("starter.captured", dict(result.detail))
            await self.emit_event("tutorial.milestone_completed", {"milestone": flag.name})

            try:
                await self._sync.refresh_profile()
            except ProfileSyncException as exc:
                self.log_error(step, exc, pending_step="refresh_profile")
                raise PartialSyncError(step, "refresh_profile", result) from exc

            self.log_operation(step, starter=starter.name)
            return result

    async def _choose_starter(self) -> StarterSpecies:
        choice = await self._session.listeners.first_answer("select_starter", self)
        if choice is None:
            return random_starter(self._config)
        if isinstance(choice, StarterSpecies):
            return choice
        return resolve_starter(str(choice), self._config)

    # ------------------------------------------------------------------ #
    # Delegated operations
    # ------------------------------------------------------------------ #

    async def claim_codename(self, last_failure: Optional[str] = None) -> CodenameClaimResult:
        async with self._operation("claim_codename"):
            return await self._codenames.claim(last_failure)

    async def accept_level_rewards(self, level: int) -> LevelUpRewards:
        async with self._operation("accept_level_rewards"):
            return await self._rewards.accept(level)

    async def sync_awarded_badges(self) -> BadgeSyncResult:
        async with self._operation("sync_awarded_badges"):
            return await self._badges.sync()

    # ------------------------------------------------------------------ #
    # Full run
    # ------------------------------------------------------------------ #

    async def _claim_step(self) -> StepResult:
        claim = await self.claim_codename()
        detail: Dict[str, Any] = {
            "codename": claim.codename,
            "attempts": claim.attempts,
            "rejected": list(claim.rejected),
        }
        status = StepStatus.COMPLETED if claim.claimed else StepStatus.REJECTED
        return StepResult("claim_codename", status, TutorialState.NAME_SELECTION, detail)

    async def run_bootstrap(self) -> List[StepResult]:
        """
        Run every remaining bootstrap step in order.

        Fetches the profile first if the mirror is empty. Stops early when a
        codename claim is rejected for good or a step leaves its milestone
        incomplete.
        """
        if not self.mirror.is_populated:
            await self.fetch_profile()

        steps: Dict[TutorialState, Callable[[], Awaitable[StepResult]]] = {
            TutorialState.LEGAL_SCREEN: self.accept_legal_screen,
            TutorialState.AVATAR_SELECTION: self.setup_avatar,
            TutorialState.NAME_SELECTION: self._claim_step,
            TutorialState.POKEMON_CAPTURE: self.complete_starter_encounter,
            TutorialState.FIRST_TIME_EXPERIENCE_COMPLETE: self.complete_first_time_experience,
        }

        results: List[StepResult] = []
        while True:
            milestone = self.mirror.tutorial.next_milestone()
            if milestone is None:
                break

            result = await steps[milestone]()
            results.append(result)
            if not result.ok:
                break
            if self.mirror.tutorial.next_milestone() is milestone:
                self.log.warning(
                    "Bootstrap step did not complete its milestone",
                    extra={"step": result.step, "milestone": milestone.name},
                )
                break

        self.log_operation(
            "run_bootstrap",
            steps=[result.step for result in results],
            state=self.state.value,
        )
        return results
