"""
Codename claiming.

Purpose
-------
Claim a trainer codename, retrying with new candidates while the server
rejects names and still reports remaining claims.

Flow
----
Each attempt sends CLAIM_CODENAME in the standard batch and applies the
inventory and settings slots whatever the claim status. Then:

- SUCCESS: apply the updated player, mark NAME_SELECTION, refresh the
  profile. If either follow-up fails the claim has still happened on the
  server, so `PartialSyncError` names the step to retry.
- rejected, claims remaining: try again, passing the rejected name to the
  listeners as `last_failure`.
- rejected, no claims remaining: return an EXHAUSTED result.
- `max_attempts` rejections without the server reaching zero: raise
  `CodenameExhausted`.

The caller holds the session lock.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Tuple

from pogoprofile.core.config.config import Config
from pogoprofile.core.exceptions import (
    CodenameExhausted,
    ConfigurationError,
    PartialSyncError,
    ProfileSyncException,
)
from pogoprofile.domain.models.tutorial import TutorialState
from pogoprofile.messaging import requests as msg
from pogoprofile.messaging.responses import ClaimCodenameResponse
from pogoprofile.modules.codename.generator import generate_codename
from pogoprofile.modules.shared.base_service import BaseService

if TYPE_CHECKING:
    from logging import Logger

    from pogoprofile.core.event.bus import EventBus
    from pogoprofile.modules.bootstrap.profile_sync import ProfileSynchronizer
    from pogoprofile.session.context import ProfileSession


class ClaimStatus(Enum):
    CLAIMED = "claimed"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class CodenameClaimResult:
    status: ClaimStatus
    codename: Optional[str]
    attempts: int
    rejected: Tuple[str, ...] = ()
    last_server_status: Optional[ClaimCodenameResponse.Status] = None

    @property
    def claimed(self) -> bool:
        return self.status is ClaimStatus.CLAIMED


class CodenameClaimer(BaseService):
    """
    Args:
        owner: Object handed to listener hooks (the orchestrator)
        sync: Profile synchronizer used for the post-claim steps
        max_attempts: Local cap on claims per call
    """

    def __init__(
        self,
        session: ProfileSession,
        config_manager: Any,
        event_bus: EventBus,
        logger: Logger,
        *,
        owner: Any,
        sync: ProfileSynchronizer,
        max_attempts: Optional[int] = None,
    ) -> None:
        super().__init__(session, config_manager, event_bus, logger)
        self._owner = owner
        self._sync = sync
        if max_attempts is None:
            max_attempts = Config.CODENAME_MAX_ATTEMPTS
        if max_attempts < 1:
            raise ConfigurationError(
                "codename_max_attempts", f"must be at least 1, got {max_attempts}"
            )
        self.max_attempts = max_attempts

    async def _candidate(self, last_failure: Optional[str]) -> str:
        chosen = await self._session.listeners.first_answer(
            "claim_name", self._owner, last_failure
        )
        return chosen if chosen is not None else generate_codename(self._config)

    async def claim(self, last_failure: Optional[str] = None) -> CodenameClaimResult:
        attempts = 0
        rejected: list[str] = []

        while attempts < self.max_attempts:
            candidate = await self._candidate(last_failure)
            attempts += 1

            responses = await self.send_standard(msg.claim_codename(candidate))
            self.apply_companions(responses)
            answer: ClaimCodenameResponse = responses.primary

            if answer.status is ClaimCodenameResponse.Status.SUCCESS:
                return await self._commit(answer, candidate, attempts, rejected)

            rejected.append(candidate)
            remaining = answer.remaining_claims
            self.log.info(
                "Codename rejected",
                extra={
                    "codename": candidate,
                    "server_status": answer.status.value,
                    "remaining_claims": remaining,
                    "attempt": attempts,
                },
            )
            await self.emit_event(
                "codename.rejected",
                {
                    "codename": candidate,
                    "status": answer.status.value,
                    "remaining_claims": remaining,
                },
            )

            if remaining <= 0:
                return CodenameClaimResult(
                    status=ClaimStatus.EXHAUSTED,
                    codename=None,
                    attempts=attempts,
                    rejected=tuple(rejected),
                    last_server_status=answer.status,
                )
            last_failure = candidate

        self.log.warning(
            "Codename attempt cap reached",
            extra={"attempts": attempts, "last_attempt": last_failure},
        )
        raise CodenameExhausted(attempts, last_failure)

    async def _commit(
        self,
        answer: ClaimCodenameResponse,
        candidate: str,
        attempts: int,
        rejected: list[str],
    ) -> CodenameClaimResult:
        codename = answer.codename or candidate
        if answer.updated_player is not None:
            await self._sync.apply_player(answer.updated_player)

        result = CodenameClaimResult(
            status=ClaimStatus.CLAIMED,
            codename=codename,
            attempts=attempts,
            rejected=tuple(rejected),
            last_server_status=answer.status,
        )

        try:
            await self._sync.mark_milestone(TutorialState.NAME_SELECTION)
        except ProfileSyncException as exc:
            raise PartialSyncError("claim_codename", "mark_milestone", result) from exc
        try:
            await self._sync.refresh_profile()
        except ProfileSyncException as exc:
            raise PartialSyncError("claim_codename", "refresh_profile", result) from exc

        self.log_operation("claim_codename", codename=codename, attempts=attempts)
        await self.emit_event("codename.claimed", {"codename": codename, "attempts": attempts})
        return result
