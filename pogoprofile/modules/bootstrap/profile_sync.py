"""
Profile synchronization primitives.

Fetch, refresh and milestone marking are shared by the bootstrap steps and
by codename claiming. None of these take the session lock; the orchestrator
holds it for the whole operation.
"""

from __future__ import annotations

from pogoprofile.domain.models.tutorial import TutorialState
from pogoprofile.messaging import batch as batches
from pogoprofile.messaging import requests as msg
from pogoprofile.messaging.responses import PlayerData
from pogoprofile.modules.shared.base_service import BaseService


class ProfileSynchronizer(BaseService):
    async def fetch_profile(self) -> PlayerData:
        """
        GET_PLAYER alongside a challenge check; apply the player slot only.

        Raises
        ------
        DispatchError / SessionError
            From the dispatcher, unmodified.
        DecodeError
            If the player slot is missing or malformed.
        """
        responses = await self.send(
            batches.profile_batch(self._session.locale), (batches.PRIMARY,)
        )
        player = responses.primary.player_data
        await self.apply_player(player)
        return player

    async def refresh_profile(self) -> PlayerData:
        """GET_PLAYER in the standard batch; apply player, inventory, settings."""
        responses = await self.send_standard(msg.get_player(self._session.locale))
        player = responses.primary.player_data
        await self.apply_player(player)
        self.apply_companions(responses)
        return player

    async def mark_milestone(self, flag: TutorialState) -> PlayerData:
        """MARK_TUTORIAL_COMPLETE with marketing and push opt-ins off."""
        was_complete = self.mirror.is_milestone_complete(flag)
        responses = await self.send_standard(
            msg.mark_tutorial_complete(
                flag, send_marketing_emails=False, send_push_notifications=False
            )
        )
        player = responses.primary.player_data
        await self.apply_player(player)
        self.apply_companions(responses)
        self.mirror.mark_milestone(flag)
        if not was_complete:
            await self.emit_event(
                "tutorial.milestone_completed", {"milestone": flag.name}
            )
        self.log_operation("mark_milestone", milestone=flag.name)
        return player

    async def apply_player(self, player: PlayerData) -> None:
        self.mirror.apply_snapshot(player)
        await self.emit_event(
            "profile.synced",
            {
                "username": player.username,
                "currencies": self.mirror.currencies.as_dict(),
            },
        )
