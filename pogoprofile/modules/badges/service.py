"""
Awarded badge synchronization.

Asks the server which badges were awarded, then equips them one request at
a time in the order the server listed them. The mirror keeps the last badge
the server confirmed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from pogoprofile.domain.models.profile import EquippedBadge
from pogoprofile.messaging import batch as batches
from pogoprofile.messaging import requests as msg
from pogoprofile.messaging.responses import CheckAwardedBadgesResponse, EquipBadgeResponse
from pogoprofile.modules.shared.base_service import BaseService


@dataclass(frozen=True)
class BadgeSyncResult:
    success: bool
    awarded: Tuple[Tuple[str, int], ...] = ()
    equipped: Tuple[EquippedBadge, ...] = ()

    @property
    def last_equipped(self) -> Optional[EquippedBadge]:
        return self.equipped[-1] if self.equipped else None


class BadgeSynchronizer(BaseService):
    async def sync(self) -> BadgeSyncResult:
        responses = await self.send(batches.single_batch(msg.check_awarded_badges()))
        awarded: CheckAwardedBadgesResponse = responses.primary
        if not awarded.success:
            self.log.info("Awarded badge check unsuccessful")
            return BadgeSyncResult(success=False)

        equipped: list[EquippedBadge] = []
        for badge_type, badge_level in awarded.pairs():
            answer: EquipBadgeResponse = (
                await self.send(
                    batches.single_batch(msg.equip_badge(badge_type, badge_level))
                )
            ).primary
            if answer.result is not EquipBadgeResponse.Result.SUCCESS:
                self.log.info(
                    "Badge not equipped",
                    extra={"badge_type": badge_type, "result": answer.result.value},
                )
                continue

            badge = answer.equipped or EquippedBadge(badge_type, badge_level)
            self.mirror.set_equipped_badge(badge)
            equipped.append(badge)
            await self.emit_event(
                "badge.equipped",
                {"badge_type": badge.badge_type, "level": badge.level},
            )

        self.log_operation(
            "sync_awarded_badges",
            awarded=len(awarded.awarded_badges),
            equipped=len(equipped),
        )
        return BadgeSyncResult(
            success=True,
            awarded=tuple(awarded.pairs()),
            equipped=tuple(equipped),
        )
