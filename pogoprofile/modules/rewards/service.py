"""
Level-up reward claiming.

Rewards can only be claimed for a level the player has reached according
to the mirror's stats. Awarded items are added to the current inventory
counts, never written over them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from pogoprofile.domain.models.base import validate_non_negative
from pogoprofile.messaging import batch as batches
from pogoprofile.messaging import requests as msg
from pogoprofile.messaging.responses import ItemAward, LevelUpRewardsResponse
from pogoprofile.modules.shared.base_service import BaseService


class RewardStatus(Enum):
    UNSET = "UNSET"
    SUCCESS = "SUCCESS"
    AWARDED_ALREADY = "AWARDED_ALREADY"
    NOT_UNLOCKED_YET = "NOT_UNLOCKED_YET"


@dataclass(frozen=True)
class LevelUpRewards:
    status: RewardStatus
    level: int
    rewards: Tuple[ItemAward, ...] = ()
    unlocked_items: Tuple[str, ...] = ()

    @property
    def has_rewards(self) -> bool:
        return bool(self.rewards)


class LevelRewardClaimer(BaseService):
    async def accept(self, level: int) -> LevelUpRewards:
        validate_non_negative(level, "level")
        current = self.mirror.stats.level
        if level > current:
            self.log.info(
                "Level rewards not unlocked yet",
                extra={"level": level, "current_level": current},
            )
            return LevelUpRewards(status=RewardStatus.NOT_UNLOCKED_YET, level=level)

        responses = await self.send(batches.single_batch(msg.level_up_rewards(level)))
        answer: LevelUpRewardsResponse = responses.primary

        bag = self._session.inventory
        for award in answer.items_awarded:
            bag.get_item(award.item_id).add(award.count)

        result = LevelUpRewards(
            status=RewardStatus(answer.result.value),
            level=level,
            rewards=answer.items_awarded,
            unlocked_items=answer.items_unlocked,
        )
        self.log_operation(
            "accept_level_rewards",
            level=level,
            status=result.status.value,
            items=len(result.rewards),
        )
        await self.emit_event(
            "level_rewards.accepted",
            {
                "level": level,
                "status": result.status.value,
                "rewards": {award.item_id: award.count for award in result.rewards},
            },
        )
        return result
