from pogoprofile.modules.rewards.service import (
    LevelRewardClaimer,
    LevelUpRewards,
    RewardStatus,
)

__all__ = ["LevelRewardClaimer", "LevelUpRewards", "RewardStatus"]
