"""
Unit tests for level-up reward claiming and awarded badge sync.
"""

import pytest

from pogoprofile.core.exceptions import DecodeError
from pogoprofile.domain.models import DomainValidationError, EquippedBadge
from pogoprofile.messaging.requests import RequestType
from pogoprofile.messaging.responses import ItemAward
from pogoprofile.modules.rewards import RewardStatus


@pytest.mark.unit
@pytest.mark.asyncio
class TestAcceptLevelRewards:
    """Test BootstrapOrchestrator.accept_level_rewards."""

    async def test_level_above_current_is_not_unlocked(self, orchestrator, server):
        await orchestrator.fetch_profile()

        result = await orchestrator.accept_level_rewards(3)

        assert result.status is RewardStatus.NOT_UNLOCKED_YET
        assert result.rewards == ()
        assert server.count(RequestType.LEVEL_UP_REWARDS) == 0

    async def test_awards_are_added_to_existing_counts(
        self, orchestrator, server, session, recorded_events
    ):
        # Arrange
        session.inventory.get_item("ITEM_A").count = 7
        await orchestrator.refresh_profile()
        server.level_rewards = {
            "result": "SUCCESS",
            "items_awarded": [
                {"item_id": "ITEM_A", "count": 3},
                {"item_id": "ITEM_B", "count": 1},
            ],
            "items_unlocked": ["ITEM_C"],
        }

        # Act
        result = await orchestrator.accept_level_rewards(5)

        # Assert
        assert result.status is RewardStatus.SUCCESS
        assert result.rewards == (ItemAward("ITEM_A", 3), ItemAward("ITEM_B", 1))
        assert result.unlocked_items == ("ITEM_C",)
        assert session.inventory.count_of("ITEM_A") == 10
        assert session.inventory.count_of("ITEM_B") == 1
        assert server.requests_of(RequestType.LEVEL_UP_REWARDS)[0].payload == {"level": 5}
        assert server.sent_kinds()[-1] == [RequestType.LEVEL_UP_REWARDS]
        assert (
            "level_rewards.accepted",
            {
                "session_id": "test-session",
                "level": 5,
                "status": "SUCCESS",
                "rewards": {"ITEM_A": 3, "ITEM_B": 1},
            },
        ) in recorded_events

    async def test_negative_award_leaves_inventory_unchanged(
        self, orchestrator, server, session, recorded_events
    ):
        # Arrange
        session.inventory.get_item("ITEM_A").count = 7
        await orchestrator.refresh_profile()
        server.level_rewards = {
            "result": "SUCCESS",
            "items_awarded": [
                {"item_id": "ITEM_A", "count": 3},
                {"item_id": "ITEM_B", "count": -1},
            ],
        }

        # Act
        with pytest.raises(DecodeError) as exc_info:
            await orchestrator.accept_level_rewards(5)

        # Assert
        assert exc_info.value.kind == "LEVEL_UP_REWARDS"
        assert session.inventory.count_of("ITEM_A") == 7
        assert session.inventory.count_of("ITEM_B") == 0
        assert not any(name == "level_rewards.accepted" for name, _ in recorded_events)

    async def test_awarded_already(self, orchestrator, server, session):
        await orchestrator.refresh_profile()
        server.level_rewards = {"result": "AWARDED_ALREADY"}

        result = await orchestrator.accept_level_rewards(2)

        assert result.status is RewardStatus.AWARDED_ALREADY
        assert result.has_rewards is False

    async def test_negative_level_rejected(self, orchestrator, server):
        with pytest.raises(DomainValidationError):
            await orchestrator.accept_level_rewards(-1)

        assert server.batches == []


@pytest.mark.unit
@pytest.mark.asyncio
class TestSyncAwardedBadges:
    """Test BootstrapOrchestrator.sync_awarded_badges."""

    async def test_equips_each_badge_in_server_order(
        self, orchestrator, server, recorded_events
    ):
        server.awarded_badges = [("BADGE_TRAVEL_KM", 1), ("BADGE_POKEDEX_ENTRIES", 2)]
        await orchestrator.fetch_profile()

        result = await orchestrator.sync_awarded_badges()

        assert result.success is True
        assert result.awarded == (("BADGE_TRAVEL_KM", 1), ("BADGE_POKEDEX_ENTRIES", 2))
        assert [r.payload for r in server.requests_of(RequestType.EQUIP_BADGE)] == [
            {"badge_type": "BADGE_TRAVEL_KM", "badge_level": 1},
            {"badge_type": "BADGE_POKEDEX_ENTRIES", "badge_level": 2},
        ]
        # one EQUIP_BADGE per batch
        assert server.sent_kinds()[-2:] == [
            [RequestType.EQUIP_BADGE],
            [RequestType.EQUIP_BADGE],
        ]
        assert result.last_equipped == EquippedBadge("BADGE_POKEDEX_ENTRIES", 2)
        assert orchestrator.mirror.equipped_badge == EquippedBadge("BADGE_POKEDEX_ENTRIES", 2)
        assert [name for name, _ in recorded_events].count("badge.equipped") == 2

    async def test_failed_equip_is_not_recorded(self, orchestrator, server):
        server.awarded_badges = [("BADGE_TRAVEL_KM", 1), ("BADGE_POKEDEX_ENTRIES", 2)]
        server.script(
            RequestType.EQUIP_BADGE, {"result": "SUCCESS"}, {"result": "COOLDOWN_ACTIVE"}
        )
        await orchestrator.fetch_profile()

        result = await orchestrator.sync_awarded_badges()

        assert result.equipped == (EquippedBadge("BADGE_TRAVEL_KM", 1),)
        assert orchestrator.mirror.equipped_badge == EquippedBadge("BADGE_TRAVEL_KM", 1)

    async def test_unsuccessful_check_equips_nothing(self, orchestrator, server):
        server.awarded_badges = [("BADGE_TRAVEL_KM", 1)]
        server.script(RequestType.CHECK_AWARDED_BADGES, {"success": False})
        await orchestrator.fetch_profile()

        result = await orchestrator.sync_awarded_badges()

        assert result.success is False
        assert result.last_equipped is None
        assert server.count(RequestType.EQUIP_BADGE) == 0
        assert orchestrator.mirror.equipped_badge is None

    async def test_no_awarded_badges(self, orchestrator, server):
        await orchestrator.fetch_profile()

        result = await orchestrator.sync_awarded_badges()

        assert result.success is True
        assert result.equipped == ()
        assert server.count(RequestType.EQUIP_BADGE) == 0
