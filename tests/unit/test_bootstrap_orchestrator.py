"""
Unit Tests for BootstrapOrchestrator
====================================

Purpose
-------
Drive the orchestrator against the scripted FakeGameServer and check what
was sent, what landed in the mirror and what was left untouched on failure.

Test Coverage
-------------
- fetch_profile: locale, player-slot-only decoding, dispatch failures
- setup_avatar: random policy bounds, listener overrides, all-or-nothing
- complete_starter_encounter: species choice, partial sync
- mark_milestone: opt-outs, idempotence
- run_bootstrap: full sequence, early stop on codename exhaustion
- Per-session serialization and emitted events

Testing Strategy
----------------
- Unit tests against an in-memory dispatcher
- AAA pattern (Arrange, Act, Assert)
"""

import asyncio

import pytest

from pogoprofile.core.exceptions import (
    DecodeError,
    DispatchError,
    PartialSyncError,
    SessionError,
)
from pogoprofile.domain.models import BOOTSTRAP_ORDER, Gender, PlayerAvatar, TutorialState
from pogoprofile.domain.models.avatar import COSMETIC_SLOTS
from pogoprofile.messaging.requests import RequestType
from pogoprofile.modules.bootstrap import BootstrapState, StepStatus
from pogoprofile.modules.bootstrap.avatar import slot_ranges
from pogoprofile.session.listeners import TutorialListener


# ============================================================================
# FETCH PROFILE
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
class TestFetchProfile:
    """Test BootstrapOrchestrator.fetch_profile."""

    async def test_sends_locale_and_populates_mirror(self, orchestrator, server, locale):
        server.player["username"] = "Gary"

        player = await orchestrator.fetch_profile()

        assert server.sent_kinds() == [[RequestType.GET_PLAYER, RequestType.CHECK_CHALLENGE]]
        assert server.requests_of(RequestType.GET_PLAYER)[0].payload == {
            "player_locale": locale.to_dict()
        }
        assert player.username == "Gary"
        assert orchestrator.mirror.is_populated
        assert orchestrator.state is BootstrapState.PROFILE_FETCHED

    async def test_challenge_slot_is_not_decoded(self, orchestrator, server):
        server.script(RequestType.CHECK_CHALLENGE, b"\x00 not a challenge answer")

        await orchestrator.fetch_profile()

        assert orchestrator.mirror.is_populated

    async def test_malformed_currency_does_not_block_sync(self, orchestrator, server):
        server.player["currencies"] = [
            {"name": "STARDUST", "amount": 500},
            {"name": "POKECOIN", "amount": 10},
            {"name": "UNKNOWN_COIN", "amount": "lots"},
        ]

        await orchestrator.fetch_profile()

        assert orchestrator.mirror.is_populated
        assert orchestrator.mirror.currencies.as_dict() == {"STARDUST": 500, "POKECOIN": 10}

    async def test_session_error_propagates_unmodified(self, orchestrator, server):
        error = SessionError("token expired")
        server.script(RequestType.GET_PLAYER, error)

        with pytest.raises(SessionError) as exc_info:
            await orchestrator.fetch_profile()

        assert exc_info.value is error
        assert orchestrator.mirror.is_populated is False
        assert orchestrator.state is BootstrapState.UNINITIALIZED

    async def test_extra_trailing_payloads_ignored(self, orchestrator, server, mocker):
        original = server.send

        async def with_injected_payload(requests):
            return list(await original(requests)) + [b"injected"]

        mocker.patch.object(server, "send", side_effect=with_injected_payload)

        await orchestrator.fetch_profile()

        assert orchestrator.mirror.is_populated

    async def test_missing_player_slot_raises_decode_error(self, orchestrator, server, mocker):
        mocker.patch.object(server, "send", return_value=[])

        with pytest.raises(DecodeError) as exc_info:
            await orchestrator.fetch_profile()

        assert exc_info.value.kind == "GET_PLAYER"
        assert orchestrator.mirror.is_populated is False


# ============================================================================
# AVATAR
# ============================================================================


class FixedAvatarListener(TutorialListener):
    def __init__(self, avatar):
        self.avatar = avatar

    def select_avatar(self, orchestrator):
        return self.avatar


class AsyncAvatarListener(FixedAvatarListener):
    async def select_avatar(self, orchestrator):
        await asyncio.sleep(0)
        return self.avatar


@pytest.mark.unit
@pytest.mark.asyncio
class TestSetupAvatar:
    """Test BootstrapOrchestrator.setup_avatar."""

    async def test_random_avatar_within_slot_ranges(self, orchestrator, server):
        await orchestrator.fetch_profile()

        result = await orchestrator.setup_avatar()

        assert result.status is StepStatus.COMPLETED
        avatar = orchestrator.mirror.avatar
        ranges = slot_ranges(avatar.gender)
        for slot in COSMETIC_SLOTS:
            assert 0 <= getattr(avatar, slot) < ranges[slot]
        assert orchestrator.mirror.is_milestone_complete(TutorialState.AVATAR_SELECTION)
        assert server.sent_kinds()[1][0] is RequestType.SET_AVATAR
        assert server.sent_kinds()[2][0] is RequestType.MARK_TUTORIAL_COMPLETE

    @pytest.mark.parametrize("listener_cls", [FixedAvatarListener, AsyncAvatarListener])
    async def test_listener_avatar_is_sent(self, orchestrator, server, listener_cls):
        chosen = PlayerAvatar(gender=Gender.FEMALE, skin=3, hair=1, shirt=8, backpack=2)
        orchestrator.add_listener(listener_cls(chosen))
        await orchestrator.fetch_profile()

        await orchestrator.setup_avatar()

        sent = server.requests_of(RequestType.SET_AVATAR)[0].payload["player_avatar"]
        assert PlayerAvatar.from_dict(sent) == chosen
        assert orchestrator.mirror.avatar == chosen

    async def test_hooks_run_under_session_lock(self, orchestrator, server):
        seen = {}

        class LockObservingListener(TutorialListener):
            def select_avatar(self, orchestrator):
                seen["locked"] = orchestrator.session.lock.locked()
                seen["username"] = orchestrator.mirror.username
                return None

        server.player["username"] = "Observer"
        orchestrator.add_listener(LockObservingListener())
        await orchestrator.fetch_profile()

        await orchestrator.setup_avatar()

        assert seen == {"locked": True, "username": "Observer"}
        assert orchestrator.session.lock.locked() is False

    async def test_bad_settings_payload_applies_nothing(self, orchestrator, server, session):
        # Arrange
        await orchestrator.fetch_profile()
        avatar_before = orchestrator.mirror.avatar
        server.inventory_items = [{"item_id": "ITEM_POKE_BALL", "count": 50}]
        server.script(RequestType.DOWNLOAD_SETTINGS, b"{not json")

        # Act
        with pytest.raises(DecodeError) as exc_info:
            await orchestrator.setup_avatar()

        # Assert
        assert exc_info.value.kind == "DOWNLOAD_SETTINGS"
        assert orchestrator.mirror.avatar == avatar_before
        assert not orchestrator.mirror.is_milestone_complete(TutorialState.AVATAR_SELECTION)
        assert session.settings.hash == ""
        assert session.inventory.last_timestamp_ms == 0
        assert session.inventory.count_of("ITEM_POKE_BALL") == 0

    async def test_companions_carry_previous_timestamp_and_hash(self, orchestrator, server):
        await orchestrator.fetch_profile()

        await orchestrator.setup_avatar()

        mark_batch = server.batches[2]
        assert mark_batch[2].payload == {"last_timestamp_ms": 5_000}
        assert mark_batch[4].payload == {"hash": "settings-hash-1"}

    async def test_already_complete_sends_nothing(self, orchestrator, server):
        server.complete(TutorialState.AVATAR_SELECTION)
        await orchestrator.fetch_profile()

        result = await orchestrator.setup_avatar()

        assert result.status is StepStatus.ALREADY_COMPLETE
        assert len(server.batches) == 1

    async def test_mark_failure_after_set_avatar_is_partial(self, orchestrator, server):
        await orchestrator.fetch_profile()
        server.script(RequestType.MARK_TUTORIAL_COMPLETE, DispatchError("offline"))

        with pytest.raises(PartialSyncError) as exc_info:
            await orchestrator.setup_avatar()

        assert exc_info.value.operation == "setup_avatar"
        assert exc_info.value.pending_step == "mark_milestone"
        assert isinstance(exc_info.value.__cause__, DispatchError)


# ============================================================================
# STARTER ENCOUNTER
# ============================================================================


class StarterListener(TutorialListener):
    def __init__(self, name):
        self.name = name

    def select_starter(self, orchestrator):
        return self.name


@pytest.mark.unit
@pytest.mark.asyncio
class TestStarterEncounter:
    """Test BootstrapOrchestrator.complete_starter_encounter."""

    async def test_listener_choice_and_refresh(self, orchestrator, server, session):
        orchestrator.add_listener(StarterListener("squirtle"))
        server.inventory_items = [{"item_id": "ITEM_POKE_BALL", "count": 20}]
        await orchestrator.fetch_profile()

        result = await orchestrator.complete_starter_encounter()

        assert server.requests_of(RequestType.ENCOUNTER_TUTORIAL_COMPLETE)[0].payload == {
            "pokemon_id": 7
        }
        assert result.detail == {"starter": "SQUIRTLE", "pokedex_id": 7}
        assert session.inventory.count_of("ITEM_POKE_BALL") == 20
        assert server.sent_kinds()[-1][0] is RequestType.GET_PLAYER
        assert orchestrator.mirror.is_milestone_complete(TutorialState.POKEMON_CAPTURE)

    async def test_random_starter_is_configured_species(self, orchestrator, server):
        await orchestrator.fetch_profile()

        await orchestrator.complete_starter_encounter()

        sent = server.requests_of(RequestType.ENCOUNTER_TUTORIAL_COMPLETE)[0]
        assert sent.payload["pokemon_id"] in {1, 4, 7}

    async def test_refresh_failure_is_partial_and_keeps_capture(self, orchestrator, server):
        await orchestrator.fetch_profile()
        server.script(RequestType.GET_PLAYER, DispatchError("offline"))

        with pytest.raises(PartialSyncError) as exc_info:
            await orchestrator.complete_starter_encounter()

        error = exc_info.value
        assert error.operation == "complete_starter_encounter"
        assert error.pending_step == "refresh_profile"
        assert error.committed.status is StepStatus.COMPLETED
        assert orchestrator.mirror.is_milestone_complete(TutorialState.POKEMON_CAPTURE)

        # Retrying the named step completes the sync
        await orchestrator.refresh_profile()
        assert orchestrator.mirror.is_milestone_complete(TutorialState.POKEMON_CAPTURE)


# ============================================================================
# MILESTONES
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
class TestMarkMilestone:
    """Test BootstrapOrchestrator.mark_milestone."""

    async def test_opts_out_of_marketing_and_push(self, orchestrator, server):
        await orchestrator.fetch_profile()

        await orchestrator.accept_legal_screen()

        payload = server.requests_of(RequestType.MARK_TUTORIAL_COMPLETE)[0].payload
        assert payload == {
            "tutorials_completed": ["LEGAL_SCREEN"],
            "send_marketing_emails": False,
            "send_push_notifications": False,
        }
        assert orchestrator.state is BootstrapState.LEGAL_ACCEPTED

    async def test_second_mark_is_already_complete(self, orchestrator, server):
        await orchestrator.fetch_profile()

        first = await orchestrator.mark_milestone(TutorialState.GYM_TUTORIAL)
        second = await orchestrator.mark_milestone(TutorialState.GYM_TUTORIAL)

        assert first.status is StepStatus.COMPLETED
        assert second.status is StepStatus.ALREADY_COMPLETE
        assert server.count(RequestType.MARK_TUTORIAL_COMPLETE) == 1


# ============================================================================
# FULL RUN
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
class TestRunBootstrap:
    """Test BootstrapOrchestrator.run_bootstrap."""

    async def test_fresh_account_runs_every_step_in_order(self, orchestrator, server):
        results = await orchestrator.run_bootstrap()

        assert [result.step for result in results] == [
            "accept_legal_screen",
            "setup_avatar",
            "claim_codename",
            "complete_starter_encounter",
            "complete_first_time_experience",
        ]
        assert all(result.status is StepStatus.COMPLETED for result in results)
        assert orchestrator.state is BootstrapState.FIRST_TIME_EXPERIENCE_COMPLETE
        assert 10 <= len(orchestrator.mirror.username) < 15

    async def test_resumes_from_existing_progress(self, orchestrator, server):
        server.complete(
            TutorialState.LEGAL_SCREEN,
            TutorialState.AVATAR_SELECTION,
            TutorialState.NAME_SELECTION,
        )
        server.player["username"] = "AlreadyNamed"

        results = await orchestrator.run_bootstrap()

        assert [result.step for result in results] == [
            "complete_starter_encounter",
            "complete_first_time_experience",
        ]
        assert server.count(RequestType.SET_AVATAR) == 0
        assert server.count(RequestType.CLAIM_CODENAME) == 0

    async def test_codename_exhaustion_stops_the_run(
        self, orchestrator, server, claim_rejection
    ):
        server.script(RequestType.CLAIM_CODENAME, claim_rejection(remaining=0))

        results = await orchestrator.run_bootstrap()

        assert results[-1].step == "claim_codename"
        assert results[-1].status is StepStatus.REJECTED
        assert orchestrator.state is BootstrapState.AVATAR_SET
        assert server.count(RequestType.ENCOUNTER_TUTORIAL_COMPLETE) == 0

    async def test_completed_account_sends_only_fetch(self, orchestrator, server):
        server.complete(*BOOTSTRAP_ORDER)

        results = await orchestrator.run_bootstrap()

        assert results == []
        assert len(server.batches) == 1


# ============================================================================
# CONCURRENCY / EVENTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
class TestSerialization:
    """Operations on one session never overlap."""

    async def test_concurrent_operations_run_one_at_a_time(
        self, orchestrator, server, mocker
    ):
        original = server.send
        tracker = {"in_flight": 0, "max_in_flight": 0}

        async def slow_send(requests):
            tracker["in_flight"] += 1
            tracker["max_in_flight"] = max(tracker["max_in_flight"], tracker["in_flight"])
            try:
                await asyncio.sleep(0.01)
                return await original(requests)
            finally:
                tracker["in_flight"] -= 1

        mocker.patch.object(server, "send", side_effect=slow_send)

        await asyncio.gather(
            orchestrator.fetch_profile(),
            orchestrator.refresh_profile(),
            orchestrator.sync_awarded_badges(),
            orchestrator.accept_legal_screen(),
        )

        assert tracker["max_in_flight"] == 1
        assert len(server.batches) >= 4


@pytest.mark.unit
@pytest.mark.asyncio
class TestEvents:
    """Test events published during a bootstrap run."""

    async def test_bootstrap_run_events(self, orchestrator, recorded_events):
        await orchestrator.run_bootstrap()

        milestones = [
            payload["milestone"]
            for name, payload in recorded_events
            if name == "tutorial.milestone_completed"
        ]
        names = {name for name, _ in recorded_events}

        assert milestones == [flag.name for flag in BOOTSTRAP_ORDER]
        assert {"profile.synced", "avatar.updated", "starter.captured", "codename.claimed"} <= names
        assert all(payload["session_id"] == "test-session" for _, payload in recorded_events)

    async def test_failed_fetch_publishes_nothing(self, orchestrator, server, recorded_events):
        server.script(RequestType.GET_PLAYER, DispatchError("offline"))

        with pytest.raises(DispatchError):
            await orchestrator.fetch_profile()

        assert recorded_events == []
