"""Tests for commands, transitions and the HunterSystem facade."""

from __future__ import annotations

import threading

import pytest
from pydantic import TypeAdapter

from hunter_system.core.constants import MAX_CHARACTER_LEVEL
from hunter_system.core.exceptions import InsufficientResourceError, NotFoundError, ValidationError
from hunter_system.engine.dungeon import DungeonRunOutcome
from hunter_system.engine.rng import RandomSource
from hunter_system.engine.system import (
    ApplyXp,
    Command,
    DrainRewards,
    EquipItem,
    EquipShadow,
    HunterSystem,
    MaxOut,
    PurchaseEquipment,
    RunDungeon,
    SalvageItem,
    UnequipItem,
    UpgradeItem,
    apply_command,
)
from hunter_system.engine.upgrade import UpgradeResult
from hunter_system.models import (
    LevelUpReward,
    LogCategory,
    PlayerState,
    Rarity,
    RejectionReason,
    UpgradeOutcome,
    create_player_state,
)


class TestCommandParsing:
    """Tests for the discriminated command union."""

    def test_parse_by_kind(self) -> None:
        """Test raw payloads become typed commands."""
        adapter = TypeAdapter(Command)

        command = adapter.validate_python({"kind": "apply_xp", "xp_delta": 25})

        assert isinstance(command, ApplyXp)
        assert command.xp_delta == 25

    def test_unknown_kind_rejected(self) -> None:
        """Test unknown kinds fail validation."""
        with pytest.raises(ValueError):
            TypeAdapter(Command).validate_python({"kind": "teleport"})

    def test_commands_frozen(self) -> None:
        """Test commands cannot be changed after creation."""
        command = RunDungeon(dungeon_id="dungeon_1")

        with pytest.raises(ValueError):
            command.dungeon_id = "dungeon_2"

    def test_max_out_target_bounded(self) -> None:
        """Test max-out targets above the level cap fail validation."""
        with pytest.raises(ValueError):
            MaxOut(target_level=MAX_CHARACTER_LEVEL + 1)


class TestApplyCommand:
    """Tests for apply_command."""

    def test_input_state_untouched(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test the caller's state is never mutated."""
        before = sample_state.model_dump()

        transition = apply_command(sample_state, ApplyXp(xp_delta=5_000), rng)

        assert transition.ok
        assert transition.state is not sample_state
        assert sample_state.model_dump() == before

    def test_apply_xp_effects(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test XP logs and the level-up reward are reported."""
        transition = apply_command(sample_state, ApplyXp(xp_delta=200), rng)

        assert transition.state.character.level == 2
        assert [entry.title for entry in transition.logs] == ["Experience Gained", "LEVEL UP - 2"]
        assert transition.logs[1].category == LogCategory.LEVEL_UP
        assert len(transition.rewards) == 1
        assert isinstance(transition.rewards[0], LevelUpReward)
        assert len(transition.effects) == 3

    def test_negative_xp_noop(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test negative XP changes no progression."""
        transition = apply_command(sample_state, ApplyXp(xp_delta=-100), rng)

        assert transition.ok
        assert transition.state.character == sample_state.character
        assert transition.result.xp_applied == 0
        assert transition.rewards == ()

    def test_purchase_rejected(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test an unaffordable purchase returns the original state."""
        transition = apply_command(sample_state, PurchaseEquipment(cost=9_999), rng)

        assert not transition.ok
        assert transition.rejection == RejectionReason.INSUFFICIENT_SHARDS
        assert isinstance(transition.error, InsufficientResourceError)
        assert transition.state is sample_state
        assert transition.logs == ()

    def test_purchase(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test a purchase adds the item to the new state."""
        transition = apply_command(sample_state, PurchaseEquipment(cost=200, rarity=Rarity.RARE), rng)

        assert transition.ok
        assert transition.state.shards == 800
        assert transition.state.inventory[0].id == transition.result.id
        assert len(sample_state.inventory) == 1

    def test_salvage_missing(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test salvaging an unknown item is rejected as not found."""
        transition = apply_command(sample_state, SalvageItem(item_id="missing"), rng)

        assert transition.rejection == RejectionReason.NOT_FOUND
        assert isinstance(transition.error, NotFoundError)

    def test_equip_and_unequip(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test equip and unequip commands."""
        equipped = apply_command(sample_state, EquipItem(item_id="item-sword"), rng)
        unequipped = apply_command(equipped.state, UnequipItem(item_id="item-sword"), rng)

        assert equipped.state.get_item("item-sword").is_equipped
        assert not unequipped.state.get_item("item-sword").is_equipped

    def test_equip_shadow(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test the shadow toggle command."""
        transition = apply_command(sample_state, EquipShadow(shadow_id="shadow-igris"), rng)

        assert transition.state.equipped_shadow.id == "shadow-igris"
        assert transition.logs[-1].category == LogCategory.SHADOW

    def test_unknown_dungeon(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test an unknown dungeon is rejected with no result record."""
        transition = apply_command(sample_state, RunDungeon(dungeon_id="dungeon_nowhere"), rng)

        assert transition.rejection == RejectionReason.NOT_FOUND
        assert isinstance(transition.result, DungeonRunOutcome)
        assert transition.result.result is None
        assert transition.state is sample_state

    def test_upgrade_max_level_rejected(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test a max-level upgrade is rejected with the original state."""
        sample_state.get_item("item-sword").level = 20

        transition = apply_command(sample_state, UpgradeItem(item_id="item-sword"), rng)

        assert transition.rejection == RejectionReason.MAX_LEVEL
        assert transition.state is sample_state

    def test_max_out(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test the max-out command."""
        transition = apply_command(sample_state, MaxOut(), rng)

        assert transition.state.character.level == 100
        assert transition.logs[-1].title == "System Override"

    def test_drain(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test draining returns the queue and empties it in the new state."""
        sample_state.reward_queue.append(LevelUpReward(name="Level 2", value=2))

        transition = apply_command(sample_state, DrainRewards(), rng)

        assert [reward.kind for reward in transition.result] == ["levelup"]
        assert len(transition.state.reward_queue) == 0
        assert len(sample_state.reward_queue) == 1
        assert transition.rewards == ()

    def test_touch_on_success(self, sample_state: PlayerState, rng: RandomSource) -> None:
        """Test successful transitions refresh the update time."""
        transition = apply_command(sample_state, ApplyXp(xp_delta=1), rng)

        assert transition.state.updated_at >= sample_state.updated_at


class TestHunterSystem:
    """Tests for the HunterSystem facade."""

    def test_fresh_system(self) -> None:
        """Test a system starts with a new player."""
        system = HunterSystem(seed=1)

        assert system.state.character.level == 1
        assert system.reward_snapshot() == ()

    def test_level_apply_swaps_state(self) -> None:
        """Test a successful request replaces the held state."""
        system = HunterSystem(seed=1)
        before = system.state

        result = system.request_level_apply(150)

        assert result.level == 2
        assert system.state is not before
        assert system.state.character.level == 2
        assert before.character.level == 1

    def test_upgrade_missing_item(self) -> None:
        """Test upgrading an unknown item is rejected without raising."""
        system = HunterSystem(create_player_state(shards=500), seed=1)

        result = system.request_upgrade("missing")

        assert isinstance(result, UpgradeResult)
        assert result.outcome == UpgradeOutcome.REJECTED
        assert result.reason == RejectionReason.NOT_FOUND
        assert result.wallet_shards == 500

    def test_dungeon_not_found(self) -> None:
        """Test an unknown dungeon returns a rejected outcome."""
        system = HunterSystem(seed=1)

        outcome = system.request_dungeon_run("nowhere")

        assert outcome.result is None
        assert outcome.rejection == RejectionReason.NOT_FOUND

    @pytest.mark.parametrize("dungeon_id", ["dungeon_\u00b2", "dungeon_" + "9" * 5_000])
    def test_malformed_floor_id(self, dungeon_id: str) -> None:
        """Test malformed floor ids are reported as not found."""
        system = HunterSystem(seed=1)

        outcome = system.request_dungeon_run(dungeon_id)

        assert outcome.result is None
        assert outcome.rejection == RejectionReason.NOT_FOUND
        assert system.state.dungeon_runs == []

    def test_invalid_buffs_rejected(self) -> None:
        """Test a buff for an unknown stat is rejected without raising."""
        system = HunterSystem(seed=1)
        before = system.state

        outcome = system.request_dungeon_run("dungeon_1", buffs={"luck": 5})

        assert outcome.result is None
        assert system.state is before

    def test_invalid_request_transition(self) -> None:
        """Test an invalid request value yields a rejected transition."""
        system = HunterSystem(seed=1)

        transition = system.request_equip_item(None)

        assert not transition.ok
        assert isinstance(transition.error, ValidationError)
        assert transition.error.details["field_name"] == "item_id"
        assert transition.state is system.state

    def test_drain_rewards(self) -> None:
        """Test draining empties the held queue."""
        system = HunterSystem(seed=1)
        system.request_level_apply(150)

        drained = system.drain_rewards()

        assert [reward.kind for reward in drained] == ["levelup"]
        assert system.reward_snapshot() == ()
        assert system.drain_rewards() == ()

    def test_purchase_and_salvage(self) -> None:
        """Test the shop requests report through transitions."""
        system = HunterSystem(create_player_state(shards=300), seed=4)

        bought = system.request_purchase(100, Rarity.UNCOMMON)
        salvaged = system.request_salvage(bought.result.id)

        assert bought.ok and salvaged.ok
        assert salvaged.result == 15
        assert system.state.shards == 300 - 100 + 15

    def test_max_out_request(self) -> None:
        """Test the max-out request clamps its target."""
        system = HunterSystem(seed=1)

        transition = system.request_max_out(0)

        assert transition.ok
        assert system.state.character.level == 1

    def test_max_out_request_capped(self) -> None:
        """Test an oversized max-out target lands on the level cap."""
        system = HunterSystem(seed=1)

        transition = system.request_max_out(10**200)

        assert transition.ok
        assert system.state.character.level == MAX_CHARACTER_LEVEL

    def test_save_and_restore(self) -> None:
        """Test a saved payload restores an equal state."""
        system = HunterSystem(seed=1)
        system.request_level_apply(500)

        restored = HunterSystem.from_saved(system.save(), seed=1)

        assert restored.state.character == system.state.character
        assert len(restored.reward_snapshot()) == len(system.reward_snapshot())

    def test_concurrent_requests_serialized(self) -> None:
        """Test concurrent requests never lose an update."""
        system = HunterSystem(seed=1)

        def worker() -> None:
            for _ in range(25):
                system.request_level_apply(1)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert system.state.character.xp_current == 100
        assert sum(1 for entry in system.state.logs if entry.title == "Experience Gained") == 100
