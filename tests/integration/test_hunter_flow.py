"""Integration tests for a hunter's progression loop.

Runs dungeons, upgrades and shadow management end to end through the
HunterSystem facade.
"""

from __future__ import annotations

import pytest

from hunter_system.engine import HunterSystem
from hunter_system.models import (
    EquipmentItem,
    EquipmentSlot,
    LogCategory,
    Rarity,
    StatBonus,
    StatType,
    create_player_state,
)


pytestmark = pytest.mark.integration


class TestProgressionLoop:
    """Test the clear, loot, upgrade loop."""

    def test_gate_clear_to_upgrade(self) -> None:
        """Clear a gate, equip the best drop and upgrade it with the shards."""
        system = HunterSystem(create_player_state(shards=1_000), seed=11)

        outcome = system.request_dungeon_run("dungeon_red_gate")
        assert outcome.victory

        rewards = system.drain_rewards()
        kinds = [reward.kind for reward in rewards]
        assert kinds[0] == "item"
        assert "title" in kinds and "frame" in kinds
        assert "currency" in kinds
        assert "levelup" in kinds

        item_id = outcome.result.equipment[0].id
        assert system.request_equip_item(item_id).ok

        power_before = outcome.power
        upgrade = system.request_upgrade(item_id)
        assert upgrade.succeeded
        assert system.state.shards == 1_000 + 30 - 100

        after = system.request_dungeon_run("dungeon_goblin_den")
        assert after.power >= power_before

    def test_tower_climb_until_defeat(self) -> None:
        """Climb the tower until a floor is too strong, then stop."""
        system = HunterSystem(seed=3)

        floor = 1
        while True:
            outcome = system.request_dungeon_run(f"dungeon_{floor}")
            if not outcome.victory:
                break
            floor += 1
            assert floor < 100

        runs = system.state.dungeon_runs
        assert len(runs) == floor
        assert all(run.victory for run in runs[:-1])
        assert not runs[-1].victory
        assert system.state.logs[-1].title == "Dungeon Failed"

    def test_repeat_gate_unlocks_once(self) -> None:
        """Clear the same gate twice; cosmetics unlock only the first time."""
        system = HunterSystem(seed=5)

        first = system.request_dungeon_run("dungeon_goblin_den")
        system.drain_rewards()
        second = system.request_dungeon_run("dungeon_goblin_den")

        assert first.result.unlocked_title_id == "goblin_slayer"
        assert second.result.unlocked_title_id is None
        assert not any(reward.kind == "title" for reward in system.drain_rewards())
        assert system.state.character.unlocked_title_ids.count("goblin_slayer") == 1


class TestShadowArmy:
    """Test extraction, equipping and evolution through the facade."""

    def test_extract_equip_evolve(self) -> None:
        """Extract a boss shadow, equip it and evolve it with clears."""
        system = HunterSystem(seed=8)
        system.request_max_out(20)

        boss = system.request_dungeon_run("dungeon_10")
        assert boss.victory
        shadow = system.state.shadows[0]
        assert shadow.name == "Razan"

        summoned = system.request_equip_shadow(shadow.id)
        assert summoned.ok
        assert system.state.equipped_shadow.id == shadow.id

        for _ in range(10):
            system.request_dungeon_run("dungeon_orc_citadel")
            if system.state.equipped_shadow.evolution_level >= 1:
                break

        evolved = system.state.equipped_shadow
        assert evolved.evolution_level == 1
        assert evolved.bonus.value == shadow.bonus.value + 5
        assert any(entry.title == "Shadow Evolution" for entry in system.state.logs)

    def test_unknown_requests_never_raise(self) -> None:
        """Every request with a bad id returns a rejection instead of raising."""
        system = HunterSystem(seed=2)

        assert system.request_dungeon_run("nowhere").result is None
        assert system.request_upgrade("nothing").rejected
        assert not system.request_equip_item("nothing").ok
        assert not system.request_unequip_item("nothing").ok
        assert not system.request_equip_shadow("nobody").ok
        assert not system.request_salvage("nothing").ok
        assert not system.request_purchase(10).ok
        assert system.state.logs == []


class TestEquipmentSlots:
    """Test slot exclusivity through the facade."""

    def test_one_item_per_slot(self) -> None:
        """Equipping a second weapon unequips the first."""
        state = create_player_state()
        for item_id in ("blade-a", "blade-b"):
            state.inventory.append(
                EquipmentItem(
                    id=item_id,
                    name=f"Blade {item_id[-1].upper()}",
                    slot=EquipmentSlot.WEAPON,
                    rarity=Rarity.EPIC,
                    base_stats=[StatBonus(stat=StatType.STRENGTH, value=4)],
                )
            )
        system = HunterSystem(state, seed=1)

        system.request_equip_item("blade-a")
        system.request_equip_item("blade-b")

        equipped = system.state.equipped_items
        assert [item.id for item in equipped] == ["blade-b"]
        titles = [entry.title for entry in system.state.logs if entry.category == LogCategory.EQUIPMENT]
        assert titles == ["Item Equipped", "Item Equipped"]
