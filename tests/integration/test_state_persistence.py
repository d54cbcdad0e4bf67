"""Integration tests for state persistence.

Tests save/load through JSON and resuming a session from a saved payload.
"""

from __future__ import annotations

import json

import pytest

from hunter_system.core.exceptions import MigrationError
from hunter_system.engine import HunterSystem
from hunter_system.models import CURRENT_SCHEMA_VERSION


pytestmark = pytest.mark.integration


class TestStatePersistence:
    """Test state persistence."""

    def test_resume_with_pending_rewards(self) -> None:
        """Rewards queued before a save can be drained after loading."""
        system = HunterSystem(seed=21)
        system.request_dungeon_run("dungeon_insect_pit")
        pending = [reward.id for reward in system.reward_snapshot()]
        assert pending

        payload = json.loads(json.dumps(system.save()))
        resumed = HunterSystem.from_saved(payload, seed=21)

        assert [reward.id for reward in resumed.drain_rewards()] == pending
        assert resumed.reward_snapshot() == ()

    def test_full_state_round_trip(self) -> None:
        """Inventory, army, history and logs survive a save/load cycle."""
        system = HunterSystem(seed=6)
        system.request_max_out(20)
        system.request_dungeon_run("dungeon_10")
        system.request_equip_shadow(system.state.shadows[0].id)
        system.request_equip_item(system.state.inventory[0].id)

        restored = HunterSystem.from_saved(json.loads(json.dumps(system.save())))

        assert restored.state.schema_version == CURRENT_SCHEMA_VERSION
        assert restored.state.model_dump() == system.state.model_dump()
        assert restored.state.equipped_shadow.name == "Razan"
        assert restored.state.dungeon_runs[0].extracted_shadow == "Razan"

    def test_restored_system_keeps_playing(self) -> None:
        """A restored system accepts further commands."""
        system = HunterSystem(seed=2)
        system.request_level_apply(140)

        restored = HunterSystem.from_saved(system.save(), seed=2)
        result = restored.request_level_apply(10)

        assert result.level == 2
        assert result.xp_current == 0

    def test_newer_save_refused(self) -> None:
        """Saves from a newer engine version are refused at load time."""
        payload = HunterSystem(seed=1).save()
        payload["schema_version"] = CURRENT_SCHEMA_VERSION + 5

        with pytest.raises(MigrationError):
            HunterSystem.from_saved(payload)
