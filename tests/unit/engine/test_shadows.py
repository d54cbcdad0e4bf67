"""Tests for shadow evolution and equipping."""

from __future__ import annotations

import pytest

from hunter_system.core.config import ShadowSettings
from hunter_system.core.exceptions import NotFoundError
from hunter_system.engine.shadows import equip_shadow, grant_shadow_xp, shadow_xp_share
from hunter_system.models import PlayerState, RankTier, ShadowCompanion, StatBonus, StatType


class TestShadowXp:
    """Tests for XP sharing and evolution."""

    def test_xp_share(self) -> None:
        """Test the shadow receives 20 percent of the run XP."""
        assert shadow_xp_share(1_000, ShadowSettings()) == 200
        assert shadow_xp_share(-50, ShadowSettings()) == 0

    def test_accumulates_below_threshold(self, sample_shadow: ShadowCompanion) -> None:
        """Test XP accumulates without evolving."""
        progress = grant_shadow_xp(sample_shadow, 1_000, ShadowSettings())

        assert progress.xp_gained == 200
        assert not progress.evolved
        assert sample_shadow.experience_points == 200

    def test_first_evolution(self, sample_shadow: ShadowCompanion) -> None:
        """Test crossing 500 XP evolves to Elite."""
        sample_shadow.experience_points = 400

        progress = grant_shadow_xp(sample_shadow, 1_000, ShadowSettings())

        assert progress.evolved
        assert sample_shadow.evolution_level == 1
        assert sample_shadow.bonus.value == 10 + 5
        assert sample_shadow.xp_to_next_evolution == 2_000
        assert sample_shadow.experience_points == 600
        assert sample_shadow.display_name == "Igris Elite"

    def test_second_evolution_unbounded(self, sample_shadow: ShadowCompanion) -> None:
        """Test the Marshal stage has no further threshold."""
        sample_shadow.evolution_level = 1
        sample_shadow.experience_points = 1_900
        sample_shadow.xp_to_next_evolution = 2_000

        progress = grant_shadow_xp(sample_shadow, 1_000, ShadowSettings())

        assert progress.evolution_level == 2
        assert sample_shadow.bonus.value == 10 + 10
        assert sample_shadow.xp_to_next_evolution is None

    def test_one_evolution_per_run(self, sample_shadow: ShadowCompanion) -> None:
        """Test a huge XP gain still evolves a single stage."""
        progress = grant_shadow_xp(sample_shadow, 1_000_000, ShadowSettings())

        assert progress.evolution_level == 1

    def test_maxed_shadow_keeps_gaining_xp(self, sample_shadow: ShadowCompanion) -> None:
        """Test a Marshal shadow accumulates XP without evolving."""
        sample_shadow.evolution_level = 2
        sample_shadow.xp_to_next_evolution = None

        progress = grant_shadow_xp(sample_shadow, 500, ShadowSettings())

        assert not progress.evolved
        assert sample_shadow.experience_points == 100
        assert sample_shadow.bonus.value == 10


class TestEquipShadow:
    """Tests for toggling the active shadow."""

    @pytest.fixture
    def army(self, sample_state: PlayerState) -> PlayerState:
        """A state with two shadows."""
        sample_state.shadows.append(
            ShadowCompanion(
                id="shadow-tank",
                name="Tank",
                rank=RankTier.C,
                bonus=StatBonus(stat=StatType.VITALITY, value=8),
            )
        )
        return sample_state

    def test_equip(self, army: PlayerState) -> None:
        """Test equipping sets the active shadow."""
        shadow = equip_shadow(army, "shadow-igris")

        assert shadow is not None
        assert army.equipped_shadow.id == "shadow-igris"
        assert army.logs[-1].title == "Shadow Summoned"

    def test_equip_replaces(self, army: PlayerState) -> None:
        """Test equipping another shadow replaces the current one."""
        equip_shadow(army, "shadow-igris")

        equip_shadow(army, "shadow-tank")

        assert army.equipped_shadow.id == "shadow-tank"
        assert sum(1 for s in army.shadows if s.is_equipped) == 1

    def test_toggle_off(self, army: PlayerState) -> None:
        """Test equipping the equipped shadow dismisses it."""
        equip_shadow(army, "shadow-igris")

        assert equip_shadow(army, "shadow-igris") is None
        assert army.equipped_shadow is None
        assert army.logs[-1].title == "Shadow Dismissed"

    def test_missing(self, army: PlayerState) -> None:
        """Test unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            equip_shadow(army, "shadow-beru")
