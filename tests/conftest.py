"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Hunter System test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hunter_system.engine.rng import RandomSource
from hunter_system.models.character import CharacterStats, StatBonus
from hunter_system.models.enums import EquipmentSlot, RankTier, Rarity, StatType
from hunter_system.models.equipment import EquipmentItem
from hunter_system.models.game_state import PlayerState, create_player_state
from hunter_system.models.shadows import ShadowCompanion


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from hunter_system.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "HUNTER_SYSTEM_DEBUG": "true",
        "HUNTER_SYSTEM_LOG_LEVEL": "DEBUG",
        "HUNTER_SYSTEM_POWER_SCALE": "20",
        "HUNTER_SYSTEM_UPGRADE_PITY_STEP": "0.2",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def rng() -> RandomSource:
    """Provide a seeded random source for reproducible draws."""
    return RandomSource(seed=42)


class FixedRandom(RandomSource):
    """RandomSource whose ``random()`` replays a fixed sequence of values."""

    def __init__(self, *values: float, seed: int = 0) -> None:
        super().__init__(seed=seed)
        self._values = list(values)

    def random(self) -> float:
        if self._values:
            return self._values.pop(0)
        return super().random()


@pytest.fixture
def fixed_random() -> type[FixedRandom]:
    """Provide the FixedRandom class for scripting upgrade rolls."""
    return FixedRandom


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_character() -> CharacterStats:
    """Provide a level 1 character with default attributes."""
    return CharacterStats()


@pytest.fixture
def sample_item() -> EquipmentItem:
    """Provide an unequipped rare weapon with two stat lines."""
    return EquipmentItem(
        id="item-sword",
        name="Gleaming Blade",
        slot=EquipmentSlot.WEAPON,
        rarity=Rarity.RARE,
        base_stats=[
            StatBonus(stat=StatType.STRENGTH, value=10),
            StatBonus(stat=StatType.AGILITY, value=3),
        ],
    )


@pytest.fixture
def sample_shadow() -> ShadowCompanion:
    """Provide a freshly extracted, unequipped shadow."""
    return ShadowCompanion(
        id="shadow-igris",
        name="Igris",
        rank=RankTier.B,
        bonus=StatBonus(stat=StatType.STRENGTH, value=10),
    )


@pytest.fixture
def sample_state(sample_item: EquipmentItem, sample_shadow: ShadowCompanion) -> PlayerState:
    """Provide a player with one item, one shadow and some shards."""
    state = create_player_state(shards=1_000)
    state.inventory.append(sample_item)
    state.shadows.append(sample_shadow)
    return state
