"""Shadow companion evolution and equipping.

After a victory the equipped shadow receives a share of the dungeon XP.
Experience is cumulative; once it reaches the current threshold the shadow
evolves one stage (Elite, then Marshal), its bonus grows by
``evolution_level * step`` and the threshold moves to the next stage. A
shadow evolves at most once per run.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from hunter_system.core.config import ShadowSettings, get_settings
from hunter_system.core.constants import EVOLUTION_THRESHOLDS
from hunter_system.core.exceptions import NotFoundError
from hunter_system.core.logging import get_logger
from hunter_system.models.character import StatBonus
from hunter_system.models.enums import LogCategory
from hunter_system.models.game_state import PlayerState, create_log
from hunter_system.models.shadows import ShadowCompanion


logger = get_logger(__name__)


@dataclass(frozen=True)
class ShadowProgress:
    """XP and evolution outcome of one run for the equipped shadow.

    Attributes:
        shadow_id: The shadow that received XP.
        xp_gained: XP added this run.
        evolved: Whether the shadow evolved this run.
        evolution_level: Evolution level after the run.
        bonus: Bonus after the run.
    """

    shadow_id: str
    xp_gained: int
    evolved: bool
    evolution_level: int
    bonus: StatBonus


def shadow_xp_share(dungeon_xp: int, settings: ShadowSettings | None = None) -> int:
    """XP the equipped shadow receives from a dungeon clear."""
    cfg = settings if settings is not None else get_settings().shadow
    return math.floor(max(0, dungeon_xp) * cfg.xp_share)


def grant_shadow_xp(
    shadow: ShadowCompanion,
    dungeon_xp: int,
    settings: ShadowSettings | None = None,
) -> ShadowProgress:
    """Add a dungeon's XP share to a shadow and evolve it if it crossed its threshold.

    Args:
        shadow: The shadow, mutated in place.
        dungeon_xp: XP the hunter earned from the run.
        settings: Optional shadow settings override.

    Returns:
        ShadowProgress describing the change.
    """
    cfg = settings if settings is not None else get_settings().shadow
    gained = shadow_xp_share(dungeon_xp, cfg)
    shadow.experience_points += gained

    evolved = False
    threshold = shadow.xp_to_next_evolution
    if threshold is not None and shadow.experience_points >= threshold and not shadow.is_max_evolution:
        new_level = shadow.evolution_level + 1
        shadow.evolution_level = new_level
        shadow.bonus = StatBonus(
            stat=shadow.bonus.stat,
            value=shadow.bonus.value + new_level * cfg.evolution_bonus_step,
        )
        shadow.xp_to_next_evolution = EVOLUTION_THRESHOLDS.get(new_level)
        evolved = True
        logger.info(
            "Shadow evolved",
            shadow_id=shadow.id,
            evolution_level=new_level,
            bonus=shadow.bonus.value,
        )

    return ShadowProgress(
        shadow_id=shadow.id,
        xp_gained=gained,
        evolved=evolved,
        evolution_level=shadow.evolution_level,
        bonus=shadow.bonus,
    )


def equip_shadow(state: PlayerState, shadow_id: str) -> ShadowCompanion | None:
    """Toggle a shadow as the active companion.

    Equipping an already-equipped shadow unequips it; equipping another
    shadow replaces the current one.

    Args:
        state: Working state, mutated in place.
        shadow_id: Shadow to toggle.

    Returns:
        The equipped shadow, or None if the toggle left no shadow equipped.

    Raises:
        NotFoundError: If the shadow is not in the army.
    """
    shadow = state.get_shadow(shadow_id)
    if shadow is None:
        raise NotFoundError("Shadow not found", entity="shadow", entity_id=shadow_id)

    if shadow.is_equipped:
        shadow.is_equipped = False
        state.add_log(create_log(LogCategory.SHADOW, "Shadow Dismissed", f"{shadow.display_name} returns to the shadows."))
        logger.info("Shadow unequipped", shadow_id=shadow_id)
        return None

    for other in state.shadows:
        other.is_equipped = False
    shadow.is_equipped = True
    state.add_log(create_log(LogCategory.SHADOW, "Shadow Summoned", f"{shadow.display_name} stands at your side."))
    logger.info("Shadow equipped", shadow_id=shadow_id)
    return shadow


__all__ = [
    "ShadowProgress",
    "shadow_xp_share",
    "grant_shadow_xp",
    "equip_shadow",
]
