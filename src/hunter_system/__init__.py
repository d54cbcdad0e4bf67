"""Hunter System - progression and reward resolution engine.

A gamified self-improvement tracker turns habits into an RPG economy of
levels, stats, equipment, titles, shadow companions and dungeons. This
package is the engine behind that economy; rendering, audio and cloud
saves are host concerns that call into it.

ARCHITECTURE:
- PlayerState is the single source of truth, persisted as one JSON object
- Every change goes through apply_command(state, command, rng) and yields
  a new state; the input state is never mutated
- All randomness flows through an injected, seedable RandomSource
- Rewards are appended to a queue that the host drains for presentation

Example:
    >>> from hunter_system import HunterSystem
    >>>
    >>> system = HunterSystem(seed=42)
    >>> outcome = system.request_dungeon_run("dungeon_goblin_den")
    >>> outcome.victory
    True
    >>> for reward in system.drain_rewards():
    ...     print(reward.kind, reward.name)

Modules:
    core: Configuration, logging, constants and exceptions.
    models: Pydantic V2 data model and persisted state shape.
    engine: Power, dungeons, rewards, progression, upgrades and the facade.
"""

from __future__ import annotations

# Core
from hunter_system.core.config import Settings, get_settings
from hunter_system.core.exceptions import HunterSystemError
from hunter_system.core.logging import configure_logging, get_logger

# Models (The Source of Truth)
from hunter_system.models import (
    CharacterStats,
    DungeonRunResult,
    EquipmentItem,
    PlayerState,
    RewardQueueItem,
    ShadowCompanion,
    create_player_state,
    dump_state,
    load_state,
)

# Engine
from hunter_system.engine import (
    HunterSystem,
    RandomSource,
    Transition,
    apply_command,
    player_power,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "HunterSystemError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "CharacterStats",
    "EquipmentItem",
    "ShadowCompanion",
    "DungeonRunResult",
    "RewardQueueItem",
    "PlayerState",
    "create_player_state",
    "dump_state",
    "load_state",
    # Engine
    "RandomSource",
    "HunterSystem",
    "Transition",
    "apply_command",
    "player_power",
]
