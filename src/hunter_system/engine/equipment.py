"""Equipment generation and inventory management.

Generation draws rarity, slot, name and stat lines from an injected
RandomSource. The inventory operations (equip, unequip, purchase, salvage)
mutate the PlayerState they are given; ``engine.system`` always hands them
a working copy, and every check runs before the first mutation so a
rejected operation leaves that copy untouched.
"""

from __future__ import annotations

from collections.abc import Mapping

from hunter_system.core.constants import (
    BASE_STAT_RANGES,
    BOSS_BOOSTED_RARITIES,
    DEFAULT_SHOP_RARITY_WEIGHTS,
    ITEM_NAME_PREFIXES,
    ITEM_NAME_SUFFIXES,
    ITEM_ROOTS,
    SALVAGE_LEVEL_BONUS,
    SALVAGE_SHARD_VALUES,
    STAT_LINES_BY_RARITY,
)
from hunter_system.core.exceptions import InsufficientResourceError, NotFoundError
from hunter_system.core.logging import get_logger
from hunter_system.engine.rng import RandomSource
from hunter_system.models.character import StatBonus
from hunter_system.models.enums import EquipmentSlot, LogCategory, Rarity, StatType
from hunter_system.models.equipment import EquipmentItem
from hunter_system.models.game_state import PlayerState, create_log


logger = get_logger(__name__)

SHOP_RARITY_WEIGHTS: dict[Rarity, float] = {
    Rarity(name): weight for name, weight in DEFAULT_SHOP_RARITY_WEIGHTS.items()
}


# =============================================================================
# Generation
# =============================================================================


def draw_rarity(rng: RandomSource, drop_rates: Mapping[Rarity, float]) -> Rarity:
    """Draw a rarity with a rarest-first cumulative roll.

    Rates are treated as probabilities; tables whose weights sum above 1
    are normalized first. A roll past every cumulative bound falls back
    to common.

    Args:
        rng: Random source.
        drop_rates: Probability (or weight) per rarity.

    Returns:
        The drawn rarity.
    """
    total = sum(max(0.0, rate) for rate in drop_rates.values())
    scale = total if total > 1.0 else 1.0
    roll = rng.random()

    cumulative = 0.0
    for rarity in Rarity.rarest_first():
        cumulative += max(0.0, drop_rates.get(rarity, 0.0)) / scale
        if roll < cumulative:
            return rarity
    return Rarity.COMMON


def boosted_rates(drop_rates: Mapping[Rarity, float], factor: float) -> dict[Rarity, float]:
    """Copy of ``drop_rates`` with the top rarities multiplied by ``factor``."""
    boosted = dict(drop_rates)
    for name in BOSS_BOOSTED_RARITIES:
        rarity = Rarity(name)
        if rarity in boosted:
            boosted[rarity] = boosted[rarity] * factor
    return boosted


def _item_name(rng: RandomSource, slot: EquipmentSlot, rarity: Rarity) -> str:
    root = rng.choice(ITEM_ROOTS[slot.value])
    name = f"{rng.choice(ITEM_NAME_PREFIXES)} {root}"
    if rarity.order >= Rarity.EPIC.order:
        name = f"{name} {rng.choice(ITEM_NAME_SUFFIXES)}"
    return name


def generate_equipment(
    rng: RandomSource,
    *,
    rarity: Rarity | None = None,
    slot: EquipmentSlot | None = None,
    drop_rates: Mapping[Rarity, float] | None = None,
) -> EquipmentItem:
    """Generate a new level-0 equipment item.

    Args:
        rng: Random source.
        rarity: Fixed rarity; drawn from ``drop_rates`` when omitted.
        slot: Fixed slot; drawn uniformly when omitted.
        drop_rates: Rarity table used when ``rarity`` is omitted. Defaults
            to the shop weights.

    Returns:
        A fresh, unequipped EquipmentItem with a unique id.
    """
    if rarity is None:
        rarity = draw_rarity(rng, drop_rates if drop_rates is not None else SHOP_RARITY_WEIGHTS)
    if slot is None:
        slot = rng.choice(list(EquipmentSlot))

    lines = min(STAT_LINES_BY_RARITY[rarity.value], len(StatType))
    low, high = BASE_STAT_RANGES[rarity.value]
    base_stats = [
        StatBonus(stat=stat, value=rng.randint(low, high))
        for stat in rng.sample(list(StatType), lines)
    ]

    item = EquipmentItem(
        name=_item_name(rng, slot, rarity),
        slot=slot,
        rarity=rarity,
        base_stats=base_stats,
        description=f"A {rarity.value} {slot.value} imbued with power.",
    )
    logger.debug("Equipment generated", item_id=item.id, rarity=rarity.value, slot=slot.value)
    return item


# =============================================================================
# Inventory Operations
# =============================================================================


def _require_item(state: PlayerState, item_id: str) -> EquipmentItem:
    item = state.get_item(item_id)
    if item is None:
        raise NotFoundError("Item not found", entity="item", entity_id=item_id)
    return item


def equip_item(state: PlayerState, item_id: str) -> EquipmentItem:
    """Equip an item, unequipping whatever occupied its slot.

    Args:
        state: Working state, mutated in place.
        item_id: Inventory item to equip.

    Returns:
        The equipped item.

    Raises:
        NotFoundError: If the item is not in the inventory.
    """
    item = _require_item(state, item_id)

    # Clear the slot first so the one-per-slot check never sees two items
    previous = state.equipped_in(item.slot)
    if previous is not None and previous.id != item.id:
        previous.is_equipped = False
    item.is_equipped = True

    state.add_log(create_log(LogCategory.EQUIPMENT, "Item Equipped", f"Equipped {item.to_summary()}"))
    logger.info("Item equipped", item_id=item.id, slot=item.slot.value)
    return item


def unequip_item(state: PlayerState, item_id: str) -> EquipmentItem:
    """Unequip an item. Unequipping an unequipped item is a no-op."""
    item = _require_item(state, item_id)
    if item.is_equipped:
        item.is_equipped = False
        state.add_log(
            create_log(LogCategory.EQUIPMENT, "Item Unequipped", f"Unequipped {item.to_summary()}")
        )
        logger.info("Item unequipped", item_id=item.id, slot=item.slot.value)
    return item


def purchase_equipment(
    state: PlayerState,
    cost: int,
    rng: RandomSource,
    rarity: Rarity | None = None,
) -> EquipmentItem:
    """Buy a generated item with shards.

    Args:
        state: Working state, mutated in place.
        cost: Shard price.
        rng: Random source for the generated item.
        rarity: Optional fixed rarity.

    Returns:
        The purchased item, already added to the inventory.

    Raises:
        InsufficientResourceError: If the wallet cannot cover the cost.
    """
    cost = max(0, cost)
    if state.shards < cost:
        raise InsufficientResourceError(
            "Not enough shards to purchase equipment",
            required=cost,
            available=state.shards,
        )

    item = generate_equipment(rng, rarity=rarity)
    state.shards -= cost
    state.inventory.insert(0, item)
    state.add_log(
        create_log(
            LogCategory.EQUIPMENT,
            "Equipment Purchased",
            f"Bought {item.name} ({item.rarity.value}) for {cost} Shards",
        )
    )
    logger.info("Equipment purchased", item_id=item.id, rarity=item.rarity.value, cost=cost)
    return item


def salvage_value(item: EquipmentItem) -> int:
    """Shards granted for salvaging an item."""
    return SALVAGE_SHARD_VALUES[item.rarity.value] + item.level * SALVAGE_LEVEL_BONUS


def salvage_item(state: PlayerState, item_id: str) -> int:
    """Destroy an item for shards.

    Args:
        state: Working state, mutated in place.
        item_id: Inventory item to salvage.

    Returns:
        The number of shards granted.

    Raises:
        NotFoundError: If the item is not in the inventory.
    """
    item = _require_item(state, item_id)
    shards = salvage_value(item)

    state.inventory = [other for other in state.inventory if other.id != item_id]
    state.shards += shards
    state.add_log(
        create_log(
            LogCategory.EQUIPMENT,
            "Item Salvaged",
            f"Salvaged {item.to_summary()} for {shards} Shards",
        )
    )
    logger.info("Item salvaged", item_id=item_id, shards=shards)
    return shards


__all__ = [
    "SHOP_RARITY_WEIGHTS",
    "draw_rarity",
    "boosted_rates",
    "generate_equipment",
    "equip_item",
    "unequip_item",
    "purchase_equipment",
    "salvage_value",
    "salvage_item",
]
