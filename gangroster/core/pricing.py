"""Equipment pricing rules shared by the server handlers and client patches."""

import math
from typing import Optional

WEAPON = "weapon"
MASTER_CRAFTED_SUFFIX = " (Master-crafted)"


def master_crafted_cost(base_cost: int) -> int:
    """Master-crafted weapons cost 25% more, rounded up to the nearest 5."""
    return math.ceil(base_cost * 1.25 / 5) * 5


def listed_equipment_cost(
    base_cost: int, *, equipment_type: str, master_crafted: bool = False
) -> int:
    """Catalog cost of an item, with the master-crafted uplift for weapons only."""
    if master_crafted and equipment_type == WEAPON:
        return master_crafted_cost(base_cost)
    return base_cost


def purchase_costs(
    base_cost: int,
    *,
    equipment_type: str,
    master_crafted: bool = False,
    manual_cost: Optional[int] = None,
    use_base_cost_for_rating: bool = True,
) -> tuple[int, int]:
    """
    Work out what a purchase costs.

    Returns ``(paid, rating_cost)``: the credits taken from the gang, and the
    value the item adds to the fighter's cost.
    """
    listed = listed_equipment_cost(
        base_cost, equipment_type=equipment_type, master_crafted=master_crafted
    )
    paid = listed if manual_cost is None else manual_cost
    rating_cost = listed if use_base_cost_for_rating else paid
    return paid, rating_cost


def equipment_display_name(name: str, *, master_crafted: bool) -> str:
    if master_crafted:
        return f"{name}{MASTER_CRAFTED_SUFFIX}"
    return name
