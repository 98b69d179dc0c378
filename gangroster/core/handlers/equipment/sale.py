"""Handlers for selling equipment and moving it to the gang stash."""

from dataclasses import dataclass
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from gangroster.core.context import MutationContext
from gangroster.core.cost import invalidate_fighter_cost
from gangroster.core.dispatch import invalidate_beast_owners, log_fighter_action
from gangroster.core.errors import InvalidInput, NotFound
from gangroster.core.financials import update_gang_financials
from gangroster.core.models import (
    Fighter,
    FighterEquipment,
    FighterLogType,
    Gang,
    GangStashItem,
)
from gangroster.models import format_cost_display, is_int
from gangroster.tracing import traced
from gangroster.tracker import track


@dataclass
class EquipmentSaleResult:
    gang: Gang
    fighter_equipment_id: str
    sell_value: int
    rating_delta: int
    description: str


@dataclass
class EquipmentStashResult:
    gang: Gang
    fighter_equipment_id: str
    stash_item: GangStashItem
    rating_delta: int


def get_fighter_equipment(fighter: Fighter, fighter_equipment_id) -> FighterEquipment:
    try:
        return FighterEquipment.objects.select_related("equipment").get(
            pk=fighter_equipment_id, fighter=fighter
        )
    except (FighterEquipment.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Equipment not found")


def _linked_effects_value(item: FighterEquipment) -> int:
    return sum(effect.credits_increase for effect in item.effects.all())


@traced("handle_equipment_sale")
@transaction.atomic
def handle_equipment_sale(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    fighter_equipment_id,
    manual_cost: Optional[int] = None,
) -> EquipmentSaleResult:
    """
    Sell a fighter's equipment back for credits.

    The gang receives ``manual_cost`` if given, otherwise what was paid.
    Effects granted by the item are removed with it, so an active fighter's
    rating contribution drops by the item's cost plus those effects' credits.
    """
    if manual_cost is not None and (not is_int(manual_cost) or manual_cost < 0):
        raise InvalidInput("Invalid sell value provided")

    item = get_fighter_equipment(fighter, fighter_equipment_id)
    sell_value = item.purchase_cost if manual_cost is None else manual_cost
    value_removed = item.cost + _linked_effects_value(item)
    name = item.name
    item_id = str(item.id)

    item.delete()

    rating_delta = -value_removed if fighter.counts_toward_rating else 0
    update = update_gang_financials(
        fighter.gang_id, rating_delta=rating_delta, credits_delta=sell_value
    )
    invalidate_fighter_cost(fighter.id)
    invalidate_beast_owners(fighter.id)

    description = f"{fighter.name} sold {name} for {format_cost_display(sell_value)}"
    log_fighter_action(
        ctx,
        gang_id=fighter.gang_id,
        fighter_id=fighter.id,
        fighter_name=fighter.name,
        action_type=FighterLogType.EQUIPMENT_SOLD,
        old_value=name,
        description=description,
    )
    track(
        "equipment_sold",
        fighter_id=fighter.id,
        sell_value=sell_value,
        rating_delta=rating_delta,
    )

    return EquipmentSaleResult(
        gang=update.gang,
        fighter_equipment_id=item_id,
        sell_value=sell_value,
        rating_delta=rating_delta,
        description=description,
    )


@traced("handle_equipment_stash")
@transaction.atomic
def handle_equipment_stash(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    fighter_equipment_id,
) -> EquipmentStashResult:
    """
    Move a fighter's equipment into the gang stash.

    Its value moves from the fighter (and so rating, if active) to the
    stash. Effects granted by the item stay with the fighter's copy and are
    removed.
    """
    item = get_fighter_equipment(fighter, fighter_equipment_id)
    item_id = str(item.id)
    value_removed = item.cost + _linked_effects_value(item)

    stash_item = GangStashItem.objects.create(
        gang_id=fighter.gang_id,
        owner=ctx.owner,
        equipment=item.equipment,
        cost=item.cost,
        is_master_crafted=item.is_master_crafted,
    )
    name = item.name
    item.delete()

    rating_delta = -value_removed if fighter.counts_toward_rating else 0
    update = update_gang_financials(
        fighter.gang_id, rating_delta=rating_delta, stash_delta=stash_item.cost
    )
    invalidate_fighter_cost(fighter.id)
    invalidate_beast_owners(fighter.id)

    log_fighter_action(
        ctx,
        gang_id=fighter.gang_id,
        fighter_id=fighter.id,
        fighter_name=fighter.name,
        action_type=FighterLogType.EQUIPMENT_STASHED,
        old_value=name,
        description=f"{fighter.name} moved {name} to the stash",
    )
    track("equipment_stashed", fighter_id=fighter.id, cost=stash_item.cost)

    return EquipmentStashResult(
        gang=update.gang,
        fighter_equipment_id=item_id,
        stash_item=stash_item,
        rating_delta=rating_delta,
    )
