"""Handler for buying equipment for a fighter."""

from dataclasses import dataclass
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from gangroster.content.models import ContentEquipment
from gangroster.core.context import MutationContext
from gangroster.core.cost import invalidate_fighter_cost
from gangroster.core.dispatch import invalidate_beast_owners, log_fighter_action
from gangroster.core.errors import InsufficientResource, InvalidInput, NotFound
from gangroster.core.financials import lock_gang, update_gang_financials
from gangroster.core.models import Fighter, FighterEquipment, FighterLogType, Gang
from gangroster.core.pricing import purchase_costs
from gangroster.models import format_cost_display, is_int
from gangroster.tracing import traced
from gangroster.tracker import track


@dataclass
class EquipmentPurchaseResult:
    """Result of buying equipment."""

    fighter_equipment: FighterEquipment
    gang: Gang
    purchase_cost: int
    rating_cost: int
    rating_delta: int
    description: str


def _mount_target(fighter: Fighter, target_equipment_id) -> Optional[FighterEquipment]:
    if target_equipment_id is None:
        return None
    try:
        target = FighterEquipment.objects.get(pk=target_equipment_id)
    except (FighterEquipment.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Target equipment not found")
    if target.fighter_id != fighter.id:
        raise InvalidInput("Equipment can only be mounted on the same fighter's gear")
    if target.target_equipment_id is not None:
        raise InvalidInput("Equipment cannot be mounted on mounted equipment")
    return target


@traced("handle_equipment_purchase")
@transaction.atomic
def handle_equipment_purchase(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    equipment_id,
    manual_cost: Optional[int] = None,
    master_crafted: bool = False,
    use_base_cost_for_rating: bool = True,
    target_equipment_id=None,
) -> EquipmentPurchaseResult:
    """
    Buy an item for a fighter, paying with gang credits.

    The listed cost is the catalog cost, with the master-crafted uplift for
    weapons. The gang pays ``manual_cost`` when given, otherwise the listed
    cost. The item adds the listed cost to the fighter's value, or the paid
    cost when ``use_base_cost_for_rating`` is False; gang rating follows if
    the fighter is active.

    Raises:
        NotFound: Unknown equipment or mount target
        InvalidInput: Negative manual cost or bad mount target
        InsufficientResource: The gang cannot afford it
    """
    if manual_cost is not None and (not is_int(manual_cost) or manual_cost < 0):
        raise InvalidInput("Invalid cost provided")

    try:
        equipment = ContentEquipment.objects.get(pk=equipment_id)
    except (ContentEquipment.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Equipment not found")

    target = _mount_target(fighter, target_equipment_id)

    master_crafted = bool(master_crafted) and equipment.is_weapon
    paid, rating_cost = purchase_costs(
        equipment.cost,
        equipment_type=equipment.equipment_type,
        master_crafted=master_crafted,
        manual_cost=manual_cost,
        use_base_cost_for_rating=use_base_cost_for_rating,
    )

    gang = lock_gang(fighter.gang_id)
    if gang.credits < paid:
        raise InsufficientResource(
            f"Not enough credits. Required: {paid}, Available: {gang.credits}"
        )

    fighter_equipment = FighterEquipment.objects.create(
        fighter=fighter,
        owner=ctx.owner,
        equipment=equipment,
        cost=rating_cost,
        purchase_cost=paid,
        is_master_crafted=master_crafted,
        target_equipment=target,
    )

    rating_delta = rating_cost if fighter.counts_toward_rating else 0
    update = update_gang_financials(
        fighter.gang_id, rating_delta=rating_delta, credits_delta=-paid
    )
    invalidate_fighter_cost(fighter.id)
    invalidate_beast_owners(fighter.id)

    description = (
        f"{fighter.name} bought {fighter_equipment.name} ({format_cost_display(paid)})"
    )
    log_fighter_action(
        ctx,
        gang_id=fighter.gang_id,
        fighter_id=fighter.id,
        fighter_name=fighter.name,
        action_type=FighterLogType.EQUIPMENT_PURCHASED,
        new_value=fighter_equipment.name,
        description=description,
    )
    track(
        "equipment_purchased",
        fighter_id=fighter.id,
        equipment_id=equipment.id,
        purchase_cost=paid,
        rating_cost=rating_cost,
    )

    return EquipmentPurchaseResult(
        fighter_equipment=fighter_equipment,
        gang=update.gang,
        purchase_cost=paid,
        rating_cost=rating_cost,
        rating_delta=rating_delta,
        description=description,
    )
