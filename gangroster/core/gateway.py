"""
Fighter mutation gateway.

One function per operation. Each takes a MutationContext and a params
object, looks up the fighter within the acting user's gangs, calls the
handler, and returns a MutationResult. Nothing raises past this module:
domain errors keep their kind, anything else becomes a store error.
"""

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Callable

from django.core.exceptions import ValidationError

from gangroster.core.context import MutationContext
from gangroster.core.cost import get_fighter_total_cost
from gangroster.core.errors import (
    ErrorKind,
    InvalidInput,
    MutationError,
    NotFound,
    StoreError,
)
from gangroster.core.handlers.equipment import (
    handle_equipment_purchase,
    handle_equipment_sale,
    handle_equipment_stash,
)
from gangroster.core.handlers.fighter import (
    handle_advancement_deletion,
    handle_characteristic_advancement,
    handle_fighter_details_update,
    handle_fighter_effects_update,
    handle_fighter_status_change,
    handle_fighter_xp_update,
    handle_skill_advancement,
)
from gangroster.core.models import Fighter
from gangroster.core.params import (
    AddCharacteristicAdvancementParams,
    AddSkillAdvancementParams,
    BuyEquipmentParams,
    DeleteAdvancementParams,
    EditFighterStatusParams,
    MoveEquipmentToStashParams,
    Params,
    SellEquipmentParams,
    UpdateFighterDetailsParams,
    UpdateFighterEffectsParams,
    UpdateFighterXpParams,
    UpdateFighterXpWithOoaParams,
)
from gangroster.core.results import MutationResult
from gangroster.core.serializers import (
    effect_payload,
    equipment_payload,
    fighter_payload,
    fighter_view_payload,
    gang_payload,
    skill_payload,
    user_effects_payload,
)
from gangroster.tracing import span
from gangroster.tracker import track_mutation_failure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Operation:
    name: str
    params_class: type
    run: Callable[[MutationContext, Params], MutationResult]


OPERATIONS: dict[str, Operation] = {}


def mutation_boundary(operation: str):
    """Turn a function returning result data into one returning a MutationResult."""

    def decorator(func):
        @wraps(func)
        def wrapper(ctx: MutationContext, params) -> MutationResult:
            fighter_id = getattr(params, "fighter_id", params)
            with span(f"mutation.{operation}", fighter_id=fighter_id):
                try:
                    data = func(ctx, params)
                except MutationError as e:
                    logger.info(f"{operation} failed for fighter {fighter_id}: {e}")
                    track_mutation_failure(operation, e.kind, fighter_id)
                    return MutationResult.failure(e.message, e.kind)
                except Exception:
                    logger.exception(f"{operation} failed for fighter {fighter_id}")
                    error = StoreError(f"Failed to {operation.replace('_', ' ')}")
                    track_mutation_failure(operation, error.kind, fighter_id)
                    return MutationResult.failure(error.message, error.kind)
            return MutationResult.ok(data)

        return wrapper

    return decorator


def operation(name: str, params_class: type):
    """Register a gateway function under ``name`` and wrap it in the boundary."""

    def decorator(func):
        bounded = mutation_boundary(name)(func)
        OPERATIONS[name] = Operation(name=name, params_class=params_class, run=bounded)
        return bounded

    return decorator


def get_fighter(ctx: MutationContext, fighter_id) -> Fighter:
    """Fetch a fighter the acting user may change."""
    try:
        return (
            Fighter.objects.select_related("gang", "fighter_type")
            .for_user(ctx.user)
            .get(pk=fighter_id)
        )
    except (Fighter.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Fighter not found")


@operation("edit_fighter_status", EditFighterStatusParams)
def edit_fighter_status(ctx: MutationContext, params: EditFighterStatusParams) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    gang_id = fighter.gang_id
    result = handle_fighter_status_change(
        ctx=ctx, fighter=fighter, action=params.action, sell_value=params.sell_value
    )
    data = {
        "fighter": None if result.deleted else fighter_payload(result.fighter),
        "gang": gang_payload(result.gang),
        "rating_delta": result.rating_delta,
        "credits_delta": result.credits_delta,
        "deleted": result.deleted,
    }
    if result.deleted:
        data["redirect_to"] = f"/gangs/{gang_id}/"
    return data


@operation("update_fighter_xp", UpdateFighterXpParams)
def update_fighter_xp(ctx: MutationContext, params: UpdateFighterXpParams) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_fighter_xp_update(
        ctx=ctx, fighter=fighter, xp_to_add=params.xp_to_add
    )
    return {"fighter": fighter_payload(result.fighter), "xp": result.xp_after}


@operation("update_fighter_xp_with_ooa", UpdateFighterXpWithOoaParams)
def update_fighter_xp_with_ooa(
    ctx: MutationContext, params: UpdateFighterXpWithOoaParams
) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_fighter_xp_update(
        ctx=ctx,
        fighter=fighter,
        xp_to_add=params.xp_to_add,
        ooa_count=params.ooa_count,
    )
    return {
        "fighter": fighter_payload(result.fighter),
        "xp": result.xp_after,
        "kills": result.kills_after,
    }


@operation("update_fighter_details", UpdateFighterDetailsParams)
def update_fighter_details(
    ctx: MutationContext, params: UpdateFighterDetailsParams
) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_fighter_details_update(
        ctx=ctx, fighter=fighter, changes=params.changes
    )
    data = {
        "fighter": fighter_payload(result.fighter),
        "gang": gang_payload(result.gang),
        "rating_delta": result.rating_delta,
        "total_cost": get_fighter_total_cost(result.fighter),
    }
    if result.effects is not None:
        data["effects"] = user_effects_payload(result.fighter)
    return data


@operation("update_fighter_effects", UpdateFighterEffectsParams)
def update_fighter_effects(
    ctx: MutationContext, params: UpdateFighterEffectsParams
) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_fighter_effects_update(ctx=ctx, fighter=fighter, stats=params.stats)
    return {
        "fighter_id": str(fighter.id),
        "effects": user_effects_payload(result.fighter),
        "skipped_stats": result.plan.skipped_stats,
    }


@operation("add_characteristic_advancement", AddCharacteristicAdvancementParams)
def add_characteristic_advancement(
    ctx: MutationContext, params: AddCharacteristicAdvancementParams
) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_characteristic_advancement(
        ctx=ctx,
        fighter=fighter,
        effect_type_id=params.effect_type_id,
        xp_cost=params.xp_cost,
        credits_increase=params.credits_increase,
    )
    return {
        "fighter": fighter_payload(result.fighter),
        "gang": gang_payload(result.gang),
        "advancement": effect_payload(result.advancement),
        "total_cost": get_fighter_total_cost(result.fighter),
    }


@operation("add_skill_advancement", AddSkillAdvancementParams)
def add_skill_advancement(
    ctx: MutationContext, params: AddSkillAdvancementParams
) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_skill_advancement(
        ctx=ctx,
        fighter=fighter,
        skill_id=params.skill_id,
        xp_cost=params.xp_cost,
        credits_increase=params.credits_increase,
    )
    return {
        "fighter": fighter_payload(result.fighter),
        "gang": gang_payload(result.gang),
        "advancement": skill_payload(result.advancement),
        "total_cost": get_fighter_total_cost(result.fighter),
    }


@operation("delete_advancement", DeleteAdvancementParams)
def delete_advancement(ctx: MutationContext, params: DeleteAdvancementParams) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_advancement_deletion(
        ctx=ctx,
        fighter=fighter,
        advancement_id=params.advancement_id,
        advancement_type=params.advancement_type,
    )
    return {
        "fighter": fighter_payload(result.fighter),
        "gang": gang_payload(result.gang),
        "xp_restored": result.xp_restored,
        "total_cost": get_fighter_total_cost(result.fighter),
    }


@operation("buy_equipment", BuyEquipmentParams)
def buy_equipment(ctx: MutationContext, params: BuyEquipmentParams) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_equipment_purchase(
        ctx=ctx,
        fighter=fighter,
        equipment_id=params.equipment_id,
        manual_cost=params.manual_cost,
        master_crafted=params.master_crafted,
        use_base_cost_for_rating=params.use_base_cost_for_rating,
        target_equipment_id=params.target_equipment_id,
    )
    return {
        "fighter_equipment": equipment_payload(result.fighter_equipment),
        "gang": gang_payload(result.gang),
        "purchase_cost": result.purchase_cost,
        "rating_cost": result.rating_cost,
        "total_cost": get_fighter_total_cost(fighter),
    }


@operation("sell_equipment", SellEquipmentParams)
def sell_equipment(ctx: MutationContext, params: SellEquipmentParams) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_equipment_sale(
        ctx=ctx,
        fighter=fighter,
        fighter_equipment_id=params.fighter_equipment_id,
        manual_cost=params.manual_cost,
    )
    return {
        "gang": gang_payload(result.gang),
        "fighter_equipment_id": result.fighter_equipment_id,
        "sell_value": result.sell_value,
        "total_cost": get_fighter_total_cost(fighter),
    }


@operation("move_equipment_to_stash", MoveEquipmentToStashParams)
def move_equipment_to_stash(
    ctx: MutationContext, params: MoveEquipmentToStashParams
) -> dict:
    fighter = get_fighter(ctx, params.fighter_id)
    result = handle_equipment_stash(
        ctx=ctx, fighter=fighter, fighter_equipment_id=params.fighter_equipment_id
    )
    return {
        "gang": gang_payload(result.gang),
        "fighter_equipment_id": result.fighter_equipment_id,
        "stash_item_id": str(result.stash_item.id),
        "total_cost": get_fighter_total_cost(fighter),
    }


@mutation_boundary("get_fighter_view")
def get_fighter_view(ctx: MutationContext, fighter_id) -> dict:
    """Read-only: everything the client caches for one fighter."""
    return fighter_view_payload(get_fighter(ctx, fighter_id))


def run_operation(
    ctx: MutationContext, name: str, fighter_id, payload
) -> MutationResult:
    """Run a registered operation from a raw JSON payload."""
    op = OPERATIONS.get(name)
    if op is None:
        return MutationResult.failure("Unknown operation", ErrorKind.VALIDATION)
    try:
        params = op.params_class.from_payload(fighter_id, payload)
    except InvalidInput as e:
        return MutationResult.failure(e.message, e.kind)
    except TypeError:
        return MutationResult.failure("Invalid parameters", ErrorKind.VALIDATION)
    return op.run(ctx, params)
