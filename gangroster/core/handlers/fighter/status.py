"""Handler for fighter status changes, including sale and deletion."""

import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction

from gangroster.core.context import MutationContext
from gangroster.core.cost import get_fighter_total_cost, invalidate_fighter_cost
from gangroster.core.dispatch import (
    invalidate_beast_owners,
    log_fighter_action,
    remove_fighter_images,
)
from gangroster.core.errors import InsufficientResource, InvalidInput
from gangroster.core.financials import lock_gang, update_gang_financials
from gangroster.core.models import Fighter, FighterLogType, Gang
from gangroster.core.status import (
    FighterStatusAction,
    apply_status_toggle,
    counts_toward_rating,
    rating_delta_for_transition,
)
from gangroster.models import format_cost_display, is_int
from gangroster.tracing import traced
from gangroster.tracker import track

logger = logging.getLogger(__name__)


@dataclass
class FighterStatusResult:
    """Result of a fighter status change."""

    fighter: Optional[Fighter]
    gang: Gang
    action: str
    log_type: str
    rating_delta: int
    credits_delta: int
    description: str

    @property
    def deleted(self) -> bool:
        return self.fighter is None


def _log_type_for(action: str, flags: dict, was_starved: bool) -> str:
    if action == FighterStatusAction.KILL:
        return FighterLogType.KILLED if flags["killed"] else FighterLogType.RESURRECTED
    if action == FighterStatusAction.RETIRE:
        return FighterLogType.RETIRED if flags["retired"] else FighterLogType.UNRETIRED
    if action == FighterStatusAction.SELL:
        return FighterLogType.ENSLAVED
    if action == FighterStatusAction.RESCUE:
        return FighterLogType.RESCUED
    if action == FighterStatusAction.STARVE:
        return FighterLogType.FED if was_starved else FighterLogType.STARVED
    if action == FighterStatusAction.RECOVER:
        return (
            FighterLogType.SENT_TO_RECOVERY
            if flags["recovery"]
            else FighterLogType.RECOVERED
        )
    return FighterLogType.CAPTURED if flags["captured"] else FighterLogType.RELEASED


@traced("handle_fighter_status_change")
@transaction.atomic
def handle_fighter_status_change(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    action: str,
    sell_value: Optional[int] = None,
) -> FighterStatusResult:
    """
    Apply one status action to a fighter.

    The matching flag is toggled (sell always sets enslaved, rescue always
    clears it). When the change moves the fighter across the active
    boundary, gang rating moves by the fighter's total cost. Selling also
    credits the gang with ``sell_value``. Starving an already starved fighter
    feeds them instead, which costs one meat.

    Args:
        ctx: Acting user and storage
        fighter: Fighter being changed
        action: One of FighterStatusAction
        sell_value: Credits received, required for "sell"

    Returns:
        FighterStatusResult; ``fighter`` is None after a delete

    Raises:
        InvalidInput: Unknown action or bad sell value
        InsufficientResource: Feeding without meat
    """
    if action not in FighterStatusAction.values:
        raise InvalidInput("Invalid action specified")

    if action == FighterStatusAction.DELETE:
        return _delete_fighter(ctx=ctx, fighter=fighter)

    credits_delta = 0
    meat_delta = 0
    was_starved = fighter.starved
    old_flags = fighter.status_flags()

    if action == FighterStatusAction.SELL:
        if not is_int(sell_value) or sell_value < 0:
            raise InvalidInput("Invalid sell value provided")
        credits_delta = sell_value

    if action == FighterStatusAction.STARVE and was_starved:
        gang = lock_gang(fighter.gang_id)
        if gang.meat < 1:
            raise InsufficientResource("Not enough meat to feed fighter")
        meat_delta = -1

    new_flags = apply_status_toggle(old_flags, action)
    was_active = counts_toward_rating(old_flags)
    is_active = counts_toward_rating(new_flags)

    rating_delta = 0
    if was_active != is_active:
        rating_delta = rating_delta_for_transition(
            was_active, is_active, get_fighter_total_cost(fighter)
        )

    for flag, value in new_flags.items():
        setattr(fighter, flag, value)
    fighter.save()

    update = update_gang_financials(
        fighter.gang_id,
        rating_delta=rating_delta,
        credits_delta=credits_delta,
        meat_delta=meat_delta,
    )
    fighter.gang = update.gang

    log_type = _log_type_for(action, new_flags, was_starved)
    description = f"{fighter.name}: {FighterLogType(log_type).label}"
    if rating_delta:
        description += f" (rating {format_cost_display(rating_delta, show_sign=True)})"
    if credits_delta:
        credits_display = format_cost_display(credits_delta, show_sign=True)
        description += f" (credits {credits_display})"

    log_fighter_action(
        ctx,
        gang_id=fighter.gang_id,
        fighter_id=fighter.id,
        fighter_name=fighter.name,
        action_type=log_type,
        description=description,
    )
    invalidate_beast_owners(fighter.id)

    track(
        "fighter_status_changed",
        action=str(action),
        fighter_id=fighter.id,
        gang_id=fighter.gang_id,
        rating_delta=rating_delta,
        credits_delta=credits_delta,
    )

    return FighterStatusResult(
        fighter=fighter,
        gang=update.gang,
        action=str(action),
        log_type=str(log_type),
        rating_delta=rating_delta,
        credits_delta=credits_delta,
        description=description,
    )


def _delete_fighter(*, ctx: MutationContext, fighter: Fighter) -> FighterStatusResult:
    """Delete a fighter, drop its images and take its cost off the rating."""
    gang_id = fighter.gang_id
    fighter_id = fighter.id
    fighter_name = fighter.name

    cost = get_fighter_total_cost(fighter) if fighter.counts_toward_rating else 0

    # Owners must be found before the beast link cascades away
    invalidate_beast_owners(fighter_id)

    fighter.delete()
    invalidate_fighter_cost(fighter_id)

    update = update_gang_financials(gang_id, rating_delta=-cost)

    remove_fighter_images(ctx.storage, gang_id, fighter_id)

    description = f"{fighter_name} removed from the gang ({format_cost_display(cost)})"
    log_fighter_action(
        ctx,
        gang_id=gang_id,
        fighter_id=fighter_id,
        fighter_name=fighter_name,
        action_type=FighterLogType.REMOVED,
        old_value=cost,
        description=description,
    )

    track(
        "fighter_removed",
        fighter_id=fighter_id,
        gang_id=gang_id,
        rating_delta=-cost,
        status_reason="deleted",
    )

    return FighterStatusResult(
        fighter=None,
        gang=update.gang,
        action=str(FighterStatusAction.DELETE),
        log_type=str(FighterLogType.REMOVED),
        rating_delta=-cost,
        credits_delta=0,
        description=description,
    )
