"""Handlers for XP and kill tracking."""

from dataclasses import dataclass

from django.db import transaction

from gangroster.core.context import MutationContext
from gangroster.core.dispatch import log_fighter_action
from gangroster.core.errors import InvalidInput
from gangroster.core.models import Fighter, FighterLogType
from gangroster.models import is_int
from gangroster.tracing import traced
from gangroster.tracker import track


@dataclass
class FighterXpResult:
    fighter: Fighter
    xp_before: int
    xp_after: int
    kills_before: int
    kills_after: int


@traced("handle_fighter_xp_update")
@transaction.atomic
def handle_fighter_xp_update(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    xp_to_add: int,
    ooa_count: int = 0,
) -> FighterXpResult:
    """
    Add ``xp_to_add`` to the fighter's XP, and ``ooa_count`` to their kills.

    XP is not clamped: a negative delta may take it below zero. Spyrers also
    add the OOA count to their kill count. One audit entry is written for
    the XP change, and a second when ``ooa_count`` is positive.
    """
    if not is_int(xp_to_add):
        raise InvalidInput("XP to add must be a whole number")
    if not is_int(ooa_count) or ooa_count < 0:
        raise InvalidInput("OOA count must be a non-negative whole number")

    xp_before = fighter.xp
    kills_before = fighter.kills

    fighter.xp = xp_before + xp_to_add
    update_fields = ["xp", "modified"]
    if ooa_count:
        fighter.kills = kills_before + ooa_count
        update_fields.append("kills")
        if fighter.is_spyrer:
            fighter.kill_count += ooa_count
            update_fields.append("kill_count")
    fighter.save(update_fields=update_fields)

    log_fighter_action(
        ctx,
        gang_id=fighter.gang_id,
        fighter_id=fighter.id,
        fighter_name=fighter.name,
        action_type=FighterLogType.XP_CHANGED,
        old_value=xp_before,
        new_value=fighter.xp,
        description=f"{fighter.name} XP {xp_before} -> {fighter.xp}",
    )
    if ooa_count > 0:
        log_fighter_action(
            ctx,
            gang_id=fighter.gang_id,
            fighter_id=fighter.id,
            fighter_name=fighter.name,
            action_type=FighterLogType.OOA_CHANGED,
            old_value=kills_before,
            new_value=fighter.kills,
            description=f"{fighter.name} took {ooa_count} fighter(s) out of action",
        )

    track(
        "fighter_xp_changed",
        fighter_id=fighter.id,
        xp_delta=xp_to_add,
        ooa_count=ooa_count,
    )

    return FighterXpResult(
        fighter=fighter,
        xp_before=xp_before,
        xp_after=fighter.xp,
        kills_before=kills_before,
        kills_after=fighter.kills,
    )
