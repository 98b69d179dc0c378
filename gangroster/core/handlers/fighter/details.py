"""Handler for sparse edits of a fighter's details."""

from dataclasses import dataclass, field
from typing import Any, Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from gangroster.content.models import ContentFighterType
from gangroster.core.context import MutationContext
from gangroster.core.cost import invalidate_fighter_cost
from gangroster.core.dispatch import invalidate_beast_owners, log_fighter_action
from gangroster.core.errors import InvalidInput, NotFound
from gangroster.core.financials import update_gang_financials
from gangroster.core.handlers.fighter.effects import (
    FighterEffectsResult,
    handle_fighter_effects_update,
    validate_stat_changes,
)
from gangroster.core.models import Fighter, FighterLogType, Gang
from gangroster.models import format_cost_display, is_int
from gangroster.tracing import traced
from gangroster.tracker import track


class _Unchanged:
    """Marks a field absent from the patch, as distinct from an explicit None."""

    def __repr__(self):
        return "<unchanged>"


_UNCHANGED = _Unchanged()

TEXT_FIELDS = (
    "name",
    "label",
    "note",
    "note_backstory",
    "fighter_class",
    "fighter_sub_type",
)
COUNTER_FIELDS = ("kills", "kill_count")
DETAIL_FIELDS = TEXT_FIELDS + COUNTER_FIELDS + (
    "special_rules",
    "fighter_type_id",
    "cost_adjustment",
    "stat_adjustments",
)


@dataclass
class FieldChange:
    """A single field change on a fighter."""

    field_name: str
    old_value: Any
    new_value: Any


@dataclass
class FighterDetailsResult:
    fighter: Fighter
    gang: Gang
    changes: list[FieldChange] = field(default_factory=list)
    rating_delta: int = 0
    effects: Optional[FighterEffectsResult] = None


def _validate(changes: dict) -> None:
    if not isinstance(changes, dict):
        raise InvalidInput("Changes must be a mapping of field name to value")

    unknown = sorted(set(changes) - set(DETAIL_FIELDS))
    if unknown:
        raise InvalidInput(f"Unknown field(s): {', '.join(unknown)}")

    for name in TEXT_FIELDS:
        value = changes.get(name, _UNCHANGED)
        if value is not _UNCHANGED and not isinstance(value, str):
            raise InvalidInput(f"{name} must be text")
    if "name" in changes and not changes["name"].strip():
        raise InvalidInput("Fighter name cannot be blank")

    for name in COUNTER_FIELDS:
        value = changes.get(name, _UNCHANGED)
        if value is not _UNCHANGED and (not is_int(value) or value < 0):
            raise InvalidInput(f"{name} must be a non-negative whole number")

    if "cost_adjustment" in changes and not is_int(changes["cost_adjustment"]):
        raise InvalidInput("Cost adjustment must be a whole number")

    rules = changes.get("special_rules", _UNCHANGED)
    if rules is not _UNCHANGED and (
        not isinstance(rules, list) or not all(isinstance(r, str) for r in rules)
    ):
        raise InvalidInput("Special rules must be a list of text")

    if "stat_adjustments" in changes:
        validate_stat_changes(changes["stat_adjustments"])


@traced("handle_fighter_details_update")
@transaction.atomic
def handle_fighter_details_update(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    changes: dict,
) -> FighterDetailsResult:
    """
    Apply a sparse patch of display and classification fields.

    Only keys present in ``changes`` are touched; absent keys are left as
    they are rather than cleared. The name is right-trimmed.

    When ``cost_adjustment`` changes on an active fighter, gang rating moves
    by the difference between the new and old adjustment.
    ``stat_adjustments`` are routed through the effects consolidator.
    """
    _validate(changes)

    applied: list[FieldChange] = []

    def apply(field_name: str, new_value: Any) -> None:
        old_value = getattr(fighter, field_name)
        if old_value != new_value:
            setattr(fighter, field_name, new_value)
            applied.append(FieldChange(field_name, old_value, new_value))

    for name in TEXT_FIELDS + COUNTER_FIELDS + ("special_rules",):
        value = changes.get(name, _UNCHANGED)
        if value is _UNCHANGED:
            continue
        if name == "name":
            value = value.rstrip()
        apply(name, value)

    fighter_type_id = changes.get("fighter_type_id", _UNCHANGED)
    if fighter_type_id is not _UNCHANGED:
        if fighter_type_id is None:
            apply("fighter_type", None)
        else:
            try:
                fighter_type = ContentFighterType.objects.get(pk=fighter_type_id)
            except (
                ContentFighterType.DoesNotExist,
                ValidationError,
                ValueError,
                TypeError,
            ):
                raise NotFound("Fighter type not found")
            apply("fighter_type", fighter_type)

    rating_delta = 0
    old_adjustment = fighter.cost_adjustment
    new_adjustment = changes.get("cost_adjustment", _UNCHANGED)
    if new_adjustment is not _UNCHANGED:
        apply("cost_adjustment", new_adjustment)
        if fighter.counts_toward_rating:
            rating_delta = new_adjustment - old_adjustment

    if applied:
        fighter.save()

    gang = fighter.gang
    if rating_delta:
        gang = update_gang_financials(fighter.gang_id, rating_delta=rating_delta).gang
        fighter.gang = gang

    for change in applied:
        if change.field_name == "kills":
            log_fighter_action(
                ctx,
                gang_id=fighter.gang_id,
                fighter_id=fighter.id,
                fighter_name=fighter.name,
                action_type=FighterLogType.KILLS_CHANGED,
                old_value=change.old_value,
                new_value=change.new_value,
            )
        elif change.field_name == "cost_adjustment":
            log_fighter_action(
                ctx,
                gang_id=fighter.gang_id,
                fighter_id=fighter.id,
                fighter_name=fighter.name,
                action_type=FighterLogType.COST_ADJUSTED,
                old_value=change.old_value,
                new_value=change.new_value,
                description=(
                    f"{fighter.name} cost adjustment "
                    f"{format_cost_display(change.old_value)} -> "
                    f"{format_cost_display(change.new_value)}"
                ),
            )

    effects_result = None
    stat_adjustments = changes.get("stat_adjustments", _UNCHANGED)
    if stat_adjustments is not _UNCHANGED:
        effects_result = handle_fighter_effects_update(
            ctx=ctx, fighter=fighter, stats=stat_adjustments
        )

    if any(c.field_name == "cost_adjustment" for c in applied):
        invalidate_fighter_cost(fighter.id)
        invalidate_beast_owners(fighter.id)

    track(
        "fighter_details_updated",
        fighter_id=fighter.id,
        fields=[c.field_name for c in applied],
        rating_delta=rating_delta,
    )

    return FighterDetailsResult(
        fighter=fighter,
        gang=gang,
        changes=applied,
        rating_delta=rating_delta,
        effects=effects_result,
    )
