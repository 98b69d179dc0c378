"""Handler for user stat adjustments on a fighter."""

import logging
from dataclasses import dataclass, field

from django.db import transaction

from gangroster.content.models import USER_EFFECT_CATEGORY, ContentEffectType
from gangroster.core.context import MutationContext
from gangroster.core.cost import invalidate_fighter_cost
from gangroster.core.dispatch import invalidate_beast_owners
from gangroster.core.effects import EffectPlan, ExistingModifier, plan_effect_changes
from gangroster.core.errors import InvalidInput
from gangroster.core.models import Fighter, FighterEffect, FighterEffectModifier
from gangroster.models import is_int
from gangroster.tracing import traced
from gangroster.tracker import track

logger = logging.getLogger(__name__)


@dataclass
class FighterEffectsResult:
    fighter: Fighter
    plan: EffectPlan
    created_effects: list[FighterEffect] = field(default_factory=list)


def validate_stat_changes(stats) -> dict[str, int]:
    if not isinstance(stats, dict):
        raise InvalidInput("Stat changes must be a mapping of stat name to delta")
    for stat_name, delta in stats.items():
        if not isinstance(stat_name, str) or not stat_name:
            raise InvalidInput("Stat names must be non-empty strings")
        if not is_int(delta):
            raise InvalidInput(f"Invalid delta for {stat_name}")
    return stats


def _existing_user_modifiers(fighter: Fighter) -> list[ExistingModifier]:
    effects = (
        FighterEffect.objects.filter(
            fighter=fighter, effect_type__category__name=USER_EFFECT_CATEGORY
        )
        .prefetch_related("modifiers")
        .order_by("created", "id")
    )
    return [
        ExistingModifier(
            id=modifier.id,
            effect_id=effect.id,
            stat_name=modifier.stat_name,
            value=modifier.numeric_value,
        )
        for effect in effects
        for modifier in effect.modifiers.all()
    ]


@traced("apply_effect_plan")
def apply_effect_plan(
    ctx: MutationContext, fighter: Fighter, plan: EffectPlan
) -> list[FighterEffect]:
    """Write an EffectPlan: updates and creations first, then batched deletes."""
    for update in plan.updates:
        FighterEffectModifier.objects.filter(pk=update.modifier_id).update(
            numeric_value=update.value
        )

    created = []
    for creation in plan.creations:
        effect_type = creation.effect_type
        effect = FighterEffect.objects.create(
            fighter=fighter,
            owner=ctx.owner,
            effect_type=effect_type,
            effect_name=effect_type.name,
            type_specific_data=dict(effect_type.type_specific_data or {}),
        )
        FighterEffectModifier.objects.create(
            effect=effect,
            stat_name=creation.stat_name,
            numeric_value=creation.value,
        )
        created.append(effect)

    if plan.deleted_modifier_ids:
        FighterEffectModifier.objects.filter(id__in=plan.deleted_modifier_ids).delete()
    if plan.deleted_effect_ids:
        FighterEffect.objects.filter(id__in=plan.deleted_effect_ids).delete()

    return created


@traced("handle_fighter_effects_update")
@transaction.atomic
def handle_fighter_effects_update(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    stats: dict[str, int],
) -> FighterEffectsResult:
    """
    Apply signed stat deltas to a fighter's user adjustments.

    Existing adjustment modifiers are merged or cancelled before any new
    effect is created. Stats with no matching effect type are skipped.
    """
    stats = validate_stat_changes(stats)

    plan = plan_effect_changes(
        _existing_user_modifiers(fighter),
        stats,
        lambda stat_name, delta: ContentEffectType.objects.matching_adjustment(
            stat_name, delta
        ),
    )
    created = apply_effect_plan(ctx, fighter, plan)

    if plan.skipped_stats:
        logger.warning(
            f"No adjustment effect type for {', '.join(plan.skipped_stats)}; "
            f"skipped for fighter {fighter.id}"
        )

    if not plan.is_empty:
        invalidate_fighter_cost(fighter.id)
        invalidate_beast_owners(fighter.id)

    track(
        "fighter_effects_updated",
        fighter_id=fighter.id,
        updates=len(plan.updates),
        creations=len(plan.creations),
        deleted_modifiers=len(plan.deleted_modifier_ids),
        deleted_effects=len(plan.deleted_effect_ids),
    )

    return FighterEffectsResult(fighter=fighter, plan=plan, created_effects=created)
