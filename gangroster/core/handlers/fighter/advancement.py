"""Handlers for buying and undoing fighter advancements with XP."""

from dataclasses import dataclass
from typing import Optional, Union

from django.core.exceptions import ValidationError
from django.db import transaction

from gangroster.content.models import (
    ADVANCEMENT_EFFECT_CATEGORY,
    ContentEffectType,
    ContentSkill,
)
from gangroster.core.context import MutationContext
from gangroster.core.cost import invalidate_fighter_cost
from gangroster.core.dispatch import invalidate_beast_owners, log_fighter_action
from gangroster.core.errors import InsufficientResource, InvalidInput, NotFound
from gangroster.core.financials import update_gang_financials
from gangroster.core.models import (
    Fighter,
    FighterEffect,
    FighterEffectModifier,
    FighterLogType,
    FighterSkill,
    Gang,
)
from gangroster.models import is_int
from gangroster.tracing import traced
from gangroster.tracker import track

CHARACTERISTIC = "characteristic"
SKILL = "skill"
ADVANCEMENT_TYPES = (CHARACTERISTIC, SKILL)


@dataclass
class FighterAdvancementResult:
    """Result of buying an advancement."""

    fighter: Fighter
    gang: Gang
    advancement: Union[FighterEffect, FighterSkill]
    advancement_type: str
    xp_cost: int
    credits_increase: int
    rating_delta: int


@dataclass
class FighterAdvancementDeletionResult:
    fighter: Fighter
    gang: Gang
    advancement_type: str
    xp_restored: int
    rating_delta: int


def _validate_costs(xp_cost, credits_increase) -> None:
    if not is_int(xp_cost) or xp_cost < 0:
        raise InvalidInput("XP cost must be a non-negative whole number")
    if not is_int(credits_increase) or credits_increase < 0:
        raise InvalidInput("Credits increase must be a non-negative whole number")


def _spend_xp(fighter: Fighter, xp_cost: int) -> None:
    if fighter.xp < xp_cost:
        raise InsufficientResource(
            f"Insufficient XP. Required: {xp_cost}, Available: {fighter.xp}"
        )
    fighter.xp -= xp_cost
    fighter.save(update_fields=["xp", "modified"])


def _apply_rating(fighter: Fighter, delta: int) -> Gang:
    if delta and fighter.counts_toward_rating:
        return update_gang_financials(fighter.gang_id, rating_delta=delta).gang
    return fighter.gang


def _rating_effect(fighter: Fighter, delta: int) -> int:
    return delta if fighter.counts_toward_rating else 0


def _finish(ctx, fighter, action_type, description, **track_labels) -> None:
    invalidate_fighter_cost(fighter.id)
    invalidate_beast_owners(fighter.id)
    log_fighter_action(
        ctx,
        gang_id=fighter.gang_id,
        fighter_id=fighter.id,
        fighter_name=fighter.name,
        action_type=action_type,
        description=description,
    )
    track(str(action_type), fighter_id=fighter.id, **track_labels)


@traced("handle_characteristic_advancement")
@transaction.atomic
def handle_characteristic_advancement(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    effect_type_id,
    xp_cost: int,
    credits_increase: int = 0,
) -> FighterAdvancementResult:
    """
    Buy a characteristic increase.

    Creates an effect from the advancement effect type, copying its template
    modifiers, and records the XP cost, credits increase and how many times
    this characteristic has now been increased. The XP is deducted and, if
    the fighter is active, gang rating rises by the credits increase.

    Raises:
        InvalidInput: Negative costs
        NotFound: Unknown advancement effect type
        InsufficientResource: Not enough XP
    """
    _validate_costs(xp_cost, credits_increase)

    try:
        effect_type = ContentEffectType.objects.prefetch_related("modifiers").get(
            pk=effect_type_id, category__name=ADVANCEMENT_EFFECT_CATEGORY
        )
    except (ContentEffectType.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Advancement not found")

    templates = list(effect_type.modifiers.all())
    if not templates:
        raise InvalidInput(f"{effect_type.name} has no characteristic to increase")

    _spend_xp(fighter, xp_cost)

    times_increased = (
        FighterEffect.objects.filter(fighter=fighter, effect_type=effect_type).count()
        + 1
    )
    effect = FighterEffect.objects.create(
        fighter=fighter,
        owner=ctx.owner,
        effect_type=effect_type,
        effect_name=effect_type.name,
        type_specific_data={
            **(effect_type.type_specific_data or {}),
            "times_increased": times_increased,
            "xp_cost": xp_cost,
            "credits_increase": credits_increase,
        },
    )
    FighterEffectModifier.objects.bulk_create(
        [
            FighterEffectModifier(
                effect=effect,
                stat_name=template.stat_name,
                numeric_value=template.default_numeric_value,
            )
            for template in templates
        ]
    )

    gang = _apply_rating(fighter, credits_increase)

    _finish(
        ctx,
        fighter,
        FighterLogType.ADVANCEMENT_ADDED,
        f"{fighter.name} spent {xp_cost} XP on {effect_type.name}",
        advancement_type=CHARACTERISTIC,
        xp_cost=xp_cost,
    )

    return FighterAdvancementResult(
        fighter=fighter,
        gang=gang,
        advancement=effect,
        advancement_type=CHARACTERISTIC,
        xp_cost=xp_cost,
        credits_increase=credits_increase,
        rating_delta=_rating_effect(fighter, credits_increase),
    )


@traced("handle_skill_advancement")
@transaction.atomic
def handle_skill_advancement(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    skill_id,
    xp_cost: int,
    credits_increase: int = 0,
) -> FighterAdvancementResult:
    """
    Buy a skill with XP.

    Raises:
        InvalidInput: Negative costs, or the fighter already has the skill
        NotFound: Unknown skill
        InsufficientResource: Not enough XP
    """
    _validate_costs(xp_cost, credits_increase)

    try:
        skill = ContentSkill.objects.get(pk=skill_id)
    except (ContentSkill.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Skill not found")

    if FighterSkill.objects.filter(fighter=fighter, skill=skill).exists():
        raise InvalidInput(f"{fighter.name} already has {skill.name}")

    _spend_xp(fighter, xp_cost)

    fighter_skill = FighterSkill.objects.create(
        fighter=fighter,
        owner=ctx.owner,
        skill=skill,
        xp_cost=xp_cost,
        credits_increase=credits_increase,
        is_advance=True,
    )

    gang = _apply_rating(fighter, credits_increase)

    _finish(
        ctx,
        fighter,
        FighterLogType.ADVANCEMENT_ADDED,
        f"{fighter.name} spent {xp_cost} XP on {skill.name}",
        advancement_type=SKILL,
        xp_cost=xp_cost,
    )

    return FighterAdvancementResult(
        fighter=fighter,
        gang=gang,
        advancement=fighter_skill,
        advancement_type=SKILL,
        xp_cost=xp_cost,
        credits_increase=credits_increase,
        rating_delta=_rating_effect(fighter, credits_increase),
    )


@traced("handle_advancement_deletion")
@transaction.atomic
def handle_advancement_deletion(
    *,
    ctx: MutationContext,
    fighter: Fighter,
    advancement_id,
    advancement_type: str,
) -> FighterAdvancementDeletionResult:
    """
    Undo an advancement, refunding its XP and its credits increase.

    A characteristic advancement's effect is deleted with its modifiers.
    """
    if advancement_type not in ADVANCEMENT_TYPES:
        raise InvalidInput("Invalid advancement type")

    record: Optional[Union[FighterEffect, FighterSkill]]
    try:
        if advancement_type == SKILL:
            record = FighterSkill.objects.select_related("skill").get(
                pk=advancement_id, fighter=fighter
            )
            xp_restored = record.xp_cost
            credits_increase = record.credits_increase
            name = record.skill.name
        else:
            record = FighterEffect.objects.get(
                pk=advancement_id,
                fighter=fighter,
                effect_type__category__name=ADVANCEMENT_EFFECT_CATEGORY,
            )
            xp_restored = record.xp_cost
            credits_increase = record.credits_increase
            name = record.effect_name
    except (
        FighterSkill.DoesNotExist,
        FighterEffect.DoesNotExist,
        ValidationError,
        ValueError,
    ):
        raise NotFound("Advancement not found")

    record.delete()

    fighter.xp += xp_restored
    fighter.save(update_fields=["xp", "modified"])

    gang = _apply_rating(fighter, -credits_increase)

    _finish(
        ctx,
        fighter,
        FighterLogType.ADVANCEMENT_REMOVED,
        f"{fighter.name} removed {name}, {xp_restored} XP restored",
        advancement_type=advancement_type,
        xp_restored=xp_restored,
    )

    return FighterAdvancementDeletionResult(
        fighter=fighter,
        gang=gang,
        advancement_type=advancement_type,
        xp_restored=xp_restored,
        rating_delta=_rating_effect(fighter, -credits_increase),
    )
