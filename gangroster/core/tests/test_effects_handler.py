"""Tests for handle_fighter_effects_update against the database."""

import pytest

from gangroster.core.errors import InvalidInput
from gangroster.core.handlers.fighter import handle_fighter_effects_update
from gangroster.core.models import FighterEffect, FighterEffectModifier


def user_modifiers(fighter):
    return sorted(
        FighterEffectModifier.objects.filter(effect__fighter=fighter).values_list(
            "stat_name", "numeric_value"
        )
    )


@pytest.mark.django_db
def test_first_adjustment_creates_effect(ctx, fighter, user_adjustment_types):
    result = handle_fighter_effects_update(
        ctx=ctx, fighter=fighter, stats={"toughness": 1}
    )

    assert len(result.created_effects) == 1
    effect = FighterEffect.objects.get(fighter=fighter)
    assert effect.effect_type == user_adjustment_types[("toughness", 1)]
    assert effect.effect_name == "TOUGHNESS Increase"
    assert user_modifiers(fighter) == [("toughness", 1)]


@pytest.mark.django_db
def test_cancelling_adjustment_removes_effect(ctx, fighter, user_adjustment_types):
    handle_fighter_effects_update(ctx=ctx, fighter=fighter, stats={"toughness": 1})
    handle_fighter_effects_update(ctx=ctx, fighter=fighter, stats={"toughness": -1})

    assert not FighterEffect.objects.filter(fighter=fighter).exists()
    assert user_modifiers(fighter) == []


@pytest.mark.django_db
def test_repeated_adjustments_fold_into_one_modifier(
    ctx, fighter, user_adjustment_types
):
    handle_fighter_effects_update(ctx=ctx, fighter=fighter, stats={"toughness": 1})
    handle_fighter_effects_update(ctx=ctx, fighter=fighter, stats={"toughness": 2})

    assert FighterEffect.objects.filter(fighter=fighter).count() == 1
    assert user_modifiers(fighter) == [("toughness", 3)]


@pytest.mark.django_db
def test_several_stats_in_one_request(ctx, fighter, user_adjustment_types):
    handle_fighter_effects_update(
        ctx=ctx, fighter=fighter, stats={"ws": 1, "movement": -1}
    )

    assert FighterEffect.objects.filter(fighter=fighter).count() == 2
    assert user_modifiers(fighter) == [("movement", -1), ("ws", 1)]


@pytest.mark.django_db
def test_stat_without_effect_type_is_skipped(ctx, fighter, user_adjustment_types):
    result = handle_fighter_effects_update(
        ctx=ctx, fighter=fighter, stats={"leadership": 1, "ws": 1}
    )

    assert result.plan.skipped_stats == ["leadership"]
    assert user_modifiers(fighter) == [("ws", 1)]


@pytest.mark.django_db
def test_advancement_effects_are_not_consolidated(
    ctx, fighter, user_adjustment_types, make_advancement_type
):
    """Only user adjustments are merged; bought advancements stay as they are."""
    advancement = make_advancement_type("WS Advance", "ws")
    effect = FighterEffect.objects.create(
        fighter=fighter, effect_type=advancement, effect_name=advancement.name
    )
    FighterEffectModifier.objects.create(effect=effect, stat_name="ws", numeric_value=1)

    handle_fighter_effects_update(ctx=ctx, fighter=fighter, stats={"ws": -1})

    assert FighterEffect.objects.filter(pk=effect.pk).exists()
    assert user_modifiers(fighter) == [("ws", -1), ("ws", 1)]


@pytest.mark.django_db
@pytest.mark.parametrize("stats", [["ws"], {"ws": "1"}, {"": 1}, {"ws": 1.5}])
def test_invalid_stats_are_rejected(ctx, fighter, stats):
    with pytest.raises(InvalidInput):
        handle_fighter_effects_update(ctx=ctx, fighter=fighter, stats=stats)
