"""Tests for fighter total cost and its cache."""

from unittest.mock import patch

import pytest
from django.core.cache import cache
from django.db import DatabaseError

from gangroster.core.cost import (
    calculate_fighter_cost,
    fighter_cost_cache_key,
    get_fighter_total_cost,
    invalidate_fighter_cost,
)
from gangroster.core.models import (
    Fighter,
    FighterEffect,
    FighterEquipment,
    FighterExoticBeast,
    FighterSkill,
)


@pytest.mark.django_db
def test_total_cost_sums_every_source(fighter, make_equipment, make_skill):
    FighterEquipment.objects.create(
        fighter=fighter, equipment=make_equipment("Lasgun", cost=15), cost=15
    )
    FighterSkill.objects.create(
        fighter=fighter, skill=make_skill("Dodge"), credits_increase=20
    )
    FighterEffect.objects.create(
        fighter=fighter,
        effect_name="Toughness",
        type_specific_data={"credits_increase": 30},
    )
    fighter.cost_adjustment = -5
    fighter.save()

    assert calculate_fighter_cost(fighter) == 100 + 15 + 20 + 30 - 5


@pytest.mark.django_db
def test_beast_cost_is_carried_by_owner(make_fighter, make_equipment):
    owner = make_fighter("Beastmaster")
    pet = make_fighter("Cyber-mastiff", credits=50)
    FighterEquipment.objects.create(
        fighter=pet, equipment=make_equipment("Armour", cost=10), cost=10
    )
    FighterExoticBeast.objects.create(owner_fighter=owner, pet=pet)

    assert get_fighter_total_cost(owner) == 160
    assert get_fighter_total_cost(pet) == 0


@pytest.mark.django_db
def test_total_cost_is_cached_until_invalidated(fighter):
    assert get_fighter_total_cost(fighter) == 100
    assert cache.get(fighter_cost_cache_key(fighter.id)) == 100

    Fighter.objects.filter(pk=fighter.pk).update(credits=150)
    fighter.refresh_from_db()
    assert get_fighter_total_cost(fighter) == 100

    invalidate_fighter_cost(fighter.id)
    assert get_fighter_total_cost(fighter) == 150


@pytest.mark.django_db
def test_failed_calculation_returns_zero_and_is_not_cached(fighter):
    with patch(
        "gangroster.core.cost.calculate_fighter_cost",
        side_effect=DatabaseError("connection lost"),
    ):
        assert get_fighter_total_cost(fighter) == 0

    assert cache.get(fighter_cost_cache_key(fighter.id)) is None
    assert get_fighter_total_cost(fighter) == 100
