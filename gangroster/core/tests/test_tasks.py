"""
Tests for background tasks in gangroster.core.tasks.
"""

import uuid

import pytest
from django.core.cache import cache

from gangroster.core.cost import fighter_cost_cache_key
from gangroster.core.models import FighterExoticBeast, FighterLog, FighterLogType
from gangroster.core.tasks import invalidate_beast_owner_cache, record_fighter_log


@pytest.mark.django_db
def test_record_fighter_log_writes_entry(user, gang, fighter):
    # Call the task directly (not via enqueue, to test the function itself)
    entry_id = record_fighter_log.func(
        gang_id=str(gang.id),
        fighter_id=str(fighter.id),
        fighter_name=fighter.name,
        action_type=FighterLogType.KILLED,
        old_value="Alive",
        new_value="Dead",
        user_id=user.pk,
        description="Test Fighter was killed",
    )

    entry = FighterLog.objects.get(pk=entry_id)
    assert entry.gang == gang
    assert entry.fighter_id == fighter.id
    assert entry.action_type == FighterLogType.KILLED
    assert entry.user == user
    assert str(entry) == "Test Fighter: Fighter killed"


@pytest.mark.django_db
def test_record_fighter_log_via_enqueue(gang):
    """Test that record_fighter_log works when called via enqueue (ImmediateBackend)."""
    fighter_id = str(uuid.uuid4())

    record_fighter_log.enqueue(
        gang_id=str(gang.id),
        fighter_id=fighter_id,
        fighter_name="Removed Fighter",
        action_type=str(FighterLogType.REMOVED),
    )

    entry = FighterLog.objects.get()
    assert str(entry.fighter_id) == fighter_id
    assert entry.old_value == ""
    assert entry.user is None


@pytest.mark.django_db
def test_invalidate_beast_owner_cache_drops_owner_costs(make_fighter):
    owner = make_fighter("Beastmaster")
    pet = make_fighter("Cyber-mastiff")
    FighterExoticBeast.objects.create(owner_fighter=owner, pet=pet)
    cache.set(fighter_cost_cache_key(owner.id), 999)

    assert invalidate_beast_owner_cache.func(fighter_id=str(pet.id)) == 1
    assert cache.get(fighter_cost_cache_key(owner.id)) is None


@pytest.mark.django_db
def test_invalidate_beast_owner_cache_via_enqueue(make_fighter):
    owner = make_fighter("Beastmaster")
    pet = make_fighter("Cyber-mastiff")
    FighterExoticBeast.objects.create(owner_fighter=owner, pet=pet)
    cache.set(fighter_cost_cache_key(owner.id), 999)

    invalidate_beast_owner_cache.enqueue(fighter_id=str(pet.id))

    assert cache.get(fighter_cost_cache_key(owner.id)) is None


@pytest.mark.django_db
def test_invalidate_beast_owner_cache_without_owners(fighter):
    cache.set(fighter_cost_cache_key(fighter.id), 100)

    assert invalidate_beast_owner_cache.func(fighter_id=str(fighter.id)) == 0
    assert cache.get(fighter_cost_cache_key(fighter.id)) == 100
