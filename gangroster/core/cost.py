"""
Fighter total cost.

A fighter's effective cost is what it adds to gang rating: base cost, plus
equipment, skills, effects, the manual adjustment and any exotic beasts it
owns. An owned beast contributes through its owner and costs 0 on its own.

Computed costs are cached per fighter. Every mutation that changes a
fighter's cost calls ``invalidate_fighter_cost``; owners of a changed beast
are invalidated by the ``invalidate_beast_owner_cache`` task.
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.db.models import Sum

from gangroster.core.models import Fighter, FighterExoticBeast
from gangroster.tracing import traced
from gangroster.tracker import track

logger = logging.getLogger(__name__)


def fighter_cost_cache_key(fighter_id) -> str:
    return f"fighter-total-cost:{fighter_id}"


def invalidate_fighter_cost(*fighter_ids) -> None:
    cache.delete_many(
        [fighter_cost_cache_key(fighter_id) for fighter_id in fighter_ids]
    )


def _own_cost(fighter: Fighter) -> int:
    """Cost of the fighter itself, ignoring beasts on either side."""
    equipment = fighter.equipment.aggregate(total=Sum("cost"))["total"] or 0
    skills = fighter.skills.aggregate(total=Sum("credits_increase"))["total"] or 0
    effects = sum(effect.credits_increase for effect in fighter.effects.all())
    return fighter.credits + equipment + skills + effects + fighter.cost_adjustment


def calculate_fighter_cost(fighter: Fighter) -> int:
    """Compute a fighter's total cost from the database, uncached."""
    if FighterExoticBeast.objects.filter(pet=fighter).exists():
        return 0

    total = _own_cost(fighter)
    for link in fighter.owned_beasts.select_related("pet"):
        total += _own_cost(link.pet)
    return total


@traced("get_fighter_total_cost")
def get_fighter_total_cost(fighter: Fighter) -> int:
    """
    Return the fighter's effective total cost, used for every rating delta.

    Fails closed: if the calculation raises, the error is logged and 0 is
    returned so the calling mutation can still complete.
    """
    key = fighter_cost_cache_key(fighter.pk)
    cached = cache.get(key)
    if cached is not None:
        return cached

    try:
        with transaction.atomic():
            total = calculate_fighter_cost(fighter)
    except Exception:
        logger.exception(f"Failed to calculate total cost for fighter {fighter.pk}")
        track("fighter_cost_calculation_failed", fighter_id=fighter.pk)
        return 0

    cache.set(key, total, settings.FIGHTER_COST_CACHE_TIMEOUT)
    return total
