import logging

from django.core.cache import cache
from django.db import transaction
from django.tasks import task

logger = logging.getLogger(__name__)


@task
def record_fighter_log(
    gang_id: str,
    fighter_id: str,
    fighter_name: str,
    action_type: str,
    old_value: str = "",
    new_value: str = "",
    user_id=None,
    description: str = "",
):
    """
    Write one fighter audit log entry.

    Runs in its own savepoint so a failed write cannot poison a surrounding
    transaction when the task backend executes it inline.
    """
    from gangroster.core.models import FighterLog

    with transaction.atomic():
        entry = FighterLog.objects.create(
            gang_id=gang_id,
            fighter_id=fighter_id,
            fighter_name=fighter_name,
            action_type=action_type,
            old_value=old_value or "",
            new_value=new_value or "",
            user_id=user_id,
            description=description,
        )
    logger.info(f"Recorded {action_type} for fighter {fighter_id}")
    return str(entry.id)


@task
def invalidate_beast_owner_cache(fighter_id: str):
    """
    Drop the cached cost of any fighter that owns ``fighter_id`` as a beast.

    Called whenever a fighter changes, so owners' totals stay fresh.
    """
    from gangroster.core.cost import fighter_cost_cache_key
    from gangroster.core.models import FighterExoticBeast

    owner_ids = list(
        FighterExoticBeast.objects.filter(pet_id=fighter_id).values_list(
            "owner_fighter_id", flat=True
        )
    )
    if not owner_ids:
        return 0

    cache.delete_many([fighter_cost_cache_key(owner_id) for owner_id in owner_ids])
    logger.info(
        f"Invalidated cost cache for {len(owner_ids)} owner(s) of beast {fighter_id}"
    )
    return len(owner_ids)
