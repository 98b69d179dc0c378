"""
Fire-and-forget side effects of fighter mutations.

Audit logging, owner cache invalidation and image cleanup must never fail
the mutation that triggered them. Each helper here catches and logs its own
errors.
"""

import logging
from typing import Any, Optional

from django.core.files.storage import Storage

from gangroster.core.context import MutationContext
from gangroster.core.tasks import invalidate_beast_owner_cache, record_fighter_log
from gangroster.tracing import span
from gangroster.tracker import track

logger = logging.getLogger(__name__)


def _as_text(value: Optional[Any]) -> str:
    return "" if value is None else str(value)


def log_fighter_action(
    ctx: MutationContext,
    *,
    gang_id,
    fighter_id,
    fighter_name: str,
    action_type: str,
    old_value=None,
    new_value=None,
    description: str = "",
) -> bool:
    """Enqueue an audit log entry. Returns False if it could not be enqueued."""
    try:
        record_fighter_log.enqueue(
            gang_id=str(gang_id),
            fighter_id=str(fighter_id),
            fighter_name=fighter_name,
            action_type=str(action_type),
            old_value=_as_text(old_value),
            new_value=_as_text(new_value),
            user_id=ctx.user_id,
            description=description,
        )
        return True
    except Exception:
        logger.exception(f"Failed to log {action_type} for fighter {fighter_id}")
        track("fighter_log_failed", action_type=str(action_type), fighter_id=fighter_id)
        return False


def invalidate_beast_owners(fighter_id) -> bool:
    """Enqueue cost cache invalidation for the owners of a beast fighter."""
    try:
        invalidate_beast_owner_cache.enqueue(fighter_id=str(fighter_id))
        return True
    except Exception:
        logger.exception(f"Failed to invalidate beast owner cache for {fighter_id}")
        return False


def fighter_image_prefix(gang_id) -> str:
    return f"gangs/{gang_id}/fighters/"


def remove_fighter_images(storage: Storage, gang_id, fighter_id) -> int:
    """
    Delete a fighter's stored images.

    Files live under ``gangs/<gang_id>/fighters/`` and are named either
    ``<fighter_id>.webp`` or ``<fighter_id>_<anything>``. Returns how many
    files were deleted; any storage error is logged and stops the cleanup.
    """
    prefix = fighter_image_prefix(gang_id)
    fighter_id = str(fighter_id)
    deleted = 0

    with span("remove_fighter_images", gang_id=gang_id, fighter_id=fighter_id):
        try:
            _, files = storage.listdir(prefix)
            for name in files:
                if name.startswith(f"{fighter_id}_") or name == f"{fighter_id}.webp":
                    storage.delete(f"{prefix}{name}")
                    deleted += 1
        except Exception:
            logger.exception(f"Failed to remove images for fighter {fighter_id}")
            track("fighter_image_cleanup_failed", fighter_id=fighter_id)

    return deleted
