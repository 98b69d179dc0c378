import json
import logging
from typing import Any, Optional
from uuid import UUID

from django.db.models import Model

logger = logging.getLogger("gangroster.tracker")


def _label(value: Any):
    """
    Reduce a label to something Cloud Logging can index.

    Fighter and gang ids arrive as UUIDs or model instances, action and log
    types as choices. Everything ends up as a JSON scalar or a list of them.
    Returns ``None`` when the value should be dropped.
    """
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        # TextChoices members are str subclasses
        return str(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Model):
        return str(value.pk)
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_label(item) for item in value]
        return [item for item in items if item is not None]
    return None


def track(event: str, n: int = 1, value: Optional[float] = None, **labels: Any) -> None:
    """
    Emit a structured log event.

    In production, StructuredLogHandler formats this as JSON for Cloud Logging.
    In development, logs as JSON string to console.

    Args:
        event: Event name (e.g. 'fighter_status_changed')
        n: Count increment (default=1)
        value: Optional numeric value (e.g. a rating delta)
        **labels: Fighter/gang ids, models, choices and plain values.
            ``None`` labels are left out.

    Example:
        track("fighter_status_changed", action="kill", fighter_id=fighter.id)
    """
    payload = {
        "event": event,
        "n": n,
    }
    if value is not None:
        payload["value"] = value

    filtered_labels = {}
    for key, val in labels.items():
        if val is None:
            continue
        label = _label(val)
        if label is None:
            logger.debug(
                f"Dropping label '{key}' of type {type(val).__name__} "
                f"for event '{event}'"
            )
            continue
        filtered_labels[key] = label
    if filtered_labels:
        payload["labels"] = filtered_labels

    logger.info(json.dumps(payload))


def track_mutation_failure(operation: str, error_kind: str, fighter_id) -> None:
    """One event per failed fighter mutation, labelled by error kind."""
    track(
        "fighter_mutation_failed",
        operation=operation,
        error_kind=error_kind,
        fighter_id=fighter_id,
    )
