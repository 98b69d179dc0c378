import uuid

from django.db import models


def is_int(value):
    """Check if a value is a real integer (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


def format_cost_display(cost_value, show_sign=False):
    """
    Format a cost value for display with proper sign handling.

    >>> format_cost_display(5)
    '5¢'
    >>> format_cost_display(5, show_sign=True)
    '+5¢'
    >>> format_cost_display(-5, show_sign=True)
    '-5¢'
    """
    if show_sign and cost_value >= 0:
        return f"+{cost_value}¢"
    return f"{cost_value}¢"


class Owned(models.Model):
    """An Owned object is owned by a User."""

    owner = models.ForeignKey(
        "auth.User", on_delete=models.CASCADE, null=True, blank=False, db_index=True
    )

    class Meta:
        abstract = True


class Base(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created = models.DateTimeField(auto_now_add=True, db_index=True)
    modified = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        abstract = True
