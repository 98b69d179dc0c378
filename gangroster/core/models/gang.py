from django.db import models
from simple_history.models import HistoricalRecords

from .base import AppBase


class Gang(AppBase):
    """
    A gang: the owning collection of fighters.

    ``rating`` is maintained incrementally by the mutation handlers, which
    apply explicit deltas through ``update_gang_financials``. It is never
    recomputed on read.
    """

    name = models.CharField(max_length=255)
    credits = models.IntegerField(default=0, help_text="Spendable credits.")
    rating = models.IntegerField(
        default=0, help_text="Sum of the effective cost of active fighters."
    )
    meat = models.PositiveIntegerField(
        default=0, help_text="Meat used to feed starving fighters."
    )
    stash_value = models.IntegerField(
        default=0, help_text="Total value of the equipment held in the gang stash."
    )
    history = HistoricalRecords()

    def __str__(self):
        return self.name

    @property
    def wealth(self):
        return self.credits + self.rating + self.stash_value

    class Meta:
        verbose_name = "Gang"
        verbose_name_plural = "Gangs"
        ordering = ["name"]
