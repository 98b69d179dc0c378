from django.db import models
from simple_history.models import HistoricalRecords

from .base import Content


class ContentFighterType(Content):
    """
    A hireable fighter template, e.g. "Prospector Digger" or "Spyrer Hunter".
    """

    name = models.CharField(max_length=255, db_index=True)
    fighter_class = models.CharField(
        max_length=255,
        blank=True,
        help_text="The fighter class, e.g. Leader, Champion, Ganger or Exotic Beast.",
    )
    cost = models.PositiveIntegerField(
        default=0, help_text="The base cost to hire this fighter type."
    )
    is_spyrer = models.BooleanField(
        default=False,
        help_text="Spyrers track kills separately for advancement.",
    )
    history = HistoricalRecords()

    def __str__(self):
        return self.name

    class Meta:
        verbose_name = "Fighter Type"
        verbose_name_plural = "Fighter Types"
        ordering = ["name"]
