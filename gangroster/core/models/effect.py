from django.db import models
from simple_history.models import HistoricalRecords

from gangroster.models import Base

from .base import AppBase


class FighterEffect(AppBase):
    """
    A named stat modifier instance attached to a fighter.

    Effects come from user stat adjustments, characteristic advancements or
    equipment. An effect must always own at least one modifier; the effects
    consolidator deletes an effect together with its last modifier.
    """

    fighter = models.ForeignKey(
        "core.Fighter", on_delete=models.CASCADE, related_name="effects"
    )
    effect_type = models.ForeignKey(
        "content.ContentEffectType",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fighter_effects",
    )
    effect_name = models.CharField(max_length=255)
    fighter_equipment = models.ForeignKey(
        "core.FighterEquipment",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="effects",
    )
    type_specific_data = models.JSONField(default=dict, blank=True)
    history = HistoricalRecords()

    def __str__(self):
        return self.effect_name

    @property
    def credits_increase(self) -> int:
        return int((self.type_specific_data or {}).get("credits_increase") or 0)

    @property
    def xp_cost(self) -> int:
        return int((self.type_specific_data or {}).get("xp_cost") or 0)

    class Meta:
        verbose_name = "Fighter Effect"
        verbose_name_plural = "Fighter Effects"
        ordering = ["created"]


class FighterEffectModifier(Base):
    effect = models.ForeignKey(
        FighterEffect, on_delete=models.CASCADE, related_name="modifiers"
    )
    stat_name = models.CharField(max_length=100, db_index=True)
    numeric_value = models.IntegerField()

    def __str__(self):
        return f"{self.stat_name} {self.numeric_value:+d}"

    class Meta:
        verbose_name = "Fighter Effect Modifier"
        verbose_name_plural = "Fighter Effect Modifiers"
        ordering = ["created"]
