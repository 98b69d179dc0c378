"""
Effect templates.

An effect type is a named template ("User Adjustment: +1 Toughness",
"Characteristic Increase: Strength") whose template modifiers describe which
stats it changes and in which direction. Fighter effects in gangroster.core
are instances of these templates.
"""

from django.db import models
from simple_history.models import HistoricalRecords

from .base import Content

# Category holding fighter-chosen stat adjustments
USER_EFFECT_CATEGORY = "user"
# Category holding characteristic advancements bought with XP
ADVANCEMENT_EFFECT_CATEGORY = "advancements"


class ContentEffectCategory(Content):
    name = models.CharField(max_length=255, unique=True)
    history = HistoricalRecords()

    def __str__(self):
        return self.name

    class Meta:
        verbose_name = "Effect Category"
        verbose_name_plural = "Effect Categories"
        ordering = ["name"]


class ContentEffectTypeQuerySet(models.QuerySet):
    def user_adjustments(self):
        return self.filter(category__name=USER_EFFECT_CATEGORY)

    def matching_adjustment(self, stat_name: str, delta: int):
        """
        Find the user-adjustment effect type for a stat and direction.

        The type matches when one of its template modifiers targets
        ``stat_name`` with a default value of the same sign as ``delta``.
        Returns None when nothing matches.
        """
        if delta > 0:
            sign_filter = {"modifiers__default_numeric_value__gt": 0}
        else:
            sign_filter = {"modifiers__default_numeric_value__lt": 0}
        return (
            self.user_adjustments()
            .filter(modifiers__stat_name=stat_name, **sign_filter)
            .order_by("name")
            .first()
        )


class ContentEffectType(Content):
    name = models.CharField(max_length=255, db_index=True)
    category = models.ForeignKey(
        ContentEffectCategory,
        on_delete=models.CASCADE,
        related_name="effect_types",
    )
    type_specific_data = models.JSONField(
        default=dict,
        blank=True,
        help_text="Extra data copied onto fighter effects of this type.",
    )
    history = HistoricalRecords()

    objects = ContentEffectTypeQuerySet.as_manager()

    def __str__(self):
        return self.name

    class Meta:
        verbose_name = "Effect Type"
        verbose_name_plural = "Effect Types"
        ordering = ["category", "name"]


class ContentEffectTypeModifier(Content):
    effect_type = models.ForeignKey(
        ContentEffectType,
        on_delete=models.CASCADE,
        related_name="modifiers",
    )
    stat_name = models.CharField(max_length=100)
    default_numeric_value = models.IntegerField(
        help_text="The value a new modifier of this type starts with, e.g. +1 or -1."
    )

    def __str__(self):
        return f"{self.effect_type}: {self.stat_name} {self.default_numeric_value:+d}"

    class Meta:
        verbose_name = "Effect Type Modifier"
        verbose_name_plural = "Effect Type Modifiers"
        ordering = ["effect_type", "stat_name"]
