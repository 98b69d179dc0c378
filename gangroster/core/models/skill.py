from django.db import models
from simple_history.models import HistoricalRecords

from .base import AppBase


class FighterSkill(AppBase):
    """A skill held by a fighter. Skills bought with XP are advancements."""

    fighter = models.ForeignKey(
        "core.Fighter", on_delete=models.CASCADE, related_name="skills"
    )
    skill = models.ForeignKey(
        "content.ContentSkill", on_delete=models.PROTECT, related_name="fighter_skills"
    )
    xp_cost = models.PositiveIntegerField(default=0)
    credits_increase = models.IntegerField(default=0)
    is_advance = models.BooleanField(default=False)
    history = HistoricalRecords()

    def __str__(self):
        return self.skill.name

    class Meta:
        verbose_name = "Fighter Skill"
        verbose_name_plural = "Fighter Skills"
        ordering = ["created"]
        unique_together = ["fighter", "skill"]
