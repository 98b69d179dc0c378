from django.db import models

from gangroster.models import Base


class FighterLogType(models.TextChoices):
    KILLED = "fighter_killed", "Fighter killed"
    RESURRECTED = "fighter_resurrected", "Fighter resurrected"
    RETIRED = "fighter_retired", "Fighter retired"
    UNRETIRED = "fighter_unretired", "Fighter unretired"
    ENSLAVED = "fighter_enslaved", "Fighter sold to the guilders"
    RESCUED = "fighter_rescued", "Fighter rescued"
    STARVED = "fighter_starved", "Fighter starved"
    FED = "fighter_fed", "Fighter fed"
    RECOVERED = "fighter_recovered", "Fighter recovered"
    SENT_TO_RECOVERY = "fighter_sent_to_recovery", "Fighter sent to recovery"
    CAPTURED = "fighter_captured", "Fighter captured"
    RELEASED = "fighter_released", "Fighter released"
    REMOVED = "fighter_removed", "Fighter removed"
    XP_CHANGED = "fighter_xp_changed", "XP changed"
    OOA_CHANGED = "fighter_ooa_changed", "Kills changed by OOA"
    KILLS_CHANGED = "fighter_kills_changed", "Kills changed"
    COST_ADJUSTED = "fighter_cost_adjusted", "Cost adjusted"
    ADVANCEMENT_ADDED = "advancement_added", "Advancement added"
    ADVANCEMENT_REMOVED = "advancement_removed", "Advancement removed"
    EQUIPMENT_PURCHASED = "equipment_purchased", "Equipment purchased"
    EQUIPMENT_SOLD = "equipment_sold", "Equipment sold"
    EQUIPMENT_STASHED = "equipment_stashed", "Equipment moved to stash"


class FighterLog(Base):
    """
    Audit trail of fighter changes.

    ``fighter_id`` is a plain value rather than a foreign key so entries
    survive the fighter being deleted.
    """

    gang = models.ForeignKey(
        "core.Gang", on_delete=models.CASCADE, related_name="fighter_logs"
    )
    fighter_id = models.UUIDField(null=True, blank=True, db_index=True)
    fighter_name = models.CharField(max_length=255, blank=True)
    action_type = models.CharField(max_length=50, choices=FighterLogType.choices)
    old_value = models.CharField(max_length=255, blank=True)
    new_value = models.CharField(max_length=255, blank=True)
    user = models.ForeignKey(
        "auth.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fighter_logs",
    )
    description = models.TextField(blank=True)

    def __str__(self):
        return f"{self.fighter_name}: {self.get_action_type_display()}"

    class Meta:
        verbose_name = "Fighter Log"
        verbose_name_plural = "Fighter Logs"
        ordering = ["-created"]
