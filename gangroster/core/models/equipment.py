from django.db import models
from simple_history.models import HistoricalRecords

from gangroster.core.pricing import equipment_display_name

from .base import AppBase


class FighterEquipment(AppBase):
    """
    An item of equipment owned by a fighter.

    ``cost`` is the value the item adds to the fighter's total cost (and so to
    gang rating). ``purchase_cost`` is what the gang actually paid, which is
    also the default sale price.
    """

    fighter = models.ForeignKey(
        "core.Fighter", on_delete=models.CASCADE, related_name="equipment"
    )
    equipment = models.ForeignKey(
        "content.ContentEquipment",
        on_delete=models.PROTECT,
        related_name="fighter_equipment",
    )
    cost = models.IntegerField(default=0)
    purchase_cost = models.IntegerField(default=0)
    is_master_crafted = models.BooleanField(default=False)
    target_equipment = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="mounted_equipment",
        help_text="The equipment this item is mounted on.",
    )
    history = HistoricalRecords()

    def __str__(self):
        return self.name

    @property
    def name(self):
        return equipment_display_name(
            self.equipment.name, master_crafted=self.is_master_crafted
        )

    class Meta:
        verbose_name = "Fighter Equipment"
        verbose_name_plural = "Fighter Equipment"
        ordering = ["created"]


class GangStashItem(AppBase):
    """Equipment held in the gang stash rather than by a fighter."""

    gang = models.ForeignKey(
        "core.Gang", on_delete=models.CASCADE, related_name="stash_items"
    )
    equipment = models.ForeignKey(
        "content.ContentEquipment",
        on_delete=models.PROTECT,
        related_name="stash_items",
    )
    cost = models.IntegerField(default=0)
    is_master_crafted = models.BooleanField(default=False)
    history = HistoricalRecords()

    def __str__(self):
        return equipment_display_name(
            self.equipment.name, master_crafted=self.is_master_crafted
        )

    class Meta:
        verbose_name = "Stash Item"
        verbose_name_plural = "Stash Items"
        ordering = ["created"]
