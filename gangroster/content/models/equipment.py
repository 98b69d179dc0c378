from django.db import models
from simple_history.models import HistoricalRecords

from .base import Content


class EquipmentType(models.TextChoices):
    WEAPON = "weapon", "Weapon"
    WARGEAR = "wargear", "Wargear"


class ContentEquipment(Content):
    """
    An equipment catalog entry that fighters can buy.
    """

    name = models.CharField(max_length=255, db_index=True)
    cost = models.PositiveIntegerField(
        default=0, help_text="The listed trading post cost."
    )
    equipment_type = models.CharField(
        max_length=20,
        choices=EquipmentType.choices,
        default=EquipmentType.WARGEAR,
    )
    history = HistoricalRecords()

    def __str__(self):
        return self.name

    @property
    def is_weapon(self):
        return self.equipment_type == EquipmentType.WEAPON

    class Meta:
        verbose_name = "Equipment"
        verbose_name_plural = "Equipment"
        ordering = ["name"]
