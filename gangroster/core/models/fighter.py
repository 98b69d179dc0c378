from django.db import models
from simple_history.models import HistoricalRecords

from gangroster.core.status import (
    INACTIVE_FLAGS,
    STATUS_FLAGS,
    counts_toward_rating,
    is_status_incompatible,
)

from .base import AppBase


class FighterQuerySet(models.QuerySet):
    def for_user(self, user):
        """Fighters in gangs owned by ``user``."""
        if user is None or not user.is_authenticated:
            return self.none()
        return self.filter(gang__owner=user)

    def active(self):
        return self.filter(**{flag: False for flag in INACTIVE_FLAGS})


class Fighter(AppBase):
    """
    A roster member belonging to a gang.

    The status flags are independent booleans. ``counts_toward_rating`` is the
    single definition of an active fighter.
    """

    gang = models.ForeignKey(
        "core.Gang", on_delete=models.CASCADE, related_name="fighters"
    )
    name = models.CharField(max_length=255)
    label = models.CharField(max_length=255, blank=True)
    fighter_type = models.ForeignKey(
        "content.ContentFighterType",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fighters",
    )
    fighter_class = models.CharField(max_length=255, blank=True)
    fighter_sub_type = models.CharField(max_length=255, blank=True)

    credits = models.PositiveIntegerField(
        default=0, help_text="Base cost paid when the fighter was hired."
    )
    cost_adjustment = models.IntegerField(
        default=0, help_text="Manual adjustment added to the fighter's cost."
    )
    xp = models.IntegerField(default=0)
    kills = models.PositiveIntegerField(default=0)
    kill_count = models.PositiveIntegerField(
        default=0, help_text="Spyrer kill tally, tracked separately from kills."
    )

    killed = models.BooleanField(default=False)
    retired = models.BooleanField(default=False)
    enslaved = models.BooleanField(default=False)
    starved = models.BooleanField(default=False)
    captured = models.BooleanField(default=False)
    recovery = models.BooleanField(default=False)

    note = models.TextField(blank=True)
    note_backstory = models.TextField(blank=True)
    special_rules = models.JSONField(default=list, blank=True)

    history = HistoricalRecords()

    objects = FighterQuerySet.as_manager()

    def __str__(self):
        return self.name

    def status_flags(self) -> dict:
        return {flag: getattr(self, flag) for flag in STATUS_FLAGS}

    @property
    def counts_toward_rating(self) -> bool:
        return counts_toward_rating(self.status_flags())

    @property
    def has_incompatible_status(self) -> bool:
        return is_status_incompatible(self.status_flags())

    @property
    def is_spyrer(self) -> bool:
        return bool(self.fighter_type_id and self.fighter_type.is_spyrer)

    class Meta:
        verbose_name = "Fighter"
        verbose_name_plural = "Fighters"
        ordering = ["gang", "name"]


class FighterExoticBeast(AppBase):
    """Links an exotic beast fighter to the fighter that owns it."""

    owner_fighter = models.ForeignKey(
        Fighter, on_delete=models.CASCADE, related_name="owned_beasts"
    )
    pet = models.ForeignKey(
        Fighter, on_delete=models.CASCADE, related_name="beast_owner_links"
    )
    fighter_equipment = models.ForeignKey(
        "core.FighterEquipment",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="granted_beasts",
        help_text="The equipment that granted this beast, if any.",
    )

    def __str__(self):
        return f"{self.pet} (owned by {self.owner_fighter})"

    class Meta:
        verbose_name = "Exotic Beast"
        verbose_name_plural = "Exotic Beasts"
