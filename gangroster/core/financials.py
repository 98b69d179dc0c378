"""
Atomic updates to a gang's shared resources.

Credits, rating, stash value and meat are shared by every fighter in a gang.
All changes go through ``update_gang_financials``, which locks the gang row
for the rest of the surrounding transaction so concurrent mutations apply
their deltas one after another.
"""

import logging
from dataclasses import dataclass

from django.db import transaction

from gangroster.core.errors import InsufficientResource, NotFound
from gangroster.core.models import Gang
from gangroster.tracker import track

logger = logging.getLogger(__name__)


@dataclass
class FinancialUpdate:
    gang: Gang
    credits_before: int
    credits_after: int
    rating_before: int
    rating_after: int
    stash_before: int
    stash_after: int
    meat_before: int
    meat_after: int

    @property
    def wealth_before(self) -> int:
        return self.credits_before + self.rating_before + self.stash_before

    @property
    def wealth_after(self) -> int:
        return self.credits_after + self.rating_after + self.stash_after


def lock_gang(gang_id) -> Gang:
    """Fetch the gang row with a write lock held until the transaction ends."""
    try:
        return Gang.objects.select_for_update().get(pk=gang_id)
    except Gang.DoesNotExist:
        raise NotFound("Gang not found")


@transaction.atomic
def update_gang_financials(
    gang_id,
    *,
    rating_delta: int = 0,
    credits_delta: int = 0,
    stash_delta: int = 0,
    meat_delta: int = 0,
) -> FinancialUpdate:
    """
    Apply deltas to a gang's credits, rating, stash value and meat.

    Rating and stash value are clamped at zero. Meat is not: a negative
    result raises ``InsufficientResource`` and nothing is written.
    """
    gang = lock_gang(gang_id)

    credits_before = gang.credits
    rating_before = gang.rating
    stash_before = gang.stash_value
    meat_before = gang.meat

    if meat_before + meat_delta < 0:
        raise InsufficientResource("Not enough meat")

    gang.credits = credits_before + credits_delta
    gang.rating = max(0, rating_before + rating_delta)
    gang.stash_value = max(0, stash_before + stash_delta)
    gang.meat = meat_before + meat_delta
    gang.save(update_fields=["credits", "rating", "stash_value", "meat", "modified"])

    if rating_delta or credits_delta or stash_delta or meat_delta:
        track(
            "gang_financials_updated",
            gang_id=gang.id,
            rating_delta=rating_delta,
            credits_delta=credits_delta,
            stash_delta=stash_delta,
            meat_delta=meat_delta,
        )

    return FinancialUpdate(
        gang=gang,
        credits_before=credits_before,
        credits_after=gang.credits,
        rating_before=rating_before,
        rating_after=gang.rating,
        stash_before=stash_before,
        stash_after=gang.stash_value,
        meat_before=meat_before,
        meat_after=gang.meat,
    )
