"""Tests for atomic gang financial updates."""

import uuid

import pytest

from gangroster.core.errors import InsufficientResource, NotFound
from gangroster.core.financials import update_gang_financials


@pytest.mark.django_db
def test_deltas_are_applied_together(make_gang):
    gang = make_gang("Rich Gang", credits=300, rating=400, stash_value=50, meat=3)

    update = update_gang_financials(
        gang.id, rating_delta=20, credits_delta=-30, stash_delta=10, meat_delta=-1
    )

    assert update.credits_before == 300
    assert update.credits_after == 270
    assert update.rating_after == 420
    assert update.stash_after == 60
    assert update.meat_after == 2
    assert update.wealth_before == 750
    assert update.wealth_after == 750

    gang.refresh_from_db()
    assert (gang.credits, gang.rating, gang.stash_value, gang.meat) == (270, 420, 60, 2)


@pytest.mark.django_db
def test_rating_and_stash_are_clamped_at_zero(make_gang):
    gang = make_gang("Poor Gang", rating=50, stash_value=10)

    update = update_gang_financials(gang.id, rating_delta=-100, stash_delta=-40)

    assert update.rating_before == 50
    assert update.rating_after == 0
    assert update.stash_after == 0


@pytest.mark.django_db
def test_credits_may_go_negative(make_gang):
    gang = make_gang("Indebted Gang", credits=10)

    update = update_gang_financials(gang.id, credits_delta=-25)

    assert update.credits_after == -15


@pytest.mark.django_db
def test_negative_meat_raises_and_writes_nothing(make_gang):
    gang = make_gang("Hungry Gang", credits=100, meat=0)

    with pytest.raises(InsufficientResource, match="Not enough meat"):
        update_gang_financials(gang.id, credits_delta=50, meat_delta=-1)

    gang.refresh_from_db()
    assert gang.credits == 100
    assert gang.meat == 0


@pytest.mark.django_db
def test_unknown_gang():
    with pytest.raises(NotFound, match="Gang not found"):
        update_gang_financials(uuid.uuid4(), credits_delta=1)
