"""Tests for handle_fighter_xp_update."""

import pytest

from gangroster.core.errors import InvalidInput
from gangroster.core.handlers.fighter import handle_fighter_xp_update
from gangroster.core.models import FighterLog, FighterLogType


@pytest.mark.django_db
@pytest.mark.parametrize("xp_to_add", [3, -2, 0, -10])
def test_xp_is_added_unclamped(ctx, make_fighter, xp_to_add):
    fighter = make_fighter("Veteran", xp=5)

    result = handle_fighter_xp_update(ctx=ctx, fighter=fighter, xp_to_add=xp_to_add)

    assert result.xp_before == 5
    assert result.xp_after == 5 + xp_to_add
    fighter.refresh_from_db()
    assert fighter.xp == 5 + xp_to_add


@pytest.mark.django_db
def test_xp_change_writes_one_log_entry(ctx, fighter):
    handle_fighter_xp_update(ctx=ctx, fighter=fighter, xp_to_add=2)

    log = FighterLog.objects.get(fighter_id=fighter.id)
    assert log.action_type == FighterLogType.XP_CHANGED
    assert log.old_value == "0"
    assert log.new_value == "2"
    assert log.user == ctx.user


@pytest.mark.django_db
def test_xp_with_ooa_adds_kills_and_logs_twice(ctx, make_fighter):
    """Test that 3 XP and 2 OOA on a 5 XP fighter gives 8 XP and two more kills."""
    fighter = make_fighter("Brawler", xp=5, kills=1)

    result = handle_fighter_xp_update(
        ctx=ctx, fighter=fighter, xp_to_add=3, ooa_count=2
    )

    assert result.xp_after == 8
    assert result.kills_after == 3
    fighter.refresh_from_db()
    assert fighter.xp == 8
    assert fighter.kills == 3
    assert fighter.kill_count == 0

    action_types = sorted(
        FighterLog.objects.filter(fighter_id=fighter.id).values_list(
            "action_type", flat=True
        )
    )
    assert action_types == sorted(
        [FighterLogType.XP_CHANGED, FighterLogType.OOA_CHANGED]
    )


@pytest.mark.django_db
def test_spyrer_ooa_also_counts_toward_kill_count(
    ctx, make_fighter, make_fighter_type
):
    spyrer = make_fighter_type("Orrus Hunter", is_spyrer=True)
    fighter = make_fighter("Hunter", fighter_type=spyrer, kill_count=4)

    handle_fighter_xp_update(ctx=ctx, fighter=fighter, xp_to_add=1, ooa_count=2)

    fighter.refresh_from_db()
    assert fighter.kills == 2
    assert fighter.kill_count == 6


@pytest.mark.django_db
@pytest.mark.parametrize(
    "xp_to_add,ooa_count",
    [("3", 0), (1.5, 0), (None, 0), (True, 0), (1, -1), (1, "2")],
)
def test_invalid_xp_or_ooa_is_rejected(ctx, make_fighter, xp_to_add, ooa_count):
    fighter = make_fighter("Recruit", xp=5)

    with pytest.raises(InvalidInput):
        handle_fighter_xp_update(
            ctx=ctx, fighter=fighter, xp_to_add=xp_to_add, ooa_count=ooa_count
        )

    fighter.refresh_from_db()
    assert fighter.xp == 5
    assert not FighterLog.objects.exists()
