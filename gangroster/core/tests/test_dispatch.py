"""Tests that mutation side effects never fail the mutation."""

from unittest.mock import MagicMock, patch

import pytest

from gangroster.core.dispatch import (
    invalidate_beast_owners,
    log_fighter_action,
    remove_fighter_images,
)
from gangroster.core.models import FighterLog, FighterLogType


@pytest.mark.django_db
def test_log_fighter_action_records_user(ctx, gang, fighter):
    assert log_fighter_action(
        ctx,
        gang_id=gang.id,
        fighter_id=fighter.id,
        fighter_name=fighter.name,
        action_type=FighterLogType.XP_CHANGED,
        old_value=0,
        new_value=None,
    )

    entry = FighterLog.objects.get()
    assert entry.user == ctx.user
    assert entry.old_value == "0"
    assert entry.new_value == ""


@pytest.mark.django_db
def test_log_fighter_action_failure_is_swallowed(ctx, gang, fighter):
    broken = MagicMock()
    broken.enqueue.side_effect = RuntimeError("queue unavailable")

    with patch("gangroster.core.dispatch.record_fighter_log", broken):
        assert (
            log_fighter_action(
                ctx,
                gang_id=gang.id,
                fighter_id=fighter.id,
                fighter_name=fighter.name,
                action_type=FighterLogType.KILLED,
            )
            is False
        )

    assert not FighterLog.objects.exists()


def test_invalidate_beast_owners_failure_is_swallowed():
    broken = MagicMock()
    broken.enqueue.side_effect = RuntimeError("queue unavailable")

    with patch("gangroster.core.dispatch.invalidate_beast_owner_cache", broken):
        assert invalidate_beast_owners("some-fighter") is False


def test_remove_fighter_images_matches_fighter_files(storage):
    storage.listdir.return_value = (
        ["thumbs"],
        ["abc.webp", "abc_small.png", "abcd.webp", "other_abc.webp"],
    )

    assert remove_fighter_images(storage, "g1", "abc") == 2
    storage.delete.assert_any_call("gangs/g1/fighters/abc.webp")
    storage.delete.assert_any_call("gangs/g1/fighters/abc_small.png")


def test_remove_fighter_images_stops_on_storage_error(storage):
    storage.listdir.return_value = ([], ["abc.webp", "abc_small.png"])
    storage.delete.side_effect = [None, OSError("permission denied")]

    assert remove_fighter_images(storage, "g1", "abc") == 1
