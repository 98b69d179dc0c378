import json
import logging
import uuid

import pytest

from gangroster import tracker
from gangroster.core.models import FighterLogType


@pytest.fixture
def caplog_json(caplog):
    """Fixture that parses JSON logs from caplog.

    caplog's handler is added to the tracker logger directly, and propagation
    is switched off for the test so records are not captured a second time
    through the root logger.
    """
    logger = logging.getLogger("gangroster.tracker")
    logger.addHandler(caplog.handler)
    original_level = logger.level
    original_propagate = logger.propagate
    logger.setLevel(logging.INFO)
    logger.propagate = False

    def get_json_logs():
        return [
            json.loads(record.message)
            for record in caplog.records
            if record.name == "gangroster.tracker" and record.levelno == logging.INFO
        ]

    caplog.get_json_logs = get_json_logs
    yield caplog

    logger.removeHandler(caplog.handler)
    logger.setLevel(original_level)
    logger.propagate = original_propagate


def test_track_basic_event(caplog_json):
    tracker.track("fighter_status_changed")

    assert caplog_json.get_json_logs() == [{"event": "fighter_status_changed", "n": 1}]


def test_track_event_with_count_and_value(caplog_json):
    tracker.track("equipment_purchased", n=2, value=-40)

    assert caplog_json.get_json_logs() == [
        {"event": "equipment_purchased", "n": 2, "value": -40}
    ]


def test_ids_and_choices_become_strings(caplog_json):
    fighter_id = uuid.uuid4()

    tracker.track(
        "fighter_status_changed",
        fighter_id=fighter_id,
        log_type=FighterLogType.KILLED,
        rating_delta=-120,
        deleted=False,
    )

    [log] = caplog_json.get_json_logs()
    assert log["labels"] == {
        "fighter_id": str(fighter_id),
        "log_type": "fighter_killed",
        "rating_delta": -120,
        "deleted": False,
    }


@pytest.mark.django_db
def test_model_instances_are_reduced_to_their_pk(caplog_json, fighter):
    tracker.track("fighter_status_changed", fighter=fighter, gang=fighter.gang)

    [log] = caplog_json.get_json_logs()
    assert log["labels"] == {
        "fighter": str(fighter.pk),
        "gang": str(fighter.gang.pk),
    }


def test_none_and_unknown_labels_are_dropped(caplog_json):
    tracker.track("fighter_updated", sell_value=None, callback=object())

    assert caplog_json.get_json_logs() == [{"event": "fighter_updated", "n": 1}]


def test_list_labels_keep_serializable_items(caplog_json):
    ids = [uuid.uuid4(), uuid.uuid4()]

    tracker.track("effects_updated", effect_ids=ids + [object()])

    [log] = caplog_json.get_json_logs()
    assert log["labels"] == {"effect_ids": [str(i) for i in ids]}


def test_track_mutation_failure(caplog_json):
    fighter_id = uuid.uuid4()

    tracker.track_mutation_failure("sell_equipment", "not_found", fighter_id)

    assert caplog_json.get_json_logs() == [
        {
            "event": "fighter_mutation_failed",
            "n": 1,
            "labels": {
                "operation": "sell_equipment",
                "error_kind": "not_found",
                "fighter_id": str(fighter_id),
            },
        }
    ]
