"""Tests for the pure effect-modifier consolidator."""

from gangroster.core.effects import (
    EffectCreation,
    ExistingModifier,
    ModifierUpdate,
    plan_effect_changes,
)


def find_type(stat_name, delta):
    return f"{stat_name}{'+' if delta > 0 else '-'}"


def no_type(stat_name, delta):
    return None


def test_cancelling_only_modifier_deletes_it_and_its_effect():
    existing = [ExistingModifier("m1", "e1", "toughness", 1)]

    plan = plan_effect_changes(existing, {"toughness": -1}, find_type)

    assert plan.deleted_modifier_ids == ["m1"]
    assert plan.deleted_effect_ids == ["e1"]
    assert plan.updates == []
    assert plan.creations == []


def test_effect_with_other_modifiers_survives():
    existing = [
        ExistingModifier("m1", "e1", "toughness", 1),
        ExistingModifier("m2", "e1", "ws", 1),
    ]

    plan = plan_effect_changes(existing, {"toughness": -1}, find_type)

    assert plan.deleted_modifier_ids == ["m1"]
    assert plan.deleted_effect_ids == []


def test_same_sign_delta_folds_into_existing_modifier():
    existing = [ExistingModifier("m1", "e1", "toughness", 1)]

    plan = plan_effect_changes(existing, {"toughness": 2}, find_type)

    assert plan.updates == [ModifierUpdate("m1", "toughness", 3)]
    assert plan.creations == []
    assert plan.deleted_modifier_ids == []


def test_same_sign_fold_leaves_opposite_sign_untouched():
    existing = [
        ExistingModifier("m1", "e1", "toughness", 1),
        ExistingModifier("m2", "e2", "toughness", -3),
    ]

    plan = plan_effect_changes(existing, {"toughness": 1}, find_type)

    assert plan.updates == [ModifierUpdate("m1", "toughness", 2)]
    assert plan.deleted_modifier_ids == []
    assert plan.deleted_effect_ids == []


def test_extra_same_sign_modifiers_are_merged_away():
    existing = [
        ExistingModifier("m1", "e1", "ws", 1),
        ExistingModifier("m2", "e2", "ws", 2),
    ]

    plan = plan_effect_changes(existing, {"ws": 1}, find_type)

    assert plan.updates == [ModifierUpdate("m1", "ws", 2)]
    assert plan.deleted_modifier_ids == ["m2"]
    assert plan.deleted_effect_ids == ["e2"]


def test_opposite_sign_with_larger_magnitude_is_reduced():
    existing = [ExistingModifier("m1", "e1", "movement", -3)]

    plan = plan_effect_changes(existing, {"movement": 1}, find_type)

    assert plan.updates == [ModifierUpdate("m1", "movement", -2)]
    assert plan.deleted_modifier_ids == []


def test_opposite_sign_walk_deletes_then_creates_leftover():
    existing = [
        ExistingModifier("m1", "e1", "bs", -1),
        ExistingModifier("m2", "e2", "bs", -1),
    ]

    plan = plan_effect_changes(existing, {"bs": 3}, find_type)

    assert plan.deleted_modifier_ids == ["m1", "m2"]
    assert plan.deleted_effect_ids == ["e1", "e2"]
    assert plan.creations == [EffectCreation("bs", 1, "bs+")]


def test_opposite_sign_walk_stops_at_exact_match():
    existing = [
        ExistingModifier("m1", "e1", "bs", -1),
        ExistingModifier("m2", "e2", "bs", -2),
    ]

    plan = plan_effect_changes(existing, {"bs": 1}, find_type)

    assert plan.deleted_modifier_ids == ["m1"]
    assert plan.updates == []
    assert plan.creations == []


def test_new_stat_creates_effect_with_matching_type():
    plan = plan_effect_changes([], {"ws": -2}, find_type)

    assert plan.creations == [EffectCreation("ws", -2, "ws-")]


def test_missing_effect_type_skips_creation():
    plan = plan_effect_changes([], {"leadership": 1}, no_type)

    assert plan.creations == []
    assert plan.skipped_stats == ["leadership"]
    assert plan.is_empty


def test_zero_delta_is_ignored():
    existing = [ExistingModifier("m1", "e1", "ws", 1)]

    plan = plan_effect_changes(existing, {"ws": 0}, find_type)

    assert plan.is_empty


def test_effect_emptied_across_stats_is_deleted_once():
    existing = [
        ExistingModifier("m1", "e1", "ws", 1),
        ExistingModifier("m2", "e1", "bs", 1),
    ]

    plan = plan_effect_changes(existing, {"ws": -1, "bs": -1}, find_type)

    assert plan.deleted_modifier_ids == ["m1", "m2"]
    assert plan.deleted_effect_ids == ["e1"]
