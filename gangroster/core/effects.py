"""
Effect-modifier consolidation.

A fighter's stat adjustments are stored as effects, each owning one or more
``(stat_name, value)`` modifiers. When the user nudges a stat up or down we
edit the fewest records possible instead of piling up new effects:

* a delta in the same direction as an existing modifier is folded into it,
  and any further same-direction modifiers for that stat are merged away;
* a delta against existing modifiers cancels them, fully or partly, walking
  them in order until the delta is used up;
* whatever is left over becomes a new effect.

An effect never survives without modifiers: once every modifier it owns is
deleted, the effect is deleted with them.

This module is pure. ``plan_effect_changes`` works on plain values and is
shared by the server handler and the client's optimistic patch.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, Mapping, Optional


@dataclass(frozen=True)
class ExistingModifier:
    id: Hashable
    effect_id: Hashable
    stat_name: str
    value: int


@dataclass(frozen=True)
class ModifierUpdate:
    modifier_id: Hashable
    stat_name: str
    value: int


@dataclass(frozen=True)
class EffectCreation:
    stat_name: str
    value: int
    effect_type: Any


@dataclass
class EffectPlan:
    updates: list[ModifierUpdate] = field(default_factory=list)
    creations: list[EffectCreation] = field(default_factory=list)
    deleted_modifier_ids: list = field(default_factory=list)
    deleted_effect_ids: list = field(default_factory=list)
    # Stats whose leftover delta had no matching effect type
    skipped_stats: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.updates
            or self.creations
            or self.deleted_modifier_ids
            or self.deleted_effect_ids
        )


def _same_sign(value: int, delta: int) -> bool:
    return (value > 0) == (delta > 0)


def plan_effect_changes(
    existing: Iterable[ExistingModifier],
    changes: Mapping[str, int],
    find_effect_type: Callable[[str, int], Optional[Any]],
) -> EffectPlan:
    """
    Work out the modifier edits needed to apply ``changes``.

    Args:
        existing: Every modifier of the fighter's adjustment effects, in
            creation order. Modifiers for stats not being changed still
            count toward whether their effect becomes empty.
        changes: Requested ``stat_name -> signed delta``. Zero deltas are
            ignored.
        find_effect_type: Looks up the effect type for ``(stat_name, delta)``,
            matching on the delta's sign. Returning None skips the creation.

    Returns:
        An EffectPlan. Updates and creations are listed in stat order.
        Deletions are meant to be executed as one batch each.
    """
    existing = list(existing)
    plan = EffectPlan()

    by_stat: dict[str, list[ExistingModifier]] = {}
    for modifier in existing:
        by_stat.setdefault(modifier.stat_name, []).append(modifier)

    remaining_per_effect = Counter(modifier.effect_id for modifier in existing)

    def delete(modifier: ExistingModifier) -> None:
        plan.deleted_modifier_ids.append(modifier.id)
        remaining_per_effect[modifier.effect_id] -= 1
        if remaining_per_effect[modifier.effect_id] == 0:
            plan.deleted_effect_ids.append(modifier.effect_id)

    def create(stat_name: str, value: int) -> None:
        effect_type = find_effect_type(stat_name, value)
        if effect_type is None:
            plan.skipped_stats.append(stat_name)
            return
        plan.creations.append(EffectCreation(stat_name, value, effect_type))

    for stat_name, delta in changes.items():
        if not delta:
            continue

        modifiers = [m for m in by_stat.get(stat_name, []) if m.value != 0]
        same_sign = [m for m in modifiers if _same_sign(m.value, delta)]
        opposite_sign = [m for m in modifiers if not _same_sign(m.value, delta)]

        if same_sign:
            first, *others = same_sign
            new_value = first.value + delta
            if new_value == 0:
                delete(first)
            else:
                plan.updates.append(ModifierUpdate(first.id, stat_name, new_value))
            for modifier in others:
                delete(modifier)
            continue

        remaining = delta
        for modifier in opposite_sign:
            if abs(modifier.value) == abs(remaining):
                delete(modifier)
                remaining = 0
                break
            if abs(modifier.value) > abs(remaining):
                plan.updates.append(
                    ModifierUpdate(modifier.id, stat_name, modifier.value + remaining)
                )
                remaining = 0
                break
            delete(modifier)
            remaining += modifier.value

        if remaining:
            create(stat_name, remaining)

    return plan
