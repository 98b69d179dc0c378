"""
Speculative state patches for fighter mutations.

Each patch takes the cached fighter state and the mutation's parameters and
returns only the parts of the state it changes, as new values. Nothing is
mutated in place. The state is a dict shaped like the server's fighter
view: ``fighter``, ``equipment``, ``effects``, ``skills``, ``total_cost``
and ``gang``. Any part may be missing from the cache, in which case it is
left out of the patch.

Patches apply the same cost and status rules as the server so the cache
usually matches what the server later confirms. They never validate:
anything the server rejects is rolled back, and a patch that raises on bad
params is skipped.
"""

import uuid
from typing import Callable, Optional

from gangroster.core.effects import ExistingModifier, plan_effect_changes
from gangroster.core.params import (
    AddCharacteristicAdvancementParams,
    AddSkillAdvancementParams,
    BuyEquipmentParams,
    DeleteAdvancementParams,
    EditFighterStatusParams,
    MoveEquipmentToStashParams,
    SellEquipmentParams,
    UpdateFighterDetailsParams,
    UpdateFighterEffectsParams,
    UpdateFighterXpParams,
    UpdateFighterXpWithOoaParams,
)
from gangroster.core.pricing import WEAPON, equipment_display_name, purchase_costs
from gangroster.core.status import (
    STATUS_FLAGS,
    FighterStatusAction,
    apply_status_toggle,
    counts_toward_rating,
    rating_delta_for_transition,
)

TEMP_ID_PREFIX = "temp-"

USER_CATEGORY = "user"
ADVANCEMENT_CATEGORY = "advancements"


def new_temp_id() -> str:
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}"


def is_temp_id(value) -> bool:
    return isinstance(value, str) and value.startswith(TEMP_ID_PREFIX)


def _flags(fighter: dict) -> dict:
    return {flag: bool(fighter.get(flag)) for flag in STATUS_FLAGS}


def _is_active(state: dict) -> bool:
    fighter = state.get("fighter")
    return fighter is not None and counts_toward_rating(_flags(fighter))


def _gang_with(gang: dict, *, credits=0, rating=0, stash=0, meat=0) -> dict:
    """Apply deltas to a cached gang the way update_gang_financials does."""
    new_gang = dict(gang)
    new_gang["credits"] = gang["credits"] + credits
    new_gang["rating"] = max(0, gang["rating"] + rating)
    new_gang["stash_value"] = max(0, gang.get("stash_value", 0) + stash)
    new_gang["meat"] = max(0, gang.get("meat", 0) + meat)
    new_gang["wealth"] = (
        new_gang["credits"] + new_gang["rating"] + new_gang["stash_value"]
    )
    return new_gang


def _value_changes(
    state: dict, *, cost_delta: int = 0, credits: int = 0, stash: int = 0
) -> dict:
    """Total cost and gang changes for an item or advancement worth ``cost_delta``."""
    changes = {}
    if cost_delta and state.get("total_cost") is not None:
        changes["total_cost"] = state["total_cost"] + cost_delta
    gang = state.get("gang")
    if gang is not None:
        rating = cost_delta if _is_active(state) else 0
        if rating or credits or stash:
            changes["gang"] = _gang_with(
                gang, credits=credits, rating=rating, stash=stash
            )
    return changes


def _effect_credits(effect: dict) -> int:
    return int((effect.get("type_specific_data") or {}).get("credits_increase") or 0)


def patch_status(state: dict, params: EditFighterStatusParams) -> dict:
    fighter = state.get("fighter")
    if fighter is None or params.action not in FighterStatusAction.values:
        return {}

    gang = state.get("gang")
    total_cost = state.get("total_cost") or 0

    if params.action == FighterStatusAction.DELETE:
        changes = {"fighter": None}
        if gang is not None and _is_active(state):
            changes["gang"] = _gang_with(gang, rating=-total_cost)
        return changes

    old_flags = _flags(fighter)
    new_flags = apply_status_toggle(old_flags, params.action)
    rating_delta = rating_delta_for_transition(
        counts_toward_rating(old_flags), counts_toward_rating(new_flags), total_cost
    )

    changes = {"fighter": {**fighter, **new_flags}}
    if gang is not None:
        credits = 0
        if params.action == FighterStatusAction.SELL and params.sell_value:
            credits = params.sell_value
        feeding = params.action == FighterStatusAction.STARVE and old_flags["starved"]
        changes["gang"] = _gang_with(
            gang, credits=credits, rating=rating_delta, meat=-1 if feeding else 0
        )
    return changes


def patch_xp(state: dict, params: UpdateFighterXpParams) -> dict:
    fighter = state.get("fighter")
    if fighter is None:
        return {}
    return {"fighter": {**fighter, "xp": fighter["xp"] + params.xp_to_add}}


def patch_xp_with_ooa(state: dict, params: UpdateFighterXpWithOoaParams) -> dict:
    fighter = state.get("fighter")
    if fighter is None:
        return {}
    new_fighter = {**fighter, "xp": fighter["xp"] + params.xp_to_add}
    if params.ooa_count:
        new_fighter["kills"] = fighter["kills"] + params.ooa_count
        if fighter.get("is_spyrer"):
            new_fighter["kill_count"] = fighter.get("kill_count", 0) + params.ooa_count
    return {"fighter": new_fighter}


def _planned_effects(
    effects: list[dict],
    stats: dict,
    temp_id: Callable[[], str],
) -> list[dict]:
    """Run the consolidator over cached effects and return the new effect list."""
    user_effects = [e for e in effects if e.get("category") == USER_CATEGORY]
    existing = [
        ExistingModifier(
            id=modifier["id"],
            effect_id=effect["id"],
            stat_name=modifier["stat_name"],
            value=modifier["numeric_value"],
        )
        for effect in user_effects
        for modifier in effect.get("modifiers", [])
    ]

    # The client does not know the effect type catalog; the server's list
    # replaces these placeholders on reconcile.
    plan = plan_effect_changes(
        existing,
        stats,
        lambda stat_name, delta: {
            "name": f"{stat_name} {'increase' if delta > 0 else 'decrease'}"
        },
    )

    updated_values = {update.modifier_id: update.value for update in plan.updates}
    deleted_modifiers = set(plan.deleted_modifier_ids)
    deleted_effects = set(plan.deleted_effect_ids)

    new_effects = []
    for effect in effects:
        if effect["id"] in deleted_effects:
            continue
        modifiers = [
            {**m, "numeric_value": updated_values.get(m["id"], m["numeric_value"])}
            for m in effect.get("modifiers", [])
            if m["id"] not in deleted_modifiers
        ]
        new_effects.append({**effect, "modifiers": modifiers})

    for creation in plan.creations:
        new_effects.append(
            {
                "id": temp_id(),
                "effect_name": creation.effect_type["name"],
                "effect_type_id": None,
                "category": USER_CATEGORY,
                "fighter_equipment_id": None,
                "type_specific_data": {},
                "modifiers": [
                    {
                        "id": temp_id(),
                        "stat_name": creation.stat_name,
                        "numeric_value": creation.value,
                    }
                ],
            }
        )
    return new_effects


def patch_effects(
    state: dict,
    params: UpdateFighterEffectsParams,
    temp_id: Callable[[], str] = new_temp_id,
) -> dict:
    if state.get("effects") is None:
        return {}
    return {"effects": _planned_effects(state["effects"], params.stats, temp_id)}


def patch_details(
    state: dict,
    params: UpdateFighterDetailsParams,
    temp_id: Callable[[], str] = new_temp_id,
) -> dict:
    fighter = state.get("fighter")
    if fighter is None:
        return {}

    new_fighter = dict(fighter)
    changes = {}
    for name, value in params.changes.items():
        if name == "stat_adjustments":
            if state.get("effects") is not None:
                changes["effects"] = _planned_effects(state["effects"], value, temp_id)
        elif name == "name" and isinstance(value, str):
            new_fighter["name"] = value.rstrip()
        else:
            new_fighter[name] = value

    changes["fighter"] = new_fighter
    if "cost_adjustment" in params.changes:
        delta = params.changes["cost_adjustment"] - fighter.get("cost_adjustment", 0)
        changes.update(_value_changes(state, cost_delta=delta))
    return changes


def patch_buy_equipment(
    state: dict,
    params: BuyEquipmentParams,
    equipment: dict,
    temp_id: str,
) -> dict:
    """
    Add a placeholder item for ``equipment``, a catalog entry with ``name``,
    ``cost`` and ``equipment_type``.
    """
    if state.get("fighter") is None:
        return {}

    master_crafted = (
        bool(params.master_crafted) and equipment["equipment_type"] == WEAPON
    )
    paid, rating_cost = purchase_costs(
        equipment["cost"],
        equipment_type=equipment["equipment_type"],
        master_crafted=master_crafted,
        manual_cost=params.manual_cost,
        use_base_cost_for_rating=params.use_base_cost_for_rating,
    )
    item = {
        "id": temp_id,
        "fighter_id": str(params.fighter_id),
        "equipment_id": str(params.equipment_id),
        "name": equipment_display_name(
            equipment["name"], master_crafted=master_crafted
        ),
        "equipment_type": equipment["equipment_type"],
        "cost": rating_cost,
        "purchase_cost": paid,
        "is_master_crafted": master_crafted,
        "target_equipment_id": params.target_equipment_id,
    }

    changes = _value_changes(state, cost_delta=rating_cost, credits=-paid)
    changes["equipment"] = [*(state.get("equipment") or []), item]
    return changes


def _remove_item(state: dict, item_id) -> Optional[tuple[dict, dict]]:
    """Drop an item and its granted effects; returns (changes, item) or None."""
    equipment = state.get("equipment") or []
    item = next((i for i in equipment if i["id"] == str(item_id)), None)
    if item is None:
        return None

    effects = state.get("effects")
    changes = {"equipment": [i for i in equipment if i["id"] != item["id"]]}
    linked_value = 0
    if effects is not None:
        linked = [e for e in effects if e.get("fighter_equipment_id") == item["id"]]
        linked_value = sum(_effect_credits(e) for e in linked)
        changes["effects"] = [e for e in effects if e not in linked]
    item = {**item, "removed_value": item["cost"] + linked_value}
    return changes, item


def patch_sell_equipment(state: dict, params: SellEquipmentParams) -> dict:
    removed = _remove_item(state, params.fighter_equipment_id)
    if removed is None:
        return {}
    changes, item = removed
    sell_value = params.manual_cost
    if sell_value is None:
        sell_value = item["purchase_cost"]
    changes.update(
        _value_changes(state, cost_delta=-item["removed_value"], credits=sell_value)
    )
    return changes


def patch_move_to_stash(state: dict, params: MoveEquipmentToStashParams) -> dict:
    removed = _remove_item(state, params.fighter_equipment_id)
    if removed is None:
        return {}
    changes, item = removed
    changes.update(
        _value_changes(state, cost_delta=-item["removed_value"], stash=item["cost"])
    )
    return changes


def _spend_xp(state: dict, xp_cost: int) -> dict:
    fighter = state["fighter"]
    return {**fighter, "xp": fighter["xp"] - xp_cost}


def patch_add_characteristic(
    state: dict,
    params: AddCharacteristicAdvancementParams,
    advancement: dict,
    temp_id: str,
) -> dict:
    """
    Add a placeholder advancement effect. ``advancement`` is the catalog
    effect type: its ``name`` and template ``modifiers``.
    """
    if state.get("fighter") is None:
        return {}

    effects = state.get("effects") or []
    times_increased = 1 + sum(
        1 for e in effects if e.get("effect_type_id") == str(params.effect_type_id)
    )
    effect = {
        "id": temp_id,
        "effect_name": advancement["name"],
        "effect_type_id": str(params.effect_type_id),
        "category": ADVANCEMENT_CATEGORY,
        "fighter_equipment_id": None,
        "type_specific_data": {
            "times_increased": times_increased,
            "xp_cost": params.xp_cost,
            "credits_increase": params.credits_increase,
        },
        "modifiers": [
            {
                "id": f"{temp_id}-{index}",
                "stat_name": modifier["stat_name"],
                "numeric_value": modifier["numeric_value"],
            }
            for index, modifier in enumerate(advancement.get("modifiers", []))
        ],
    }

    changes = _value_changes(state, cost_delta=params.credits_increase)
    changes["fighter"] = _spend_xp(state, params.xp_cost)
    changes["effects"] = [*effects, effect]
    return changes


def patch_add_skill(
    state: dict,
    params: AddSkillAdvancementParams,
    skill: dict,
    temp_id: str,
) -> dict:
    if state.get("fighter") is None:
        return {}

    fighter_skill = {
        "id": temp_id,
        "skill_id": str(params.skill_id),
        "name": skill["name"],
        "xp_cost": params.xp_cost,
        "credits_increase": params.credits_increase,
        "is_advance": True,
    }
    changes = _value_changes(state, cost_delta=params.credits_increase)
    changes["fighter"] = _spend_xp(state, params.xp_cost)
    changes["skills"] = [*(state.get("skills") or []), fighter_skill]
    return changes


def patch_delete_advancement(state: dict, params: DeleteAdvancementParams) -> dict:
    fighter = state.get("fighter")
    if fighter is None:
        return {}

    list_name = "skills" if params.advancement_type == "skill" else "effects"
    entries = state.get(list_name) or []
    entry = next((e for e in entries if e["id"] == str(params.advancement_id)), None)
    if entry is None:
        return {}

    if list_name == "skills":
        xp_restored = entry["xp_cost"]
        credits = entry["credits_increase"]
    else:
        data = entry.get("type_specific_data") or {}
        xp_restored = int(data.get("xp_cost") or 0)
        credits = _effect_credits(entry)

    changes = _value_changes(state, cost_delta=-credits)
    changes["fighter"] = {**fighter, "xp": fighter["xp"] + xp_restored}
    changes[list_name] = [e for e in entries if e["id"] != entry["id"]]
    return changes
