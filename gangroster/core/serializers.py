"""
Plain-dict representations of roster rows.

These are what the gateway returns and what the client cache stores, so the
in-process and HTTP transports hand back identical data.
"""

from typing import Optional

from gangroster.content.models import USER_EFFECT_CATEGORY
from gangroster.core.cost import get_fighter_total_cost
from gangroster.core.models import (
    Fighter,
    FighterEffect,
    FighterEquipment,
    FighterSkill,
    Gang,
)
from gangroster.core.status import STATUS_FLAGS


def _id(value) -> Optional[str]:
    return str(value) if value is not None else None


def gang_payload(gang: Gang) -> dict:
    return {
        "id": str(gang.id),
        "name": gang.name,
        "credits": gang.credits,
        "rating": gang.rating,
        "meat": gang.meat,
        "stash_value": gang.stash_value,
        "wealth": gang.wealth,
    }


def fighter_payload(fighter: Fighter) -> dict:
    payload = {
        "id": str(fighter.id),
        "gang_id": str(fighter.gang_id),
        "name": fighter.name,
        "label": fighter.label,
        "fighter_type_id": _id(fighter.fighter_type_id),
        "fighter_class": fighter.fighter_class,
        "fighter_sub_type": fighter.fighter_sub_type,
        "credits": fighter.credits,
        "cost_adjustment": fighter.cost_adjustment,
        "xp": fighter.xp,
        "kills": fighter.kills,
        "kill_count": fighter.kill_count,
        "is_spyrer": fighter.is_spyrer,
        "note": fighter.note,
        "note_backstory": fighter.note_backstory,
        "special_rules": list(fighter.special_rules or []),
    }
    for flag in STATUS_FLAGS:
        payload[flag] = getattr(fighter, flag)
    return payload


def equipment_payload(item: FighterEquipment) -> dict:
    return {
        "id": str(item.id),
        "fighter_id": str(item.fighter_id),
        "equipment_id": str(item.equipment_id),
        "name": item.name,
        "equipment_type": item.equipment.equipment_type,
        "cost": item.cost,
        "purchase_cost": item.purchase_cost,
        "is_master_crafted": item.is_master_crafted,
        "target_equipment_id": _id(item.target_equipment_id),
    }


def effect_payload(effect: FighterEffect) -> dict:
    category = None
    if effect.effect_type_id:
        category = effect.effect_type.category.name
    return {
        "id": str(effect.id),
        "effect_name": effect.effect_name,
        "effect_type_id": _id(effect.effect_type_id),
        "category": category,
        "fighter_equipment_id": _id(effect.fighter_equipment_id),
        "type_specific_data": dict(effect.type_specific_data or {}),
        "modifiers": [
            {
                "id": str(modifier.id),
                "stat_name": modifier.stat_name,
                "numeric_value": modifier.numeric_value,
            }
            for modifier in effect.modifiers.all()
        ],
    }


def skill_payload(fighter_skill: FighterSkill) -> dict:
    return {
        "id": str(fighter_skill.id),
        "skill_id": str(fighter_skill.skill_id),
        "name": fighter_skill.skill.name,
        "xp_cost": fighter_skill.xp_cost,
        "credits_increase": fighter_skill.credits_increase,
        "is_advance": fighter_skill.is_advance,
    }


def fighter_effects_payload(fighter: Fighter) -> list[dict]:
    effects = fighter.effects.select_related("effect_type__category").prefetch_related(
        "modifiers"
    )
    return [effect_payload(effect) for effect in effects]


def user_effects_payload(fighter: Fighter) -> list[dict]:
    return [
        effect
        for effect in fighter_effects_payload(fighter)
        if effect["category"] == USER_EFFECT_CATEGORY
    ]


def fighter_view_payload(fighter: Fighter) -> dict:
    """Everything the client caches for one fighter."""
    equipment = fighter.equipment.select_related("equipment")
    skills = fighter.skills.select_related("skill")
    return {
        "fighter": fighter_payload(fighter),
        "equipment": [equipment_payload(item) for item in equipment],
        "effects": fighter_effects_payload(fighter),
        "skills": [skill_payload(skill) for skill in skills],
        "total_cost": get_fighter_total_cost(fighter),
        "gang": gang_payload(fighter.gang),
    }
