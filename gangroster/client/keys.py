"""
Query keys for the client cache.

Keys are tuples so that every key for one fighter shares the
``("fighters", <id>)`` prefix and can be invalidated together.
"""


def fighter_root(fighter_id) -> tuple:
    return ("fighters", str(fighter_id))


def fighter_detail(fighter_id) -> tuple:
    return (*fighter_root(fighter_id), "detail")


def fighter_equipment(fighter_id) -> tuple:
    return (*fighter_root(fighter_id), "equipment")


def fighter_effects(fighter_id) -> tuple:
    return (*fighter_root(fighter_id), "effects")


def fighter_skills(fighter_id) -> tuple:
    return (*fighter_root(fighter_id), "skills")


def fighter_total_cost(fighter_id) -> tuple:
    return (*fighter_root(fighter_id), "total_cost")


def gang_detail(gang_id) -> tuple:
    return ("gangs", str(gang_id), "detail")


def fighter_view_keys(fighter_id, gang_id) -> dict:
    """Map each part of a fighter view to its cache key."""
    return {
        "fighter": fighter_detail(fighter_id),
        "equipment": fighter_equipment(fighter_id),
        "effects": fighter_effects(fighter_id),
        "skills": fighter_skills(fighter_id),
        "total_cost": fighter_total_cost(fighter_id),
        "gang": gang_detail(gang_id),
    }
