"""
Fighter status rules.

Fighters carry independent boolean status flags. Whether a fighter counts
toward gang rating is decided here, in one place, for both the server
handlers and the client's optimistic patches.
"""

from typing import Mapping

from django.db import models

STATUS_FLAGS = ("killed", "retired", "enslaved", "starved", "captured", "recovery")

# Any of these set takes the fighter out of the gang rating
INACTIVE_FLAGS = ("killed", "retired", "enslaved", "captured")

# Convention only: these flags describe where the fighter is, so at most one
# of them is expected to be set
EXCLUSIVE_FLAGS = ("killed", "retired", "enslaved", "captured")


class FighterStatusAction(models.TextChoices):
    KILL = "kill", "Kill"
    RETIRE = "retire", "Retire"
    SELL = "sell", "Sell to the guilders"
    RESCUE = "rescue", "Rescue"
    STARVE = "starve", "Starve or feed"
    RECOVER = "recover", "Recovery"
    CAPTURE = "capture", "Capture"
    DELETE = "delete", "Delete"


# Flag toggled by each action; sell and rescue set and clear enslaved
ACTION_FLAGS = {
    "kill": "killed",
    "retire": "retired",
    "sell": "enslaved",
    "rescue": "enslaved",
    "starve": "starved",
    "recover": "recovery",
    "capture": "captured",
}


def counts_toward_rating(flags: Mapping[str, bool]) -> bool:
    """A fighter counts toward rating unless killed, retired, enslaved or captured."""
    return not any(flags.get(flag) for flag in INACTIVE_FLAGS)


def is_status_incompatible(flags: Mapping[str, bool]) -> bool:
    """
    Report whether more than one location-like flag is set at once.

    This is advisory. Transitions are never blocked on it.
    """
    return sum(1 for flag in EXCLUSIVE_FLAGS if flags.get(flag)) > 1


def apply_status_toggle(flags: Mapping[str, bool], action: str) -> dict:
    """
    Return the flags after a non-delete status action.

    Feeding a starved fighter is the starve action applied while ``starved``
    is already set; the meat check happens in the caller. Setting killed,
    retired, enslaved or captured also takes the fighter out of recovery.
    """
    new_flags = {flag: bool(flags.get(flag)) for flag in STATUS_FLAGS}
    flag = ACTION_FLAGS[str(action)]

    if action == FighterStatusAction.SELL:
        new_flags["enslaved"] = True
    elif action == FighterStatusAction.RESCUE:
        new_flags["enslaved"] = False
    else:
        new_flags[flag] = not new_flags[flag]

    if flag in INACTIVE_FLAGS and new_flags[flag]:
        new_flags["recovery"] = False

    return new_flags


def rating_delta_for_transition(was_active: bool, is_active: bool, cost: int) -> int:
    """Rating moves by the fighter's cost only when it crosses the active boundary."""
    if was_active and not is_active:
        return -cost
    if is_active and not was_active:
        return cost
    return 0
