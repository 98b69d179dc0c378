from .base import AppBase
from .effect import FighterEffect, FighterEffectModifier
from .equipment import FighterEquipment, GangStashItem
from .fighter import Fighter, FighterExoticBeast, FighterQuerySet
from .gang import Gang
from .log import FighterLog, FighterLogType
from .skill import FighterSkill

__all__ = [
    "AppBase",
    "Fighter",
    "FighterEffect",
    "FighterEffectModifier",
    "FighterEquipment",
    "FighterExoticBeast",
    "FighterLog",
    "FighterLogType",
    "FighterQuerySet",
    "FighterSkill",
    "Gang",
    "GangStashItem",
]
