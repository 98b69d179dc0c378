"""
Content models package.

All models are re-exported here so callers can write:
    from gangroster.content.models import ContentEquipment
"""

from .base import Content
from .effect import (
    ADVANCEMENT_EFFECT_CATEGORY,
    USER_EFFECT_CATEGORY,
    ContentEffectCategory,
    ContentEffectType,
    ContentEffectTypeModifier,
)
from .equipment import ContentEquipment, EquipmentType
from .fighter import ContentFighterType
from .skill import ContentSkill, ContentSkillCategory

__all__ = [
    "ADVANCEMENT_EFFECT_CATEGORY",
    "USER_EFFECT_CATEGORY",
    "Content",
    "ContentEffectCategory",
    "ContentEffectType",
    "ContentEffectTypeModifier",
    "ContentEquipment",
    "ContentFighterType",
    "ContentSkill",
    "ContentSkillCategory",
    "EquipmentType",
]
