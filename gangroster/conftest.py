from typing import Callable
from unittest.mock import MagicMock

import pytest
from django.core.cache import cache
from django.core.files.storage import Storage

from gangroster.content.models import (
    ADVANCEMENT_EFFECT_CATEGORY,
    USER_EFFECT_CATEGORY,
    ContentEffectCategory,
    ContentEffectType,
    ContentEffectTypeModifier,
    ContentEquipment,
    ContentFighterType,
    ContentSkill,
    ContentSkillCategory,
)
from gangroster.core.context import MutationContext
from gangroster.core.models import Fighter, Gang


@pytest.fixture(autouse=True)
def clear_cache():
    """Fighter costs are cached; every test starts cold."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(django_user_model) -> Callable[[str, str], object]:
    def make_user_(username: str, password: str) -> object:
        return django_user_model.objects.create_user(
            username=username, password=password
        )

    return make_user_


@pytest.fixture
def user(make_user):
    return make_user("testuser", "password")


@pytest.fixture
def storage():
    """A storage with no files; tests set listdir up as needed."""
    storage = MagicMock(spec=Storage)
    storage.listdir.return_value = ([], [])
    return storage


@pytest.fixture
def ctx(user, storage) -> MutationContext:
    return MutationContext(user=user, storage=storage)


@pytest.fixture
def make_gang(user) -> Callable[[str], Gang]:
    def make_gang_(name: str, **kwargs) -> Gang:
        kwargs.setdefault("owner", user)
        kwargs.setdefault("credits", 1000)
        return Gang.objects.create(name=name, **kwargs)

    return make_gang_


@pytest.fixture
def gang(make_gang) -> Gang:
    return make_gang("Test Gang")


@pytest.fixture
def make_fighter_type() -> Callable[[str], ContentFighterType]:
    def make_fighter_type_(name: str, **kwargs) -> ContentFighterType:
        kwargs.setdefault("cost", 100)
        return ContentFighterType.objects.create(name=name, **kwargs)

    return make_fighter_type_


@pytest.fixture
def fighter_type(make_fighter_type) -> ContentFighterType:
    return make_fighter_type("Ganger", fighter_class="Ganger")


@pytest.fixture
def make_fighter(gang, fighter_type) -> Callable[..., Fighter]:
    def make_fighter_(name: str, **kwargs) -> Fighter:
        kwargs.setdefault("gang", gang)
        kwargs.setdefault("owner", kwargs["gang"].owner)
        kwargs.setdefault("fighter_type", fighter_type)
        kwargs.setdefault("credits", 100)
        return Fighter.objects.create(name=name, **kwargs)

    return make_fighter_


@pytest.fixture
def fighter(make_fighter) -> Fighter:
    return make_fighter("Test Fighter")


@pytest.fixture
def make_equipment() -> Callable[[str], ContentEquipment]:
    def make_equipment_(name: str, **kwargs) -> ContentEquipment:
        return ContentEquipment.objects.create(name=name, **kwargs)

    return make_equipment_


@pytest.fixture
def make_effect_type() -> Callable[..., ContentEffectType]:
    """
    Factory for effect types with modifiers.

    ``modifiers`` maps stat name to default value, e.g. ``{"ws": -1}``.
    """

    def make_effect_type_(
        name: str,
        modifiers: dict,
        category: str = USER_EFFECT_CATEGORY,
        **kwargs,
    ) -> ContentEffectType:
        effect_category, _ = ContentEffectCategory.objects.get_or_create(name=category)
        effect_type = ContentEffectType.objects.create(
            name=name, category=effect_category, **kwargs
        )
        for stat_name, value in modifiers.items():
            ContentEffectTypeModifier.objects.create(
                effect_type=effect_type,
                stat_name=stat_name,
                default_numeric_value=value,
            )
        return effect_type

    return make_effect_type_


@pytest.fixture
def user_adjustment_types(make_effect_type) -> dict:
    """Increase and decrease user adjustment types for a handful of stats."""
    types = {}
    for stat in ("ws", "bs", "movement", "toughness"):
        types[(stat, 1)] = make_effect_type(f"{stat.upper()} Increase", {stat: 1})
        types[(stat, -1)] = make_effect_type(f"{stat.upper()} Decrease", {stat: -1})
    return types


@pytest.fixture
def make_advancement_type(make_effect_type) -> Callable[[str, str], ContentEffectType]:
    def make_advancement_type_(name: str, stat_name: str) -> ContentEffectType:
        return make_effect_type(
            name, {stat_name: 1}, category=ADVANCEMENT_EFFECT_CATEGORY
        )

    return make_advancement_type_


@pytest.fixture
def make_skill() -> Callable[[str], ContentSkill]:
    def make_skill_(name: str, category: str = "Combat") -> ContentSkill:
        skill_category, _ = ContentSkillCategory.objects.get_or_create(name=category)
        return ContentSkill.objects.create(name=name, category=skill_category)

    return make_skill_
