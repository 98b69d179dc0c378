"""
Typed parameter objects for the fighter mutation operations.

Each operation takes one of these. They hold plain values only, so the
client builds them directly and the API builds them from a JSON body with
``from_payload``.
"""

from dataclasses import MISSING, asdict, dataclass, field, fields
from typing import Optional

from gangroster.core.errors import InvalidInput


class Params:
    @classmethod
    def from_payload(cls, fighter_id, payload):
        """Build params from a JSON body, rejecting unknown or missing keys."""
        if not isinstance(payload, dict):
            raise InvalidInput("Request body must be a JSON object")

        known = {f.name for f in fields(cls)} - {"fighter_id"}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise InvalidInput(f"Unexpected field(s): {', '.join(unknown)}")

        for f in fields(cls):
            if f.name == "fighter_id":
                continue
            required = f.default is MISSING and f.default_factory is MISSING
            if required and f.name not in payload:
                raise InvalidInput(f"Missing field: {f.name}")

        return cls(fighter_id=str(fighter_id), **payload)

    def to_payload(self) -> dict:
        payload = asdict(self)
        payload.pop("fighter_id")
        return payload


@dataclass(frozen=True)
class EditFighterStatusParams(Params):
    fighter_id: str
    action: str
    sell_value: Optional[int] = None


@dataclass(frozen=True)
class UpdateFighterXpParams(Params):
    fighter_id: str
    xp_to_add: int


@dataclass(frozen=True)
class UpdateFighterXpWithOoaParams(Params):
    fighter_id: str
    xp_to_add: int
    ooa_count: int = 0


@dataclass(frozen=True)
class UpdateFighterDetailsParams(Params):
    """Sparse patch: only keys present in ``changes`` are applied."""

    fighter_id: str
    changes: dict = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateFighterEffectsParams(Params):
    fighter_id: str
    stats: dict = field(default_factory=dict)


@dataclass(frozen=True)
class AddCharacteristicAdvancementParams(Params):
    fighter_id: str
    effect_type_id: str
    xp_cost: int
    credits_increase: int = 0


@dataclass(frozen=True)
class AddSkillAdvancementParams(Params):
    fighter_id: str
    skill_id: str
    xp_cost: int
    credits_increase: int = 0


@dataclass(frozen=True)
class DeleteAdvancementParams(Params):
    fighter_id: str
    advancement_id: str
    # "skill" or "characteristic"
    advancement_type: str


@dataclass(frozen=True)
class BuyEquipmentParams(Params):
    fighter_id: str
    equipment_id: str
    manual_cost: Optional[int] = None
    master_crafted: bool = False
    use_base_cost_for_rating: bool = True
    target_equipment_id: Optional[str] = None


@dataclass(frozen=True)
class SellEquipmentParams(Params):
    fighter_id: str
    fighter_equipment_id: str
    manual_cost: Optional[int] = None


@dataclass(frozen=True)
class MoveEquipmentToStashParams(Params):
    fighter_id: str
    fighter_equipment_id: str
