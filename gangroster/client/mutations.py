"""
Optimistic mutations for one fighter.

``FighterMutations`` binds the cache keys of a fighter and its gang to a
transport. Each method patches the cache immediately, sends the mutation,
and then either reconciles with the server's answer or rolls back.
"""

import logging
import time
from typing import Callable, Optional

from gangroster.client import keys
from gangroster.client.cache import QueryCache
from gangroster.client.optimistic import OptimisticMutation, RetryPolicy
from gangroster.client.patches import (
    USER_CATEGORY,
    new_temp_id,
    patch_add_characteristic,
    patch_add_skill,
    patch_buy_equipment,
    patch_delete_advancement,
    patch_details,
    patch_effects,
    patch_move_to_stash,
    patch_sell_equipment,
    patch_status,
    patch_xp,
    patch_xp_with_ooa,
)
from gangroster.client.transport import TransportError
from gangroster.core.errors import ErrorKind
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
from gangroster.core.results import MutationResult

logger = logging.getLogger(__name__)


class FighterMutations:
    def __init__(
        self,
        cache: QueryCache,
        transport,
        *,
        fighter_id,
        gang_id,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cache = cache
        self.transport = transport
        self.fighter_id = str(fighter_id)
        self.gang_id = str(gang_id)
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep
        self.keys = keys.fighter_view_keys(self.fighter_id, self.gang_id)

    def load(self) -> MutationResult:
        """Fetch the fighter view and fill the cache with it."""
        try:
            result = self.transport.fetch_fighter(self.fighter_id)
        except TransportError as e:
            logger.warning(f"Could not load fighter {self.fighter_id}: {e}")
            return MutationResult.failure(str(e), ErrorKind.NETWORK)
        if result.success:
            self.store_view(result.data)
        return result

    def store_view(self, view: dict) -> None:
        self.cache.set_many(
            {key: view[name] for name, key in self.keys.items() if name in view}
        )

    def state(self) -> dict:
        """The cached fighter view, with None for anything not cached."""
        return {name: self.cache.get(key) for name, key in self.keys.items()}

    def _run(self, operation: str, params, patch, reconcile=None) -> MutationResult:
        view_keys = self.keys

        def state_patch(current: dict, params_) -> dict:
            state = {name: current.get(key) for name, key in view_keys.items()}
            changes = patch(state, params_)
            return {view_keys[name]: value for name, value in changes.items()}

        def apply_server_data(cache: QueryCache, params_, data: dict) -> None:
            if data.get("fighter") is not None:
                cache.set(view_keys["fighter"], data["fighter"])
            if data.get("gang") is not None:
                cache.set(view_keys["gang"], data["gang"])
            if "total_cost" in data:
                cache.set(view_keys["total_cost"], data["total_cost"])
            if reconcile is not None:
                reconcile(data)

        mutation = OptimisticMutation(
            self.cache,
            name=operation,
            keys=lambda _: view_keys.values(),
            patch=state_patch,
            send=lambda params_: self.transport.send(operation, params_),
            reconcile=apply_server_data,
            retry_policy=self.retry_policy,
            sleep=self.sleep,
        )
        return mutation.execute(params)

    def _replace_temp(self, name: str, temp_id: str, item: dict) -> None:
        self.cache.update(
            self.keys[name],
            lambda entries: [
                item if entry["id"] == temp_id else entry for entry in entries or []
            ],
        )

    def _merge_user_effects(self, user_effects: list[dict]) -> None:
        self.cache.update(
            self.keys["effects"],
            lambda effects: [
                effect
                for effect in effects or []
                if effect.get("category") != USER_CATEGORY
            ]
            + list(user_effects),
        )

    def edit_status(self, action: str, sell_value: Optional[int] = None):
        params = EditFighterStatusParams(
            fighter_id=self.fighter_id, action=action, sell_value=sell_value
        )

        def reconcile(data):
            if data.get("deleted"):
                for name in ("equipment", "effects", "skills", "total_cost"):
                    self.cache.remove(self.keys[name])

        return self._run("edit_fighter_status", params, patch_status, reconcile)

    def update_xp(self, xp_to_add: int):
        params = UpdateFighterXpParams(fighter_id=self.fighter_id, xp_to_add=xp_to_add)
        return self._run("update_fighter_xp", params, patch_xp)

    def update_xp_with_ooa(self, xp_to_add: int, ooa_count: int = 0):
        params = UpdateFighterXpWithOoaParams(
            fighter_id=self.fighter_id, xp_to_add=xp_to_add, ooa_count=ooa_count
        )
        return self._run("update_fighter_xp_with_ooa", params, patch_xp_with_ooa)

    def update_details(self, **changes):
        params = UpdateFighterDetailsParams(fighter_id=self.fighter_id, changes=changes)

        def reconcile(data):
            if "effects" in data:
                self._merge_user_effects(data["effects"])

        return self._run("update_fighter_details", params, patch_details, reconcile)

    def update_effects(self, stats: dict):
        params = UpdateFighterEffectsParams(fighter_id=self.fighter_id, stats=stats)

        def reconcile(data):
            self._merge_user_effects(data.get("effects", []))

        return self._run("update_fighter_effects", params, patch_effects, reconcile)

    def add_characteristic_advancement(
        self, advancement: dict, xp_cost: int, credits_increase: int = 0
    ):
        """``advancement`` is the catalog effect type: id, name and modifiers."""
        temp_id = new_temp_id()
        params = AddCharacteristicAdvancementParams(
            fighter_id=self.fighter_id,
            effect_type_id=str(advancement["id"]),
            xp_cost=xp_cost,
            credits_increase=credits_increase,
        )

        def reconcile(data):
            self._replace_temp("effects", temp_id, data["advancement"])
            # Server-side effect ordering and modifiers may differ
            self.cache.invalidate(self.keys["effects"])

        return self._run(
            "add_characteristic_advancement",
            params,
            lambda state, p: patch_add_characteristic(state, p, advancement, temp_id),
            reconcile,
        )

    def add_skill_advancement(
        self, skill: dict, xp_cost: int, credits_increase: int = 0
    ):
        temp_id = new_temp_id()
        params = AddSkillAdvancementParams(
            fighter_id=self.fighter_id,
            skill_id=str(skill["id"]),
            xp_cost=xp_cost,
            credits_increase=credits_increase,
        )

        def reconcile(data):
            self._replace_temp("skills", temp_id, data["advancement"])

        return self._run(
            "add_skill_advancement",
            params,
            lambda state, p: patch_add_skill(state, p, skill, temp_id),
            reconcile,
        )

    def delete_advancement(self, advancement_id, advancement_type: str):
        params = DeleteAdvancementParams(
            fighter_id=self.fighter_id,
            advancement_id=str(advancement_id),
            advancement_type=advancement_type,
        )
        return self._run("delete_advancement", params, patch_delete_advancement)

    def buy_equipment(
        self,
        equipment: dict,
        *,
        manual_cost: Optional[int] = None,
        master_crafted: bool = False,
        use_base_cost_for_rating: bool = True,
        target_equipment_id=None,
    ):
        """``equipment`` is the catalog entry: id, name, cost and equipment_type."""
        temp_id = new_temp_id()
        params = BuyEquipmentParams(
            fighter_id=self.fighter_id,
            equipment_id=str(equipment["id"]),
            manual_cost=manual_cost,
            master_crafted=master_crafted,
            use_base_cost_for_rating=use_base_cost_for_rating,
            target_equipment_id=(
                str(target_equipment_id) if target_equipment_id else None
            ),
        )

        def reconcile(data):
            self._replace_temp("equipment", temp_id, data["fighter_equipment"])

        return self._run(
            "buy_equipment",
            params,
            lambda state, p: patch_buy_equipment(state, p, equipment, temp_id),
            reconcile,
        )

    def sell_equipment(self, fighter_equipment_id, manual_cost: Optional[int] = None):
        params = SellEquipmentParams(
            fighter_id=self.fighter_id,
            fighter_equipment_id=str(fighter_equipment_id),
            manual_cost=manual_cost,
        )
        return self._run("sell_equipment", params, patch_sell_equipment)

    def move_equipment_to_stash(self, fighter_equipment_id):
        params = MoveEquipmentToStashParams(
            fighter_id=self.fighter_id,
            fighter_equipment_id=str(fighter_equipment_id),
        )
        return self._run("move_equipment_to_stash", params, patch_move_to_stash)
