"""
End-to-end tests of optimistic fighter mutations against the real gateway.

``LocalTransport`` runs the gateway in-process, so these exercise the cache
patch, the server handler and the reconcile step together.
"""

from unittest.mock import MagicMock

import pytest
import requests

from gangroster.client import keys
from gangroster.client.cache import QueryCache
from gangroster.client.mutations import FighterMutations
from gangroster.client.patches import is_temp_id
from gangroster.client.transport import HttpTransport, LocalTransport, TransportError
from gangroster.content.models import EquipmentType
from gangroster.core.errors import ErrorKind


class RecordingTransport(LocalTransport):
    """Records the cached fighter state each time a mutation is sent."""

    def __init__(self, ctx, mutations_ref):
        super().__init__(ctx)
        self.mutations_ref = mutations_ref
        self.seen = []

    def send(self, operation, params):
        self.seen.append(self.mutations_ref[0].state())
        return super().send(operation, params)


@pytest.fixture
def cache():
    return QueryCache()


@pytest.fixture
def make_mutations(cache, ctx):
    def make_mutations_(fighter, transport=None, sleeps=None):
        mutations_ref = []
        transport = transport or RecordingTransport(ctx, mutations_ref)
        mutations = FighterMutations(
            cache,
            transport,
            fighter_id=fighter.id,
            gang_id=fighter.gang_id,
            sleep=(sleeps.append if sleeps is not None else lambda delay: None),
        )
        mutations_ref.append(mutations)
        result = mutations.load()
        assert result.success, result.error
        return mutations

    return make_mutations_


@pytest.mark.django_db
def test_load_fills_every_view_key(make_mutations, fighter, cache):
    mutations = make_mutations(fighter)

    state = mutations.state()
    assert state["fighter"]["name"] == "Test Fighter"
    assert state["total_cost"] == 100
    assert state["gang"]["credits"] == 1000
    assert not cache.is_stale(keys.fighter_detail(fighter.id))


@pytest.mark.django_db
def test_xp_is_visible_before_the_server_answers(make_mutations, fighter):
    mutations = make_mutations(fighter)

    result = mutations.update_xp(5)

    assert result.success is True
    assert mutations.transport.seen[0]["fighter"]["xp"] == 5
    assert mutations.state()["fighter"]["xp"] == 5
    fighter.refresh_from_db()
    assert fighter.xp == 5


@pytest.mark.django_db
def test_failed_purchase_rolls_cache_back(
    make_mutations, make_gang, make_fighter, make_equipment
):
    gang = make_gang("Broke Gang", credits=10, rating=100)
    fighter = make_fighter("Broke", gang=gang)
    gun = make_equipment("Autogun", cost=15, equipment_type=EquipmentType.WEAPON)
    mutations = make_mutations(fighter)
    before = mutations.state()

    result = mutations.buy_equipment(
        {"id": gun.id, "name": gun.name, "cost": 15, "equipment_type": "weapon"}
    )

    assert result.success is False
    assert result.error_kind == ErrorKind.PRECONDITION_FAILED
    seen = mutations.transport.seen[0]
    assert seen["gang"]["credits"] == -5
    assert len(seen["equipment"]) == 1
    assert mutations.state() == before


@pytest.mark.django_db
def test_purchase_replaces_placeholder_with_server_item(
    make_mutations, fighter, make_equipment
):
    gun = make_equipment("Autogun", cost=15, equipment_type=EquipmentType.WEAPON)
    mutations = make_mutations(fighter)

    result = mutations.buy_equipment(
        {"id": gun.id, "name": gun.name, "cost": 15, "equipment_type": "weapon"},
        master_crafted=True,
    )

    assert result.success is True
    assert is_temp_id(mutations.transport.seen[0]["equipment"][0]["id"])
    state = mutations.state()
    [item] = state["equipment"]
    assert item["id"] == result.data["fighter_equipment"]["id"]
    assert not is_temp_id(item["id"])
    assert item["name"] == "Autogun (Master-crafted)"
    assert state["total_cost"] == 120
    assert state["gang"]["credits"] == 980


@pytest.mark.django_db
def test_sell_then_state_matches_server(make_mutations, fighter, make_equipment):
    gun = make_equipment("Autogun", cost=15, equipment_type=EquipmentType.WEAPON)
    mutations = make_mutations(fighter)
    mutations.buy_equipment(
        {"id": gun.id, "name": gun.name, "cost": 15, "equipment_type": "weapon"},
        manual_cost=10,
    )
    item_id = mutations.state()["equipment"][0]["id"]

    result = mutations.sell_equipment(item_id)

    assert result.success is True
    state = mutations.state()
    assert state["equipment"] == []
    assert state["gang"]["credits"] == 1000
    assert state["total_cost"] == 100


@pytest.mark.django_db
def test_delete_drops_fighter_keys(make_mutations, fighter, cache):
    mutations = make_mutations(fighter)

    result = mutations.edit_status("delete")

    assert result.success is True
    assert result.data["redirect_to"] == f"/gangs/{fighter.gang_id}/"
    assert mutations.state()["fighter"] is None
    assert keys.fighter_equipment(fighter.id) not in cache
    assert keys.fighter_total_cost(fighter.id) not in cache


@pytest.mark.django_db
def test_effects_are_replaced_by_server_list(
    make_mutations, fighter, user_adjustment_types
):
    mutations = make_mutations(fighter)

    result = mutations.update_effects({"ws": 1, "bs": -1})

    assert result.success is True
    sent_effects = mutations.transport.seen[0]["effects"]
    assert len(sent_effects) == 2
    assert all(is_temp_id(effect["id"]) for effect in sent_effects)

    effects = mutations.state()["effects"]
    assert sorted(e["effect_name"] for e in effects) == ["BS Decrease", "WS Increase"]
    assert not any(is_temp_id(e["id"]) for e in effects)


@pytest.mark.django_db
def test_characteristic_advancement_marks_effects_stale(
    make_mutations, make_fighter, make_advancement_type, cache
):
    fighter = make_fighter("Veteran", xp=10)
    advance = make_advancement_type("Weapon Skill", "ws")
    mutations = make_mutations(fighter)

    result = mutations.add_characteristic_advancement(
        {
            "id": advance.id,
            "name": advance.name,
            "modifiers": [{"stat_name": "ws", "numeric_value": 1}],
        },
        xp_cost=6,
        credits_increase=20,
    )

    assert result.success is True
    state = mutations.state()
    assert state["fighter"]["xp"] == 4
    assert state["total_cost"] == 120
    [effect] = state["effects"]
    assert effect["id"] == result.data["advancement"]["id"]
    assert cache.is_stale(keys.fighter_effects(fighter.id))


@pytest.mark.django_db
def test_network_failure_retries_then_rolls_back(make_mutations, fighter, ctx):
    transport = MagicMock(spec=LocalTransport(ctx))
    transport.fetch_fighter.side_effect = LocalTransport(ctx).fetch_fighter
    transport.send.side_effect = TransportError("connection refused")
    sleeps = []
    mutations = make_mutations(fighter, transport=transport, sleeps=sleeps)
    before = mutations.state()

    result = mutations.update_xp(3)

    assert result.success is False
    assert result.error_kind == ErrorKind.NETWORK
    assert transport.send.call_count == 3
    assert sleeps == [1.0, 2.0]
    assert mutations.state() == before


@pytest.mark.django_db
def test_load_network_failure(cache, fighter):
    transport = MagicMock()
    transport.fetch_fighter.side_effect = TransportError("connection refused")
    mutations = FighterMutations(
        cache, transport, fighter_id=fighter.id, gang_id=fighter.gang_id
    )

    result = mutations.load()

    assert result.error_kind == ErrorKind.NETWORK
    assert mutations.state()["fighter"] is None


@pytest.fixture
def http_mutations(make_mutations, fighter, ctx):
    """Mutations over HTTP, loaded from the real fighter view."""
    view = LocalTransport(ctx).fetch_fighter(fighter.id).data
    session = MagicMock(spec=requests.Session)
    session.request.return_value = MagicMock(
        status_code=200, **{"json.return_value": {"success": True, "data": view}}
    )
    return make_mutations(fighter, transport=HttpTransport("http://api", session))


@pytest.mark.django_db
def test_broken_response_body_rolls_back(http_mutations):
    session = http_mutations.transport.session
    session.request.side_effect = requests.exceptions.ChunkedEncodingError("broken")
    before = http_mutations.state()

    result = http_mutations.update_xp(3)

    assert result.error_kind == ErrorKind.NETWORK
    assert session.request.call_count == 4
    assert http_mutations.state() == before


@pytest.mark.django_db
def test_malformed_server_answer_rolls_back(http_mutations):
    session = http_mutations.transport.session
    session.request.return_value = MagicMock(
        status_code=200, **{"json.return_value": ["not", "an", "object"]}
    )
    before = http_mutations.state()

    result = http_mutations.update_xp(3)

    assert result.error_kind == ErrorKind.STORE_ERROR
    assert http_mutations.state() == before


@pytest.mark.django_db
def test_invalid_cost_adjustment_is_reported_not_raised(make_mutations, fighter):
    mutations = make_mutations(fighter)
    before = mutations.state()

    result = mutations.update_details(cost_adjustment="10")

    assert result.success is False
    assert result.error_kind == ErrorKind.VALIDATION
    assert result.error == "Cost adjustment must be a whole number"
    assert len(mutations.transport.seen) == 1
    assert mutations.state() == before
