import json
import uuid

import pytest
from django.urls import reverse

from gangroster.content.models import EquipmentType


def mutation_url(fighter, operation):
    return reverse(
        "api:fighter_mutation",
        kwargs={"fighter_id": fighter.id, "operation": operation},
    )


def post_json(client, url, body):
    return client.post(url, data=json.dumps(body), content_type="application/json")


@pytest.fixture
def logged_in(client, user):
    client.force_login(user)
    return client


@pytest.mark.django_db
def test_mutation_requires_login(client, fighter):
    response = post_json(client, mutation_url(fighter, "update_fighter_xp"), {})

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "Authentication required",
        "error_kind": "unauthenticated",
    }


@pytest.mark.django_db
def test_mutation_rejects_get(logged_in, fighter):
    response = logged_in.get(mutation_url(fighter, "update_fighter_xp"))

    assert response.status_code == 405


@pytest.mark.django_db
def test_update_xp(logged_in, fighter):
    response = post_json(
        logged_in, mutation_url(fighter, "update_fighter_xp"), {"xp_to_add": 3}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["xp"] == 3
    fighter.refresh_from_db()
    assert fighter.xp == 3


@pytest.mark.django_db
def test_invalid_json_is_a_validation_error(logged_in, fighter):
    response = logged_in.post(
        mutation_url(fighter, "update_fighter_xp"),
        data="{not json",
        content_type="application/json",
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON payload"
    assert response.json()["error_kind"] == "validation"


@pytest.mark.django_db
def test_invalid_status_action_is_400(logged_in, fighter):
    response = post_json(
        logged_in, mutation_url(fighter, "edit_fighter_status"), {"action": "explode"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid action specified"


@pytest.mark.django_db
def test_unknown_fighter_is_404(logged_in):
    url = reverse(
        "api:fighter_mutation",
        kwargs={"fighter_id": uuid.uuid4(), "operation": "update_fighter_xp"},
    )

    response = post_json(logged_in, url, {"xp_to_add": 1})

    assert response.status_code == 404
    assert response.json()["error_kind"] == "not_found"


@pytest.mark.django_db
def test_insufficient_credits_is_409(
    logged_in, make_gang, make_fighter, make_equipment
):
    gang = make_gang("Broke Gang", credits=0)
    fighter = make_fighter("Broke", gang=gang)
    gun = make_equipment("Autogun", cost=15, equipment_type=EquipmentType.WEAPON)

    response = post_json(
        logged_in,
        mutation_url(fighter, "buy_equipment"),
        {"equipment_id": str(gun.id)},
    )

    assert response.status_code == 409
    assert response.json()["error_kind"] == "precondition_failed"


@pytest.mark.django_db
def test_fighter_view(logged_in, fighter):
    response = logged_in.get(reverse("api:fighter", kwargs={"fighter_id": fighter.id}))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["fighter"]["name"] == "Test Fighter"
    assert data["total_cost"] == 100
    assert data["equipment"] == []


@pytest.mark.django_db
def test_fighter_view_requires_login(client, fighter):
    response = client.get(reverse("api:fighter", kwargs={"fighter_id": fighter.id}))

    assert response.status_code == 401
