from sqlalchemy import select

from app.features.verification.models.pending_verification import PendingVerification
from app.platform.db.session import get_sync_db


def pending_for(user_id):
    db = get_sync_db()
    try:
        rows = db.execute(
            select(PendingVerification).where(PendingVerification.user_id == user_id)
        ).scalars().all()
        return [row.to_request() for row in rows]
    finally:
        db.close()


def test_list_properties_returns_defaults(client, auth_headers):
    response = client.get("/api/v1/account/properties", headers=auth_headers)

    assert response.status_code == 200
    properties = {p["name"]: p for p in response.json()["data"]["properties"]}
    assert set(properties) == {"displayname", "address", "phone", "website", "email", "twitter"}
    assert properties["website"] == {
        "name": "website",
        "value": "",
        "scope": "contacts",
        "verified": "unverified",
    }


def test_website_update_queues_verification(client, auth_headers, test_user):
    response = client.put(
        "/api/v1/account/properties/website",
        json={"value": "https://alice.example.com/", "scope": "public"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["property"]["verified"] == "in-progress"
    assert data["property"]["scope"] == "public"
    assert data["verification"]["probe_url"] == "https://alice.example.com/CloudIdVerificationCode.txt"

    pending = pending_for(test_user.id)
    assert len(pending) == 1
    assert pending[0].property_type == "website"
    assert pending[0].verification_code == data["verification"]["verification_code"]
    assert pending[0].attempt == 0
    assert pending[0].last_run_at == 0


def test_changing_value_replaces_pending_request(client, auth_headers, test_user):
    client.put("/api/v1/account/properties/email", json={"value": "a@example.com"}, headers=auth_headers)
    response = client.put(
        "/api/v1/account/properties/email", json={"value": "b@example.com"}, headers=auth_headers
    )

    assert response.json()["data"]["verification"]["probe_url"] is None
    pending = pending_for(test_user.id)
    assert [p.asserted_value for p in pending] == ["b@example.com"]


def test_unchanged_value_keeps_status(client, auth_headers, test_user):
    client.put("/api/v1/account/properties/twitter", json={"value": "@alice"}, headers=auth_headers)
    response = client.put(
        "/api/v1/account/properties/twitter", json={"value": "@alice"}, headers=auth_headers
    )

    data = response.json()["data"]
    assert data["verification"] is None
    assert data["property"]["verified"] == "in-progress"
    assert len(pending_for(test_user.id)) == 1


def test_clearing_value_resets_status(client, auth_headers, test_user):
    client.put("/api/v1/account/properties/email", json={"value": "a@example.com"}, headers=auth_headers)
    response = client.put("/api/v1/account/properties/email", json={"value": ""}, headers=auth_headers)

    assert response.json()["data"]["property"]["verified"] == "unverified"
    assert pending_for(test_user.id) == []


def test_unverifiable_property_is_not_queued(client, auth_headers, test_user):
    response = client.put(
        "/api/v1/account/properties/phone", json={"value": "+49 30 123456"}, headers=auth_headers
    )

    assert response.json()["data"]["property"]["verified"] == "unverified"
    assert pending_for(test_user.id) == []


def test_unknown_property_type_is_rejected(client, auth_headers):
    response = client.put(
        "/api/v1/account/properties/fax", json={"value": "123"}, headers=auth_headers
    )

    assert response.status_code == 422
