"""End-to-end flows across invitation, readings and corrections."""

from conftest import DEFAULT_PASSWORD, auth_headers
from tavrezsi.models import PropertyTenant


def _login(client, username, password):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_invited_tenant_submits_reading(client, test_db, notifier, admin, owner):
    """Test admin setup, tenant invitation, credential setup and a first reading."""
    admin_headers = auth_headers(admin)

    response = client.post(
        "/api/properties",
        headers=admin_headers,
        json={"name": "Petőfi utca 3.", "address": "6720 Szeged", "owner_id": owner.id},
    )
    property_id = response.json()["id"]

    response = client.post(
        "/api/meters",
        headers=admin_headers,
        json={
            "identifier": "WM-100",
            "name": "Hidegvíz",
            "type": "water",
            "unit": "m3",
            "property_id": property_id,
        },
    )
    meter_id = response.json()["id"]

    response = client.post(
        "/api/property-tenants",
        headers=admin_headers,
        json={"property_id": property_id, "email": "e@x.com"},
    )
    assert response.status_code == 201
    tenant_id = response.json()["tenant_id"]
    username = response.json()["tenant"]["username"]

    rows = test_db.query(PropertyTenant).filter_by(property_id=property_id).all()
    assert len(rows) == 1
    assert rows[0].is_active is False

    response = client.post(
        "/api/reset-password",
        json={"token": notifier.last_token(), "password": "tenantpass1"},
    )
    assert response.status_code == 200

    tenant_headers = _login(client, username, "tenantpass1")
    assert [p["id"] for p in client.get("/api/properties", headers=tenant_headers).json()] == [property_id]

    response = client.post(
        "/api/readings",
        headers=tenant_headers,
        json={"meter_id": meter_id, "reading": 42},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["reading"] == 42
    assert data["is_iot"] is False
    assert data["submitted_by_id"] == tenant_id


def test_approved_correction_becomes_latest_reading(client, admin, tenant, tenancy_a, meter_a):
    """Test an approved correction shows up as the meter's latest reading."""
    tenant_headers = _login(client, "tenant", DEFAULT_PASSWORD)
    admin_headers = auth_headers(admin)

    client.post(
        "/api/readings",
        headers=admin_headers,
        json={"meter_id": meter_a.id, "reading": 500, "is_iot": True},
    )

    response = client.post(
        "/api/correction-requests",
        headers=tenant_headers,
        json={"meter_id": meter_a.id, "requested_reading": 50, "reason": "meter error"},
    )
    assert response.status_code == 201
    request_id = response.json()["id"]

    response = client.patch(
        f"/api/correction-requests/{request_id}",
        headers=admin_headers,
        json={"status": "approved"},
    )
    assert response.status_code == 200

    response = client.get(f"/api/meters/{meter_a.id}/latest-reading", headers=tenant_headers)
    assert response.status_code == 200
    latest = response.json()
    assert latest["reading"] == 50
    assert latest["is_iot"] is False
