"""Admin endpoints: login, users, listings, dashboard."""
import pytest
from fastapi.testclient import TestClient

from app import crud
from app.describe import default_description
from app.main import app
from app.models import Listing


def test_admin_login(client, users):
    response = client.post("/api/admin/login", json={"email": "admin@example.com", "password": "admin123"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Admin logged in successfully"
    result = body["result"]
    assert result["role_type"] == "a"
    assert result["name"] == "Admin User"
    assert result["email"] == "admin@example.com"


def test_admin_login_refuses_regular_user(client, users):
    response = client.post("/api/admin/login", json={"email": "user@example.com", "password": "password123"})

    assert response.status_code == 403
    assert response.json()["message"] == "Admin access required"


def test_admin_routes_reject_user_token(client, users, user_headers):
    assert client.get("/api/admin/users", headers=user_headers).status_code == 403
    assert client.get("/api/admin/dashboard").status_code == 401


def test_list_users_paginates_with_totals(client, users, admin_headers):
    response = client.get("/api/admin/users", params={"per_page": 2}, headers=admin_headers)

    result = response.json()["result"]
    assert result["current_page"] == 1
    assert result["per_page"] == 2
    assert result["total"] == 3
    assert len(result["data"]) == 2
    assert all("password" not in u for u in result["data"])


@pytest.mark.parametrize("path", ["/api/admin/users", "/api/admin/listings"])
def test_huge_page_is_empty(client, users, listings, admin_headers, path):
    response = client.get(path, params={"page": "99999999999999999999", "per_page": "99999999999999999999"}, headers=admin_headers)

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["data"] == []
    assert result["current_page"] == 1_000_000_000


def test_create_user(client, users, admin_headers):
    response = client.post(
        "/api/admin/users",
        json={"name": "  New Person ", "email": "new@example.com", "password": "secret1", "role_type": "u"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == 201
    assert body["message"] == "User created successfully"
    assert body["result"]["name"] == "New Person"
    assert body["result"]["role_type"] == "u"
    assert "password" not in body["result"]


def test_create_user_duplicate_email(client, users, admin_headers):
    response = client.post(
        "/api/admin/users",
        json={"name": "Copy", "email": "jane@example.com", "password": "secret1", "role_type": "u"},
        headers=admin_headers,
    )

    assert response.status_code == 409
    assert response.json() == {"status": 409, "message": "Email already exists"}


def test_create_user_validation(client, users, admin_headers):
    response = client.post(
        "/api/admin/users",
        json={"name": "", "email": "bad", "password": "123", "role_type": "x"},
        headers=admin_headers,
    )

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "Validation failed"
    messages = {e["field"]: e["message"] for e in body["errors"]}
    assert messages["role_type"] == 'Role type must be either "u" or "a"'
    assert set(messages) == {"name", "email", "password", "role_type"}


def test_update_user_is_partial(client, users, admin_headers):
    jane = users["jane"]

    response = client.put(f"/api/admin/users/{jane.id}", json={"name": "Jane Doe"}, headers=admin_headers)

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["name"] == "Jane Doe"
    assert result["email"] == "jane@example.com"
    assert result["role_type"] == "u"


def test_update_user_password_is_rehashed(client, users, admin_headers):
    jane = users["jane"]

    client.put(f"/api/admin/users/{jane.id}", json={"password": "brandnew"}, headers=admin_headers)
    login = client.post("/api/login", json={"email": "jane@example.com", "password": "brandnew"})

    assert login.status_code == 200


def test_update_user_email_conflict_and_not_found(client, users, admin_headers):
    jane = users["jane"]

    conflict = client.put(f"/api/admin/users/{jane.id}", json={"email": "user@example.com"}, headers=admin_headers)
    missing = client.put("/api/admin/users/999", json={"name": "X"}, headers=admin_headers)

    assert conflict.status_code == 409
    assert missing.status_code == 404
    assert missing.json()["message"] == "User not found"


def test_update_user_rejects_null_name(client, users, admin_headers):
    response = client.put(f"/api/admin/users/{users['jane'].id}", json={"name": None}, headers=admin_headers)

    assert response.status_code == 422


def test_update_user_rejects_null_password(client, users, admin_headers):
    response = client.put(f"/api/admin/users/{users['jane'].id}", json={"password": None}, headers=admin_headers)

    assert response.status_code == 422
    body = response.json()
    assert body["status"] == 422
    assert body["errors"][0]["field"] == "password"


def test_admin_cannot_delete_self(client, users, admin_headers):
    response = client.delete(f"/api/admin/users/{users['admin'].id}", headers=admin_headers)

    assert response.status_code == 403
    assert response.json() == {"status": 403, "message": "Cannot delete your own account"}


def test_delete_user_cascades_listings(client, db, users, listings, admin_headers):
    owner = users["user"]

    response = client.delete(f"/api/admin/users/{owner.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "User deleted successfully"
    db.expire_all()
    assert crud.get_user(db, owner.id) is None
    assert db.query(Listing).filter(Listing.user_id == owner.id).count() == 0
    assert db.query(Listing).count() == 1


def test_delete_missing_user(client, users, admin_headers):
    assert client.delete("/api/admin/users/999", headers=admin_headers).status_code == 404


def test_list_listings_includes_owner(client, listings, admin_headers):
    response = client.get("/api/admin/listings", params={"per_page": 3, "page": 1}, headers=admin_headers)

    result = response.json()["result"]
    assert result["total"] == 4
    assert result["per_page"] == 3
    assert len(result["data"]) == 3
    assert {"user_name", "user_email", "description", "latitude"} <= set(result["data"][0])


def test_get_listing(client, users, listings, admin_headers):
    pavilion = listings[3]

    response = client.get(f"/api/admin/listings/{pavilion.id}", headers=admin_headers)

    result = response.json()["result"]
    assert result["name"] == "Pavilion KL"
    assert result["user_name"] == "Jane Smith"
    assert result["user_email"] == "jane@example.com"
    assert client.get("/api/admin/listings/999", headers=admin_headers).status_code == 404


def test_create_listing_synthesises_description(client, users, admin_headers):
    response = client.post(
        "/api/admin/listings",
        json={"name": "Mid Valley", "latitude": 3.118, "longitude": 101.677, "user_id": users["user"].id},
        headers=admin_headers,
    )

    assert response.status_code == 201
    result = response.json()["result"]
    assert result["description"] == default_description("Mid Valley")
    assert result["user_id"] == users["user"].id


def test_create_listing_keeps_given_description(client, users, admin_headers):
    response = client.post(
        "/api/admin/listings",
        json={"name": "Cafe", "latitude": "3.1", "longitude": "101.6", "user_id": users["user"].id,
              "description": "Small cafe"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["result"]["description"] == "Small cafe"
    assert response.json()["result"]["latitude"] == 3.1


def test_create_listing_unknown_owner(client, users, admin_headers):
    response = client.post(
        "/api/admin/listings",
        json={"name": "Nowhere", "latitude": 1, "longitude": 1, "user_id": 999},
        headers=admin_headers,
    )

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_create_listing_validation(client, users, admin_headers):
    response = client.post(
        "/api/admin/listings",
        json={"name": "Bad", "latitude": 91, "longitude": -181, "user_id": 0},
        headers=admin_headers,
    )

    assert response.status_code == 422
    messages = {e["field"]: e["message"] for e in response.json()["errors"]}
    assert messages == {
        "latitude": "Latitude must be between -90 and 90",
        "longitude": "Longitude must be between -180 and 180",
        "user_id": "User ID must be a positive integer",
    }


def test_update_listing_is_partial(client, listings, admin_headers):
    starbucks = listings[0]

    response = client.put(f"/api/admin/listings/{starbucks.id}", json={"latitude": 3.2}, headers=admin_headers)

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["latitude"] == 3.2
    assert result["longitude"] == 101.6767
    assert result["name"] == "Starbucks Mid Valley"
    assert result["description"] == "Starbucks Mid Valley description"


def test_update_listing_rename_refreshes_description(client, listings, admin_headers):
    starbucks = listings[0]

    response = client.put(f"/api/admin/listings/{starbucks.id}", json={"name": "Costa"}, headers=admin_headers)

    assert response.json()["result"]["description"] == default_description("Costa")


def test_update_listing_unknown_owner(client, listings, admin_headers):
    response = client.put(f"/api/admin/listings/{listings[0].id}", json={"user_id": 999}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_delete_listing(client, listings, admin_headers):
    listing_id = listings[1].id

    first = client.delete(f"/api/admin/listings/{listing_id}", headers=admin_headers)
    second = client.delete(f"/api/admin/listings/{listing_id}", headers=admin_headers)

    assert first.json() == {"status": 200, "message": "Listing deleted successfully"}
    assert second.status_code == 404
    assert second.json()["message"] == "Listing not found"


def test_dashboard(client, listings, admin_headers):
    response = client.get("/api/admin/dashboard", headers=admin_headers)

    result = response.json()["result"]
    assert result["total_users"] == 3
    assert result["total_admins"] == 1
    assert result["total_listings"] == 4
    assert len(result["recent_listings"]) == 4
    assert set(result["recent_listings"][0]) == {"name", "created_at", "user_name"}


def test_malformed_body(client, users, admin_headers):
    response = client.post(
        "/api/admin/users",
        content=b"{not json",
        headers={**admin_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json()["status"] == 422


def test_unexpected_error_is_hidden(client, users, admin_headers, monkeypatch):
    from app import services

    def boom(db):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(services, "dashboard_stats", boom)
    raw_client = TestClient(app, raise_server_exceptions=False)

    response = raw_client.get("/api/admin/dashboard", headers=admin_headers)

    assert response.status_code == 500
    assert response.json() == {"status": 500, "message": "Internal server error"}
