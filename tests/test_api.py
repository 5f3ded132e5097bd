"""End-to-end API tests through FastAPI's TestClient."""

import pytest

from conftest import ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD, PARTNER_PASSWORD, login


def create_partner(client, **overrides):
    body = {"name": "Jane Partner", "email": "jane@example.com", "password": PARTNER_PASSWORD}
    body.update(overrides)
    return client.post("/api/partners", json=body)


@pytest.fixture
def partner(admin_client):
    response = create_partner(admin_client, deposit=100, sharePercent=5)
    assert response.status_code == 201
    return response.json()["partner"]


@pytest.fixture
def partner_client(new_client, partner):
    client = new_client()
    assert login(client, "jane@example.com", PARTNER_PASSWORD).status_code == 200
    return client


class TestLogin:
    def test_missing_fields(self, client):
        response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL})
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Email and password are required",
        }

    def test_wrong_password(self, client, admin):
        response = login(client, ADMIN_EMAIL, "wrong")
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_unknown_email(self, client, admin):
        response = login(client, "nobody@example.com", ADMIN_PASSWORD)
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_success_sets_session_cookie(self, client, admin):
        response = login(client, ADMIN_EMAIL.upper(), ADMIN_PASSWORD)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user"] == {
            "id": admin.user_id,
            "name": ADMIN_NAME,
            "email": ADMIN_EMAIL,
            "role": "ADMIN",
        }

        cookie = response.headers["set-cookie"]
        assert cookie.startswith("token=")
        attributes = [part.strip().lower() for part in cookie.split(";")[1:]]
        assert "httponly" in attributes
        assert "samesite=lax" in attributes
        assert "path=/" in attributes
        assert "max-age=604800" in attributes
        assert "secure" not in attributes

    def test_partner_login_includes_partner_id(self, new_client, partner):
        response = login(new_client(), "jane@example.com", PARTNER_PASSWORD)
        assert response.status_code == 200
        assert response.json()["user"]["partnerId"] == "VBP10001"
        assert response.json()["user"]["role"] == "PARTNER"

    def test_deactivated_account(self, admin_client, new_client, partner):
        assert admin_client.patch(f"/api/partners/{partner['id']}").status_code == 200
        response = login(new_client(), "jane@example.com", PARTNER_PASSWORD)
        assert response.status_code == 403
        assert response.json()["success"] is False
        assert "deactivated" in response.json()["message"]


class TestMeAndLogout:
    def test_me_requires_cookie(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_me_rejects_garbage_token(self, client):
        client.cookies.set("token", "not-a-real-token")
        assert client.get("/api/auth/me").status_code == 401

    def test_me_returns_claims(self, partner_client, partner):
        response = partner_client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["user"] == {
            "id": partner["id"],
            "name": "Jane Partner",
            "email": "jane@example.com",
            "role": "PARTNER",
            "partnerId": "VBP10001",
        }

    def test_logout_clears_cookie(self, admin_client):
        response = admin_client.post("/api/auth/logout")
        assert response.status_code == 200
        assert admin_client.get("/api/auth/me").status_code == 401


class TestCreatePartner:
    def test_created(self, admin_client):
        response = create_partner(admin_client, mobile="+15550100", feePercent=2.5)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Partner created successfully"
        partner = body["partner"]
        assert partner["partnerId"] == "VBP10001"
        assert partner["createdBy"] == ADMIN_NAME
        assert partner["isActive"] is True
        assert partner["feePercent"] == 2.5
        assert partner["currentMonthUSD"] == 0
        assert set(partner["monthly"]) == {
            "jan", "feb", "mar", "apr", "may", "jun",
            "jul", "aug", "sep", "oct", "nov", "dec",
        }
        assert "password" not in partner
        assert "passwordHash" not in partner

    def test_null_optional_fields_take_defaults(self, admin_client):
        response = create_partner(
            admin_client, isActive=None, deposit=None, sharePercent=None, mobile="  123 "
        )
        assert response.status_code == 201
        partner = response.json()["partner"]
        assert partner["isActive"] is True
        assert partner["deposit"] == 0
        assert partner["sharePercent"] == 0
        assert partner["mobile"] == "123"

    def test_ids_increase(self, admin_client):
        create_partner(admin_client, email="a@example.com")
        response = create_partner(admin_client, email="b@example.com")
        assert response.json()["partner"]["partnerId"] == "VBP10002"

    def test_duplicate_email(self, admin_client, partner):
        response = create_partner(admin_client, email="JANE@example.com")
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "email already exists" in response.json()["message"]

    def test_missing_required_fields(self, admin_client):
        response = admin_client.post("/api/partners", json={"name": "No Email"})
        assert response.status_code == 400
        assert response.json()["message"] == "Name, email, and password are required"

    def test_requires_admin(self, partner_client):
        response = create_partner(partner_client, email="other@example.com")
        assert response.status_code == 403

    def test_requires_login(self, client):
        assert create_partner(client).status_code == 401


class TestListPartners:
    def test_admin_sees_all(self, admin_client):
        create_partner(admin_client, email="a@example.com")
        create_partner(admin_client, email="b@example.com")
        body = admin_client.get("/api/partners").json()
        assert body["role"] == "ADMIN"
        assert [p["email"] for p in body["partners"]] == ["a@example.com", "b@example.com"]

    def test_partner_sees_only_own_record(self, admin_client, partner_client, partner):
        create_partner(admin_client, email="someone-else@example.com")
        response = partner_client.get("/api/partners")
        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "PARTNER"
        assert [p["id"] for p in body["partners"]] == [partner["id"]]

    def test_requires_login(self, client):
        assert client.get("/api/partners").status_code == 401


class TestSinglePartner:
    def test_get(self, admin_client, partner):
        response = admin_client.get(f"/api/partners/{partner['id']}")
        assert response.status_code == 200
        assert response.json()["partner"]["partnerId"] == "VBP10001"

    @pytest.mark.parametrize("method", ["get", "patch"])
    def test_unknown_id(self, admin_client, method):
        response = getattr(admin_client, method)("/api/partners/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Partner not found"}

    def test_update_unknown_id(self, admin_client):
        response = admin_client.put("/api/partners/does-not-exist", json={"deposit": 1})
        assert response.status_code == 404

    def test_partial_update(self, admin_client, partner):
        response = admin_client.put(
            f"/api/partners/{partner['id']}",
            json={"deposit": 200, "monthly": {"jan": 50}, "startDate": "2025-02-01"},
        )
        assert response.status_code == 200
        updated = response.json()["partner"]
        assert response.json()["message"] == "Partner updated successfully"
        assert updated["deposit"] == 200
        assert updated["sharePercent"] == 5
        assert updated["startDate"] == "2025-02-01"
        assert updated["monthly"]["jan"] == 50
        assert updated["monthly"]["feb"] == 0

    def test_update_email_collision(self, admin_client, partner):
        response = admin_client.put(
            f"/api/partners/{partner['id']}", json={"email": ADMIN_EMAIL}
        )
        assert response.status_code == 400
        assert "already exists" in response.json()["message"]

    def test_update_rejects_null_deposit(self, admin_client, partner):
        response = admin_client.put(f"/api/partners/{partner['id']}", json={"deposit": None})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_toggle(self, admin_client, partner):
        url = f"/api/partners/{partner['id']}"
        first = admin_client.patch(url).json()
        assert first["message"] == "Partner deactivated successfully"
        assert first["partner"]["isActive"] is False
        second = admin_client.patch(url).json()
        assert second["message"] == "Partner activated successfully"
        assert second["partner"]["isActive"] is True

    @pytest.mark.parametrize("method", ["get", "put", "patch"])
    def test_partner_is_forbidden(self, partner_client, partner, method):
        kwargs = {"json": {"deposit": 1}} if method == "put" else {}
        response = getattr(partner_client, method)(f"/api/partners/{partner['id']}", **kwargs)
        assert response.status_code == 403
        assert response.json()["message"] == "Forbidden: Admin access required"

    def test_unauthenticated_is_401(self, client, partner):
        client.cookies.clear()
        assert client.put(f"/api/partners/{partner['id']}", json={}).status_code == 401


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
