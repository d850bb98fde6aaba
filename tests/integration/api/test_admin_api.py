"""
Integration tests for Admin API endpoints.
"""

from datetime import datetime, timedelta, timezone

import pytest

from licenses.infrastructure.models import License, LicenseLog


def admin_create(admin_client, **overrides):
    payload = {"user_email": "user@example.com", "user_name": "Test User", "duration_days": 365}
    payload.update(overrides)
    response = admin_client.post("/api/admin/licenses", payload, format="json")
    assert response.status_code == 201, response.content
    return response.json()["license"]


@pytest.mark.django_db
@pytest.mark.integration
class TestAdminAuthAPI:
    """Integration tests for admin login and token checks."""

    def test_login_and_list(self, api_client, admin_token):
        """Test a login token gives access to the license list."""
        key = api_client.post(
            "/api/licenses/create",
            {"user_email": "user@example.com", "user_name": "Test User", "duration_days": 365},
            format="json",
        ).json()["license"]["key"]

        response = api_client.get(
            "/api/admin/licenses", HTTP_AUTHORIZATION=f"Bearer {admin_token}"
        )

        assert response.status_code == 200
        assert [license["license_key"] for license in response.json()["licenses"]] == [key]

    def test_login_wrong_password(self, api_client):
        """Test wrong credentials are unauthorized."""
        response = api_client.post(
            "/api/admin/login", {"username": "admin", "password": "wrong"}, format="json"
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_ERROR"

    @pytest.mark.parametrize("path", ["/api/admin/licenses", "/api/admin/stats", "/api/admin/logs"])
    def test_admin_routes_without_token(self, api_client, path):
        """Test admin routes need a token."""
        response = api_client.get(path)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_ERROR"

    @pytest.mark.parametrize(
        "header", ["Bearer not-a-token", "Bearer ", "Token abc", "Basic YWRtaW46YWRtaW4="]
    )
    def test_list_with_malformed_token(self, api_client, header):
        """Test malformed or foreign authorization headers are rejected."""
        response = api_client.get("/api/admin/licenses", HTTP_AUTHORIZATION=header)

        assert response.status_code == 401


@pytest.mark.django_db
@pytest.mark.integration
class TestAdminLicenseAPI:
    """Integration tests for admin license management."""

    def test_create(self, admin_client):
        """Test admin creation is audited with the admin name."""
        license = admin_create(admin_client, notes="partner")

        assert license["notes"] == "partner"
        entry = LicenseLog.objects.get(license_key=license["license_key"])
        assert entry.action == "admin_license_created"
        assert entry.details["admin"] == "admin"

    def test_update(self, admin_client):
        """Test a partial update changes only the given fields."""
        key = admin_create(admin_client)["license_key"]
        expires_at = (datetime.now(timezone.utc) + timedelta(days=10)).isoformat()

        response = admin_client.put(
            f"/api/admin/licenses/{key}",
            {"user_name": "Renamed", "expires_at": expires_at},
            format="json",
        )

        assert response.status_code == 200
        stored = License.objects.get(license_key=key)
        assert stored.user_name == "Renamed"
        assert stored.user_email == "user@example.com"
        assert LicenseLog.objects.filter(license_key=key, action="admin_license_updated").exists()

    def test_update_unbinds_machine(self, admin_client):
        """Test clearing machine_id lets another machine bind."""
        key = admin_create(admin_client)["license_key"]
        admin_client.post(
            "/api/licenses/validate", {"license_key": key, "machine_id": "M1"}, format="json"
        )

        admin_client.put(f"/api/admin/licenses/{key}", {"machine_id": None}, format="json")
        response = admin_client.post(
            "/api/licenses/validate", {"license_key": key, "machine_id": "M2"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["machine_id"] == "M2"

    @pytest.mark.parametrize(
        "payload",
        [
            {"license_key": "OTHER"},
            {"usage_count": 0},
            {},
            {"expires_at": "2001-01-01T00:00:00Z"},
        ],
    )
    def test_update_rejects_invalid_changes(self, admin_client, payload):
        """Test immutable fields, empty updates and past expiry are refused."""
        key = admin_create(admin_client)["license_key"]

        response = admin_client.put(f"/api/admin/licenses/{key}", payload, format="json")

        assert response.status_code == 400
        assert License.objects.filter(license_key=key).exists()

    def test_update_unknown(self, admin_client):
        """Test updating an unknown license is a 404."""
        response = admin_client.put("/api/admin/licenses/UNKNOWN", {"notes": "x"}, format="json")

        assert response.status_code == 404

    def test_delete(self, admin_client):
        """Test deletion removes the license but keeps its audit trail."""
        key = admin_create(admin_client)["license_key"]

        response = admin_client.delete(f"/api/admin/licenses/{key}")
        again = admin_client.delete(f"/api/admin/licenses/{key}")

        assert response.status_code == 200
        assert again.status_code == 404
        assert not License.objects.filter(license_key=key).exists()
        assert LicenseLog.objects.filter(license_key=key).count() == 2

    def test_revoke(self, admin_client):
        """Test admin revoke is idempotent and audited once."""
        key = admin_create(admin_client)["license_key"]

        first = admin_client.post("/api/admin/licenses/revoke", {"license_key": key}, format="json")
        second = admin_client.post("/api/admin/licenses/revoke", {"license_key": key}, format="json")

        assert first.status_code == 200
        assert second.status_code == 404
        assert LicenseLog.objects.filter(license_key=key, action="admin_license_revoked").count() == 1

    def test_stats(self, admin_client):
        """Test admin stats count revoked licenses."""
        key = admin_create(admin_client)["license_key"]
        admin_create(admin_client)
        admin_client.post("/api/admin/licenses/revoke", {"license_key": key}, format="json")

        stats = admin_client.get("/api/admin/stats").json()["stats"]

        assert stats["total_licenses"] == 2
        assert stats["revoked_licenses"] == 1
        assert stats["active_licenses"] == 1

    def test_logs_pagination(self, admin_client):
        """Test the audit log pages newest first."""
        keys = [admin_create(admin_client)["license_key"] for _ in range(3)]

        response = admin_client.get("/api/admin/logs", {"limit": 2, "offset": 0})
        rest = admin_client.get("/api/admin/logs", {"limit": 2, "offset": 2})

        assert response.status_code == 200
        assert [entry["license_key"] for entry in response.json()["logs"]] == keys[::-1][:2]
        assert [entry["license_key"] for entry in rest.json()["logs"]] == keys[:1]
        assert response.json()["logs"][0]["action"] == "admin_license_created"

    def test_logs_rejects_bad_limit(self, admin_client):
        """Test out-of-range pagination is a validation error."""
        response = admin_client.get("/api/admin/logs", {"limit": 0})

        assert response.status_code == 400
