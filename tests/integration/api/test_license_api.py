"""
Integration tests for License API endpoints.
"""

import logging

import pytest

from licenses.infrastructure.models import License, LicenseLog


def create_license(api_client, **overrides):
    payload = {"user_email": "user@example.com", "user_name": "Test User", "duration_days": 365}
    payload.update(overrides)
    payload = {name: value for name, value in payload.items() if value is not None}
    response = api_client.post("/api/licenses/create", payload, format="json")
    assert response.status_code == 201, response.content
    return response.json()["license"]


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseAPI:
    """Integration tests for the licensee-facing API."""

    def test_create_license(self, api_client):
        """Test self-service creation returns an unbound license."""
        license = create_license(api_client, notes="trial")

        assert len(license["key"]) == 24
        assert license["user_email"] == "user@example.com"
        assert license["notes"] == "trial"
        stored = License.objects.get(license_key=license["key"])
        assert stored.machine_id is None
        assert LicenseLog.objects.filter(license_key=license["key"], action="license_created").exists()

    def test_create_uses_default_duration(self, api_client, settings):
        """Test a missing duration falls back to LICENSE_DURATION_DAYS."""
        settings.LICENSE_DURATION_DAYS = 30
        license = create_license(api_client, duration_days=None)

        stored = License.objects.get(license_key=license["key"])
        assert (stored.expires_at - stored.created_at).days == 30

    def test_create_rejects_bad_input(self, api_client):
        """Test invalid input is rejected before anything is stored."""
        response = api_client.post(
            "/api/licenses/create",
            {"user_email": "not-an-email", "user_name": ""},
            format="json",
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert set(body["error"]["fields"]) == {"user_email", "user_name"}
        assert License.objects.count() == 0

    def test_validate_scenario(self, api_client):
        """Test bind on M1, confirm on M1, mismatch on M2."""
        key = create_license(api_client)["key"]

        first = api_client.post(
            "/api/licenses/validate", {"license_key": key, "machine_id": "M1"}, format="json"
        )
        assert first.status_code == 200
        assert first.json()["machine_id"] == "M1"
        assert first.json()["license"]["usage_count"] == 1

        second = api_client.post(
            "/api/licenses/validate", {"license_key": key, "machine_id": "M1"}, format="json"
        )
        assert second.json()["license"]["usage_count"] == 2

        other = api_client.post(
            "/api/licenses/validate", {"license_key": key, "machine_id": "M2"}, format="json"
        )
        assert other.status_code == 403
        assert other.json()["error"]["code"] == "MACHINE_MISMATCH"
        assert other.json()["machine_id"] == "M2"
        assert License.objects.get(license_key=key).usage_count == 2

    def test_validate_records_client(self, api_client):
        """Test the audit entry records the caller's address and user agent."""
        key = create_license(api_client)["key"]

        api_client.post(
            "/api/licenses/validate",
            {"license_key": key, "machine_id": "M1"},
            format="json",
            REMOTE_ADDR="203.0.113.9",
            HTTP_USER_AGENT="desktop-app/3.2",
        )

        entry = LicenseLog.objects.get(license_key=key, action="validation_attempt")
        assert entry.ip_address == "203.0.113.9"
        assert entry.user_agent == "desktop-app/3.2"
        assert entry.details["success"] is True

    def test_validate_unknown_key(self, api_client):
        """Test an unknown key is a 404."""
        response = api_client.post(
            "/api/licenses/validate", {"license_key": "UNKNOWN", "machine_id": "M1"}, format="json"
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LICENSE_NOT_FOUND"

    def test_validate_requires_key(self, api_client):
        """Test a missing key is a validation error."""
        response = api_client.post("/api/licenses/validate", {"machine_id": "M1"}, format="json")

        assert response.status_code == 400
        assert LicenseLog.objects.count() == 0

    def test_info(self, api_client):
        """Test info returns the summary without binding."""
        key = create_license(api_client)["key"]

        response = api_client.get(f"/api/licenses/info/{key}")

        assert response.status_code == 200
        assert response.json()["license"]["key"] == key
        assert License.objects.get(license_key=key).usage_count == 0

    def test_info_hides_invalid_licenses(self, api_client):
        """Test revoked and unknown licenses both answer 404."""
        key = create_license(api_client)["key"]
        License.objects.filter(license_key=key).update(is_active=False)

        assert api_client.get(f"/api/licenses/info/{key}").status_code == 404
        assert api_client.get("/api/licenses/info/UNKNOWN").status_code == 404

    def test_revoke_requires_admin_token(self, api_client):
        """Test revoke without a token is unauthorized and changes nothing."""
        key = create_license(api_client)["key"]

        response = api_client.post("/api/licenses/revoke", {"license_key": key}, format="json")

        assert response.status_code == 401
        assert License.objects.get(license_key=key).is_active is True

    def test_revoke_then_validate(self, admin_client):
        """Test a revoked license is rejected for its bound machine."""
        key = create_license(admin_client)["key"]
        admin_client.post(
            "/api/licenses/validate", {"license_key": key, "machine_id": "M1"}, format="json"
        )

        revoked = admin_client.post("/api/licenses/revoke", {"license_key": key}, format="json")
        again = admin_client.post("/api/licenses/revoke", {"license_key": key}, format="json")
        response = admin_client.post(
            "/api/licenses/validate", {"license_key": key, "machine_id": "M1"}, format="json"
        )

        assert revoked.status_code == 200
        assert again.status_code == 404
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "LICENSE_REVOKED"

    def test_stats(self, api_client):
        """Test public stats report counts including unbound licenses."""
        key = create_license(api_client)["key"]
        create_license(api_client)
        api_client.post(
            "/api/licenses/validate", {"license_key": key, "machine_id": "M1"}, format="json"
        )

        stats = api_client.get("/api/licenses/stats").json()["stats"]

        assert stats["total_licenses"] == 2
        assert stats["active_licenses"] == 2
        assert stats["used_licenses"] == 1
        assert stats["unused_licenses"] == 1


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthAndMetrics:
    """Integration tests for operational endpoints."""

    def test_health(self, client):
        """Test liveness and database checks."""
        assert client.get("/health/").json()["status"] == "healthy"
        assert client.get("/health/db/").json()["database"] == "connected"

    def test_correlation_id_header(self, client):
        """Test responses carry a correlation id."""
        response = client.get("/health/", HTTP_X_CORRELATION_ID="abc-123")
        assert response["X-Correlation-ID"] == "abc-123"

    def test_correlation_id_generated(self, client):
        """Test a correlation id is assigned when the caller sends none."""
        first = client.get("/health/")["X-Correlation-ID"]
        second = client.get("/health/")["X-Correlation-ID"]

        assert len(first) == 32
        assert first != second

    def test_request_log_carries_license_context(self, client, caplog):
        """Test the request log names the route and the license key."""
        with caplog.at_level(logging.INFO, logger="core.middleware.observability"):
            client.get("/api/licenses/info/ABCDEF0123456789ABCDEF01")

        (record,) = [r for r in caplog.records if r.name == "core.middleware.observability"]
        assert record.license_key == "ABCDEF0123456789ABCDEF01"
        assert record.status_code == 404
        assert record.correlation_id

    def test_metrics(self, client):
        """Test Prometheus metrics are exposed."""
        client.get("/health/")
        response = client.get("/metrics")

        assert response.status_code == 200
        assert b"http_requests_total" in response.content
