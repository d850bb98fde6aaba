"""
Serializers for Admin API endpoints.
"""

from django.conf import settings
from rest_framework import serializers

from audit.services import MAX_PAGE_SIZE

IMMUTABLE_FIELDS = ("license_key", "key", "id", "usage_count", "created_at", "last_used")


class LoginRequestSerializer(serializers.Serializer):
    """Serializer for admin login request."""

    username = serializers.CharField(required=True, max_length=150)
    password = serializers.CharField(required=True, max_length=255, trim_whitespace=False)


class AdminSummarySerializer(serializers.Serializer):
    """Serializer for the logged-in admin."""

    id = serializers.IntegerField()
    username = serializers.CharField()
    last_login = serializers.DateTimeField(allow_null=True)


class LoginResponseSerializer(serializers.Serializer):
    """Serializer for admin login response."""

    success = serializers.BooleanField()
    token = serializers.CharField()
    expires_at = serializers.DateTimeField()
    admin = AdminSummarySerializer()


class LicenseRecordSerializer(serializers.Serializer):
    """Full license record, as admins see it."""

    id = serializers.IntegerField()
    license_key = serializers.CharField(source="key")
    user_email = serializers.EmailField()
    user_name = serializers.CharField()
    machine_id = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
    is_active = serializers.BooleanField()
    last_used = serializers.DateTimeField(allow_null=True)
    usage_count = serializers.IntegerField()
    notes = serializers.CharField(allow_null=True)


class AdminCreateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for admin license creation."""

    user_email = serializers.EmailField(required=True, max_length=255)
    user_name = serializers.CharField(required=True, max_length=255)
    duration_days = serializers.IntegerField(required=False, min_value=1, max_value=36500)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        """Fill in the default license duration."""
        attrs.setdefault("duration_days", settings.LICENSE_DURATION_DAYS)
        return attrs


class UpdateLicenseRequestSerializer(serializers.Serializer):
    """
    Serializer for a partial license update.

    Only fields present in the request are returned in validated_data.
    """

    user_email = serializers.EmailField(required=False, max_length=255)
    user_name = serializers.CharField(required=False, max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    is_active = serializers.BooleanField(required=False)
    machine_id = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )
    expires_at = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        """Reject immutable fields and empty updates."""
        immutable = sorted(name for name in IMMUTABLE_FIELDS if name in self.initial_data)
        if immutable:
            raise serializers.ValidationError(
                {name: "This field cannot be updated." for name in immutable}
            )
        if not attrs:
            raise serializers.ValidationError("No fields to update.")
        return attrs


class AdminRevokeRequestSerializer(serializers.Serializer):
    """Serializer for admin revoke request."""

    license_key = serializers.CharField(required=True, max_length=64)


class AuditLogQuerySerializer(serializers.Serializer):
    """Pagination parameters for the audit log."""

    limit = serializers.IntegerField(required=False, default=100, min_value=1, max_value=MAX_PAGE_SIZE)
    offset = serializers.IntegerField(required=False, default=0, min_value=0)


class AuditLogEntrySerializer(serializers.Serializer):
    """Serializer for one audit entry."""

    id = serializers.IntegerField()
    license_key = serializers.CharField()
    action = serializers.CharField()
    machine_id = serializers.CharField(allow_null=True)
    ip_address = serializers.CharField(allow_null=True)
    user_agent = serializers.CharField(allow_null=True)
    timestamp = serializers.DateTimeField()
    details = serializers.DictField()
