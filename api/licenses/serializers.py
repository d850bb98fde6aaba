"""
Serializers for License API endpoints.
"""

from django.conf import settings
from rest_framework import serializers


class ValidateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for validate license request."""

    license_key = serializers.CharField(required=True, max_length=64)
    machine_id = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )


class CreateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for self-service license creation."""

    user_email = serializers.EmailField(required=True, max_length=255)
    user_name = serializers.CharField(required=True, max_length=255)
    duration_days = serializers.IntegerField(required=False, min_value=1, max_value=36500)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        """Fill in the default license duration."""
        attrs.setdefault("duration_days", settings.LICENSE_DURATION_DAYS)
        return attrs


class RevokeLicenseRequestSerializer(serializers.Serializer):
    """Serializer for revoke license request."""

    license_key = serializers.CharField(required=True, max_length=64)


class LicenseSummarySerializer(serializers.Serializer):
    """Licensee-facing view of a license."""

    key = serializers.CharField()
    user_email = serializers.EmailField()
    user_name = serializers.CharField()
    expires_at = serializers.DateTimeField()
    is_active = serializers.BooleanField()
    usage_count = serializers.IntegerField()


class LicenseInfoSerializer(LicenseSummarySerializer):
    """License summary with timestamps, for the info endpoint."""

    created_at = serializers.DateTimeField()
    last_used = serializers.DateTimeField(allow_null=True)


class IssuedLicenseSerializer(serializers.Serializer):
    """Serializer for a newly issued license."""

    key = serializers.CharField()
    user_email = serializers.EmailField()
    user_name = serializers.CharField()
    created_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
    notes = serializers.CharField(allow_null=True)


class ValidateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for validate license response."""

    success = serializers.BooleanField()
    license = LicenseSummarySerializer()
    machine_id = serializers.CharField()


class LicenseStatsSerializer(serializers.Serializer):
    """Serializer for license counts."""

    total_licenses = serializers.IntegerField(source="total")
    active_licenses = serializers.IntegerField(source="active")
    revoked_licenses = serializers.IntegerField(source="revoked")
    expired_licenses = serializers.IntegerField(source="expired")
    used_licenses = serializers.IntegerField(source="bound")
    unused_licenses = serializers.IntegerField(source="unbound")
