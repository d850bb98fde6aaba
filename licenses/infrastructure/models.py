"""
License, AdminUser and LicenseLog models.

The three tables behind the license store. Audit rows reference
licenses by key only, without a foreign key, so they survive deletes.
"""
from django.db import models
from django.utils import timezone


class License(models.Model):
    """
    A license issued to one user and bound to at most one machine.
    """

    license_key = models.CharField(max_length=64, unique=True)
    machine_id = models.CharField(max_length=255, null=True, blank=True)
    user_email = models.CharField(max_length=255)
    user_name = models.CharField(max_length=255)
    created_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    last_used = models.DateTimeField(null=True, blank=True)
    usage_count = models.PositiveIntegerField(default=0)
    notes = models.TextField(null=True, blank=True)

    class Meta:
        app_label = "licenses"
        db_table = "licenses"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["expires_at"], name="licenses_expires_idx"),
        ]

    def __str__(self):
        return self.license_key


class AdminUser(models.Model):
    """
    Administrator account, separate from Django's auth users.
    """

    username = models.CharField(max_length=150, unique=True)
    password_hash = models.CharField(max_length=255)
    created_at = models.DateTimeField(default=timezone.now)
    last_login = models.DateTimeField(null=True, blank=True)

    class Meta:
        app_label = "licenses"
        db_table = "admin_users"

    def __str__(self):
        return self.username


class LicenseLog(models.Model):
    """
    Append-only audit trail of license events.
    """

    license_key = models.CharField(max_length=64, db_index=True)
    action = models.CharField(max_length=64)
    machine_id = models.CharField(max_length=255, null=True, blank=True)
    ip_address = models.CharField(max_length=64, null=True, blank=True)
    user_agent = models.TextField(null=True, blank=True)
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    details = models.JSONField(default=dict, blank=True)

    class Meta:
        app_label = "licenses"
        db_table = "license_logs"
        ordering = ["-timestamp", "-id"]

    def __str__(self):
        return f"{self.action} - {self.license_key}"
