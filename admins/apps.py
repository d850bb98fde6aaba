"""
App configuration for admins.
"""
from django.apps import AppConfig, apps
from django.db.models.signals import post_migrate


class AdminsConfig(AppConfig):
    """App configuration for admins."""

    name = "admins"
    verbose_name = "Admin Users"

    def ready(self):
        """Create the default admin after the licenses tables are migrated."""
        from admins.signals import create_default_admin

        post_migrate.connect(
            create_default_admin,
            sender=apps.get_app_config("licenses"),
            dispatch_uid="admins.create_default_admin",
        )
