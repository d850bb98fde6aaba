"""
Django management command to create the default admin user.

Uses ADMIN_USERNAME / ADMIN_PASSWORD from settings unless given
on the command line. Does nothing if the admin already exists.
"""

import logging

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.management.base import BaseCommand

from admins.infrastructure.hashers import PasswordHasher
from admins.services import ensure_default_admin
from licenses.infrastructure.stores import build_store

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to create the default admin user."""

    help = "Create the default admin user if it does not exist"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--username",
            type=str,
            default=None,
            help="Admin username (default: settings.ADMIN_USERNAME)",
        )
        parser.add_argument(
            "--password",
            type=str,
            default=None,
            help="Admin password (default: settings.ADMIN_PASSWORD)",
        )
        parser.add_argument(
            "--database",
            type=str,
            default="default",
            help="Database alias (default: default)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        username = options["username"] or settings.ADMIN_USERNAME
        password = options["password"] or settings.ADMIN_PASSWORD
        store = build_store(options["database"])

        created = async_to_sync(ensure_default_admin)(store, PasswordHasher(), username, password)
        if created:
            self.stdout.write(self.style.SUCCESS(f"Created admin user: {username}"))
        else:
            self.stdout.write(f"Admin user already exists: {username}")
