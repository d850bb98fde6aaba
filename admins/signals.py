"""
Signal receivers for the admins app.
"""
from asgiref.sync import async_to_sync
from django.conf import settings

from admins.infrastructure.hashers import PasswordHasher
from admins.services import ensure_default_admin
from licenses.infrastructure.stores import build_store


def create_default_admin(sender, using="default", **kwargs):
    """Create the bootstrap admin once the license tables exist."""
    async_to_sync(ensure_default_admin)(
        build_store(using),
        PasswordHasher(),
        settings.ADMIN_USERNAME,
        settings.ADMIN_PASSWORD,
    )
