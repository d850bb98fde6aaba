"""
Model registration for the licenses app.

Django discovers models through `<app>.models`; the definitions live
in the infrastructure layer.
"""
from licenses.infrastructure.models import AdminUser, License, LicenseLog  # noqa: F401
