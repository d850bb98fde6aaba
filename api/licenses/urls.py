"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.licenses import views

urlpatterns = [
    path("validate", views.ValidateLicenseView.as_view(), name="validate-license"),
    path("create", views.CreateLicenseView.as_view(), name="create-license"),
    path("info/<str:license_key>", views.LicenseInfoView.as_view(), name="license-info"),
    path("revoke", views.RevokeLicenseView.as_view(), name="revoke-license"),
    path("stats", views.LicenseStatsView.as_view(), name="license-stats"),
]
