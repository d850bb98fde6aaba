"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.admin import views

urlpatterns = [
    path("login", views.AdminLoginView.as_view(), name="admin-login"),
    path("licenses", views.AdminLicenseListView.as_view(), name="admin-licenses"),
    path("licenses/revoke", views.AdminRevokeLicenseView.as_view(), name="admin-revoke-license"),
    path(
        "licenses/<str:license_key>",
        views.AdminLicenseDetailView.as_view(),
        name="admin-license-detail",
    ),
    path("stats", views.AdminStatsView.as_view(), name="admin-stats"),
    path("logs", views.AdminAuditLogView.as_view(), name="admin-logs"),
]
