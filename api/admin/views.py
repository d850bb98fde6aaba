"""
Admin API views.

Every view except login runs behind AdminTokenMiddleware, which puts
the verified token claims on `request.admin`.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api import container
from api.admin.serializers import (
    AdminCreateLicenseRequestSerializer,
    AdminRevokeRequestSerializer,
    AdminSummarySerializer,
    AuditLogEntrySerializer,
    AuditLogQuerySerializer,
    LicenseRecordSerializer,
    LoginRequestSerializer,
    LoginResponseSerializer,
    UpdateLicenseRequestSerializer,
)
from api.exceptions import error_body, validation_error_response
from api.licenses.serializers import LicenseStatsSerializer
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.issue_license import IssueChannel, IssueLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    DeleteLicenseHandler,
    RevokeLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.handlers.license_query_handlers import (
    GetLicenseStatsHandler,
    ListAuditLogsHandler,
    ListLicensesHandler,
)
from licenses.application.queries.list_audit_logs import ListAuditLogsQuery

LICENSE_KEY_PARAMETER = OpenApiParameter(
    name="license_key",
    type=str,
    location=OpenApiParameter.PATH,
    description="License key",
)


def _actor(request: Request) -> str:
    """Username of the admin making the request."""
    return request.admin.username


class AdminLoginView(APIView):
    """View for admin login."""

    @extend_schema(
        operation_id="admin_login",
        summary="Admin Login",
        description="Exchange admin credentials for a bearer token.",
        tags=["Admin API"],
        request=LoginRequestSerializer,
        responses={
            200: LoginResponseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Invalid credentials"},
        },
    )
    def post(self, request: Request) -> Response:
        """Log an admin in."""
        return async_to_sync(self._handle_login)(request)

    async def _handle_login(self, request: Request) -> Response:
        """Async handler for admin login."""
        serializer = LoginRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = await container.admin_authenticator().login(
            serializer.validated_data["username"], serializer.validated_data["password"]
        )
        return Response(
            {
                "success": True,
                "token": result.token,
                "expires_at": result.expires_at.isoformat(),
                "admin": AdminSummarySerializer(result.admin).data,
            }
        )


class AdminLicenseListView(APIView):
    """View for listing and creating licenses."""

    @extend_schema(
        operation_id="admin_list_licenses",
        summary="List Licenses",
        description="Return every license, newest first.",
        tags=["Admin API"],
        responses={200: LicenseRecordSerializer(many=True), 401: {"description": "Unauthorized"}},
    )
    def get(self, request: Request) -> Response:
        """List all licenses."""
        licenses = async_to_sync(ListLicensesHandler(container.license_store()).handle)()
        return Response(
            {"success": True, "licenses": LicenseRecordSerializer(licenses, many=True).data}
        )

    @extend_schema(
        operation_id="admin_create_license",
        summary="Create License",
        tags=["Admin API"],
        request=AdminCreateLicenseRequestSerializer,
        responses={
            201: LicenseRecordSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized"},
            409: {"description": "Could not generate a unique license key"},
        },
    )
    def post(self, request: Request) -> Response:
        """Create a license on behalf of a licensee."""
        return async_to_sync(self._handle_create)(request)

    async def _handle_create(self, request: Request) -> Response:
        """Async handler for admin license creation."""
        serializer = AdminCreateLicenseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        handler = IssueLicenseHandler(container.license_store(), container.audit_logger())
        license = await handler.handle(
            IssueLicenseCommand(
                user_email=serializer.validated_data["user_email"],
                user_name=serializer.validated_data["user_name"],
                duration_days=serializer.validated_data["duration_days"],
                notes=serializer.validated_data.get("notes") or None,
                channel=IssueChannel.ADMIN,
                actor=_actor(request),
                context=container.request_context(request),
            )
        )
        return Response(
            {"success": True, "license": LicenseRecordSerializer(license).data},
            status=status.HTTP_201_CREATED,
        )


class AdminLicenseDetailView(APIView):
    """View for updating and deleting a single license."""

    @extend_schema(
        operation_id="admin_update_license",
        summary="Update License",
        description=(
            "Partially update a license. The key and the usage counters cannot be "
            "changed; machine_id may be cleared to unbind the license."
        ),
        tags=["Admin API"],
        parameters=[LICENSE_KEY_PARAMETER],
        request=UpdateLicenseRequestSerializer,
        responses={
            200: {"description": "License updated"},
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized"},
            404: {"description": "License not found"},
        },
    )
    def put(self, request: Request, license_key: str) -> Response:
        """Update a license."""
        return async_to_sync(self._handle_update)(request, license_key)

    async def _handle_update(self, request: Request, license_key: str) -> Response:
        """Async handler for license update."""
        serializer = UpdateLicenseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        handler = UpdateLicenseHandler(container.license_store(), container.audit_logger())
        await handler.handle(
            UpdateLicenseCommand(
                license_key=license_key,
                actor=_actor(request),
                changes=dict(serializer.validated_data),
                context=container.request_context(request),
            )
        )
        return Response({"success": True, "message": "License updated successfully"})

    @extend_schema(
        operation_id="admin_delete_license",
        summary="Delete License",
        tags=["Admin API"],
        parameters=[LICENSE_KEY_PARAMETER],
        responses={
            200: {"description": "License deleted"},
            401: {"description": "Unauthorized"},
            404: {"description": "License not found"},
        },
    )
    def delete(self, request: Request, license_key: str) -> Response:
        """Delete a license."""
        handler = DeleteLicenseHandler(container.license_store(), container.audit_logger())
        async_to_sync(handler.handle)(
            DeleteLicenseCommand(
                license_key=license_key,
                actor=_actor(request),
                context=container.request_context(request),
            )
        )
        return Response({"success": True, "message": "License deleted successfully"})


class AdminRevokeLicenseView(APIView):
    """View for admin revocation."""

    @extend_schema(
        operation_id="admin_revoke_license",
        summary="Revoke License",
        tags=["Admin API"],
        request=AdminRevokeRequestSerializer,
        responses={
            200: {"description": "License revoked"},
            401: {"description": "Unauthorized"},
            404: {"description": "License not found or already revoked"},
        },
    )
    def post(self, request: Request) -> Response:
        """Revoke a license."""
        return async_to_sync(self._handle_revoke)(request)

    async def _handle_revoke(self, request: Request) -> Response:
        """Async handler for admin revocation."""
        serializer = AdminRevokeRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        handler = RevokeLicenseHandler(container.license_store(), container.audit_logger())
        changed = await handler.handle(
            RevokeLicenseCommand(
                license_key=serializer.validated_data["license_key"],
                actor=_actor(request),
                context=container.request_context(request),
            )
        )
        if not changed:
            return Response(
                error_body("LICENSE_NOT_FOUND", "License not found or already revoked"),
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response({"success": True, "message": "License revoked successfully"})


class AdminStatsView(APIView):
    """View for license statistics."""

    @extend_schema(
        operation_id="admin_license_stats",
        summary="License Statistics",
        tags=["Admin API"],
        responses={200: LicenseStatsSerializer, 401: {"description": "Unauthorized"}},
    )
    def get(self, request: Request) -> Response:
        """Get license statistics."""
        stats = async_to_sync(GetLicenseStatsHandler(container.license_store()).handle)()
        return Response({"success": True, "stats": LicenseStatsSerializer(stats).data})


class AdminAuditLogView(APIView):
    """View for the audit trail."""

    @extend_schema(
        operation_id="admin_audit_logs",
        summary="Audit Logs",
        description="Page through audit entries, newest first.",
        tags=["Admin API"],
        parameters=[
            OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY),
            OpenApiParameter(name="offset", type=int, location=OpenApiParameter.QUERY),
        ],
        responses={200: AuditLogEntrySerializer(many=True), 401: {"description": "Unauthorized"}},
    )
    def get(self, request: Request) -> Response:
        """List audit entries."""
        params = AuditLogQuerySerializer(data=request.query_params)
        if not params.is_valid():
            return validation_error_response(params.errors)

        handler = ListAuditLogsHandler(container.audit_logger())
        entries = async_to_sync(handler.handle)(
            ListAuditLogsQuery(
                limit=params.validated_data["limit"], offset=params.validated_data["offset"]
            )
        )
        return Response(
            {
                "success": True,
                "logs": AuditLogEntrySerializer(entries, many=True).data,
                "limit": params.validated_data["limit"],
                "offset": params.validated_data["offset"],
            }
        )
