"""
License API views.

These endpoints are used by the licensed desktop application to:
- Validate (and on first use, bind) a license
- Request a license (self-service)
- Read license info and statistics

Revoke lives here too but requires an admin token.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api import container
from api.exceptions import error_body, validation_error_response
from api.licenses.serializers import (
    CreateLicenseRequestSerializer,
    IssuedLicenseSerializer,
    LicenseInfoSerializer,
    LicenseStatsSerializer,
    LicenseSummarySerializer,
    RevokeLicenseRequestSerializer,
    ValidateLicenseRequestSerializer,
    ValidateLicenseResponseSerializer,
)
from core.domain.exceptions import LicenseRejectedError
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import RevokeLicenseHandler
from licenses.application.handlers.license_query_handlers import (
    GetLicenseInfoHandler,
    GetLicenseStatsHandler,
)
from licenses.application.queries.get_license_info import GetLicenseInfoQuery


class ValidateLicenseView(APIView):
    """View for validating licenses."""

    @extend_schema(
        operation_id="validate_license",
        summary="Validate License",
        description=(
            "Validate a license for a machine. The first successful validation binds "
            "the license to that machine; later validations from other machines are "
            "rejected. Every attempt is recorded in the audit trail."
        ),
        tags=["License API"],
        request=ValidateLicenseRequestSerializer,
        responses={
            200: ValidateLicenseResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License revoked, expired, or bound to another machine"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Validate a license."""
        return async_to_sync(self._handle_validate)(request)

    async def _handle_validate(self, request: Request) -> Response:
        """Async handler for validate license."""
        serializer = ValidateLicenseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        validator = container.license_validator()
        license = await validator.validate(
            serializer.validated_data["license_key"],
            machine_id=serializer.validated_data.get("machine_id") or None,
            context=container.request_context(request),
        )
        return Response(
            {
                "success": True,
                "license": LicenseSummarySerializer(license).data,
                "machine_id": license.machine_id,
            },
            status=status.HTTP_200_OK,
        )


class CreateLicenseView(APIView):
    """View for self-service license issuance."""

    @extend_schema(
        operation_id="create_license",
        summary="Create License",
        description="Issue a new, unbound license for a licensee.",
        tags=["License API"],
        request=CreateLicenseRequestSerializer,
        responses={
            201: IssuedLicenseSerializer,
            400: {"description": "Bad Request"},
            409: {"description": "Could not generate a unique license key"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a license."""
        return async_to_sync(self._handle_create)(request)

    async def _handle_create(self, request: Request) -> Response:
        """Async handler for create license."""
        serializer = CreateLicenseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        handler = IssueLicenseHandler(container.license_store(), container.audit_logger())
        license = await handler.handle(
            IssueLicenseCommand(
                user_email=serializer.validated_data["user_email"],
                user_name=serializer.validated_data["user_name"],
                duration_days=serializer.validated_data["duration_days"],
                notes=serializer.validated_data.get("notes") or None,
                context=container.request_context(request),
            )
        )
        return Response(
            {"success": True, "license": IssuedLicenseSerializer(license).data},
            status=status.HTTP_201_CREATED,
        )


class LicenseInfoView(APIView):
    """View for read-only license info."""

    @extend_schema(
        operation_id="get_license_info",
        summary="Get License Info",
        description=(
            "Return a summary of a currently valid license. Revoked, expired and "
            "unknown keys all answer 404. This never binds or counts usage."
        ),
        tags=["License API"],
        parameters=[
            OpenApiParameter(
                name="license_key",
                type=str,
                location=OpenApiParameter.PATH,
                description="License key",
            ),
        ],
        responses={
            200: LicenseInfoSerializer,
            404: {"description": "License not found or invalid"},
        },
    )
    def get(self, request: Request, license_key: str) -> Response:
        """Get license info."""
        return async_to_sync(self._handle_info)(license_key)

    async def _handle_info(self, license_key: str) -> Response:
        """Async handler for license info."""
        handler = GetLicenseInfoHandler(container.license_validator())
        try:
            license = await handler.handle(GetLicenseInfoQuery(license_key=license_key))
        except LicenseRejectedError:
            return Response(
                error_body("LICENSE_NOT_FOUND", "License not found or invalid"),
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response({"success": True, "license": LicenseInfoSerializer(license).data})


class RevokeLicenseView(APIView):
    """View for revoking licenses (admin token required)."""

    @extend_schema(
        operation_id="revoke_license",
        summary="Revoke License",
        description="Revoke an active license. Requires an admin bearer token.",
        tags=["License API"],
        request=RevokeLicenseRequestSerializer,
        responses={
            200: {"description": "License revoked"},
            401: {"description": "Missing or invalid admin token"},
            404: {"description": "License not found or already revoked"},
        },
    )
    def post(self, request: Request) -> Response:
        """Revoke a license."""
        return async_to_sync(self._handle_revoke)(request)

    async def _handle_revoke(self, request: Request) -> Response:
        """Async handler for revoke license."""
        serializer = RevokeLicenseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        handler = RevokeLicenseHandler(container.license_store(), container.audit_logger())
        changed = await handler.handle(
            RevokeLicenseCommand(
                license_key=serializer.validated_data["license_key"],
                context=container.request_context(request),
            )
        )
        if not changed:
            return Response(
                error_body("LICENSE_NOT_FOUND", "License not found or already revoked"),
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response({"success": True, "message": "License revoked successfully"})


class LicenseStatsView(APIView):
    """View for license statistics."""

    @extend_schema(
        operation_id="get_license_stats",
        summary="License Statistics",
        tags=["License API"],
        responses={200: LicenseStatsSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get license statistics."""
        stats = async_to_sync(GetLicenseStatsHandler(container.license_store()).handle)()
        return Response({"success": True, "stats": LicenseStatsSerializer(stats).data})
