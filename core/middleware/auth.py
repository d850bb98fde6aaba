"""
Admin token authentication middleware.

This middleware verifies admin bearer tokens for the admin API and
for license revocation, before any view runs.
"""

import logging
from typing import Optional

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from api.container import admin_authenticator
from core.domain.exceptions import AuthError

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/api/admin/", "/api/licenses/revoke")
PUBLIC_PATHS = ("/api/admin/login",)


class AdminTokenMiddleware(MiddlewareMixin):
    """
    Middleware for admin token authentication.

    This middleware:
    1. Requires `Authorization: Bearer <token>` on admin-only paths
    2. Verifies the token signature and expiry
    3. Stores the token claims on `request.admin`
    4. Returns 401 Unauthorized if authentication fails
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        request.admin = None  # type: ignore
        if not self._requires_admin(request.path):
            return None

        token = self._bearer_token(request)
        if not token:
            return self._unauthorized("Missing admin token. Provide an Authorization: Bearer header.")

        try:
            request.admin = admin_authenticator().verify(token)  # type: ignore
        except AuthError as e:
            logger.warning("Invalid admin token", extra={"path": request.path})
            return self._unauthorized(e.message)
        return None

    def _requires_admin(self, path: str) -> bool:
        """
        Check if this path needs an admin token.

        Args:
            path: Request path

        Returns:
            True if the path is admin-only
        """
        normalized = path.rstrip("/")
        if normalized in PUBLIC_PATHS:
            return False
        return any(path.startswith(prefix) for prefix in PROTECTED_PREFIXES)

    def _bearer_token(self, request: HttpRequest) -> str:
        """Extract the token from the Authorization header."""
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer":
            return ""
        return token.strip()

    def _unauthorized(self, message: str) -> JsonResponse:
        return JsonResponse(
            {"success": False, "error": {"code": "AUTH_ERROR", "message": message}},
            status=401,
        )
