"""Privileged account endpoints.

``POST /api/v1/users/`` creates a user inside the caller's company.
Every response of this endpoint (including DRF's own 401/403 and throttle
responses) uses the ``{"success": ..., ...}`` envelope and carries
permissive CORS headers, so browser clients can call it cross-origin.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.dtos import CreateUserDTO
from modules.accounts.exceptions import (
    MembershipNotFound,
    NotCompanyAdmin,
    UserAlreadyExists,
    UserProvisioningFailed,
)
from modules.accounts.permissions import AllowPreflight
from modules.accounts.repositories.django_repository import MembershipDjangoRepository
from modules.accounts.serializers import REQUIRED_USER_FIELDS, CreateUserSerializer
from modules.accounts.services import UserProvisioningService

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def _error(message: str, status_code: int) -> Response:
    return Response({"success": False, "error": message}, status=status_code)


class CreateUserView(APIView):
    permission_classes = [AllowPreflight]
    throttle_scope = "user_provisioning"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = UserProvisioningService(MembershipDjangoRepository())

    def options(self, request: Request, *args, **kwargs) -> Response:
        """CORS preflight: empty body, status 200."""
        return Response(status=status.HTTP_200_OK)

    def post(self, request: Request) -> Response:
        """POST /api/v1/users/"""
        try:
            caller = self._service.authorize_admin(request.user.pk)
        except (MembershipNotFound, NotCompanyAdmin) as exc:
            return _error(str(exc), status.HTTP_403_FORBIDDEN)

        serializer = CreateUserSerializer(data=request.data)
        if not serializer.is_valid():
            if serializer.missing_required_fields():
                return _error(
                    f"Missing required fields: {', '.join(REQUIRED_USER_FIELDS)}",
                    status.HTTP_400_BAD_REQUEST,
                )
            return _error("Invalid request body.", status.HTTP_400_BAD_REQUEST)

        try:
            dto = CreateUserDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            message = str(first.get("ctx", {}).get("error", first["msg"]))
            return _error(message, status.HTTP_400_BAD_REQUEST)

        try:
            user = self._service.create_user(caller, dto)
        except UserAlreadyExists as exc:
            return _error(str(exc), status.HTTP_400_BAD_REQUEST)
        except UserProvisioningFailed as exc:
            return _error(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {"success": True, "user": user.model_dump(mode="json")},
            status=status.HTTP_201_CREATED,
        )

    def handle_exception(self, exc):
        response = super().handle_exception(exc)
        if isinstance(response.data, dict) and "detail" in response.data:
            response.data = {"success": False, "error": str(response.data["detail"])}
        return response

    def finalize_response(self, request, response, *args, **kwargs):
        response = super().finalize_response(request, response, *args, **kwargs)
        for header, value in CORS_HEADERS.items():
            response[header] = value
        return response
