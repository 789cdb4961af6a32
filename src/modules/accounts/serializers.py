"""Accounts DRF serializers (wire contract)."""

from __future__ import annotations

from rest_framework import serializers

REQUIRED_USER_FIELDS = ("email", "password", "fullName", "role")
MISSING_CODES = frozenset({"required", "blank", "null"})


class CreateUserSerializer(serializers.Serializer):
    """Validates the privileged user-creation payload.

    Field names follow the public wire format (``fullName``,
    ``companyId``).  ``companyId`` is accepted and ignored.
    """

    email = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    fullName = serializers.CharField(source="full_name")  # noqa: N815
    role = serializers.CharField()
    companyId = serializers.CharField(  # noqa: N815
        source="requested_company_id",
        required=False,
        allow_null=True,
        allow_blank=True,
    )

    def missing_required_fields(self) -> bool:
        for field in REQUIRED_USER_FIELDS:
            codes = {getattr(e, "code", None) for e in self.errors.get(field, [])}
            if codes & MISSING_CODES:
                return True
        return False
