"""Tenancy models: companies and the users that belong to them.

- ``Company`` is the isolation boundary for every business row.
- ``Membership`` binds one Django user to one company with one role.
  The role is looked up server-side on every privileged request; it is
  never read from the token or the request body.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    SALES = "sales", "Sales"
    DESIGNER = "designer", "Designer"
    PRODUCTION = "production", "Production"
    ACCOUNTANT = "accountant", "Accountant"


# Roles an admin may grant through user provisioning.
ASSIGNABLE_ROLES: frozenset[str] = frozenset(
    {Role.SALES, Role.DESIGNER, Role.PRODUCTION, Role.ACCOUNTANT}
)


class Company(BaseModel):
    """A print shop (tenant).

    ``currency`` is the base currency every price is reported in; when
    unset, displays fall back to ``settings.DEFAULT_CURRENCY_CODE``.
    """

    name = models.CharField(max_length=255)
    currency = models.ForeignKey(
        "pricing.Currency",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=0)

    class Meta:
        db_table = "companies"
        ordering = ["name"]
        verbose_name_plural = "companies"

    def __str__(self) -> str:
        return self.name


class Membership(BaseModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="membership",
    )
    company = models.ForeignKey(
        "accounts.Company",
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    role = models.CharField(max_length=20, choices=Role.choices)
    full_name = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "memberships"
        indexes = [
            models.Index(fields=["company", "role"], name="memberships_company_role_idx"),
        ]

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __str__(self) -> str:
        return f"{self.user} @ {self.company_id} ({self.role})"
