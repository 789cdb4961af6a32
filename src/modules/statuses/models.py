"""Order status registry model.

Business rules implemented:
- Status names are unique within a company.
- ``sort_order`` defines both display and workflow order; the first entry
  is the status new orders start in.
- ``color`` is a ``#RRGGBB`` badge background; the text color is derived
  with ``registry.contrast_color``.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import TenantModel

DEFAULT_STATUS_COLOR = "#6b7280"


class OrderStatus(TenantModel):
    name = models.CharField(max_length=100)
    sort_order = models.IntegerField(default=0)
    color = models.CharField(max_length=7, default=DEFAULT_STATUS_COLOR)

    class Meta:
        db_table = "order_statuses"
        ordering = ["sort_order", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"],
                name="order_statuses_unique_name_per_company",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.sort_order}. {self.name}"
