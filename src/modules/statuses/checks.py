"""System check: every company must carry the load-bearing statuses.

Runs with the ``database`` tag (``manage.py check --database default`` and
``migrate``), so a misconfigured registry is reported before payment
confirmation or delivery fails at runtime.
"""

from __future__ import annotations

from django.core import checks
from django.db import OperationalError, ProgrammingError


@checks.register(checks.Tags.database)
def check_required_statuses(app_configs=None, databases=None, **kwargs):
    if not databases:
        return []

    from modules.accounts.models import Company
    from modules.statuses.models import OrderStatus
    from modules.statuses.registry import REQUIRED_STATUS_NAMES

    try:
        companies = list(Company.objects.values_list("id", "name"))
        present = set(
            OrderStatus.objects.filter(name__in=REQUIRED_STATUS_NAMES).values_list(
                "company_id", "name"
            )
        )
    except (OperationalError, ProgrammingError):
        # Tables do not exist yet (fresh database before ``migrate``).
        return []

    errors = []
    for company_id, company_name in companies:
        missing = [n for n in REQUIRED_STATUS_NAMES if (company_id, n) not in present]
        if missing:
            errors.append(
                checks.Warning(
                    f"Company '{company_name}' is missing required order "
                    f"statuses: {', '.join(missing)}.",
                    hint="Run 'manage.py seed_data --statuses-only' or add them "
                    "on the status settings page.",
                    obj=str(company_id),
                    id="statuses.W001",
                )
            )
    return errors
