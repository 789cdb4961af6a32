"""Order status registry service.

Admins edit the registry; every other module only reads it, through
``list_statuses`` or the ``registry`` snapshot.  The load-bearing names
(``Ready for Production`` and ``Delivered``) can be recolored or
reordered but never renamed or deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, FrozenSet, List, Optional
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction

from modules.core import cache
from modules.statuses.exceptions import (
    ProtectedStatus,
    StatusAlreadyExists,
    StatusInUse,
    StatusNotFound,
)
from modules.statuses.registry import (
    DEFAULT_STATUSES,
    REQUIRED_STATUS_NAMES,
    StatusRegistry,
)

if TYPE_CHECKING:
    from modules.statuses.dtos import CreateStatusDTO, UpdateStatusDTO
    from modules.statuses.models import OrderStatus
    from modules.statuses.repositories.interfaces import IStatusRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StatusWriteResult:
    status: Optional[OrderStatus]
    affected_read_paths: FrozenSet[str] = field(
        default_factory=lambda: frozenset({cache.ORDER_STATUSES})
    )


class StatusService:
    def __init__(self, status_repository: IStatusRepository) -> None:
        self._repo = status_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_statuses(self, company_id: UUID) -> List[OrderStatus]:
        """Statuses of *company_id*, ``sort_order`` ascending."""
        return self._repo.list(company_id)

    def registry(self, company_id: UUID) -> StatusRegistry:
        return StatusRegistry.from_statuses(self._repo.list(company_id))

    def get_status(self, company_id: UUID, status_id: Any) -> OrderStatus:
        status = self._repo.get_by_id(company_id, status_id)
        if status is None:
            raise StatusNotFound(f"Status {status_id} not found.")
        return status

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_status(self, company_id: UUID, dto: CreateStatusDTO) -> StatusWriteResult:
        if self._repo.get_by_name(company_id, dto.name) is not None:
            raise StatusAlreadyExists(f"Status '{dto.name}' already exists.")
        data = {"name": dto.name, "sort_order": dto.sort_order}
        if dto.color:
            data["color"] = dto.color
        try:
            status = self._repo.create(company_id, data)
        except IntegrityError as exc:
            raise StatusAlreadyExists(f"Status '{dto.name}' already exists.") from exc
        logger.info(
            "order_status.created", company_id=str(company_id), status_name=status.name
        )
        return StatusWriteResult(status)

    @transaction.atomic
    def update_status(
        self, company_id: UUID, status_id: Any, dto: UpdateStatusDTO
    ) -> StatusWriteResult:
        """Rename, recolor or reorder a status.

        A rename moves every order in the old name to the new one within
        the same transaction, so orders never point at a missing name.
        """
        status = self.get_status(company_id, status_id)
        log = logger.bind(company_id=str(company_id), status_id=str(status.id))
        changes = dto.model_dump(exclude_none=True)
        paths = {cache.ORDER_STATUSES}

        new_name = changes.get("name")
        if new_name is not None and new_name != status.name:
            if status.name in REQUIRED_STATUS_NAMES:
                raise ProtectedStatus(f"Status '{status.name}' cannot be renamed.")
            if self._repo.get_by_name(company_id, new_name) is not None:
                raise StatusAlreadyExists(f"Status '{new_name}' already exists.")
            renamed = self._repo.rename_in_orders(company_id, status.name, new_name)
            if renamed:
                paths.add(cache.ORDERS)
                paths.update(cache.read_path(cache.ORDER_DETAILS, oid) for oid in renamed)
            log.info("order_status.renamed", old_name=status.name, new_name=new_name)
        else:
            changes.pop("name", None)

        for field_name, value in changes.items():
            setattr(status, field_name, value)
        if changes:
            self._repo.save(status, list(changes))
        log.info("order_status.updated", fields=sorted(changes))
        return StatusWriteResult(status, frozenset(paths))

    @transaction.atomic
    def delete_status(self, company_id: UUID, status_id: Any) -> StatusWriteResult:
        status = self.get_status(company_id, status_id)
        if status.name in REQUIRED_STATUS_NAMES:
            raise ProtectedStatus(f"Status '{status.name}' cannot be deleted.")
        if self._repo.name_in_use(company_id, status.name):
            raise StatusInUse(f"Status '{status.name}' is used by existing orders.")
        self._repo.delete(status)
        logger.info(
            "order_status.deleted", company_id=str(company_id), status_name=status.name
        )
        return StatusWriteResult(None)

    @transaction.atomic
    def seed_defaults(self, company_id: UUID) -> List[OrderStatus]:
        """Create the default vocabulary entries the company is missing."""
        existing = {status.name for status in self._repo.list(company_id)}
        created = []
        for position, (name, color) in enumerate(DEFAULT_STATUSES, start=1):
            if name in existing:
                continue
            created.append(
                self._repo.create(
                    company_id, {"name": name, "sort_order": position, "color": color}
                )
            )
        if created:
            logger.info(
                "order_status.defaults_seeded",
                company_id=str(company_id),
                created=[status.name for status in created],
            )
        return created
