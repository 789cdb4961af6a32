"""Order comments: revision feedback and designer notes.

Any member of the company may read or add comments.  Adding one never
changes the order itself; it only makes the order's comment list stale.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, FrozenSet, List

import structlog

from modules.core import cache
from modules.orders.exceptions import OrderNotFound

if TYPE_CHECKING:
    from modules.orders.dtos import AddCommentDTO
    from modules.orders.models import OrderComment
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CommentResult:
    comment: OrderComment
    affected_read_paths: FrozenSet[str]


class CommentService:
    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    def _get_order(self, company_id: Any, order_id: Any):
        order = self._order_repo.get_by_id(company_id, order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_comments(self, company_id: Any, order_id: Any) -> List[OrderComment]:
        return self._order_repo.list_comments(self._get_order(company_id, order_id))

    def add_comment(
        self, company_id: Any, order_id: Any, dto: AddCommentDTO, user_id: Any = None
    ) -> CommentResult:
        """Raises ``OrderNotFound`` for missing or foreign orders."""
        order = self._get_order(company_id, order_id)
        comment = self._order_repo.add_comment(
            order,
            {"user_id": user_id, "content": dto.content, "is_internal": dto.is_internal},
        )
        logger.info(
            "order.comment_added",
            order_id=str(order.id),
            comment_id=str(comment.id),
            is_internal=dto.is_internal,
        )
        return CommentResult(
            comment, frozenset({cache.read_path(cache.ORDER_COMMENTS, order.id)})
        )
