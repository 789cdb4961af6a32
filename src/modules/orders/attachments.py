"""Order attachments: smart file naming and upload.

Uploaded files are renamed to
``ORD-{orderId[:8]}_{ClientName}_{PROOF|PRINT|REF}_{epochMillis}.{ext}``
so production staff can tell files apart outside the application.  The
millisecond timestamp keeps names distinct in practice; nothing here
guarantees uniqueness.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, FrozenSet, List, Optional

import structlog
from django.core.files.storage import default_storage
from django.db import DatabaseError

from modules.core import cache
from modules.orders.constants import ATTACHMENT_SHORT_CODES, AttachmentType
from modules.orders.events import AttachmentUploaded
from modules.orders.exceptions import (
    AttachmentUploadFailed,
    InvalidAttachment,
    OrderNotFound,
)

if TYPE_CHECKING:
    from django.core.files.storage import Storage

    from modules.orders.models import OrderAttachment
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

FALLBACK_CLIENT_NAME = "Order"
FALLBACK_EXTENSION = "file"
CLIENT_NAME_MAX_LENGTH = 30

_NOT_ALPHANUMERIC_OR_SPACE = re.compile(r"[^a-zA-Z0-9\s]")
_WHITESPACE_RUN = re.compile(r"\s+")
_UNDERSCORE_RUN = re.compile(r"_+")


def sanitize_client_name(client_name: Optional[str]) -> str:
    name = (client_name or "").strip()
    name = _NOT_ALPHANUMERIC_OR_SPACE.sub("", name)
    name = _WHITESPACE_RUN.sub("_", name)
    name = _UNDERSCORE_RUN.sub("_", name)
    return name[:CLIENT_NAME_MAX_LENGTH] or FALLBACK_CLIENT_NAME


def file_extension(original_file_name: str) -> str:
    _, dot, extension = (original_file_name or "").rpartition(".")
    if not dot or not extension:
        return FALLBACK_EXTENSION
    return extension.lower()


def build_attachment_name(
    order_id: Any,
    client_name: Optional[str],
    file_type: str,
    original_file_name: str,
    timestamp_ms: Optional[int] = None,
) -> str:
    """Storage name of an uploaded order file.

    >>> build_attachment_name("abcdefgh-1234", "Jane O'Brien!!", "design_mockup",
    ...                       "logo.PNG", timestamp_ms=1702656000000)
    'ORD-abcdefgh_Jane_OBrien_PROOF_1702656000000.png'
    """
    short_code = ATTACHMENT_SHORT_CODES.get(file_type)
    if short_code is None:
        raise InvalidAttachment(f"Unknown file type '{file_type}'.")
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    order_short = str(order_id)[:8]
    return (
        f"ORD-{order_short}_{sanitize_client_name(client_name)}_{short_code}"
        f"_{timestamp_ms}.{file_extension(original_file_name)}"
    )


@dataclass(frozen=True)
class AttachmentUploadResult:
    attachment: OrderAttachment
    affected_read_paths: FrozenSet[str]


class AttachmentService:
    """Stores order files under ``{company_id}/{order_id}/{smart_name}``.

    Uploading never changes the order's status; it only makes the order's
    attachment list, detail view and list view stale.
    """

    def __init__(
        self, order_repository: IOrderRepository, storage: Optional[Storage] = None
    ) -> None:
        self._order_repo = order_repository
        self._storage = storage or default_storage

    def _get_order(self, company_id: Any, order_id: Any):
        order = self._order_repo.get_by_id(company_id, order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_attachments(self, company_id: Any, order_id: Any) -> List[OrderAttachment]:
        return self._order_repo.list_attachments(self._get_order(company_id, order_id))

    def upload(
        self,
        company_id: Any,
        order_id: Any,
        uploaded_file,
        file_type: str,
        uploader_id: Any = None,
    ) -> AttachmentUploadResult:
        """Store *uploaded_file* and record it against the order.

        Raises:
            OrderNotFound: unknown order.
            InvalidAttachment: no file, or an unknown ``file_type``.
            AttachmentUploadFailed: storage or database write failed.
        """
        if uploaded_file is None:
            raise InvalidAttachment("A file is required.")
        if file_type not in AttachmentType.values:
            raise InvalidAttachment(f"Unknown file type '{file_type}'.")

        order = self._get_order(company_id, order_id)
        smart_name = build_attachment_name(
            order.id, order.client_name, file_type, uploaded_file.name
        )
        path = f"{order.company_id}/{order.id}/{smart_name}"
        log = logger.bind(order_id=str(order.id), company_id=str(order.company_id))

        try:
            stored_path = self._storage.save(path, uploaded_file)
        except OSError as exc:
            log.error("order.attachment_store_failed", error=str(exc))
            raise AttachmentUploadFailed(f"Upload failed: {exc}") from exc

        try:
            order.add_domain_event(
                AttachmentUploaded(
                    aggregate_id=order.id,
                    company_id=order.company_id,
                    file_name=smart_name,
                    file_type=file_type,
                )
            )
            attachment = self._order_repo.add_attachment(
                order,
                {
                    "file_name": smart_name,
                    "file_url": self._storage.url(stored_path),
                    "file_type": file_type,
                    "file_size": uploaded_file.size or 0,
                    "uploader_id": uploader_id,
                },
            )
        except DatabaseError as exc:
            log.error("order.attachment_record_failed", error=str(exc))
            self._storage.delete(stored_path)
            raise AttachmentUploadFailed(f"Upload failed: {exc}") from exc

        log.info("order.attachment_uploaded", file_name=smart_name, file_type=file_type)
        return AttachmentUploadResult(
            attachment,
            frozenset(
                {
                    cache.read_path(cache.ORDER_ATTACHMENTS, order.id),
                    cache.read_path(cache.ORDER_DETAILS, order.id),
                    cache.ORDERS,
                }
            ),
        )
