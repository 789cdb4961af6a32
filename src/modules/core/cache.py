"""Read-path cache.

A *read path* names one cached view of tenant data, e.g. ``orders`` or
``order-details:<uuid>``.  Mutations return the exact set of read paths
they make stale and the API layer drops those keys after the write has
been committed.  Keys are namespaced by company so one tenant can never
read (or evict) another tenant's entries.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

import structlog
from django.conf import settings
from django.core.cache import cache

logger = structlog.get_logger(__name__)

ORDERS = "orders"
ORDER_DETAILS = "order-details"
ORDER_ATTACHMENTS = "order-attachments"
ORDER_COMMENTS = "order-comments"
ORDER_STATUSES = "order-statuses"
EXCHANGE_RATES = "exchange-rates"
PRICING_TIERS = "pricing-tiers"


def read_path(prefix: str, identifier: Any = None) -> str:
    """Build a read path, e.g. ``read_path(ORDER_DETAILS, order.id)``."""
    if identifier is None:
        return prefix
    return f"{prefix}:{identifier}"


def cache_key(company_id: Any, path: str) -> str:
    return f"read:{company_id}:{path}"


def get_or_set(company_id: Any, path: str, producer: Callable[[], Any]) -> Any:
    """Return the cached value for *path*, computing it on a miss."""
    key = cache_key(company_id, path)
    value = cache.get(key)
    if value is None:
        value = producer()
        cache.set(key, value, settings.READ_PATH_CACHE_TTL)
    return value


def invalidate(company_id: Any, paths: Iterable[str]) -> None:
    keys = [cache_key(company_id, path) for path in sorted(paths)]
    if not keys:
        return
    cache.delete_many(keys)
    logger.info("cache.invalidated", company_id=str(company_id), keys=keys)
