"""Exchange-rate selection and conversion.

Only *currently active* rates are considered; there is no lookup by
order date and no interpolation.  When several rates for the same
currency are active at once, the one with the latest ``valid_from``
wins (ties: the most recently created row).
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Protocol

from modules.pricing.formatting import TWO_PLACES, to_decimal


class RateLike(Protocol):
    currency_id: Any
    rate_to_company_currency: Decimal
    valid_from: datetime
    is_active: bool
    created_at: datetime


def select_active_rate(rates: Iterable[RateLike], currency_id: Any) -> Optional[RateLike]:
    candidates = [
        rate
        for rate in rates
        if rate.is_active and str(rate.currency_id) == str(currency_id)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda rate: (rate.valid_from, rate.created_at))


def convert_to_base(amount: Any, rate_to_company_currency: Any) -> Decimal:
    """``amount_in_base = amount_in_foreign * rate``, rounded to cents."""
    rate = to_decimal(rate_to_company_currency)
    if rate <= 0:
        raise ValueError("Exchange rate must be positive.")
    return (to_decimal(amount) * rate).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
