"""Money rendering.

``format_currency`` never raises: a missing or unparsable amount renders
as zero, a missing symbol falls back to the currency code, and a missing
code falls back to ``settings.DEFAULT_CURRENCY_CODE``.

``resolve_display`` decides *which* amounts are shown for a price that
may be denominated in a foreign currency.  The layout variant only
changes how the two strings are joined, never which values are picked.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Literal, Optional

from django.conf import settings
from pydantic import BaseModel, ConfigDict

TWO_PLACES = Decimal("0.01")
APPROX_MARKER = "≈"

Variant = Literal["inline", "stacked", "compact"]
VARIANTS: tuple[str, ...] = ("inline", "stacked", "compact")


def to_decimal(amount: Any) -> Decimal:
    """Coerce *amount* to a finite ``Decimal``; anything else becomes zero."""
    if amount is None or isinstance(amount, bool):
        return Decimal("0")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")
    if not value.is_finite():
        return Decimal("0")
    return value


def format_currency(
    amount: Any = None,
    currency_code: Optional[str] = None,
    symbol: Optional[str] = None,
) -> str:
    code = (currency_code or "").strip().upper() or settings.DEFAULT_CURRENCY_CODE
    value = to_decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    if value == 0:
        value = abs(value)
    prefix = (symbol or "").strip()
    if prefix:
        return f"{prefix}{value:,.2f}" if len(prefix) == 1 else f"{prefix} {value:,.2f}"
    return f"{code} {value:,.2f}"


class RenderedPrice(BaseModel):
    """A price ready for display.

    ``secondary`` is set only when a conversion to the base currency is
    shown, and ``approximate`` tells whether it is marked with "≈".
    ``text`` is the variant-specific combination of both.
    """

    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: Optional[str] = None
    approximate: bool = False
    variant: Variant = "inline"
    text: str

    @property
    def is_converted(self) -> bool:
        return self.secondary is not None


def resolve_display(
    amount: Any,
    base_currency: Optional[str],
    foreign_currency: Optional[str] = None,
    base_amount: Any = None,
    variant: Variant = "inline",
    *,
    base_symbol: Optional[str] = None,
    foreign_symbol: Optional[str] = None,
    show_approx: bool = True,
) -> RenderedPrice:
    if variant not in VARIANTS:
        raise ValueError(f"Unknown price variant {variant!r}; expected one of {VARIANTS}")

    has_foreign = bool(foreign_currency) and foreign_currency != base_currency
    if not has_foreign or base_amount is None:
        primary = format_currency(amount, base_currency, base_symbol)
        return RenderedPrice(primary=primary, variant=variant, text=primary)

    primary = format_currency(amount, foreign_currency, foreign_symbol)
    secondary = format_currency(base_amount, base_currency, base_symbol)

    if variant == "stacked":
        marker = f"{APPROX_MARKER} " if show_approx else ""
        text = f"{primary}\n{marker}{secondary}"
    else:
        marker = APPROX_MARKER if show_approx else ""
        text = f"{primary} ({marker}{secondary})"
    return RenderedPrice(
        primary=primary,
        secondary=secondary,
        approximate=show_approx,
        variant=variant,
        text=text,
    )
