"""Unit tests for active exchange-rate selection and conversion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from modules.pricing.rates import convert_to_base, select_active_rate

pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class StubRate:
    currency_id: UUID
    rate_to_company_currency: Decimal
    valid_from: datetime
    is_active: bool = True
    created_at: datetime = NOW


class TestSelectActiveRate:
    def test_no_rates(self):
        assert select_active_rate([], uuid4()) is None

    def test_ignores_inactive_and_other_currencies(self):
        usd, eur = uuid4(), uuid4()
        rates = [
            StubRate(usd, Decimal("3.67"), NOW, is_active=False),
            StubRate(eur, Decimal("4.00"), NOW),
        ]
        assert select_active_rate(rates, usd) is None

    def test_latest_valid_from_wins(self):
        usd = uuid4()
        older = StubRate(usd, Decimal("3.60"), NOW - timedelta(days=2))
        newer = StubRate(usd, Decimal("3.67"), NOW)
        assert select_active_rate([newer, older], usd) is newer

    def test_tie_broken_by_creation_time(self):
        usd = uuid4()
        first = StubRate(usd, Decimal("3.60"), NOW, created_at=NOW)
        second = StubRate(usd, Decimal("3.70"), NOW, created_at=NOW + timedelta(seconds=1))
        assert select_active_rate([second, first], usd) is second

    def test_matches_string_currency_id(self):
        usd = uuid4()
        rate = StubRate(usd, Decimal("3.67"), NOW)
        assert select_active_rate([rate], str(usd)) is rate


class TestConvertToBase:
    def test_multiplies_and_rounds_to_cents(self):
        assert convert_to_base(Decimal("100"), Decimal("3.6725")) == Decimal("367.25")
        assert convert_to_base(Decimal("10.01"), Decimal("3.6725")) == Decimal("36.76")

    @pytest.mark.parametrize("rate", [Decimal("0"), Decimal("-1"), None])
    def test_rejects_non_positive_rate(self, rate):
        with pytest.raises(ValueError, match="must be positive"):
            convert_to_base(Decimal("10"), rate)
