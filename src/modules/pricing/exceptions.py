"""Pricing domain exceptions."""

from __future__ import annotations


class CurrencyNotFound(Exception):
    """The referenced currency does not exist."""


class ExchangeRateNotFound(Exception):
    """No active exchange rate exists for the currency in this company."""


class ExchangeRateAlreadyExists(Exception):
    """The company already has an active rate for this currency."""


class PricingTierNotFound(Exception):
    """The pricing tier does not exist in the caller's company."""
