"""Pricing URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import SimpleRouter

from modules.pricing.views import (
    CompanyCurrencyView,
    CurrencyListView,
    ExchangeRateViewSet,
    PricingTierViewSet,
)

router = SimpleRouter(trailing_slash=True)
router.register("exchange-rates", ExchangeRateViewSet, basename="exchange-rate")
router.register("pricing-tiers", PricingTierViewSet, basename="pricing-tier")

urlpatterns = [
    path("currencies/", CurrencyListView.as_view(), name="currency-list"),
    path("company-currency/", CompanyCurrencyView.as_view(), name="company-currency"),
    *router.urls,
]
